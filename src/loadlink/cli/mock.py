from __future__ import annotations

import asyncio

import typer
from rich.console import Console

from loadlink.core import run_mock_device


def register(app: typer.Typer) -> None:
    @app.command()
    def mock(
        bind: str = typer.Option("127.0.0.1", "--bind", "-b", help="Address to bind"),
        port: int = typer.Option(8080, "--port", "-p", help="Port to listen on"),
        raw: int = typer.Option(
            84_000, "--raw", help="Raw converter reading to report"
        ),
        unit_quirk: bool = typer.Option(
            True,
            "--unit-quirk/--no-unit-quirk",
            help="Repeat 'unit' as a label string, like some firmware builds",
        ),
    ) -> None:
        """Run a mock load-cell controller for development."""
        console = Console()
        console.print(f"Starting mock device on {bind}:{port}...")
        console.print("Press Ctrl+C to stop.\n")

        try:
            asyncio.run(
                run_mock_device(
                    host=bind, port=port, raw_reading=raw, unit_label_quirk=unit_quirk
                )
            )
        except KeyboardInterrupt:
            console.print("\n[green]Mock device stopped.[/green]")
