from __future__ import annotations

import asyncio
from typing import Annotated

import typer
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from loadlink.session import DeviceSession
from loadlink.views import LoadCellStatusView, StatusPresentation

from .common import HostOption, fail, run_with_device


def render_status(view: LoadCellStatusView) -> Panel:
    config = view.config
    if view.presentation is StatusPresentation.NOT_CONNECTED:
        body = Text("Not connected", style="red")
    elif view.presentation is StatusPresentation.DISABLED or config is None:
        body = Text("Load-cell front end is disabled", style="yellow")
    else:
        unit = config.unit_label or ""
        body = Text.assemble(
            (f"{config.weight:.2f} {unit}".strip(), "bold green"),
            f"\nraw {config.raw_reading}",
            f"\ngain {config.gain_label or config.gain}",
            f"  rate {config.sample_rate_label or config.sample_rate} SPS",
        )
    return Panel(body, title=f"Load cell @ {view.address}")


def register(app: typer.Typer) -> None:
    @app.command()
    def watch(
        host: HostOption = None,
        duration: Annotated[
            float | None,
            typer.Option("--duration", "-d", help="Stop after this many seconds"),
        ] = None,
    ) -> None:
        """Show the live load-cell reading until interrupted."""
        console = Console()

        async def _watch(session: DeviceSession) -> None:
            if not session.connection.load_cell_view_visible:
                fail("Load-cell front end is disabled on this device")

            with Live(console=console, refresh_per_second=8) as live:
                def _render(view: LoadCellStatusView) -> None:
                    live.update(render_status(view))

                session.status.on_update = _render
                await session.show_load_cell_status()
                try:
                    if duration is None:
                        await asyncio.Event().wait()
                    else:
                        await asyncio.sleep(duration)
                finally:
                    await session.navigator.close()

        try:
            run_with_device(host, _watch)
        except KeyboardInterrupt:
            console.print("\nStopped.")
