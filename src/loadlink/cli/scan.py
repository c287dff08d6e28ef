from __future__ import annotations

import asyncio
import logging

import typer
from rich.console import Console
from rich.table import Table

from loadlink.core import detect_local_network, scan_network
from loadlink.utils.redaction import Redactor

from .common import fail, load_settings_or_exit

logger = logging.getLogger(__name__)


def register(app: typer.Typer) -> None:
    @app.command()
    def scan(
        network: str | None = typer.Argument(
            None,
            help=(
                "Network to scan (e.g., 192.168.1.0/24). "
                "Uses config default if omitted."
            ),
        ),
        local: bool = typer.Option(
            False, "--local", help="Scan the /24 of this machine's address"
        ),
        redact: bool = typer.Option(
            False,
            "--redact",
            help="Redact addresses in output",
        ),
    ) -> None:
        """Scan a network for load-cell controllers."""
        console = Console()

        settings = load_settings_or_exit()

        if network is None and local:
            try:
                network = detect_local_network()
            except RuntimeError as exc:
                fail(str(exc))
            console.print(f"Using local network: {network}")
        elif network is None:
            network = settings.discovery.default_network
            console.print(f"Using network from config: {network}")

        console.print(f"Scanning {network} for devices...")
        logger.info(
            "Scan settings: timeout=%.2fs, parallel_scans=%d",
            settings.discovery.timeout,
            settings.discovery.parallel_scans,
        )
        try:
            devices = asyncio.run(scan_network(network, settings.discovery))
        except ValueError as exc:
            fail(f"Invalid network {network!r}: {exc}")

        if not devices:
            console.print("No devices found.")
            return

        redactor = Redactor(enabled=redact)
        table = Table()
        table.add_column("Address", style="cyan")
        table.add_column("Mode")
        table.add_column("Netmask")
        table.add_column("Gateway")

        for device in devices:
            config = redactor.redact_network(device.network)
            table.add_row(
                redactor.redact_ip(device.address),
                "DHCP" if config.use_dhcp else "Static",
                config.netmask,
                config.gateway,
            )

        console.print(table)
        console.print(f"\n[green]Found {len(devices)} device(s)[/green]")
