from __future__ import annotations

import typer
from rich.console import Console

from loadlink.session import DeviceSession

from .common import (
    HostOption,
    load_settings_or_exit,
    resolve_config_path_or_exit,
    run_with_device,
)


def _yes_no(value: bool | None) -> str:
    if value is None:
        return "[yellow]unknown[/yellow]"
    return "yes" if value else "no"


def register(app: typer.Typer) -> None:
    @app.command()
    def info(host: HostOption = None) -> None:
        """Show configuration and a summary of the device."""
        settings = load_settings_or_exit()
        config_path, config_exists = resolve_config_path_or_exit(allow_missing=True)

        console = Console()

        console.print("[bold]loadlink info[/bold]\n")
        console.print(f"Config file: {config_path if config_exists else 'defaults'}")
        console.print(f"Device address: {host or settings.device.address}")
        console.print(f"Request timeout: {settings.device.timeout}s")
        console.print(f"Polling interval: {settings.polling.interval}s")

        async def _summary(session: DeviceSession) -> None:
            network = await session.get_network_config()
            modbus = await session.get_modbus_enabled()
            i2c = await session.get_i2c_pullup_enabled()
            sizes = await session.get_assembly_sizes()

            console.print("\n[bold]Device[/bold]")
            if network is not None:
                mode = "DHCP" if network.use_dhcp else "static"
                console.print(f"Network: {mode} {network.ip_address}")
            console.print(f"Modbus TCP: {_yes_no(modbus)}")
            console.print(f"I2C pull-ups: {_yes_no(i2c)}")
            front_end = _yes_no(session.connection.load_cell_view_visible)
            console.print(f"Load-cell front end: {front_end}")
            if sizes is not None:
                console.print(
                    f"Assemblies: {sizes.input_assembly_size} in / "
                    f"{sizes.output_assembly_size} out bytes"
                )

        run_with_device(host, _summary)
