from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from loadlink.models import NetworkConfig, WriteResult
from loadlink.session import DeviceSession
from loadlink.utils.redaction import Redactor

from .common import HostOption, RebootOption, fail, reboot_prompt, run_with_device

app = typer.Typer(no_args_is_help=True, help="Show or change network settings")


def network_table(config: NetworkConfig) -> Table:
    table = Table(show_header=False)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("Mode", "DHCP" if config.use_dhcp else "Static")
    table.add_row("IP address", config.ip_address)
    table.add_row("Netmask", config.netmask)
    table.add_row("Gateway", config.gateway)
    table.add_row("DNS 1", config.dns1)
    table.add_row("DNS 2", config.dns2)
    return table


@app.command("show")
def show_network(
    host: HostOption = None,
    redact: Annotated[
        bool,
        typer.Option("--redact", help="Redact addresses in output"),
    ] = False,
) -> None:
    """Show the device's network configuration."""
    config = run_with_device(host, DeviceSession.get_network_config)
    if config is None:
        fail("Could not read network configuration")

    Console().print(network_table(Redactor(enabled=redact).redact_network(config)))


@app.command("set")
def set_network(
    host: HostOption = None,
    dhcp: Annotated[
        bool | None,
        typer.Option("--dhcp/--static", help="Use DHCP or a static address"),
    ] = None,
    ip_address: Annotated[str | None, typer.Option("--ip", help="IP address")] = None,
    netmask: Annotated[str | None, typer.Option("--netmask")] = None,
    gateway: Annotated[str | None, typer.Option("--gateway")] = None,
    dns1: Annotated[str | None, typer.Option("--dns1")] = None,
    dns2: Annotated[str | None, typer.Option("--dns2")] = None,
    reboot: RebootOption = None,
) -> None:
    """Change network settings; unset options keep their current value."""
    changes = {
        "use_dhcp": dhcp,
        "ip_address": ip_address,
        "netmask": netmask,
        "gateway": gateway,
        "dns1": dns1,
        "dns2": dns2,
    }
    changes = {key: value for key, value in changes.items() if value is not None}
    if not changes:
        fail("Nothing to change")

    async def _save(session: DeviceSession) -> tuple[NetworkConfig, WriteResult]:
        await session.show_configuration()
        current = session.configuration.network
        if current is None:
            fail("Could not read network configuration")
        updated = current.model_copy(update=changes)
        return updated, await session.configuration.save_network(updated)

    updated, result = run_with_device(
        host, _save, confirm_reboot=reboot_prompt(reboot)
    )
    if not result:
        fail(result.message or "Device rejected the network configuration")

    console = Console()
    console.print("[green]✓[/green] Network configuration saved")
    console.print(network_table(updated))
