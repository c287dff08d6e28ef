from __future__ import annotations

import typer
from rich.console import Console

from loadlink.models import WriteResult
from loadlink.session import DeviceSession

from .common import HostOption, RebootOption, fail, reboot_prompt, run_with_device

modbus_app = typer.Typer(no_args_is_help=True, help="Modbus TCP server")
i2c_app = typer.Typer(no_args_is_help=True, help="I2C bus pull-up resistors")


def _print_state(label: str, enabled: bool | None) -> None:
    if enabled is None:
        fail(f"Could not read {label} state")
    state = "[green]enabled[/green]" if enabled else "[yellow]disabled[/yellow]"
    Console().print(f"{label}: {state}")


def _report(label: str, enabled: bool, result: WriteResult) -> None:
    if not result:
        fail(result.message or f"Could not change {label} state")
    _print_state(label, enabled)


@modbus_app.command("show")
def show_modbus(host: HostOption = None) -> None:
    """Show whether the Modbus TCP server is enabled."""
    _print_state("Modbus TCP", run_with_device(host, DeviceSession.get_modbus_enabled))


def _set_modbus(host: str | None, enabled: bool) -> None:
    async def _apply(session: DeviceSession) -> WriteResult:
        await session.show_configuration()
        return await session.configuration.set_modbus(enabled)

    _report("Modbus TCP", enabled, run_with_device(host, _apply))


@modbus_app.command("enable")
def enable_modbus(host: HostOption = None) -> None:
    """Enable the Modbus TCP server."""
    _set_modbus(host, True)


@modbus_app.command("disable")
def disable_modbus(host: HostOption = None) -> None:
    """Disable the Modbus TCP server."""
    _set_modbus(host, False)


@i2c_app.command("show")
def show_i2c(host: HostOption = None) -> None:
    """Show whether the internal I2C pull-ups are enabled."""
    enabled = run_with_device(host, DeviceSession.get_i2c_pullup_enabled)
    _print_state("I2C pull-ups", enabled)


def _set_i2c(host: str | None, enabled: bool, reboot: bool | None) -> None:
    async def _apply(session: DeviceSession) -> WriteResult:
        await session.show_configuration()
        return await session.configuration.set_i2c_pullup(enabled)

    result = run_with_device(host, _apply, confirm_reboot=reboot_prompt(reboot))
    _report("I2C pull-ups", enabled, result)


@i2c_app.command("enable")
def enable_i2c(host: HostOption = None, reboot: RebootOption = None) -> None:
    """Enable the internal I2C pull-ups (takes effect after a restart)."""
    _set_i2c(host, True, reboot)


@i2c_app.command("disable")
def disable_i2c(host: HostOption = None, reboot: RebootOption = None) -> None:
    """Disable the internal I2C pull-ups (takes effect after a restart)."""
    _set_i2c(host, False, reboot)
