from __future__ import annotations

from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from loadlink.models import LoadCellConfig, LoadCellConfigRequest, WriteResult
from loadlink.session import DeviceSession

from .common import HostOption, RebootOption, fail, reboot_prompt, run_with_device

app = typer.Typer(no_args_is_help=True, help="Load-cell front-end settings")


def _coded(code: int, label: str | None) -> str:
    return f"{label} ({code})" if label else str(code)


def load_cell_table(config: LoadCellConfig) -> Table:
    table = Table(show_header=False)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("Enabled", "yes" if config.enabled else "no")
    table.add_row("Initialized", "yes" if config.initialized else "no")
    table.add_row("Connected", "yes" if config.connected else "no")
    table.add_row("Byte offset", str(config.byte_offset))
    table.add_row("Unit", _coded(config.unit, config.unit_label))
    table.add_row("Gain", _coded(config.gain, config.gain_label))
    table.add_row("Sample rate", _coded(config.sample_rate, config.sample_rate_label))
    table.add_row("Channel", _coded(config.channel, config.channel_label))
    table.add_row("LDO", f"{config.ldo_voltage} V ({config.ldo_value})")
    table.add_row("Average", str(config.average))
    if config.connected:
        table.add_row("Weight", f"{config.weight} {config.unit_label or ''}".strip())
        table.add_row("Raw reading", str(config.raw_reading))
        table.add_row("Calibration factor", str(config.calibration_factor))
        table.add_row("Zero offset", str(config.zero_offset))
    return table


@app.command("show")
def show_load_cell(host: HostOption = None) -> None:
    """Show the load-cell configuration and current reading."""
    config = run_with_device(host, DeviceSession.get_load_cell_config)
    if config is None:
        fail("Could not read load-cell configuration")
    Console().print(load_cell_table(config))


@app.command("set")
def set_load_cell(
    host: HostOption = None,
    enabled: Annotated[
        bool | None, typer.Option("--enable/--disable", help="Front end on or off")
    ] = None,
    byte_offset: Annotated[
        int | None,
        typer.Option("--byte-offset", help="Position in the input assembly (0-22)"),
    ] = None,
    unit: Annotated[
        int | None, typer.Option("--unit", help="Unit code (0 g, 1 lbs, 2 kg)")
    ] = None,
    gain: Annotated[int | None, typer.Option("--gain", help="Gain code (0-7)")] = None,
    sample_rate: Annotated[
        int | None, typer.Option("--sample-rate", help="Sample-rate code")
    ] = None,
    channel: Annotated[
        int | None, typer.Option("--channel", help="Input channel (0 or 1)")
    ] = None,
    ldo_value: Annotated[
        int | None, typer.Option("--ldo", help="LDO voltage code (0-7)")
    ] = None,
    average: Annotated[
        int | None, typer.Option("--average", help="Samples to average (1-50)")
    ] = None,
    reboot: RebootOption = None,
) -> None:
    """Change load-cell settings; only the given options are sent."""
    try:
        request = LoadCellConfigRequest(
            enabled=enabled,
            byte_offset=byte_offset,
            unit=unit,
            gain=gain,
            sample_rate=sample_rate,
            channel=channel,
            ldo_value=ldo_value,
            average=average,
        )
    except ValidationError as exc:
        fail(f"Invalid load-cell settings:\n{exc}")
    if not request.to_payload():
        fail("Nothing to change")

    async def _save(session: DeviceSession) -> tuple[WriteResult, bool]:
        await session.show_configuration()
        result = await session.configuration.save_load_cell(request)
        return result, session.connection.load_cell_view_visible

    result, visible = run_with_device(host, _save, confirm_reboot=reboot_prompt(reboot))
    if not result:
        fail(result.message or "Device rejected the load-cell configuration")

    console = Console()
    message = result.message or "Load-cell configuration saved"
    console.print(f"[green]✓[/green] {message}")
    state = "available" if visible else "hidden"
    console.print(f"Live status view: {state}")
