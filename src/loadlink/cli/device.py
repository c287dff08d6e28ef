from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from loadlink.models import AssemblyData
from loadlink.session import DeviceSession

from .common import HostOption, YesOption, fail, run_with_device

BYTES_PER_ROW = 8


def _hex_rows(data: bytes) -> list[tuple[str, str]]:
    rows = []
    for start in range(0, len(data), BYTES_PER_ROW):
        chunk = data[start : start + BYTES_PER_ROW]
        rows.append((f"{start:02d}", " ".join(f"{byte:02X}" for byte in chunk)))
    return rows


def assembly_table(assemblies: AssemblyData) -> Table:
    table = Table()
    table.add_column("Offset", style="cyan")
    table.add_column("Input (100)")
    table.add_column("Output (150)")
    for (offset, inputs), (_, outputs) in zip(
        _hex_rows(assemblies.input_assembly),
        _hex_rows(assemblies.output_assembly),
        strict=True,
    ):
        table.add_row(offset, inputs, outputs)
    return table


def register(app: typer.Typer) -> None:
    @app.command()
    def reboot(host: HostOption = None, yes: YesOption = False) -> None:
        """Restart the device."""
        if not yes:
            typer.confirm("Reboot the device?", abort=True)

        result = run_with_device(host, DeviceSession.reboot)
        if not result:
            fail(result.message or "Reboot request failed")
        Console().print("[green]✓[/green] Device is rebooting")

    @app.command()
    def logs(host: HostOption = None) -> None:
        """Print the device's log buffer."""
        buffer = run_with_device(host, DeviceSession.get_logs)
        if buffer is None:
            fail("Could not read device logs")

        console = Console()
        console.print(buffer.logs, end="", highlight=False, markup=False)
        if buffer.truncated:
            console.print(
                f"\n[yellow]Showing {buffer.size} of {buffer.total_size} bytes[/yellow]"
            )

    @app.command()
    def assemblies(host: HostOption = None) -> None:
        """Show the raw input and output assembly bytes."""
        data = run_with_device(host, DeviceSession.get_assemblies)
        if data is None:
            fail("Could not read assembly data")

        console = Console()
        console.print(assembly_table(data))
        reading = data.load_cell
        if reading is not None and reading.initialized:
            console.print(
                f"Load cell at byte {reading.byte_offset}: "
                f"{reading.weight} {reading.unit} (raw {reading.raw_reading})"
            )
