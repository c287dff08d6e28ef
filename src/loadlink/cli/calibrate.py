from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from loadlink.models import (
    DEFAULT_CALIBRATION_SAMPLES,
    CalibrationAction,
    CalibrationResult,
)
from loadlink.session import DeviceSession

from .common import HostOption, fail, run_with_device

app = typer.Typer(no_args_is_help=True, help="Calibrate the load cell")


def _calibrate(
    host: str | None,
    action: CalibrationAction,
    known_weight: float | None = None,
    samples: int = DEFAULT_CALIBRATION_SAMPLES,
) -> None:
    async def _run(session: DeviceSession) -> CalibrationResult | None:
        await session.show_configuration()
        return await session.configuration.calibrate(action, known_weight, samples)

    result = run_with_device(host, _run)
    if result is None:
        fail(f"Calibration '{action}' failed")
    if not result.ok:
        fail(result.message or f"Calibration '{action}' rejected")

    console = Console()
    console.print(f"[green]✓[/green] {result.message or 'Calibration completed'}")
    if result.zero_offset is not None:
        console.print(f"Zero offset: {result.zero_offset}")
    if result.calibration_factor is not None:
        console.print(f"Calibration factor: {result.calibration_factor}")


@app.command("tare")
def tare(host: HostOption = None) -> None:
    """Zero the scale with nothing on it."""
    _calibrate(host, "tare")


@app.command("weight")
def calibrate_weight(
    known_weight: Annotated[
        float, typer.Argument(help="Weight on the scale, in the configured unit")
    ],
    host: HostOption = None,
    samples: Annotated[
        int, typer.Option("--samples", "-s", min=1, help="Readings to average")
    ] = DEFAULT_CALIBRATION_SAMPLES,
) -> None:
    """Calibrate against a known weight."""
    if known_weight <= 0:
        fail("Known weight must be greater than 0")
    _calibrate(host, "calibrate", known_weight, samples)


@app.command("afe")
def calibrate_afe(host: HostOption = None) -> None:
    """Run the analog front-end internal calibration."""
    _calibrate(host, "afe")
