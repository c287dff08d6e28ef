from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from loadlink.models import WriteResult
from loadlink.session import DeviceSession

from .common import HostOption, YesOption, fail, run_with_device

app = typer.Typer(no_args_is_help=True, help="Firmware updates")


@app.command("upload")
def upload(
    path: Annotated[
        Path,
        typer.Argument(exists=True, dir_okay=False, help="Firmware image (.bin)"),
    ],
    host: HostOption = None,
    yes: YesOption = False,
) -> None:
    """Upload a firmware image; the device reboots when it is applied."""
    if not yes:
        typer.confirm(f"Upload {path.name} and reboot the device?", abort=True)

    console = Console()
    console.print(f"Uploading {path.name} ({path.stat().st_size} bytes)...")

    async def _upload(session: DeviceSession) -> WriteResult:
        return await session.upload_firmware(path)

    result = run_with_device(host, _upload)
    if not result:
        fail(result.message or "Firmware upload failed")
    console.print("[green]✓[/green] Firmware uploaded, device is restarting")


@app.command("url")
def update_from_url(
    url: Annotated[str, typer.Argument(help="URL the device downloads from")],
    host: HostOption = None,
    yes: YesOption = False,
) -> None:
    """Ask the device to fetch and apply firmware from a URL."""
    if not yes:
        typer.confirm(f"Update the device firmware from {url}?", abort=True)

    async def _start(session: DeviceSession) -> WriteResult:
        return await session.start_ota_from_url(url)

    result = run_with_device(host, _start)
    if not result:
        fail(result.message or "Could not start the update")
    Console().print(f"[green]✓[/green] {result.message or 'Update started'}")


@app.command("status")
def status(host: HostOption = None) -> None:
    """Show firmware update progress."""
    ota = run_with_device(host, DeviceSession.get_ota_status)
    if ota is None:
        fail("Could not read update status")

    console = Console()
    console.print(f"Status: {ota.status}")
    console.print(f"Progress: {ota.progress}%")
    if ota.message:
        console.print(f"Message: {ota.message}")
