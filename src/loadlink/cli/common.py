from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Annotated, NoReturn, TypeVar

import typer
from rich.console import Console
from rich.markup import escape

from loadlink.config import Settings, get_settings, resolve_config_path
from loadlink.session import DeviceSession
from loadlink.views import ConfirmReboot

T = TypeVar("T")

HostOption = Annotated[
    str | None,
    typer.Option("--host", "-H", help="Device address (overrides config)"),
]
YesOption = Annotated[
    bool,
    typer.Option("--yes", "-y", help="Do not ask for confirmation"),
]
RebootOption = Annotated[
    bool | None,
    typer.Option(
        "--reboot/--no-reboot",
        help="Reboot after a change that needs it (asks when omitted)",
    ),
]

err_console = Console(stderr=True)


def load_settings_or_exit() -> Settings:
    try:
        return get_settings()
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc


def resolve_config_path_or_exit(allow_missing: bool = False) -> tuple[Path, bool]:
    try:
        return resolve_config_path(allow_missing=allow_missing)
    except FileNotFoundError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc


def fail(message: str) -> NoReturn:
    err_console.print(f"[red]✗[/red] {escape(message)}")
    raise typer.Exit(1)


def reboot_prompt(reboot: bool | None) -> ConfirmReboot:
    async def _confirm(message: str) -> bool:
        if reboot is not None:
            return reboot
        return typer.confirm(f"{message} Reboot now?", default=False)

    return _confirm


def build_session(
    settings: Settings,
    host: str | None = None,
    confirm_reboot: ConfirmReboot | None = None,
) -> DeviceSession:
    return DeviceSession(settings, address=host, confirm_reboot=confirm_reboot)


def run_with_device(
    host: str | None,
    operation: Callable[[DeviceSession], Awaitable[T]],
    *,
    confirm_reboot: ConfirmReboot | None = None,
) -> T:
    """Connect to the device, run ``operation`` and close the session."""
    settings = load_settings_or_exit()

    async def _run() -> T:
        async with build_session(settings, host, confirm_reboot) as session:
            if not await session.connect():
                fail(f"Could not connect to {session.address}")
            return await operation(session)

    return asyncio.run(_run())
