from __future__ import annotations

from typing import Annotated

import typer

from loadlink.utils.logging import setup_logging

from . import calibrate as calibrate_cmd
from . import config as config_cmd
from . import firmware as firmware_cmd
from . import loadcell as loadcell_cmd
from . import network as network_cmd
from .device import register as register_device
from .info import register as register_info
from .mock import register as register_mock
from .scan import register as register_scan
from .toggles import i2c_app, modbus_app
from .watch import register as register_watch

app = typer.Typer(
    help="loadlink - load-cell controller configuration client", no_args_is_help=True
)

app.add_typer(config_cmd.app, name="config")
app.add_typer(network_cmd.app, name="network")
app.add_typer(modbus_app, name="modbus")
app.add_typer(i2c_app, name="i2c")
app.add_typer(loadcell_cmd.app, name="loadcell")
app.add_typer(calibrate_cmd.app, name="calibrate")
app.add_typer(firmware_cmd.app, name="firmware")

register_info(app)
register_device(app)
register_watch(app)
register_scan(app)
register_mock(app)


@app.callback(invoke_without_command=True)
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", help="Show version and exit"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Log debug output"),
    ] = False,
) -> None:
    """loadlink CLI."""
    try:
        setup_logging("DEBUG" if verbose else None)
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc

    if version:
        from importlib.metadata import version as get_version

        typer.echo(f"loadlink version {get_version('loadlink')}")
        raise typer.Exit()
