from __future__ import annotations

from typing import Annotated

import typer

from loadlink.config import DeviceConfig, Settings, render_settings_toml, write_settings

from .common import load_settings_or_exit, resolve_config_path_or_exit

app = typer.Typer(no_args_is_help=True, help="Manage the configuration file")


@app.command("show")
def show_config() -> None:
    """Print the settings in effect and where they come from."""
    settings = load_settings_or_exit()
    path, exists = resolve_config_path_or_exit(allow_missing=True)

    typer.echo(f"Config source: {path if exists else 'defaults'}")
    typer.echo(render_settings_toml(settings), nl=False)


@app.command("path")
def config_path() -> None:
    path, _ = resolve_config_path_or_exit(allow_missing=True)
    typer.echo(str(path))


@app.command("init")
def init_config(
    address: Annotated[
        str | None,
        typer.Option("--address", "-a", help="Device address to store"),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite existing config"),
    ] = False,
) -> None:
    """Write a config file with default settings."""
    path, exists = resolve_config_path_or_exit(allow_missing=True)

    if exists and not force:
        typer.echo(f"Config already exists at {path}")
        raise typer.Exit(1)

    settings = Settings()
    if address:
        settings = Settings(device=DeviceConfig(address=address))
    write_settings(settings, path)
    typer.echo(f"Wrote config to {path} (device {settings.device.address})")
