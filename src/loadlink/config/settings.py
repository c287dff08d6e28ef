from __future__ import annotations

import json
import tomllib
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from .paths import resolve_config_path

DEFAULT_DEVICE_ADDRESS = "172.16.82.99"
DEFAULT_REQUEST_TIMEOUT = 10.0
DEFAULT_POLL_INTERVAL = 0.25


class DeviceConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    address: str = DEFAULT_DEVICE_ADDRESS
    timeout: float = Field(default=DEFAULT_REQUEST_TIMEOUT, gt=0)


class PollingConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    interval: float = Field(default=DEFAULT_POLL_INTERVAL, gt=0)


class DiscoveryConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    default_network: str = "192.168.1.0/24"
    timeout: float = Field(default=1.0, gt=0)
    parallel_scans: int = Field(default=50, ge=1, le=255)


class Settings(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    device: DeviceConfig = Field(default_factory=DeviceConfig)
    polling: PollingConfig = Field(default_factory=PollingConfig)
    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)


def load_settings(path: Path) -> Settings:
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Invalid TOML in config file: {path}\n{exc}") from exc

    try:
        return Settings.model_validate(data or {})
    except ValidationError as exc:
        raise ValueError(f"Invalid config file: {path}\n{exc}") from exc


@lru_cache
def get_settings() -> Settings:
    path, exists = resolve_config_path(allow_missing=False)
    if exists:
        return load_settings(path)
    return Settings()


def _toml_string(value: str) -> str:
    return json.dumps(value)


def render_settings_toml(settings: Settings) -> str:
    lines = [
        "# loadlink configuration",
        "",
        "[device]",
        f"address = {_toml_string(settings.device.address)}",
        f"timeout = {settings.device.timeout}",
        "",
        "[polling]",
        f"interval = {settings.polling.interval}",
        "",
        "[discovery]",
        f"default_network = {_toml_string(settings.discovery.default_network)}",
        f"timeout = {settings.discovery.timeout}",
        f"parallel_scans = {settings.discovery.parallel_scans}",
        "",
    ]
    return "\n".join(lines)


def write_settings(settings: Settings, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_settings_toml(settings))
