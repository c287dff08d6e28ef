from __future__ import annotations

import pytest

from loadlink.config import (
    CONFIG_ENV_VAR,
    DeviceConfig,
    DiscoveryConfig,
    Settings,
    default_config_path,
    get_settings,
    load_settings,
    resolve_config_path,
    write_settings,
)


def test_defaults_without_config_file():
    settings = get_settings()

    assert settings.device.address == "172.16.82.99"
    assert settings.device.timeout == 10.0
    assert settings.polling.interval == 0.25
    assert settings.discovery.parallel_scans == 50


def test_default_path_follows_xdg(tmp_path):
    path, exists = resolve_config_path(allow_missing=True)

    assert path == tmp_path / "xdg" / "loadlink" / "config.toml"
    assert path == default_config_path()
    assert exists is False


def test_config_roundtrip(tmp_path):
    path = tmp_path / "config.toml"
    settings = Settings(
        device=DeviceConfig(address="192.168.0.40", timeout=2.5),
        discovery=DiscoveryConfig(default_network="10.0.0.0/24"),
    )
    write_settings(settings, path)

    assert load_settings(path) == settings


def test_env_var_selects_config_file(tmp_path, monkeypatch):
    path = tmp_path / "custom.toml"
    path.write_text('[device]\naddress = "10.1.2.3"\n')
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

    settings = get_settings()

    assert settings.device.address == "10.1.2.3"
    assert settings.device.timeout == 10.0


def test_env_var_pointing_to_missing_file(tmp_path, monkeypatch):
    monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "missing.toml"))

    with pytest.raises(FileNotFoundError):
        get_settings()


@pytest.mark.parametrize(
    "content",
    [
        "[device\naddress = 1",
        "[device]\nport = 80\n",
        "[polling]\ninterval = 0\n",
    ],
)
def test_invalid_config_file(tmp_path, content):
    path = tmp_path / "config.toml"
    path.write_text(content)

    with pytest.raises(ValueError, match="config file"):
        load_settings(path)
