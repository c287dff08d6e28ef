from __future__ import annotations

import pytest
from fakes import DEVICE_ADDRESS, FakeDevice

from loadlink.config import CONFIG_ENV_VAR, get_settings
from loadlink.core.gateway import DeviceGateway
from loadlink.core.transport import HttpTransport


@pytest.fixture(autouse=True)
def _isolate_settings_env(monkeypatch: pytest.MonkeyPatch, tmp_path):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def device() -> FakeDevice:
    return FakeDevice()


@pytest.fixture
def gateway(device: FakeDevice) -> DeviceGateway:
    transport = HttpTransport(lambda: DEVICE_ADDRESS, transport=device.transport())
    return DeviceGateway(transport)
