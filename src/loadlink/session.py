"""One device session: state, gateway, workflow and views wired together."""

from __future__ import annotations

import logging
from pathlib import Path
from types import TracebackType

import httpx

from loadlink.config import Settings
from loadlink.core.connection import ConnectionManager
from loadlink.core.gateway import DeviceGateway
from loadlink.core.navigation import (
    CONFIGURATION_VIEW,
    LOAD_CELL_STATUS_VIEW,
    Navigator,
)
from loadlink.core.state import ConnectionState
from loadlink.core.transport import HttpTransport
from loadlink.models import (
    DEFAULT_CALIBRATION_SAMPLES,
    AssemblyData,
    AssemblySizes,
    CalibrationAction,
    CalibrationResult,
    LoadCellConfig,
    LoadCellConfigRequest,
    LogBufferResponse,
    NetworkConfig,
    OtaStatus,
    WriteResult,
)
from loadlink.views import ConfigurationView, ConfirmReboot, LoadCellStatusView

logger = logging.getLogger(__name__)


class DeviceSession:
    """Entry point for anything that drives a single controller.

    Reads are connectivity-determining: a failed read while connected drops
    the connection. Writes report failure through a falsy
    :class:`WriteResult` and leave the connection alone. Nothing raises past
    this class for a device failure.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        address: str | None = None,
        http_transport: httpx.AsyncBaseTransport | None = None,
        confirm_reboot: ConfirmReboot | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.state = ConnectionState(address or self.settings.device.address)
        self.transport = HttpTransport(
            lambda: self.state.address,
            timeout=self.settings.device.timeout,
            transport=http_transport,
        )
        self.gateway = DeviceGateway(self.transport)
        self.navigator = Navigator(self.state)
        self.connection = ConnectionManager(self.state, self.gateway, self.navigator)
        self.configuration = ConfigurationView(
            self.state,
            self.gateway,
            self.connection,
            confirm_reboot=confirm_reboot,
        )
        self.status = LoadCellStatusView(
            self.state, self.gateway, interval=self.settings.polling.interval
        )
        self.navigator.register(self.configuration)
        self.navigator.register(self.status)

    async def __aenter__(self) -> DeviceSession:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.navigator.close()
        await self.transport.aclose()

    # connection

    @property
    def address(self) -> str:
        return self.state.address

    @property
    def is_connected(self) -> bool:
        return self.state.connected

    async def connect(self, address: str | None = None) -> bool:
        return await self.connection.connect(address)

    async def disconnect(self) -> None:
        await self.connection.disconnect()

    async def set_address(self, address: str) -> None:
        await self.connection.set_address(address)

    async def show_configuration(self) -> bool:
        return await self.navigator.navigate(CONFIGURATION_VIEW)

    async def show_load_cell_status(self) -> bool:
        return await self.navigator.navigate(LOAD_CELL_STATUS_VIEW)

    # network and toggles

    async def get_network_config(self) -> NetworkConfig | None:
        return await self.connection.checked(self.gateway.get_network_config())

    async def save_network_config(self, config: NetworkConfig) -> WriteResult:
        return await self.gateway.save_network_config(config)

    async def get_modbus_enabled(self) -> bool | None:
        return await self.connection.checked(self.gateway.get_modbus_enabled())

    async def set_modbus_enabled(self, enabled: bool) -> WriteResult:
        return await self.gateway.set_modbus_enabled(enabled)

    async def get_i2c_pullup_enabled(self) -> bool | None:
        return await self.connection.checked(self.gateway.get_i2c_pullup_enabled())

    async def set_i2c_pullup_enabled(self, enabled: bool) -> WriteResult:
        return await self.gateway.set_i2c_pullup_enabled(enabled)

    # load cell

    async def get_load_cell_config(self) -> LoadCellConfig | None:
        return await self.connection.checked(self.gateway.get_load_cell_config())

    async def save_load_cell_config(
        self, request: LoadCellConfigRequest
    ) -> WriteResult:
        return await self.connection.save_load_cell_config(request)

    async def calibrate(
        self,
        action: CalibrationAction,
        known_weight: float | None = None,
        samples: int = DEFAULT_CALIBRATION_SAMPLES,
    ) -> CalibrationResult | None:
        return await self.gateway.calibrate(action, known_weight, samples)

    # device

    async def get_assemblies(self) -> AssemblyData | None:
        return await self.connection.checked(self.gateway.get_assemblies())

    async def get_assembly_sizes(self) -> AssemblySizes | None:
        return await self.connection.checked(self.gateway.get_assembly_sizes())

    async def upload_firmware(self, path: Path | str) -> WriteResult:
        return await self.gateway.upload_firmware(path)

    async def start_ota_from_url(self, url: str) -> WriteResult:
        return await self.gateway.start_ota_from_url(url)

    async def get_ota_status(self) -> OtaStatus | None:
        return await self.connection.checked(self.gateway.get_ota_status())

    async def reboot(self) -> WriteResult:
        return await self.gateway.reboot()

    async def get_logs(self) -> LogBufferResponse | None:
        return await self.connection.checked(self.gateway.get_logs())
