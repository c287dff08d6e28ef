"""Configuration view: network, Modbus, I2C and load-cell settings."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable

from loadlink.core.connection import ConnectionManager
from loadlink.core.gateway import DeviceGateway
from loadlink.core.navigation import CONFIGURATION_VIEW
from loadlink.core.state import ConnectionSnapshot, ConnectionState
from loadlink.models import (
    DEFAULT_CALIBRATION_SAMPLES,
    CalibrationAction,
    CalibrationResult,
    LoadCellConfig,
    LoadCellConfigRequest,
    NetworkConfig,
    WriteResult,
)
from loadlink.views.base import View

logger = logging.getLogger(__name__)

ConfirmReboot = Callable[[str], Awaitable[bool]]

NETWORK_REBOOT_MESSAGE = "Network configuration saved. Reboot required."
I2C_REBOOT_MESSAGE = "I2C pull-up setting saved. Restart required to take effect."
LOAD_CELL_REBOOT_MESSAGE = (
    "Load-cell configuration saved. Reboot required to apply gain, sample rate, "
    "channel or LDO changes."
)


class ConfigurationView(View):
    """Holds the last values read from the device.

    A failed read keeps what was shown before; a failed write records its
    message in :attr:`last_error` and leaves the shown values alone.
    """

    name = CONFIGURATION_VIEW

    def __init__(
        self,
        state: ConnectionState,
        gateway: DeviceGateway,
        connection: ConnectionManager,
        *,
        confirm_reboot: ConfirmReboot | None = None,
    ) -> None:
        super().__init__(state)
        self._gateway = gateway
        self._connection = connection
        self._confirm_reboot = confirm_reboot
        self._reload: asyncio.Task[bool] | None = None
        self.network: NetworkConfig | None = None
        self.modbus_enabled: bool | None = None
        self.i2c_pullup_enabled: bool | None = None
        self.load_cell: LoadCellConfig | None = None
        self.last_error: str | None = None

    async def show(self) -> None:
        await super().show()
        if self.connected:
            await self.load_all()

    async def hide(self) -> None:
        await super().hide()
        reload, self._reload = self._reload, None
        if reload is not None and not reload.done():
            reload.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await reload

    def on_connection_state_changed(self, snapshot: ConnectionSnapshot) -> None:
        was_connected = self.connected
        super().on_connection_state_changed(snapshot)
        if was_connected or not (snapshot.connected and self.active):
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        if self._reload is None or self._reload.done():
            self._reload = loop.create_task(self.load_all())

    async def load_all(self) -> bool:
        if not self._state.connected:
            return False

        network = await self._gateway.get_network_config()
        modbus = await self._gateway.get_modbus_enabled()
        i2c = await self._gateway.get_i2c_pullup_enabled()
        load_cell = await self._gateway.get_load_cell_config()
        if not self.active:
            return False

        if network is not None:
            self.network = network
        if modbus is not None:
            self.modbus_enabled = modbus
        if i2c is not None:
            self.i2c_pullup_enabled = i2c
        if load_cell is not None:
            self.load_cell = load_cell
        return None not in (network, modbus, i2c, load_cell)

    async def reload_load_cell(self) -> LoadCellConfig | None:
        config = await self._gateway.get_load_cell_config()
        if config is not None and self.active:
            self.load_cell = config
        return config

    async def save_network(self, config: NetworkConfig) -> WriteResult:
        result = await self._gateway.save_network_config(config)
        if self._record(result):
            self.network = config
            await self._offer_reboot(result.message or NETWORK_REBOOT_MESSAGE)
        return result

    async def set_modbus(self, enabled: bool) -> WriteResult:
        result = await self._gateway.set_modbus_enabled(enabled)
        if self._record(result):
            self.modbus_enabled = enabled
        return result

    async def set_i2c_pullup(self, enabled: bool) -> WriteResult:
        result = await self._gateway.set_i2c_pullup_enabled(enabled)
        if self._record(result):
            self.i2c_pullup_enabled = enabled
            await self._offer_reboot(result.message or I2C_REBOOT_MESSAGE)
        return result

    async def save_load_cell(self, request: LoadCellConfigRequest) -> WriteResult:
        result = await self._connection.save_load_cell_config(request)
        if self._record(result):
            await self.reload_load_cell()
            await self._offer_reboot(result.message or LOAD_CELL_REBOOT_MESSAGE)
        return result

    async def calibrate(
        self,
        action: CalibrationAction,
        known_weight: float | None = None,
        samples: int = DEFAULT_CALIBRATION_SAMPLES,
    ) -> CalibrationResult | None:
        result = await self._gateway.calibrate(action, known_weight, samples)
        if result is None:
            self.last_error = f"Calibration '{action}' failed"
            return None
        if not result.ok:
            self.last_error = result.message or f"Calibration '{action}' failed"
            return result

        self.last_error = None
        await self.reload_load_cell()
        return result

    def _record(self, result: WriteResult) -> bool:
        self.last_error = None if result else (result.message or "Write failed")
        return bool(result)

    async def _offer_reboot(self, message: str) -> bool:
        if self._confirm_reboot is None or not await self._confirm_reboot(message):
            return False
        result = await self._gateway.reboot()
        if not result:
            self.last_error = result.message or "Reboot request failed"
        return bool(result)
