"""Connect/disconnect workflow, the only writer of :class:`ConnectionState`."""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from typing import TypeVar

from loadlink.core.gateway import DeviceGateway
from loadlink.core.navigation import LOAD_CELL_STATUS_VIEW, Navigator
from loadlink.core.state import ConnectionPhase, ConnectionState
from loadlink.models import LoadCellConfigRequest, WriteResult

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ConnectionManager:
    def __init__(
        self,
        state: ConnectionState,
        gateway: DeviceGateway,
        navigator: Navigator | None = None,
    ) -> None:
        self._state = state
        self._gateway = gateway
        self._navigator = navigator
        self._attempt = 0
        self._load_cell_visible = False

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def load_cell_view_visible(self) -> bool:
        return self._load_cell_visible

    async def set_address(self, address: str) -> None:
        if address == self._state.address:
            return
        # a connect in flight is superseded and will not re-derive visibility
        was_active = self._state.phase is not ConnectionPhase.DISCONNECTED
        self._attempt += 1
        self._state.set_address(address)
        if was_active:
            await self.refresh_optional_views()

    async def connect(self, address: str | None = None) -> bool:
        """Verify the device with a network-config round-trip.

        Returns once the state transition and the dependent visibility check
        are both complete.
        """
        if address is not None:
            self._state.set_address(address)
        self._attempt += 1
        attempt = self._attempt
        target = self._state.address

        logger.info("Connecting to %s", target)
        self._state.mark_connecting()
        config = await self._gateway.get_network_config()

        if attempt != self._attempt:
            logger.debug("Connection attempt to %s superseded", target)
            return False

        if config is not None and self._state.mark_connected(target):
            logger.info("Connected to %s", target)
            await self.refresh_optional_views()
            return True

        logger.warning("Could not connect to %s", target)
        self._state.mark_disconnected()
        await self.refresh_optional_views()
        return False

    async def disconnect(self) -> None:
        self._attempt += 1
        self._state.mark_disconnected()
        logger.info("Disconnected from %s", self._state.address)
        await self.refresh_optional_views()

    async def refresh_optional_views(self) -> bool:
        """Show the load-cell status view only when the front end is enabled."""
        visible = False
        if self._state.connected:
            config = await self._gateway.get_load_cell_config()
            visible = config is not None and config.enabled and self._state.connected

        self._load_cell_visible = visible
        if self._navigator is not None:
            await self._navigator.set_visible(LOAD_CELL_STATUS_VIEW, visible)
        return visible

    async def checked(self, operation: Awaitable[T]) -> T:
        """Await a connectivity-determining operation.

        A failed result (``None`` or a falsy write) drops the connection.
        """
        result = await operation
        failed = result is None or (isinstance(result, WriteResult) and not result.ok)
        if failed and self._state.connected:
            logger.warning("Lost contact with %s", self._state.address)
            await self.disconnect()
        return result

    async def save_load_cell_config(
        self, request: LoadCellConfigRequest
    ) -> WriteResult:
        result = await self._gateway.save_load_cell_config(request)
        if result:
            await self.refresh_optional_views()
        return result
