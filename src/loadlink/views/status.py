"""Live load-cell status view."""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable

from loadlink.config import DEFAULT_POLL_INTERVAL
from loadlink.core.gateway import DeviceGateway
from loadlink.core.navigation import LOAD_CELL_STATUS_VIEW
from loadlink.core.refresh import RefreshCoordinator
from loadlink.core.state import ConnectionSnapshot, ConnectionState
from loadlink.models import LoadCellConfig
from loadlink.views.base import View

logger = logging.getLogger(__name__)


class StatusPresentation(enum.Enum):
    NOT_CONNECTED = "not_connected"
    DISABLED = "disabled"
    LIVE = "live"


class LoadCellStatusView(View):
    name = LOAD_CELL_STATUS_VIEW

    def __init__(
        self,
        state: ConnectionState,
        gateway: DeviceGateway,
        *,
        interval: float = DEFAULT_POLL_INTERVAL,
        on_update: Callable[[LoadCellStatusView], None] | None = None,
    ) -> None:
        super().__init__(state)
        self._gateway = gateway
        self.on_update = on_update
        self.coordinator = RefreshCoordinator(self.refresh, interval)
        self.presentation = StatusPresentation.NOT_CONNECTED
        self.config: LoadCellConfig | None = None

    async def show(self) -> None:
        await super().show()
        if not self.connected:
            self._present(StatusPresentation.NOT_CONNECTED)
        self.coordinator.start()

    async def hide(self) -> None:
        await super().hide()
        await self.coordinator.stop()

    def on_connection_state_changed(self, snapshot: ConnectionSnapshot) -> None:
        super().on_connection_state_changed(snapshot)
        if not snapshot.connected:
            self._present(StatusPresentation.NOT_CONNECTED)

    async def refresh(self) -> None:
        if not self._state.connected:
            self._present(StatusPresentation.NOT_CONNECTED)
            return

        config = await self._gateway.get_load_cell_config()
        if not self.active:
            logger.debug("Status view hidden, dropping load-cell reading")
            return
        if not self._state.connected:
            self._present(StatusPresentation.NOT_CONNECTED)
            return

        if config is None:
            self._present(StatusPresentation.DISABLED)
            return

        self.config = config
        self._present(
            StatusPresentation.LIVE if config.enabled else StatusPresentation.DISABLED
        )

    def _present(self, presentation: StatusPresentation) -> None:
        self.presentation = presentation
        if self.on_update is not None:
            self.on_update(self)
