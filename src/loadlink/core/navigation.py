"""Active-view tracking and optional-view visibility."""

from __future__ import annotations

import logging
from typing import Protocol

from loadlink.core.state import ConnectionSnapshot, ConnectionState

logger = logging.getLogger(__name__)

CONFIGURATION_VIEW = "configuration"
LOAD_CELL_STATUS_VIEW = "load_cell_status"


class NavigableView(Protocol):
    name: str

    async def show(self) -> None: ...

    async def hide(self) -> None: ...

    def on_connection_state_changed(self, snapshot: ConnectionSnapshot) -> None: ...


class Navigator:
    """Keeps one view active and relays connection changes to it.

    Inactive views are not notified; they re-read the connection state when
    they are next activated.
    """

    def __init__(
        self,
        state: ConnectionState,
        *,
        home: str = CONFIGURATION_VIEW,
        optional: tuple[str, ...] = (LOAD_CELL_STATUS_VIEW,),
    ) -> None:
        self._state = state
        self._home = home
        self._views: dict[str, NavigableView] = {}
        self._active: NavigableView | None = None
        self._hidden: set[str] = set(optional)
        state.subscribe(self)

    @property
    def active(self) -> NavigableView | None:
        return self._active

    @property
    def active_name(self) -> str | None:
        return self._active.name if self._active else None

    def register(self, view: NavigableView) -> None:
        self._views[view.name] = view

    def is_visible(self, name: str) -> bool:
        return name in self._views and name not in self._hidden

    def visible_views(self) -> list[str]:
        return [name for name in self._views if name not in self._hidden]

    async def navigate(self, name: str) -> bool:
        if not self.is_visible(name):
            logger.debug("Cannot navigate to hidden or unknown view %r", name)
            return False

        target = self._views[name]
        if target is self._active:
            return True

        if self._active is not None:
            await self._active.hide()
        self._active = target
        await target.show()
        target.on_connection_state_changed(self._state.snapshot())
        return True

    async def close(self) -> None:
        if self._active is not None:
            await self._active.hide()
            self._active = None

    async def set_visible(self, name: str, visible: bool) -> None:
        if visible:
            self._hidden.discard(name)
            return

        self._hidden.add(name)
        if self.active_name == name:
            logger.debug("View %r hidden while active, going to %r", name, self._home)
            await self.navigate(self._home)

    def on_connection_state_changed(self, snapshot: ConnectionSnapshot) -> None:
        if self._active is not None:
            self._active.on_connection_state_changed(snapshot)
