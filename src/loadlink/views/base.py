from __future__ import annotations

from loadlink.core.state import ConnectionSnapshot, ConnectionState


class View:
    """Headless view: holds what a screen would display, not how.

    ``active`` is the guard every awaited result is checked against before it
    is applied; a view that was hidden meanwhile drops the result.
    """

    name = ""

    def __init__(self, state: ConnectionState) -> None:
        self._state = state
        self.active = False
        self.connected = state.connected

    @property
    def address(self) -> str:
        return self._state.address

    async def show(self) -> None:
        self.active = True
        self.connected = self._state.connected

    async def hide(self) -> None:
        self.active = False

    def on_connection_state_changed(self, snapshot: ConnectionSnapshot) -> None:
        self.connected = snapshot.connected
