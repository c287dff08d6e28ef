"""Shared connection state.

One :class:`ConnectionState` exists per session. Only
:class:`loadlink.core.connection.ConnectionManager` calls its mutators; any
number of observers read it and receive synchronous notifications.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from loadlink.config import DEFAULT_DEVICE_ADDRESS

logger = logging.getLogger(__name__)


class ConnectionPhase(enum.Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


@dataclass(frozen=True)
class ConnectionSnapshot:
    address: str
    phase: ConnectionPhase

    @property
    def connected(self) -> bool:
        return self.phase is ConnectionPhase.CONNECTED


@runtime_checkable
class ConnectionAware(Protocol):
    def on_connection_state_changed(self, snapshot: ConnectionSnapshot) -> None:
        """Called synchronously after every connection transition."""


class ConnectionState:
    def __init__(self, address: str = DEFAULT_DEVICE_ADDRESS) -> None:
        self._address = address
        self._phase = ConnectionPhase.DISCONNECTED
        self._observers: list[ConnectionAware] = []

    @property
    def address(self) -> str:
        return self._address

    @property
    def phase(self) -> ConnectionPhase:
        return self._phase

    @property
    def connected(self) -> bool:
        return self._phase is ConnectionPhase.CONNECTED

    def snapshot(self) -> ConnectionSnapshot:
        return ConnectionSnapshot(address=self._address, phase=self._phase)

    def subscribe(self, observer: ConnectionAware) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def unsubscribe(self, observer: ConnectionAware) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    # writer side

    def set_address(self, address: str) -> None:
        """Point at a new device; a changed address is never connected."""
        if address == self._address:
            return
        logger.debug("Device address changed: %s -> %s", self._address, address)
        self._address = address
        if self._phase is not ConnectionPhase.DISCONNECTED:
            self._transition(ConnectionPhase.DISCONNECTED)

    def mark_connecting(self) -> None:
        self._transition(ConnectionPhase.CONNECTING)

    def mark_connected(self, verified_address: str) -> bool:
        """Record a successful round-trip against ``verified_address``.

        Refused when the address changed while the request was in flight.
        """
        if verified_address != self._address:
            logger.debug(
                "Ignoring stale verification of %s (current %s)",
                verified_address,
                self._address,
            )
            return False
        self._transition(ConnectionPhase.CONNECTED)
        return True

    def mark_disconnected(self) -> None:
        self._transition(ConnectionPhase.DISCONNECTED)

    def _transition(self, phase: ConnectionPhase) -> None:
        previous = self._phase
        self._phase = phase
        logger.debug(
            "Connection %s -> %s (%s)", previous.value, phase.value, self._address
        )
        snapshot = self.snapshot()
        for observer in list(self._observers):
            observer.on_connection_state_changed(snapshot)
