from __future__ import annotations

from .connection import ConnectionManager
from .errors import (
    ApplicationError,
    DecodeError,
    DeviceError,
    LoadlinkError,
    ProtocolError,
    TransportError,
)
from .gateway import DeviceGateway
from .mock_device import MockLoadCellDevice, run_mock_device
from .navigation import CONFIGURATION_VIEW, LOAD_CELL_STATUS_VIEW, Navigator
from .normalizer import FieldRule, PayloadNormalizer
from .refresh import RefreshCoordinator
from .scanner import check_device, detect_local_network, scan_network
from .state import ConnectionPhase, ConnectionSnapshot, ConnectionState
from .transport import HttpTransport, TransportResponse

__all__ = [
    "ApplicationError",
    "CONFIGURATION_VIEW",
    "ConnectionManager",
    "ConnectionPhase",
    "ConnectionSnapshot",
    "ConnectionState",
    "DecodeError",
    "DeviceError",
    "DeviceGateway",
    "FieldRule",
    "HttpTransport",
    "LOAD_CELL_STATUS_VIEW",
    "LoadlinkError",
    "MockLoadCellDevice",
    "Navigator",
    "PayloadNormalizer",
    "ProtocolError",
    "RefreshCoordinator",
    "TransportError",
    "TransportResponse",
    "check_device",
    "detect_local_network",
    "run_mock_device",
    "scan_network",
]
