"""loadlink - configuration client for networked load-cell controllers."""

from __future__ import annotations

from importlib.metadata import version

from .config import DeviceConfig, DiscoveryConfig, PollingConfig, Settings, get_settings
from .models import (
    CalibrationResult,
    LoadCellConfig,
    LoadCellConfigRequest,
    NetworkConfig,
    WriteResult,
)
from .session import DeviceSession

__all__ = [
    "CalibrationResult",
    "DeviceConfig",
    "DeviceSession",
    "DiscoveryConfig",
    "LoadCellConfig",
    "LoadCellConfigRequest",
    "NetworkConfig",
    "PollingConfig",
    "Settings",
    "WriteResult",
    "__version__",
    "get_settings",
]

__version__ = version("loadlink")
