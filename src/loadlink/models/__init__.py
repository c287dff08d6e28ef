"""Typed device records."""

from loadlink.models.device import (
    ASSEMBLY_SIZE,
    AssemblyData,
    AssemblyLoadCellReading,
    AssemblySizes,
    DiscoveredDevice,
    LogBufferResponse,
    NetworkConfig,
    OtaStatus,
)
from loadlink.models.loadcell import (
    DEFAULT_CALIBRATION_SAMPLES,
    MAX_BYTE_OFFSET,
    CalibrationAction,
    CalibrationRequest,
    ChannelCalibration,
    LoadCellConfig,
    LoadCellConfigRequest,
    LoadCellHardwareStatus,
)
from loadlink.models.results import CalibrationResult, WriteResult

__all__ = [
    "ASSEMBLY_SIZE",
    "AssemblyData",
    "AssemblyLoadCellReading",
    "AssemblySizes",
    "CalibrationAction",
    "CalibrationRequest",
    "CalibrationResult",
    "ChannelCalibration",
    "DEFAULT_CALIBRATION_SAMPLES",
    "DiscoveredDevice",
    "LoadCellConfig",
    "LoadCellConfigRequest",
    "LoadCellHardwareStatus",
    "LogBufferResponse",
    "MAX_BYTE_OFFSET",
    "NetworkConfig",
    "OtaStatus",
    "WriteResult",
]
