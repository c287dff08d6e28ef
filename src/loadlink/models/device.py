"""Device records for network, I/O assembly, OTA and log endpoints."""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, Field, field_validator

ASSEMBLY_SIZE = 32


class NetworkConfig(BaseModel):
    """Network settings as stored on the device.

    Addresses are kept as plain strings; the device is authoritative about
    their syntax.
    """

    model_config = {"frozen": True, "extra": "ignore"}

    use_dhcp: bool = True
    ip_address: str = ""
    netmask: str = ""
    gateway: str = ""
    dns1: str = ""
    dns2: str = ""


def _fixed_bytes(values: Any) -> bytes:
    buffer = bytearray(ASSEMBLY_SIZE)
    if isinstance(values, (bytes, bytearray)):
        values = list(values)
    if not isinstance(values, list):
        return bytes(buffer)

    index = 0
    for value in values:
        if index >= ASSEMBLY_SIZE:
            break
        # bool is an int subclass but never a byte value here
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            continue
        if isinstance(value, float) and not math.isfinite(value):
            continue
        buffer[index] = int(value) & 0xFF
        index += 1
    return bytes(buffer)


def _block(payload: dict[str, Any], key: str) -> dict[str, Any]:
    block = payload.get(key)
    return block if isinstance(block, dict) else {}


class AssemblyLoadCellReading(BaseModel):
    """Load-cell values the device decodes from its own input assembly."""

    model_config = {"frozen": True, "extra": "ignore"}

    weight: float = 0.0
    weight_scaled: int = 0
    raw_reading: int = 0
    unit: str = ""
    unit_code: int = 0
    byte_offset: int = 0
    available: bool = False
    connected: bool = False
    initialized: bool = False
    status_byte: int = 0


class AssemblyData(BaseModel):
    """Snapshot of the input (100) and output (150) I/O assemblies."""

    model_config = {"frozen": True}

    input_assembly: bytes = Field(default=bytes(ASSEMBLY_SIZE))
    output_assembly: bytes = Field(default=bytes(ASSEMBLY_SIZE))
    load_cell: AssemblyLoadCellReading | None = None

    @field_validator("input_assembly", "output_assembly", mode="before")
    @classmethod
    def _coerce_assembly(cls, value: Any) -> bytes:
        return _fixed_bytes(value)

    @classmethod
    def from_status_payload(cls, payload: dict[str, Any]) -> AssemblyData:
        input_block = _block(payload, "input_assembly_100")
        output_block = _block(payload, "output_assembly_150")
        load_cell = input_block.get("nau7802")
        return cls(
            input_assembly=input_block.get("raw_bytes"),
            output_assembly=output_block.get("raw_bytes"),
            load_cell=load_cell if isinstance(load_cell, dict) else None,
        )


class AssemblySizes(BaseModel):
    model_config = {"frozen": True, "extra": "ignore"}

    input_assembly_size: int
    output_assembly_size: int


class OtaStatus(BaseModel):
    """Firmware update progress as reported by the device."""

    model_config = {"frozen": True, "extra": "ignore"}

    status: str = "unknown"
    progress: int = 0
    message: str = ""


class LogBufferResponse(BaseModel):
    model_config = {"frozen": True, "extra": "ignore"}

    status: str = ""
    logs: str = ""
    size: int = 0
    total_size: int = 0
    truncated: bool = False


class DiscoveredDevice(BaseModel):
    """A host that answered the network-config probe."""

    model_config = {"frozen": True}

    address: str
    network: NetworkConfig
