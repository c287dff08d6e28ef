"""Load-cell front-end records."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

MAX_BYTE_OFFSET = 22
DEFAULT_CALIBRATION_SAMPLES = 10

CalibrationAction = Literal["tare", "calibrate", "afe"]


class ChannelCalibration(BaseModel):
    model_config = {"frozen": True, "extra": "ignore"}

    offset: int = 0
    gain: int = 0


class LoadCellHardwareStatus(BaseModel):
    """Power rails and calibration flags read from the converter registers."""

    model_config = {"frozen": True, "extra": "ignore"}

    available: bool = False
    power_digital: bool = False
    power_analog: bool = False
    power_regulator: bool = False
    calibration_active: bool = False
    calibration_error: bool = False
    oscillator_ready: bool = False
    avdd_ready: bool = False


class LoadCellConfig(BaseModel):
    """Load-cell configuration and live reading.

    Each ``*_label`` (and ``ldo_voltage``) is supplied by the device alongside
    its code; the client never derives one from the other.
    """

    model_config = {"frozen": True, "extra": "ignore"}

    enabled: bool = False
    byte_offset: int = 0
    unit: int = 0
    unit_label: str | None = None
    gain: int = 0
    gain_label: str | None = None
    sample_rate: int = 0
    sample_rate_label: str | None = None
    channel: int = 0
    channel_label: str | None = None
    ldo_value: int = 0
    ldo_voltage: float = 0.0
    average: int = 0
    initialized: bool = False
    connected: bool = False
    available: bool = False
    weight: float = 0.0
    raw_reading: int = 0
    calibration_factor: float = 0.0
    zero_offset: float = 0.0
    revision_code: int = 0
    channel1: ChannelCalibration | None = None
    channel2: ChannelCalibration | None = None
    status: LoadCellHardwareStatus | None = None


class LoadCellConfigRequest(BaseModel):
    """Partial write: only the fields that are set are sent."""

    model_config = {"frozen": True, "extra": "forbid"}

    enabled: bool | None = None
    byte_offset: int | None = Field(default=None, ge=0, le=MAX_BYTE_OFFSET)
    unit: int | None = None
    gain: int | None = None
    sample_rate: int | None = None
    channel: int | None = None
    ldo_value: int | None = None
    average: int | None = Field(default=None, ge=1, le=50)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class CalibrationRequest(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    action: CalibrationAction
    samples: int = Field(default=DEFAULT_CALIBRATION_SAMPLES, ge=1)
    known_weight: float | None = None

    def to_payload(self) -> dict[str, Any]:
        body: dict[str, Any] = {"action": self.action}
        if self.action == "calibrate":
            body["samples"] = self.samples
            if self.known_weight is not None:
                body["known_weight"] = self.known_weight
        return body
