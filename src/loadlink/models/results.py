from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel


class CalibrationResult(BaseModel):
    model_config = {"frozen": True, "extra": "ignore"}

    status: str = ""
    message: str = ""
    zero_offset: float | None = None
    calibration_factor: float | None = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"


@dataclass(frozen=True)
class WriteResult:
    """Outcome of a write; falsy when the device did not accept it."""

    ok: bool
    message: str | None = None

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def failed(cls, message: str | None = None) -> WriteResult:
        return cls(ok=False, message=message)
