"""Device gateway: one coroutine per device capability.

Every public coroutine returns a typed record, ``None`` (reads) or a falsy
:class:`WriteResult` (writes). Transport, protocol, decode and application
errors are raised internally and converted here; none escape.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from loadlink.core.errors import (
    ApplicationError,
    DecodeError,
    DeviceError,
    ProtocolError,
)
from loadlink.core.normalizer import PayloadNormalizer
from loadlink.core.transport import HttpTransport, TransportResponse
from loadlink.models import (
    DEFAULT_CALIBRATION_SAMPLES,
    AssemblyData,
    AssemblySizes,
    CalibrationAction,
    CalibrationRequest,
    CalibrationResult,
    LoadCellConfig,
    LoadCellConfigRequest,
    LogBufferResponse,
    NetworkConfig,
    OtaStatus,
    WriteResult,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

IPCONFIG_PATH = "/api/ipconfig"
MODBUS_PATH = "/api/modbus"
I2C_PULLUP_PATH = "/api/i2c/pullup"
STATUS_PATH = "/api/status"
ASSEMBLY_SIZES_PATH = "/api/assemblies/sizes"
OTA_UPDATE_PATH = "/api/ota/update"
OTA_STATUS_PATH = "/api/ota/status"
REBOOT_PATH = "/api/reboot"
LOGS_PATH = "/api/logs"
LOAD_CELL_PATH = "/api/nau7802"
CALIBRATE_PATH = "/api/nau7802/calibrate"

FIRMWARE_FIELD = "firmware"


def _decode_object(
    response: TransportResponse,
    object_pairs_hook: Callable[[list[tuple[str, Any]]], Any] | None = None,
) -> dict[str, Any]:
    try:
        data = json.loads(response.body, object_pairs_hook=object_pairs_hook)
    except ValueError as exc:
        raise DecodeError(f"Invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise DecodeError(f"Expected a JSON object, got {type(data).__name__}")
    return data


def _validate(model: type[ModelT], data: dict[str, Any]) -> ModelT:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise DecodeError(f"Invalid {model.__name__} payload: {exc}") from exc


def _ensure_success(response: TransportResponse) -> TransportResponse:
    if not response.is_success:
        raise ProtocolError(response.status_code, response.text)
    return response


def _structured_message(response: TransportResponse) -> str | None:
    """Check a ``{status, message}`` body and return its message.

    An empty body or one without ``status`` counts as success.
    """
    if not response.body.strip():
        return None
    data = _decode_object(response)
    message = data.get("message")
    if message is not None and not isinstance(message, str):
        message = str(message)
    status = data.get("status")
    if status is None or status == "ok":
        return message
    raise ApplicationError(message or "Unknown error")


def _failure_message(exc: ProtocolError) -> str:
    try:
        data = json.loads(exc.body)
    except ValueError:
        return str(exc)
    message = data.get("message") if isinstance(data, dict) else None
    if isinstance(message, str) and message:
        return f"{exc}: {message}"
    return str(exc)


def _read_enabled(data: dict[str, Any]) -> bool:
    enabled = data.get("enabled")
    if not isinstance(enabled, bool):
        raise DecodeError(f"Expected boolean 'enabled', got {enabled!r}")
    return enabled


class DeviceGateway:
    def __init__(
        self,
        transport: HttpTransport,
        load_cell_normalizer: PayloadNormalizer | None = None,
    ) -> None:
        self._transport = transport
        self._load_cell_normalizer = (
            load_cell_normalizer or PayloadNormalizer.for_model(LoadCellConfig)
        )

    @property
    def transport(self) -> HttpTransport:
        return self._transport

    async def _get_object(self, path: str) -> dict[str, Any]:
        response = _ensure_success(await self._transport.get(path))
        return _decode_object(response)

    async def _read(self, path: str, model: type[ModelT]) -> ModelT | None:
        try:
            return _validate(model, await self._get_object(path))
        except DeviceError as exc:
            logger.debug("Read %s failed: %s", path, exc)
            return None

    async def _write(self, path: str, payload: dict[str, Any]) -> WriteResult:
        try:
            response = _ensure_success(await self._transport.post(path, json=payload))
            return WriteResult(ok=True, message=_structured_message(response))
        except ApplicationError as exc:
            logger.warning("Device rejected %s: %s", path, exc.message)
            return WriteResult.failed(exc.message)
        except ProtocolError as exc:
            logger.debug("Write %s failed: %s", path, exc)
            return WriteResult.failed(_failure_message(exc))
        except DeviceError as exc:
            logger.debug("Write %s failed: %s", path, exc)
            return WriteResult.failed(str(exc))

    async def _read_toggle(self, path: str) -> bool | None:
        try:
            return _read_enabled(await self._get_object(path))
        except DeviceError as exc:
            logger.debug("Read %s failed: %s", path, exc)
            return None

    # network

    async def get_network_config(self) -> NetworkConfig | None:
        return await self._read(IPCONFIG_PATH, NetworkConfig)

    async def save_network_config(self, config: NetworkConfig) -> WriteResult:
        return await self._write(IPCONFIG_PATH, config.model_dump())

    # toggles

    async def get_modbus_enabled(self) -> bool | None:
        return await self._read_toggle(MODBUS_PATH)

    async def set_modbus_enabled(self, enabled: bool) -> WriteResult:
        return await self._write(MODBUS_PATH, {"enabled": enabled})

    async def get_i2c_pullup_enabled(self) -> bool | None:
        return await self._read_toggle(I2C_PULLUP_PATH)

    async def set_i2c_pullup_enabled(self, enabled: bool) -> WriteResult:
        return await self._write(I2C_PULLUP_PATH, {"enabled": enabled})

    # assemblies

    async def get_assemblies(self) -> AssemblyData | None:
        try:
            payload = await self._get_object(STATUS_PATH)
            return AssemblyData.from_status_payload(payload)
        except (DeviceError, ValidationError) as exc:
            logger.debug("Read %s failed: %s", STATUS_PATH, exc)
            return None

    async def get_assembly_sizes(self) -> AssemblySizes | None:
        return await self._read(ASSEMBLY_SIZES_PATH, AssemblySizes)

    # firmware

    async def upload_firmware(self, path: Path | str) -> WriteResult:
        """Send a firmware image as multipart form data.

        The image is read in a worker thread, then posted from memory; images
        are a few megabytes at most. Success is decided by the HTTP status
        alone.
        """
        firmware = Path(path)
        try:
            image = await asyncio.to_thread(firmware.read_bytes)
            files = {FIRMWARE_FIELD: (firmware.name, image, "application/octet-stream")}
            response = await self._transport.post(OTA_UPDATE_PATH, files=files)
            _ensure_success(response)
        except OSError as exc:
            logger.warning("Cannot read firmware image %s: %s", firmware, exc)
            return WriteResult.failed(f"Cannot read {firmware}: {exc}")
        except DeviceError as exc:
            logger.debug("Firmware upload failed: %s", exc)
            return WriteResult.failed(str(exc))

        logger.info("Uploaded firmware image %s", firmware.name)
        return WriteResult(ok=True)

    async def start_ota_from_url(self, url: str) -> WriteResult:
        return await self._write(OTA_UPDATE_PATH, {"url": url})

    async def get_ota_status(self) -> OtaStatus | None:
        return await self._read(OTA_STATUS_PATH, OtaStatus)

    async def reboot(self) -> WriteResult:
        try:
            _ensure_success(await self._transport.post(REBOOT_PATH))
        except DeviceError as exc:
            logger.debug("Reboot request failed: %s", exc)
            return WriteResult.failed(str(exc))
        logger.info("Reboot requested")
        return WriteResult(ok=True)

    async def get_logs(self) -> LogBufferResponse | None:
        return await self._read(LOGS_PATH, LogBufferResponse)

    # load cell

    async def get_load_cell_config(self) -> LoadCellConfig | None:
        try:
            response = _ensure_success(await self._transport.get(LOAD_CELL_PATH))
            raw = _decode_object(
                response, object_pairs_hook=self._load_cell_normalizer.merge_pairs
            )
            return _validate(LoadCellConfig, self._load_cell_normalizer.normalize(raw))
        except DeviceError as exc:
            logger.debug("Read %s failed: %s", LOAD_CELL_PATH, exc)
            return None

    async def save_load_cell_config(
        self, request: LoadCellConfigRequest
    ) -> WriteResult:
        return await self._write(LOAD_CELL_PATH, request.to_payload())

    async def calibrate(
        self,
        action: CalibrationAction,
        known_weight: float | None = None,
        samples: int = DEFAULT_CALIBRATION_SAMPLES,
    ) -> CalibrationResult | None:
        """Run a tare, known-weight or analog front-end calibration.

        A device-reported failure comes back as a result with ``ok`` false so
        its message can be shown; ``None`` means the exchange itself failed.
        """
        try:
            request = CalibrationRequest(
                action=action, samples=samples, known_weight=known_weight
            )
        except ValidationError as exc:
            logger.warning("Invalid calibration request: %s", exc)
            return None

        try:
            response = await self._transport.post(
                CALIBRATE_PATH, json=request.to_payload()
            )
            payload = _decode_object(_ensure_success(response))
            result = _validate(CalibrationResult, payload)
        except DeviceError as exc:
            logger.debug("Calibration '%s' failed: %s", action, exc)
            return None

        if not result.ok:
            logger.warning("Calibration '%s' rejected: %s", action, result.message)
        return result
