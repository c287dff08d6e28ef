"""Mock load-cell controller for development and testing."""

from __future__ import annotations

import asyncio
import json
import logging
import struct
from dataclasses import dataclass, field
from typing import Any

from aiohttp import web

from loadlink.models import ASSEMBLY_SIZE, MAX_BYTE_OFFSET

logger = logging.getLogger(__name__)

GAIN_LABELS = ("x1", "x2", "x4", "x8", "x16", "x32", "x64", "x128")
SAMPLE_RATE_LABELS = {0: "10", 1: "20", 2: "40", 3: "80", 7: "320"}
UNIT_LABELS = ("g", "lbs", "kg")
UNIT_GRAMS = (1.0, 453.592, 1000.0)
LDO_VOLTAGES = (4.5, 4.2, 3.9, 3.6, 3.3, 3.0, 2.7, 2.4)

LOAD_CELL_BLOCK_SIZE = 10
REVISION_CODE = 0x0F


def _default_network() -> dict[str, Any]:
    return {
        "use_dhcp": False,
        "ip_address": "192.168.1.50",
        "netmask": "255.255.255.0",
        "gateway": "192.168.1.1",
        "dns1": "8.8.8.8",
        "dns2": "8.8.4.4",
    }


def _error(message: str, status: int = 400) -> web.Response:
    return web.json_response({"status": "error", "message": message}, status=status)


async def _json_body(request: web.Request) -> dict[str, Any] | None:
    try:
        data = await request.json()
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None


@dataclass
class MockLoadCellDevice:
    """In-memory device answering the controller's HTTP API.

    With ``unit_label_quirk`` set, the load-cell payload repeats ``unit`` as a
    label string after its numeric code, as some firmware builds do.
    """

    network: dict[str, Any] = field(default_factory=_default_network)
    modbus_enabled: bool = False
    i2c_pullup_enabled: bool = True
    load_cell_enabled: bool = True
    byte_offset: int = 0
    unit: int = 0
    gain: int = 7
    sample_rate: int = 3
    channel: int = 0
    ldo_value: int = 4
    average: int = 10
    calibration_factor: float = 100.0
    zero_offset: float = 0.0
    raw_reading: int = 0
    unit_label_quirk: bool = True
    output_assembly: bytearray = field(default_factory=lambda: bytearray(ASSEMBLY_SIZE))
    log_lines: list[str] = field(default_factory=list)
    ota: dict[str, Any] = field(
        default_factory=lambda: {"status": "idle", "progress": 0, "message": ""}
    )
    firmware_uploads: list[tuple[str, int]] = field(default_factory=list)
    reboot_requests: int = 0

    # readings

    @property
    def initialized(self) -> bool:
        return self.load_cell_enabled

    @property
    def weight_grams(self) -> float:
        if self.calibration_factor == 0:
            return 0.0
        return (self.raw_reading - self.zero_offset) / self.calibration_factor

    @property
    def weight(self) -> float:
        return self.weight_grams / UNIT_GRAMS[self.unit]

    def input_assembly(self) -> bytearray:
        data = bytearray(ASSEMBLY_SIZE)
        if not self.initialized:
            return data
        status_byte = 0x07
        block = struct.pack(
            "<iiBB",
            round(self.weight * 100),
            self.raw_reading,
            self.unit,
            status_byte,
        )
        data[self.byte_offset : self.byte_offset + LOAD_CELL_BLOCK_SIZE] = block
        return data

    def log(self, message: str) -> None:
        self.log_lines.append(message)
        logger.debug("mock: %s", message)

    # payloads

    def load_cell_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "enabled": self.load_cell_enabled,
            "byte_offset": self.byte_offset,
            "unit": self.unit,
            "gain": self.gain,
            "sample_rate": self.sample_rate,
            "channel": self.channel,
            "ldo_value": self.ldo_value,
            "average": self.average,
            "initialized": self.initialized,
            "gain_label": GAIN_LABELS[self.gain],
            "unit_label": UNIT_LABELS[self.unit],
            "channel_label": f"Channel {self.channel + 1}",
            "ldo_voltage": LDO_VOLTAGES[self.ldo_value],
        }
        if self.sample_rate in SAMPLE_RATE_LABELS:
            payload["sample_rate_label"] = SAMPLE_RATE_LABELS[self.sample_rate]

        if not self.initialized:
            payload["connected"] = False
            return payload

        payload.update(
            {
                "connected": True,
                "raw_reading": self.raw_reading,
                "available": True,
                "weight": round(self.weight, 2),
                "unit_code": self.unit,
                "calibration_factor": self.calibration_factor,
                "zero_offset": self.zero_offset,
                "revision_code": REVISION_CODE,
                "channel1": {"offset": 0, "gain": 0},
                "channel2": {"offset": 0, "gain": 0},
                "status": {
                    "available": True,
                    "power_digital": True,
                    "power_analog": True,
                    "power_regulator": True,
                    "calibration_active": False,
                    "calibration_error": False,
                    "oscillator_ready": True,
                    "avdd_ready": True,
                },
            }
        )
        return payload

    def status_payload(self) -> dict[str, Any]:
        input_block: dict[str, Any] = {"raw_bytes": list(self.input_assembly())}
        if self.initialized:
            input_block["nau7802"] = {
                "weight_scaled": round(self.weight * 100),
                "weight": round(self.weight, 2),
                "unit": UNIT_LABELS[self.unit],
                "unit_code": self.unit,
                "raw_reading": self.raw_reading,
                "byte_offset": self.byte_offset,
                "available": True,
                "connected": True,
                "initialized": True,
                "status_byte": 0x07,
            }
        return {
            "input_assembly_100": input_block,
            "output_assembly_150": {"raw_bytes": list(self.output_assembly)},
        }

    # handlers

    async def get_ipconfig(self, _request: web.Request) -> web.Response:
        return web.json_response(self.network)

    async def post_ipconfig(self, request: web.Request) -> web.Response:
        data = await _json_body(request)
        if data is None:
            return _error("Invalid JSON")
        if "use_dhcp" not in data or not isinstance(data["use_dhcp"], bool):
            return _error("Missing or invalid 'use_dhcp' field")
        for key in ("use_dhcp", "ip_address", "netmask", "gateway", "dns1", "dns2"):
            if key in data:
                self.network[key] = data[key]
        self.log("IP configuration saved")
        return web.json_response(
            {
                "status": "ok",
                "message": "IP configuration saved successfully. "
                "Reboot required to apply changes.",
            }
        )

    async def get_modbus(self, _request: web.Request) -> web.Response:
        return web.json_response({"enabled": self.modbus_enabled})

    async def post_modbus(self, request: web.Request) -> web.Response:
        data = await _json_body(request)
        if data is None or not isinstance(data.get("enabled"), bool):
            return _error("Missing or invalid 'enabled' field")
        self.modbus_enabled = data["enabled"]
        self.log(f"Modbus {'enabled' if self.modbus_enabled else 'disabled'}")
        return web.json_response(
            {
                "status": "ok",
                "enabled": self.modbus_enabled,
                "message": "Modbus state saved successfully",
            }
        )

    async def get_i2c_pullup(self, _request: web.Request) -> web.Response:
        return web.json_response({"enabled": self.i2c_pullup_enabled})

    async def post_i2c_pullup(self, request: web.Request) -> web.Response:
        data = await _json_body(request)
        if data is None or not isinstance(data.get("enabled"), bool):
            return _error("Missing or invalid 'enabled' field")
        self.i2c_pullup_enabled = data["enabled"]
        return web.json_response(
            {
                "status": "ok",
                "enabled": self.i2c_pullup_enabled,
                "message": "I2C pull-up setting saved. "
                "Restart required for changes to take effect.",
            }
        )

    async def get_status(self, _request: web.Request) -> web.Response:
        return web.json_response(self.status_payload())

    async def get_assembly_sizes(self, _request: web.Request) -> web.Response:
        return web.json_response(
            {
                "input_assembly_size": ASSEMBLY_SIZE,
                "output_assembly_size": ASSEMBLY_SIZE,
            }
        )

    async def post_ota_update(self, request: web.Request) -> web.Response:
        if request.content_type == "multipart/form-data":
            reader = await request.multipart()
            async for part in reader:
                if getattr(part, "name", None) != "firmware":
                    continue
                data = await part.read()  # type: ignore[union-attr]
                filename = getattr(part, "filename", None) or "firmware.bin"
                self.firmware_uploads.append((filename, len(data)))
                self.ota = {
                    "status": "complete",
                    "progress": 100,
                    "message": "Firmware uploaded",
                }
                self.log(f"Firmware {filename} uploaded ({len(data)} bytes)")
                return web.json_response(
                    {
                        "status": "ok",
                        "message": "Firmware uploaded successfully. "
                        "Finishing update and rebooting...",
                    }
                )
            return _error("No firmware part in upload")

        data = await _json_body(request)
        url = data.get("url") if data else None
        if not isinstance(url, str) or not url:
            return _error("Missing or invalid URL")
        self.ota = {
            "status": "in_progress",
            "progress": 0,
            "message": f"Fetching {url}",
        }
        self.log(f"OTA update started from {url}")
        return web.json_response({"status": "ok", "message": "OTA update started"})

    async def get_ota_status(self, _request: web.Request) -> web.Response:
        return web.json_response(self.ota)

    async def post_reboot(self, _request: web.Request) -> web.Response:
        self.reboot_requests += 1
        self.log("Reboot requested")
        return web.json_response({"status": "ok", "message": "Device rebooting..."})

    async def get_logs(self, _request: web.Request) -> web.Response:
        text = "".join(f"{line}\n" for line in self.log_lines)
        return web.json_response(
            {
                "status": "ok",
                "logs": text,
                "size": len(text),
                "total_size": len(text),
                "truncated": False,
            }
        )

    async def get_load_cell(self, _request: web.Request) -> web.Response:
        text = json.dumps(self.load_cell_payload())
        if self.unit_label_quirk and self.initialized:
            # a dict cannot hold the duplicate key, so append it to the text
            label = json.dumps(UNIT_LABELS[self.unit])
            text = f"{text[:-1]}, \"unit\": {label}}}"
        return web.Response(text=text, content_type="application/json")

    async def post_load_cell(self, request: web.Request) -> web.Response:
        data = await _json_body(request)
        if data is None:
            return _error("Invalid JSON")

        changed = False
        if isinstance(data.get("enabled"), bool):
            self.load_cell_enabled = data["enabled"]
            changed = True
        offset = data.get("byte_offset")
        if isinstance(offset, int):
            if not 0 <= offset <= MAX_BYTE_OFFSET:
                return _error(
                    f"Byte offset too large. Maximum is {MAX_BYTE_OFFSET} "
                    f"(assembly size {ASSEMBLY_SIZE} - "
                    f"data size {LOAD_CELL_BLOCK_SIZE})"
                )
            self.byte_offset = offset
            changed = True

        ranges = {
            "unit": range(len(UNIT_LABELS)),
            "gain": range(len(GAIN_LABELS)),
            "sample_rate": tuple(SAMPLE_RATE_LABELS),
            "channel": range(2),
            "ldo_value": range(len(LDO_VOLTAGES)),
            "average": range(1, 51),
        }
        for key, allowed in ranges.items():
            value = data.get(key)
            if isinstance(value, int) and value in allowed:
                setattr(self, key, value)
                changed = True

        message = (
            "Configuration saved. Reboot required to apply gain, sample rate, "
            "channel, or LDO changes."
            if changed
            else "No changes"
        )
        return web.json_response({"status": "ok", "message": message})

    async def post_calibrate(self, request: web.Request) -> web.Response:
        data = await _json_body(request)
        if data is None:
            return _error("Invalid JSON")
        if not self.initialized:
            return _error("NAU7802 not initialized", status=500)

        action = data.get("action")
        if action == "tare":
            self.zero_offset = float(self.raw_reading)
            return web.json_response(
                {
                    "status": "ok",
                    "message": "Tare calibration completed",
                    "zero_offset": self.zero_offset,
                }
            )
        if action == "calibrate":
            known_weight = data.get("known_weight")
            if not isinstance(known_weight, (int, float)):
                return _error("Missing or invalid 'known_weight' field")
            if known_weight <= 0:
                return _error("Known weight must be greater than 0")
            grams = known_weight * UNIT_GRAMS[self.unit]
            delta = self.raw_reading - self.zero_offset
            if delta == 0:
                return web.json_response(
                    {"status": "error", "message": "Calibration failed"}
                )
            self.calibration_factor = delta / grams
            return web.json_response(
                {
                    "status": "ok",
                    "message": "Calibration completed",
                    "calibration_factor": self.calibration_factor,
                    "zero_offset": self.zero_offset,
                }
            )
        if action == "afe":
            return web.json_response(
                {"status": "ok", "message": "AFE calibration completed successfully"}
            )
        return _error("Invalid action (must be 'tare', 'calibrate', or 'afe')")

    def build_app(self) -> web.Application:
        app = web.Application()
        app.add_routes(
            [
                web.get("/api/ipconfig", self.get_ipconfig),
                web.post("/api/ipconfig", self.post_ipconfig),
                web.get("/api/modbus", self.get_modbus),
                web.post("/api/modbus", self.post_modbus),
                web.get("/api/i2c/pullup", self.get_i2c_pullup),
                web.post("/api/i2c/pullup", self.post_i2c_pullup),
                web.get("/api/status", self.get_status),
                web.get("/api/assemblies/sizes", self.get_assembly_sizes),
                web.post("/api/ota/update", self.post_ota_update),
                web.get("/api/ota/status", self.get_ota_status),
                web.post("/api/reboot", self.post_reboot),
                web.get("/api/logs", self.get_logs),
                web.get("/api/nau7802", self.get_load_cell),
                web.post("/api/nau7802", self.post_load_cell),
                web.post("/api/nau7802/calibrate", self.post_calibrate),
            ]
        )
        return app


async def run_mock_device(
    host: str = "0.0.0.0",
    port: int = 8080,
    raw_reading: int = 84_000,
    unit_label_quirk: bool = True,
) -> None:
    """Serve a mock device until cancelled."""
    device = MockLoadCellDevice(
        raw_reading=raw_reading, unit_label_quirk=unit_label_quirk
    )
    runner = web.AppRunner(device.build_app())
    await runner.setup()
    site = web.TCPSite(runner, host, port)
    await site.start()
    logger.info("Mock device listening on %s:%d", host, port)
    try:
        await asyncio.Event().wait()
    finally:
        await runner.cleanup()
        logger.info("Mock device stopped")
