"""Fake device answering through httpx.MockTransport."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import httpx


DEVICE_ADDRESS = "10.0.0.5"

NETWORK_PAYLOAD = {
    "use_dhcp": False,
    "ip_address": "10.0.0.5",
    "netmask": "255.255.255.0",
    "gateway": "10.0.0.1",
    "dns1": "8.8.8.8",
    "dns2": "8.8.4.4",
}

# numeric unit first, then the label string, as the firmware emits it
LOAD_CELL_TEXT = (
    '{"enabled": true, "byte_offset": 4, "unit": 1, "gain": 7, "sample_rate": 3,'
    ' "channel": 0, "ldo_value": 4, "average": 10, "initialized": true,'
    ' "gain_label": "x128", "unit_label": "lbs", "sample_rate_label": "80",'
    ' "channel_label": "Channel 1", "ldo_voltage": 3.3, "connected": true,'
    ' "raw_reading": 84000, "available": true, "weight": 1.85,'
    ' "unit_code": 1, "calibration_factor": 100.0, "zero_offset": 0.0,'
    ' "revision_code": 15, "unit": "lbs"}'
)

Handler = Callable[[httpx.Request], httpx.Response]


class FakeDevice:
    """Route table answering requests through ``httpx.MockTransport``."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Handler] = {}
        self.requests: list[httpx.Request] = []
        self.reachable = True
        self.set_json("GET", "/api/ipconfig", NETWORK_PAYLOAD)
        self.set_json("POST", "/api/ipconfig", {"status": "ok", "message": "Saved"})
        self.set_json("GET", "/api/modbus", {"enabled": False})
        self.set_json("POST", "/api/modbus", {"status": "ok", "enabled": True})
        self.set_json("GET", "/api/i2c/pullup", {"enabled": True})
        self.set_json("POST", "/api/i2c/pullup", {"status": "ok", "message": "Saved"})
        self.set_text("GET", "/api/nau7802", LOAD_CELL_TEXT)
        self.set_json("POST", "/api/nau7802", {"status": "ok", "message": "Saved"})
        self.set_json("POST", "/api/reboot", {"status": "ok"})

    def set_json(
        self, method: str, path: str, payload: Any, status: int = 200
    ) -> None:
        self.routes[(method, path)] = lambda _request: httpx.Response(
            status, json=payload
        )

    def set_text(self, method: str, path: str, text: str, status: int = 200) -> None:
        self.routes[(method, path)] = lambda _request: httpx.Response(
            status, text=text, headers={"content-type": "application/json"}
        )

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.reachable:
            raise httpx.ConnectError("No route to host", request=request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"status": "error", "message": "Not found"})
        return route(request)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [
            request
            for request in self.requests
            if request.method == method and request.url.path == path
        ]

    def last_body(self, method: str, path: str) -> Any:
        return json.loads(self.calls(method, path)[-1].content)


