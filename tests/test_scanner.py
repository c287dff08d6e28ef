from __future__ import annotations

import asyncio

import httpx
from fakes import NETWORK_PAYLOAD

from loadlink.config import DiscoveryConfig
from loadlink.core.scanner import check_device, scan_network

RESPONDING = {"10.0.0.5", "10.0.0.3"}


def _network(request: httpx.Request) -> httpx.Response:
    if request.url.host not in RESPONDING:
        raise httpx.ConnectError("Connection refused", request=request)
    if request.url.path != "/api/ipconfig":
        return httpx.Response(404)
    return httpx.Response(200, json={**NETWORK_PAYLOAD, "ip_address": request.url.host})


def test_scan_finds_responding_hosts():
    config = DiscoveryConfig(timeout=0.5, parallel_scans=2)
    devices = asyncio.run(
        scan_network("10.0.0.0/29", config, transport=httpx.MockTransport(_network))
    )

    assert [device.address for device in devices] == ["10.0.0.3", "10.0.0.5"]
    assert devices[0].network.ip_address == "10.0.0.3"
    assert devices[0].network.use_dhcp is False


def test_check_device_ignores_other_services():
    def _web_server(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html></html>")

    async def scenario():
        transport = httpx.MockTransport(_web_server)
        async with httpx.AsyncClient(transport=transport) as client:
            return await check_device("10.0.0.8", DiscoveryConfig(), client)

    assert asyncio.run(scenario()) is None
