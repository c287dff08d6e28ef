from __future__ import annotations

import asyncio
import ipaddress
import logging
import socket

import httpx

from loadlink.config import DiscoveryConfig
from loadlink.core.gateway import IPCONFIG_PATH
from loadlink.core.transport import base_url
from loadlink.models import DiscoveredDevice, NetworkConfig

logger = logging.getLogger(__name__)


async def check_device(
    address: str, config: DiscoveryConfig, client: httpx.AsyncClient
) -> DiscoveredDevice | None:
    logger.debug("Checking %s", address)
    try:
        response = await client.get(
            f"{base_url(address)}{IPCONFIG_PATH}", timeout=config.timeout
        )
        response.raise_for_status()
        network = NetworkConfig.model_validate(response.json())
    except httpx.TimeoutException:
        logger.debug("No response from %s (timeout)", address)
        return None
    except (httpx.HTTPError, OSError) as exc:
        logger.debug("Failed to query %s: %s", address, exc)
        return None
    except ValueError as exc:
        logger.debug("%s answered with an unexpected payload: %s", address, exc)
        return None

    logger.debug("Found device at %s", address)
    return DiscoveredDevice(address=address, network=network)


async def scan_network(
    network: str,
    config: DiscoveryConfig,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[DiscoveredDevice]:
    net = ipaddress.ip_network(network, strict=False)
    hosts = [str(host) for host in net.hosts()]
    logger.debug(
        "Scanning %s (%d hosts, timeout=%.2fs, parallel=%d)",
        network,
        len(hosts),
        config.timeout,
        config.parallel_scans,
    )

    semaphore = asyncio.Semaphore(config.parallel_scans)

    async with httpx.AsyncClient(transport=transport) as client:

        async def _probe(address: str) -> DiscoveredDevice | None:
            async with semaphore:
                return await check_device(address, config, client)

        results = await asyncio.gather(*(_probe(address) for address in hosts))

    devices = [device for device in results if device is not None]
    devices.sort(key=lambda device: ipaddress.ip_address(device.address))
    logger.debug("Scan complete: found %d devices", len(devices))
    return devices


def detect_local_network() -> str:
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(("8.8.8.8", 80))
            local_ip = sock.getsockname()[0]
        network = ipaddress.ip_network(f"{local_ip}/24", strict=False)
        logger.debug("Detected local network: %s", network)
        return str(network)
    except OSError as exc:
        raise RuntimeError("Could not detect local network") from exc
