from __future__ import annotations

import ipaddress
from dataclasses import dataclass

from loadlink.models import NetworkConfig


@dataclass
class Redactor:
    """Masks addresses in console output that may be shared."""

    enabled: bool = True

    def redact_ip(self, ip: str) -> str:
        if not self.enabled or not ip:
            return ip
        try:
            address = ipaddress.ip_address(ip)
        except ValueError:
            return ip
        if address.version != 4:
            return "x:x:x:x"
        return f"x.x.x.{str(address).rsplit('.', 1)[1]}"

    def redact_network(self, config: NetworkConfig) -> NetworkConfig:
        if not self.enabled:
            return config
        # netmask is not identifying
        return config.model_copy(
            update={
                "ip_address": self.redact_ip(config.ip_address),
                "gateway": self.redact_ip(config.gateway),
                "dns1": self.redact_ip(config.dns1),
                "dns2": self.redact_ip(config.dns2),
            }
        )
