from loadlink.models import NetworkConfig
from loadlink.utils.redaction import Redactor


def test_redact_ip_keeps_last_octet():
    redactor = Redactor()
    assert redactor.redact_ip("192.168.1.50") == "x.x.x.50"
    assert redactor.redact_ip("fe80::1") == "x:x:x:x"
    assert redactor.redact_ip("device.local") == "device.local"
    assert redactor.redact_ip("") == ""


def test_redact_network_leaves_netmask():
    config = NetworkConfig(
        use_dhcp=False,
        ip_address="10.1.2.3",
        netmask="255.255.255.0",
        gateway="10.1.2.1",
        dns1="8.8.8.8",
    )

    redacted = Redactor().redact_network(config)

    assert redacted.ip_address == "x.x.x.3"
    assert redacted.gateway == "x.x.x.1"
    assert redacted.dns1 == "x.x.x.8"
    assert redacted.netmask == "255.255.255.0"
    assert Redactor(enabled=False).redact_network(config) == config
