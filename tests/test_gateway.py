from __future__ import annotations

import asyncio

import httpx
import pytest
from fakes import DEVICE_ADDRESS, NETWORK_PAYLOAD

from loadlink.core.errors import TransportError
from loadlink.core.gateway import DeviceGateway
from loadlink.core.transport import HttpTransport
from loadlink.models import LoadCellConfigRequest, NetworkConfig


def test_get_network_config(gateway, device):
    config = asyncio.run(gateway.get_network_config())

    assert config == NetworkConfig(**NETWORK_PAYLOAD)
    request = device.calls("GET", "/api/ipconfig")[0]
    assert str(request.url) == f"http://{DEVICE_ADDRESS}/api/ipconfig"


def test_unreachable_device_returns_sentinels(gateway, device):
    device.reachable = False

    assert asyncio.run(gateway.get_network_config()) is None
    assert asyncio.run(gateway.get_modbus_enabled()) is None
    assert asyncio.run(gateway.get_load_cell_config()) is None
    assert asyncio.run(gateway.calibrate("tare")) is None

    result = asyncio.run(gateway.set_modbus_enabled(True))
    assert not result
    assert "No route to host" in (result.message or "")
    assert not asyncio.run(gateway.reboot())


def test_timeout_is_a_transport_failure(device):
    def _slow(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    transport = HttpTransport(
        lambda: DEVICE_ADDRESS, timeout=0.5, transport=httpx.MockTransport(_slow)
    )
    with pytest.raises(TransportError, match="timed out after 0.5s"):
        asyncio.run(transport.get("/api/ipconfig"))
    assert asyncio.run(DeviceGateway(transport).get_network_config()) is None


def test_non_success_status_is_a_failure(gateway, device):
    device.set_json("GET", "/api/ipconfig", NETWORK_PAYLOAD, status=500)
    device.set_json("POST", "/api/modbus", {"status": "ok"}, status=503)

    assert asyncio.run(gateway.get_network_config()) is None
    result = asyncio.run(gateway.set_modbus_enabled(False))
    assert not result
    assert result.message == "HTTP 503"


def test_malformed_payload_is_a_failure(gateway, device):
    device.set_text("GET", "/api/ipconfig", "<html>oops</html>")
    device.set_json("GET", "/api/modbus", {"enabled": "yes"})
    device.set_json("GET", "/api/i2c/pullup", [True])

    assert asyncio.run(gateway.get_network_config()) is None
    assert asyncio.run(gateway.get_modbus_enabled()) is None
    assert asyncio.run(gateway.get_i2c_pullup_enabled()) is None


def test_toggles(gateway, device):
    assert asyncio.run(gateway.get_modbus_enabled()) is False
    assert asyncio.run(gateway.get_i2c_pullup_enabled()) is True

    assert asyncio.run(gateway.set_modbus_enabled(True))
    assert device.last_body("POST", "/api/modbus") == {"enabled": True}
    assert asyncio.run(gateway.set_i2c_pullup_enabled(False))
    assert device.last_body("POST", "/api/i2c/pullup") == {"enabled": False}


def test_write_with_error_status_surfaces_message(gateway, device):
    device.set_json(
        "POST",
        "/api/ipconfig",
        {"status": "error", "message": "Missing or invalid 'use_dhcp' field"},
    )
    result = asyncio.run(gateway.save_network_config(NetworkConfig()))

    assert not result
    assert result.message == "Missing or invalid 'use_dhcp' field"


@pytest.mark.parametrize("body", ["", "{}", '{"message": "done"}'])
def test_write_without_status_field_succeeds(gateway, device, body):
    device.set_text("POST", "/api/modbus", body)
    assert asyncio.run(gateway.set_modbus_enabled(True))


def test_save_network_config_sends_all_fields(gateway, device):
    config = NetworkConfig(**NETWORK_PAYLOAD)
    result = asyncio.run(gateway.save_network_config(config))

    assert result
    assert result.message == "Saved"
    assert device.last_body("POST", "/api/ipconfig") == NETWORK_PAYLOAD


def test_load_cell_config_keeps_unit_code_before_label(gateway):
    config = asyncio.run(gateway.get_load_cell_config())

    assert config is not None
    assert config.enabled is True
    assert config.unit == 1
    assert config.unit_label == "lbs"
    assert config.gain_label == "x128"
    assert config.byte_offset == 4
    assert config.raw_reading == 84000


def test_load_cell_config_with_only_unit_label(gateway, device):
    device.set_text("GET", "/api/nau7802", '{"enabled": true, "unit": "lbs"}')
    config = asyncio.run(gateway.get_load_cell_config())

    assert config is not None
    assert config.unit == 0


def test_load_cell_config_with_numeric_unit(gateway, device):
    device.set_json("GET", "/api/nau7802", {"enabled": False, "unit": 2})
    config = asyncio.run(gateway.get_load_cell_config())

    assert config is not None
    assert config.enabled is False
    assert config.unit == 2


def test_save_load_cell_config_omits_unset_fields(gateway, device):
    request = LoadCellConfigRequest(enabled=True, byte_offset=12)
    assert asyncio.run(gateway.save_load_cell_config(request))
    assert device.last_body("POST", "/api/nau7802") == {
        "enabled": True,
        "byte_offset": 12,
    }


def test_calibrate_request_bodies(gateway, device):
    device.set_json(
        "POST", "/api/nau7802/calibrate", {"status": "ok", "message": "done"}
    )

    asyncio.run(gateway.calibrate("tare"))
    assert device.last_body("POST", "/api/nau7802/calibrate") == {"action": "tare"}

    asyncio.run(gateway.calibrate("afe", samples=30))
    assert device.last_body("POST", "/api/nau7802/calibrate") == {"action": "afe"}

    asyncio.run(gateway.calibrate("calibrate"))
    assert device.last_body("POST", "/api/nau7802/calibrate") == {
        "action": "calibrate",
        "samples": 10,
    }

    asyncio.run(gateway.calibrate("calibrate", known_weight=2.5, samples=4))
    assert device.last_body("POST", "/api/nau7802/calibrate") == {
        "action": "calibrate",
        "samples": 4,
        "known_weight": 2.5,
    }


def test_calibrate_result(gateway, device):
    device.set_json(
        "POST",
        "/api/nau7802/calibrate",
        {
            "status": "ok",
            "message": "Calibration completed",
            "calibration_factor": 42.0,
        },
    )
    result = asyncio.run(gateway.calibrate("calibrate", known_weight=1.0))

    assert result is not None
    assert result.ok
    assert result.calibration_factor == 42.0
    assert result.zero_offset is None


def test_calibrate_device_error_is_reported(gateway, device):
    device.set_json(
        "POST",
        "/api/nau7802/calibrate",
        {"status": "error", "message": "Failed to acquire device lock"},
    )
    result = asyncio.run(gateway.calibrate("tare"))

    assert result is not None
    assert not result.ok
    assert result.message == "Failed to acquire device lock"


def test_calibrate_invalid_request_is_not_sent(gateway, device):
    assert asyncio.run(gateway.calibrate("calibrate", samples=0)) is None
    assert device.calls("POST", "/api/nau7802/calibrate") == []


def test_upload_firmware_is_multipart(gateway, device, tmp_path):
    image = tmp_path / "app.bin"
    image.write_bytes(b"\xe9firmware-image")
    # success depends on the HTTP status, not the body
    device.set_json("POST", "/api/ota/update", {"status": "error"})

    assert asyncio.run(gateway.upload_firmware(image))

    request = device.calls("POST", "/api/ota/update")[0]
    assert request.headers["content-type"].startswith("multipart/form-data")
    assert b'name="firmware"; filename="app.bin"' in request.content
    assert b"\xe9firmware-image" in request.content


def test_upload_firmware_failures(gateway, device, tmp_path):
    missing = asyncio.run(gateway.upload_firmware(tmp_path / "missing.bin"))
    assert not missing
    assert device.calls("POST", "/api/ota/update") == []

    image = tmp_path / "app.bin"
    image.write_bytes(b"data")
    device.set_json("POST", "/api/ota/update", {}, status=500)
    assert not asyncio.run(gateway.upload_firmware(image))


def test_start_ota_from_url(gateway, device):
    device.set_json("POST", "/api/ota/update", {"status": "ok"})
    assert asyncio.run(gateway.start_ota_from_url("http://host/fw.bin"))
    assert device.last_body("POST", "/api/ota/update") == {
        "url": "http://host/fw.bin"
    }


def test_reboot_sends_no_body(gateway, device):
    device.set_text("POST", "/api/reboot", "")
    assert asyncio.run(gateway.reboot())
    assert device.calls("POST", "/api/reboot")[0].content == b""


def test_device_records(gateway, device):
    device.set_json(
        "GET",
        "/api/status",
        {
            "input_assembly_100": {"raw_bytes": list(range(40))},
            "output_assembly_150": {"raw_bytes": [255, 1]},
        },
    )
    device.set_json(
        "GET",
        "/api/assemblies/sizes",
        {"input_assembly_size": 32, "output_assembly_size": 32},
    )
    device.set_json(
        "GET", "/api/ota/status", {"status": "in_progress", "progress": 40}
    )
    device.set_json(
        "GET",
        "/api/logs",
        {
            "status": "ok",
            "logs": "boot\n",
            "size": 5,
            "total_size": 9000,
            "truncated": True,
        },
    )

    assemblies = asyncio.run(gateway.get_assemblies())
    assert assemblies is not None
    assert len(assemblies.input_assembly) == 32
    assert assemblies.output_assembly[:3] == bytes([255, 1, 0])

    sizes = asyncio.run(gateway.get_assembly_sizes())
    assert sizes is not None and sizes.input_assembly_size == 32

    ota = asyncio.run(gateway.get_ota_status())
    assert ota is not None
    assert (ota.status, ota.progress, ota.message) == ("in_progress", 40, "")

    logs = asyncio.run(gateway.get_logs())
    assert logs is not None
    assert logs.truncated is True
    assert logs.logs == "boot\n"


def test_address_is_read_on_every_request(device):
    address = {"current": "10.0.0.5"}
    transport = HttpTransport(
        lambda: address["current"], transport=device.transport()
    )
    gateway = DeviceGateway(transport)

    asyncio.run(gateway.get_modbus_enabled())
    address["current"] = "10.0.0.6"
    asyncio.run(gateway.get_modbus_enabled())

    hosts = [request.url.host for request in device.calls("GET", "/api/modbus")]
    assert hosts == ["10.0.0.5", "10.0.0.6"]


def test_assemblies_skip_non_finite_numbers(gateway, device):
    device.set_text(
        "GET",
        "/api/status",
        '{"input_assembly_100": {"raw_bytes": [1, Infinity, 2, NaN, 1e999, 3]},'
        ' "output_assembly_150": {"raw_bytes": [-Infinity]}}',
    )

    assemblies = asyncio.run(gateway.get_assemblies())

    assert assemblies is not None
    assert assemblies.input_assembly[:4] == bytes([1, 2, 3, 0])
    assert assemblies.output_assembly == bytes(32)


def test_repeated_reads_give_equal_records(gateway):
    async def read_twice():
        return [
            (
                await gateway.get_network_config(),
                await gateway.get_modbus_enabled(),
                await gateway.get_i2c_pullup_enabled(),
                await gateway.get_load_cell_config(),
            )
            for _ in range(2)
        ]

    first, second = asyncio.run(read_twice())

    assert first == second
    assert first[3] is not None


@pytest.mark.parametrize("body", ["", "{}"])
def test_load_cell_save_with_empty_body_succeeds(gateway, device, body):
    device.set_text("POST", "/api/nau7802", body)

    result = asyncio.run(gateway.save_load_cell_config(LoadCellConfigRequest(gain=5)))

    assert result
    assert result.message is None
    assert device.last_body("POST", "/api/nau7802") == {"gain": 5}
