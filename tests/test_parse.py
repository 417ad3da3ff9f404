"""nmcli terse-output parsers."""

import pytest

from wifipriority_app.core_base import ProfileReadError
from wifipriority_app.core_nmcli import (
    decode_profile,
    parse_connection_list,
    parse_device_status,
    parse_settings,
    parse_wifi_list,
)


def test_wifi_row_with_escaped_bssid() -> None:
    sample = r"*:4D794E6574776F726B:AA\:BB\:CC\:DD\:EE\:FF:2437 MHz:85"
    aps = parse_wifi_list(sample, device="wlan0")
    assert len(aps) == 1, f"Expected 1 AP, got {len(aps)}"
    ap = aps[0]
    assert ap.ssid == b"MyNetwork"
    assert ap.bssid == "AA:BB:CC:DD:EE:FF"
    assert ap.frequency_mhz == 2437
    assert ap.signal == 85
    assert ap.band == "2.4 GHz"
    assert ap.in_use is True
    assert ap.device == "wlan0"


def test_wifi_rows_skip_garbage() -> None:
    out = "\n".join([
        r" :ZZ:AA\:BB\:CC\:DD\:EE\:01:2412 MHz:10",  # bad hex
        "too:short",
        "",
        r" :4869:AA\:BB\:CC\:DD\:EE\:02:5180 MHz:130",
    ])
    aps = parse_wifi_list(out)
    assert [(a.ssid, a.signal) for a in aps] == [(b"Hi", 100)]


def test_hidden_network_has_empty_ssid() -> None:
    ap = parse_wifi_list(r" ::AA\:BB\:CC\:DD\:EE\:03:6115 MHz:33")[0]
    assert ap.ssid == b""
    assert ap.display_ssid == "<hidden> (AA:BB:CC:DD:EE:03)"
    assert ap.band == "6 GHz"


def test_connection_list_with_colon_in_name() -> None:
    out = r"Cafe\: Guest:u-1:802-11-wireless:1700000000" "\nLAN:u-2:802-3-ethernet:0\n"
    profiles = parse_connection_list(out)
    assert [(p.name, p.uuid, p.type, p.timestamp) for p in profiles] == [
        ("Cafe: Guest", "u-1", "802-11-wireless", 1700000000),
        ("LAN", "u-2", "802-3-ethernet", 0),
    ]


def test_decode_profile() -> None:
    settings = parse_settings(
        "connection.id:Home\nconnection.uuid:u-1\nconnection.type:802-11-wireless\n"
        "connection.timestamp:1700000000\n802-11-wireless.ssid:Home\\:Net\n"
    )
    profile = decode_profile(settings)
    assert profile.ssid == b"Home:Net"
    assert profile.is_known


def test_decode_profile_without_timestamp_is_not_known() -> None:
    profile = decode_profile({
        "connection.uuid": "u-1",
        "connection.type": "802-11-wireless",
        "connection.timestamp": "",
        "802-11-wireless.ssid": "Home",
    })
    assert profile.timestamp == 0
    assert not profile.is_known


@pytest.mark.parametrize(
    "settings",
    [
        {"connection.type": "802-11-wireless", "802-11-wireless.ssid": "x"},
        {"connection.uuid": "u-1", "802-11-wireless.ssid": "x"},
        {"connection.uuid": "u-1", "connection.type": "802-11-wireless"},
        {
            "connection.uuid": "u-1",
            "connection.type": "802-11-wireless",
            "connection.timestamp": "yesterday",
            "802-11-wireless.ssid": "x",
        },
    ],
)
def test_decode_profile_rejects_malformed(settings) -> None:
    with pytest.raises(ProfileReadError):
        decode_profile(settings)


def test_device_status_keeps_wifi_only() -> None:
    devices = parse_device_status("wlan0:wifi:connected\neth0:ethernet:connected\np2p-dev-wlan0:wifi-p2p:disconnected\n")
    assert [(d.name, d.is_activated) for d in devices] == [("wlan0", True)]
