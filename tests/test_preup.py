from wifipriority_app.config import PreUpConfig
from wifipriority_app.core_models import SavedProfile
from wifipriority_app.preup import plan_patch, run_preup

from fakes import FakeDirectory, wifi_profile

CFG = PreUpConfig(
    prefixes=("Home", "Office"),
    priv_ipv6=("fd00::53",),
    priv_ipv4=("192.168.1.53", "192.168.1.54"),
    pub_ipv6=("2606:4700:4700::1111",),
    pub_ipv4=("1.1.1.1",),
    ipv6_token="::1:2:3:4",
)


def ethernet(name: str) -> SavedProfile:
    return SavedProfile(uuid=f"uuid-{name}", name=name, type="802-3-ethernet")


def test_private_wireless_gets_private_dns_and_token() -> None:
    props = plan_patch(wifi_profile("Home-5G"), CFG)
    assert props["ipv6.dns"] == "fd00::53"
    assert props["ipv4.dns"] == "192.168.1.53 192.168.1.54"
    assert props["ipv6.token"] == "::1:2:3:4"
    assert props["ipv6.addr-gen-mode"] == "eui64"
    assert props["ipv6.ip6-privacy"] == "2"
    assert props["ipv6.dns-priority"] == "1"
    assert props["ipv4.dns-priority"] == "2"


def test_private_ethernet_gets_private_dns() -> None:
    props = plan_patch(ethernet("Office LAN"), CFG)
    assert props["ipv4.dns"] == "192.168.1.53 192.168.1.54"
    assert props["ipv6.token"] == "::1:2:3:4"


def test_public_wireless_gets_public_dns() -> None:
    props = plan_patch(wifi_profile("Airport"), CFG)
    assert props["ipv6.dns"] == "2606:4700:4700::1111"
    assert props["ipv4.dns"] == "1.1.1.1"
    assert props["ipv6.token"] == ""


def test_other_ethernet_is_cleared() -> None:
    props = plan_patch(ethernet("Wired connection 1"), CFG)
    assert props["ipv6.dns"] == ""
    assert props["ipv4.dns"] == ""
    assert props["ipv6.token"] == ""
    assert props["ipv4.method"] == "auto"


def test_prefix_must_match_start() -> None:
    assert plan_patch(wifi_profile("MyHome"), CFG)["ipv4.dns"] == "1.1.1.1"


def test_other_types_untouched() -> None:
    vpn = SavedProfile(uuid="u-vpn", name="Home VPN", type="vpn")
    assert plan_patch(vpn, CFG) == {}


def test_run_preup_continues_after_failure() -> None:
    directory = FakeDirectory(profiles=[wifi_profile("Home"), ethernet("LAN"), wifi_profile("Cafe")])
    directory.fail_writes_for = {"uuid-LAN"}

    updated, failed = run_preup(directory, CFG)

    assert (updated, failed) == (2, 1)
    assert [uuid for uuid, _ in directory.modified] == ["uuid-Home", "uuid-Cafe"]


def test_dry_run_writes_nothing() -> None:
    directory = FakeDirectory(profiles=[wifi_profile("Home"), ethernet("LAN")])

    assert run_preup(directory, CFG, dry_run=True) == (0, 0)
    assert directory.modified == []
