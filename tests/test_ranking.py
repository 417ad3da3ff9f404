import random

from wifipriority_app.core_ranking import rank
from wifipriority_app.core_base import ssid_band_score

from fakes import ap


def ssids(ranked):
    return [o.ssid.decode() for o in ranked]


def test_known_precedes_unknown_regardless_of_signal() -> None:
    ranked = rank([ap("A", 100), ap("B", 1)], {b"B"})
    assert ssids(ranked) == ["B", "A"]


def test_higher_signal_wins_among_known() -> None:
    ranked = rank([ap("A", 50), ap("B", 80)], {b"A", b"B"})
    assert ssids(ranked) == ["B", "A"]


def test_band_hint_breaks_signal_ties() -> None:
    ranked = rank([ap("Home-2G", 70), ap("Home-5G", 70)], {b"Home-2G", b"Home-5G"})
    assert ssids(ranked) == ["Home-5G", "Home-2G"]


def test_band_hint_never_outranks_signal() -> None:
    ranked = rank([ap("Home-6G", 40), ap("Home", 41)], {b"Home-6G", b"Home"})
    assert ssids(ranked) == ["Home", "Home-6G"]


def test_measured_frequency_is_ignored() -> None:
    ranked = rank([ap("Cafe", 60, freq=2412), ap("Bar", 60, freq=5180)], set())
    assert ssids(ranked) == ["Cafe", "Bar"]


def test_is_known_annotated() -> None:
    ranked = rank([ap("A", 10, known=True), ap("B", 20)], {b"B"})
    assert [(o.ssid, o.is_known) for o in ranked] == [(b"B", True), (b"A", False)]


def test_inputs_are_not_modified() -> None:
    obs = [ap("A", 10), ap("B", 20)]
    ranked = rank(obs, {b"A", b"B"})
    assert all(o.is_known for o in ranked)
    assert [o.is_known for o in obs] == [False, False]
    assert all(r is not o for r in ranked for o in obs)


def test_current_network_does_not_change_order() -> None:
    obs = [ap("A", 90), ap("B", 30)]
    assert ssids(rank(obs, {b"A", b"B"}, current_ssid=b"B")) == ["A", "B"]


def test_empty_input() -> None:
    assert rank([], {b"A"}) == []


def test_duplicates_kept() -> None:
    ranked = rank([ap("A", 40, device="wlan0"), ap("A", 70, device="wlan1")], {b"A"})
    assert [o.device for o in ranked] == ["wlan1", "wlan0"]


def test_sort_is_stable_for_equal_keys() -> None:
    rng = random.Random(1234)
    for _ in range(25):
        # same known flag, signal and band score: only input order differs
        tied = [ap(f"net{i}", 55) for i in range(8)]
        rng.shuffle(tied)
        others = [ap("strong-5g", 90), ap("weak", 5), ap("known", 1)]
        obs = tied + others
        rng.shuffle(obs)
        ranked = rank(obs, {b"known"})
        expected_tied = [o.ssid for o in obs if o.signal == 55]
        assert [o.ssid for o in ranked if o.signal == 55] == expected_tied
        assert ranked[0].ssid == b"known"


def test_ssid_band_score_table() -> None:
    assert ssid_band_score(b"Office-6GHz") == 60
    assert ssid_band_score(b"office_6g") == 60
    assert ssid_band_score(b"HOME-5GHZ") == 50
    assert ssid_band_score(b"home-5g") == 50
    assert ssid_band_score(b"Cafe 2.4GHz") == 24
    assert ssid_band_score(b"cafe-2ghz") == 24
    assert ssid_band_score(b"cafe-2G") == 24
    assert ssid_band_score(b"Airport") == 0
    assert ssid_band_score(b"") == 0
