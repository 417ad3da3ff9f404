import pytest

from wifipriority_app.core_models import BackoffState


def test_sequence_from_empty_state() -> None:
    state = BackoffState()
    delays = []
    for _ in range(5):
        delays.append(state.delay)
        state = state.grow()
    assert delays == pytest.approx([0.0, 0.5, 0.6, 0.72, 0.864])


def test_growth_is_monotonic_and_capped() -> None:
    state = BackoffState()
    previous = -1.0
    for _ in range(100):
        state = state.grow()
        assert state.delay >= previous
        assert state.delay <= 100.0
        previous = state.delay
    assert state.delay == 100.0
    assert state.grow().delay == 100.0


def test_reset() -> None:
    assert BackoffState(42.0).reset() == BackoffState(0.0)


def test_custom_parameters() -> None:
    state = BackoffState().grow(initial=2.0, factor=2.0, maximum=5.0)
    assert state.delay == 2.0
    assert state.grow(2.0, 2.0, 5.0).delay == 4.0
    assert state.grow(2.0, 2.0, 5.0).grow(2.0, 2.0, 5.0).delay == 5.0
