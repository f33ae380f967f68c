"""Unit tests for the partial-persist throttle."""
import pytest

from assistant_relay.config.settings import ThrottleSettings
from assistant_relay.streaming.throttle import should_persist


def test_default_persisted_indices():
    persisted = [i for i in range(40) if should_persist(i)]
    assert persisted == [0, 2, 4, 6, 15, 30]


@pytest.mark.parametrize(
    "n_fragments, expected_writes",
    [(0, 0), (1, 1), (2, 1), (3, 2), (7, 4), (8, 4), (15, 4), (16, 5), (30, 5), (31, 6)],
)
def test_write_count_for_stream_length(n_fragments: int, expected_writes: int):
    assert sum(1 for i in range(n_fragments) if should_persist(i)) == expected_writes


def test_custom_settings():
    settings = ThrottleSettings(every_n=5, early_window=0, early_every=1)
    assert [i for i in range(12) if should_persist(i, settings)] == [0, 5, 10]
