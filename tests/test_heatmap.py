# ABOUTME: Unit tests for keyboard heatmap aggregation
import pytest

from keystroke_coach.engine import compute_session_stats, process_keystroke
from keystroke_coach.heatmap import (
    KeyHeatmapData, aggregate_key_accuracy, get_heat_level,
    get_weakest_keys, get_strongest_keys
)


def session(pairs):
    events = [
        process_keystroke(expected, actual, 'Key', i * 100)
        for i, (expected, actual) in enumerate(pairs)
    ]
    return compute_session_stats(events, 0, len(events) * 100)


class TestAggregateKeyAccuracy:
    """Test merging per-key accuracy across sessions."""

    def test_merges_sessions(self):
        first = session([('a', 'a'), ('a', 'x'), ('b', 'b')])
        second = session([('a', 'a'), ('b', 'x'), ('b', 'b'), ('c', 'c')])

        data = {k.char: k for k in aggregate_key_accuracy([first, second])}

        assert data['a'] == KeyHeatmapData(char='a', accuracy=67, total=3, correct=2)
        assert data['b'] == KeyHeatmapData(char='b', accuracy=67, total=3, correct=2)
        assert data['c'] == KeyHeatmapData(char='c', accuracy=100, total=1, correct=1)

    def test_sorted_weakest_first(self):
        stats = session([('a', 'a'), ('b', 'x'), ('b', 'b'), ('c', 'x')])
        assert [k.char for k in aggregate_key_accuracy([stats])] == ['c', 'b', 'a']

    def test_no_sessions(self):
        assert aggregate_key_accuracy([]) == []
        assert aggregate_key_accuracy([session([])]) == []


class TestHeatLevels:
    """Test heat buckets."""

    @pytest.mark.parametrize('accuracy, level', [
        (100, 'excellent'), (95, 'excellent'), (94, 'good'), (85, 'good'),
        (80, 'fair'), (75, 'fair'), (70, 'weak'), (60, 'weak'), (59, 'critical'),
    ])
    def test_levels(self, accuracy, level):
        assert get_heat_level(accuracy, 10) == level

    def test_too_few_attempts(self):
        assert get_heat_level(10, 2) == 'none'


class TestWeakestAndStrongest:
    """Test ranked key lists."""

    @pytest.fixture
    def data(self):
        return [
            KeyHeatmapData('a', 50, 10, 5),
            KeyHeatmapData('b', 90, 10, 9),
            KeyHeatmapData('c', 10, 2, 0),
            KeyHeatmapData('d', 70, 10, 7),
        ]

    def test_weakest(self, data):
        assert [k.char for k in get_weakest_keys(data, 2)] == ['a', 'd']

    def test_strongest(self, data):
        assert [k.char for k in get_strongest_keys(data, 2)] == ['b', 'd']


if __name__ == '__main__':
    pytest.main([__file__])
