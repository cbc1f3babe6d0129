from datetime import timedelta
from types import SimpleNamespace

import pytest

from a2squery.ping import PingBuffer, PingStats, calculate_stats, start


class _FakeClient:
    address = "127.0.0.1:27016"

    def __init__(self, outcomes):
        self._outcomes = iter(outcomes)

    def get_info(self):
        outcome = next(self._outcomes)
        if isinstance(outcome, BaseException):
            raise outcome
        return SimpleNamespace(ping=outcome, folder="dayz", name="Test")


def _ms(value):
    return timedelta(milliseconds=value)


def test_buffer_keeps_order():
    buffer = PingBuffer(5)
    for value in (1, 2, 3):
        buffer.add(_ms(value))
    assert buffer.values() == [_ms(1), _ms(2), _ms(3)]
    assert len(buffer) == 3


def test_buffer_drops_oldest_when_full():
    buffer = PingBuffer(3)
    for value in range(1, 6):
        buffer.add(_ms(value))
    assert len(buffer) == 3
    assert buffer.values() == [_ms(3), _ms(4), _ms(5)]


def test_buffer_rejects_zero_size():
    with pytest.raises(ValueError):
        PingBuffer(0)


def test_stats_empty():
    assert calculate_stats(PingBuffer(4)) == PingStats()


def test_stats_bounds_and_mean():
    buffer = PingBuffer(10)
    for value in (4, 1, 7):
        buffer.add(_ms(value))
    stats = calculate_stats(buffer)
    assert stats.min == _ms(1)
    assert stats.max == _ms(7)
    assert stats.min <= stats.avg <= stats.max


def test_stats_single_value():
    buffer = PingBuffer(2)
    buffer.add(_ms(9))
    stats = calculate_stats(buffer)
    assert stats.min == stats.max == stats.avg == _ms(9)


def test_start_counts_successes_and_failures(capsys):
    client = _FakeClient([_ms(5), OSError("timeout"), _ms(7)])
    start(client, 3, 0)
    out = capsys.readouterr().out
    assert "Start 3 times ping 127.0.0.1:27016 with 0s period" in out
    assert 'folder="dayz" name="Test" time=5ms' in out
    assert "Transmitted 3 request, received 2 response, failed 1" in out
    assert "Min=5ms Max=7ms" in out


def test_start_stops_on_interrupt(capsys):
    client = _FakeClient([_ms(5), KeyboardInterrupt()])
    start(client, 0, 0)
    out = capsys.readouterr().out
    assert "Start infinity ping 127.0.0.1:27016" in out
    assert "Received signal, stopping..." in out
    assert "received 1 response" in out


def test_start_negative_count_sends_nothing(capsys):
    client = _FakeClient([])
    start(client, -1, 0)
    out = capsys.readouterr().out
    assert "Transmitted 0 request, received 0 response, failed 0" in out
    assert "Min=0s Max=0s Avg=0s" in out