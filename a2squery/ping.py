"""Repeated A2S_INFO requests with response-time statistics."""

from __future__ import annotations

import itertools
import logging
import signal
import threading
from dataclasses import dataclass
from datetime import timedelta
from types import TracebackType

from .bread import format_duration

PING_BUFFER_SIZE = 65535

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PingStats:
    """Minimum, maximum and mean response time."""

    min: timedelta = timedelta(0)
    max: timedelta = timedelta(0)
    avg: timedelta = timedelta(0)


class PingBuffer:
    """Keeps the most recent response times, dropping the oldest when full."""

    def __init__(self, size: int = PING_BUFFER_SIZE) -> None:
        if size < 1:
            raise ValueError(f"buffer size must be positive, got {size}")
        self.size = size
        self._data: list[timedelta] = []
        self._start = 0

    def __len__(self) -> int:
        return len(self._data)

    def add(self, value: timedelta) -> None:
        if len(self._data) < self.size:
            self._data.append(value)
        else:
            self._data[self._start] = value
            self._start = (self._start + 1) % self.size

    def values(self) -> list[timedelta]:
        """Return the stored times, oldest first."""
        return self._data[self._start:] + self._data[: self._start]


def calculate_stats(buffer: PingBuffer) -> PingStats:
    """Compute statistics over every time held in the buffer."""
    pings = buffer.values()
    if not pings:
        return PingStats()
    total = sum(pings, timedelta(0))
    return PingStats(min=min(pings), max=max(pings), avg=total // len(pings))


class _StopSignal:
    """Turns SIGINT and SIGTERM into a stop request while active."""

    _SIGNALS = (signal.SIGINT, signal.SIGTERM)

    def __init__(self) -> None:
        self.event = threading.Event()
        self.received: int | None = None
        self._previous: dict[int, object] = {}

    def _handle(self, signum, frame) -> None:
        self.received = signum
        self.event.set()

    def is_set(self) -> bool:
        return self.event.is_set()

    def wait(self, seconds: float) -> bool:
        return self.event.wait(seconds)

    def __enter__(self) -> "_StopSignal":
        if threading.current_thread() is threading.main_thread():
            for signum in self._SIGNALS:
                self._previous[signum] = signal.signal(signum, self._handle)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        for signum, previous in self._previous.items():
            signal.signal(signum, previous)
        self._previous.clear()


def start(client, count: int = 0, period: int = 1) -> None:
    """Ping ``client`` ``count`` times (forever if 0) and print a report."""
    buffer = PingBuffer()
    errors = 0

    if count != 0:
        print(f"Start {count} times ping {client.address} with {period}s period\n")
    else:
        print(f"Start infinity ping {client.address} with {period}s period\n")

    attempts = itertools.count() if count == 0 else range(count)
    interrupted = False
    try:
        with _StopSignal() as stop:
            for _ in attempts:
                if stop.is_set():
                    break
                try:
                    info = client.get_info()
                except Exception as exc:  # any failed request counts as lost
                    logger.warning("Failed to get ping: %s", exc)
                    errors += 1
                    continue

                buffer.add(info.ping)
                print(
                    f"A2S_INFO response server={client.address} "
                    f'folder="{info.folder}" name="{info.name}" '
                    f"time={format_duration(info.ping)}"
                )
                if stop.wait(period):
                    break
            interrupted = stop.is_set()
    except KeyboardInterrupt:
        interrupted = True

    if interrupted:
        print("Received signal, stopping...")

    stats = calculate_stats(buffer)
    received = len(buffer)
    print(
        f"\nTransmitted {received + errors} request, "
        f"received {received} response, failed {errors}"
    )
    if received >= buffer.size:
        print(f"Requests counter truncated to {buffer.size}")
    print(
        f"Min={format_duration(stats.min)} "
        f"Max={format_duration(stats.max)} "
        f"Avg={format_duration(stats.avg)}"
    )