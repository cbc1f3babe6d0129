"""Little-endian readers for values packed in server query responses."""

from __future__ import annotations

import math
import re
import struct
from datetime import timedelta


class ReadError(Exception):
    """A value could not be read from a response."""


class UnderflowError(ReadError):
    """The response holds fewer bytes than the value needs."""


class BoolError(ReadError):
    """A boolean byte was neither 0 nor 1."""


class StringLengthError(ReadError):
    """A fixed-length string could not be read with the requested length."""


_ESCAPES = {0x01: b"\x01", 0x02: b"\x00", 0x03: b"\xff"}
_ESCAPE_PATTERN = re.compile(rb"\x01([\x01\x02\x03])")


def _underflow(available: int, expected: int) -> UnderflowError:
    return UnderflowError(
        "buffer underflow: not enough data to read: "
        f"got {available} of expected {expected} bytes"
    )


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _seconds_to_duration(value: float) -> timedelta:
    try:
        seconds = int(value)
        nanoseconds = _round_half_away((value - seconds) * 1e9)
        return timedelta(seconds=seconds, microseconds=nanoseconds / 1000)
    except (ValueError, OverflowError) as exc:
        raise ReadError(f"invalid duration value {value!r}") from exc


class ByteReader:
    """Consumes typed values from the front of a byte string."""

    def __init__(self, data: bytes | bytearray | memoryview = b"") -> None:
        self._data = bytes(data)
        self._pos = 0

    def __len__(self) -> int:
        return len(self._data) - self._pos

    def rest(self) -> bytes:
        """Return the unread bytes without consuming them."""
        return self._data[self._pos:]

    def _take(self, size: int) -> bytes:
        if len(self) < size:
            raise _underflow(len(self), size)
        chunk = self._data[self._pos:self._pos + size]
        self._pos += size
        return chunk

    def _unpack(self, fmt: str):
        size = struct.calcsize(fmt)
        return struct.unpack("<" + fmt, self._take(size))[0]

    def byte(self) -> int:
        return self._take(1)[0]

    def bool(self) -> bool:
        """Read a byte where 1 is true and 0 is false."""
        value = self.byte()
        if value == 1:
            return True
        if value == 0:
            return False
        raise BoolError(f"unsupported boolean byte in buffer: 0x{value:X}")

    def int8(self) -> int:
        return self._unpack("b")

    def int16(self) -> int:
        return self._unpack("h")

    def int32(self) -> int:
        return self._unpack("i")

    def int64(self) -> int:
        return self._unpack("q")

    def uint16(self) -> int:
        return self._unpack("H")

    def uint32(self) -> int:
        return self._unpack("I")

    def uint64(self) -> int:
        return self._unpack("Q")

    def float32(self) -> float:
        return self._unpack("f")

    def float64(self) -> float:
        return self._unpack("d")

    def bytes_page(self) -> bytes:
        """Read up to the next NUL byte, which is consumed but not returned."""
        end = self._data.find(b"\x00", self._pos)
        if end < 0:
            remaining = len(self)
            self._pos = len(self._data)
            raise UnderflowError(
                "buffer underflow: not enough data to read: "
                f"no string terminator in {remaining} bytes"
            )
        value = self._data[self._pos:end]
        self._pos = end + 1
        return value

    def string(self) -> str:
        """Read a NUL-terminated string."""
        return self.bytes_page().decode("utf-8", errors="replace")

    def string_len(self, size: int) -> str:
        """Read a string of exactly ``size`` bytes."""
        if size < 0:
            raise StringLengthError(
                "length of the string from the buffer is less than expected: "
                f"negative length {size}"
            )
        return self._take(size).decode("utf-8", errors="replace")

    def duration32(self) -> timedelta:
        """Read a float32 number of seconds as a duration."""
        return _seconds_to_duration(self.float32())

    def duration64(self) -> timedelta:
        """Read a float64 number of seconds as a duration."""
        return _seconds_to_duration(self.float64())


def escape_sequences(data: bytes) -> bytes:
    """Replace escape pairs: 01 01 -> 01, 01 02 -> 00, 01 03 -> FF."""
    return _ESCAPE_PATTERN.sub(lambda m: _ESCAPES[m.group(1)[0]], bytes(data))


def _fraction(value: int, precision: int) -> str:
    digits = str(value).rjust(precision, "0").rstrip("0")
    return "." + digits if digits else ""


def format_duration(value: timedelta) -> str:
    """Format a duration the way ``1h2m3.5s``, ``1.5ms`` or ``0s`` read."""
    total = (value.days * 86400 + value.seconds) * 10**9 + value.microseconds * 1000
    sign = "-" if total < 0 else ""
    u = abs(total)

    if u == 0:
        return "0s"
    if u < 1000:
        return f"{sign}{u}ns"
    if u < 10**6:
        return f"{sign}{u // 1000}{_fraction(u % 1000, 3)}µs"
    if u < 10**9:
        return f"{sign}{u // 10**6}{_fraction(u % 10**6, 6)}ms"

    seconds, nanos = divmod(u, 10**9)
    text = f"{seconds % 60}{_fraction(nanos, 9)}s"
    minutes = seconds // 60
    if minutes:
        text = f"{minutes % 60}m{text}"
        hours = minutes // 60
        if hours:
            text = f"{hours}h{text}"
    return sign + text