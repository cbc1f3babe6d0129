"""Version, flags, difficulty and signature fields of the Arma 3 server browser protocol."""

from __future__ import annotations

from dataclasses import dataclass

from .bread import ByteReader, ReadError
from .protocol import AppID, ProtocolVersionError


@dataclass(frozen=True)
class Flags:
    """The eight bits of the flags byte, whose meaning is undocumented."""

    flag0: bool = False
    flag1: bool = False
    flag2: bool = False
    flag3: bool = False
    flag4: bool = False
    flag5: bool = False
    flag6: bool = False
    flag7: bool = False


@dataclass(frozen=True)
class Difficulty:
    """Arma 3 difficulty; levels are 0 newbie, 1 normal, 2 expert, 3 custom."""

    level: int = 0
    ai_level: int = 0
    advance_flight: bool = False
    third_person: bool = False
    crosshair: bool = False


def read_flags(reader: ByteReader) -> Flags | None:
    """Read the flags byte; None when no flag is set."""
    try:
        value = reader.byte()
    except ReadError as exc:
        raise ReadError(f"flags: {exc}") from exc
    if value == 0:
        return None
    return Flags(*(bool(value & (1 << bit)) for bit in range(8)))


def read_difficulty(reader: ByteReader, app_id: int) -> Difficulty | None:
    """Read the two difficulty bytes, which only Arma 3 sends."""
    if app_id != AppID.ARMA3:
        return None
    try:
        value = reader.byte()
    except ReadError as exc:
        raise ReadError(f"first byte: {exc}") from exc
    if value == 0:
        return None
    try:
        crosshair = reader.byte()
    except ReadError as exc:
        raise ReadError(f"second byte: {exc}") from exc
    return Difficulty(
        level=value & 0b111,
        ai_level=(value >> 3) & 0b111,
        # the protocol sets bit 6 when advanced flight is off
        advance_flight=not value & (1 << 6),
        third_person=bool(value & (1 << 7)),
        crosshair=bool(crosshair & 0x01),
    )


def read_signatures(reader: ByteReader) -> list[str]:
    """Read the list of accepted key signatures, skipping empty ones."""
    count = reader.byte()
    signatures = []
    for i in range(count):
        try:
            length = reader.byte()
        except ReadError as exc:
            raise ReadError(f"{i} length: {exc}") from exc
        if length == 0:
            continue
        try:
            signatures.append(reader.string_len(length))
        except ReadError as exc:
            raise ReadError(f"{i} name: {exc}") from exc
    return signatures


def read_version(reader: ByteReader, app_id: int) -> tuple[int, int]:
    """Read the protocol version and return it with the game it implies.

    Arma 3 answers with v3 and DayZ with its own v2, so when ``app_id`` is 0
    the game is taken from the version.
    """
    version = reader.byte()
    if version == 1:
        raise ProtocolVersionError(1)
    if version == 3:
        if app_id == 0:
            app_id = AppID.ARMA3
        if app_id == AppID.DAYZ:
            raise ProtocolVersionError(3, for_dayz=True)
    elif version == 2:
        if app_id == 0:
            app_id = AppID.DAYZ
    else:
        raise ProtocolVersionError(version)
    return version, int(app_id)