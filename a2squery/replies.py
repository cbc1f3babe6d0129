"""Readers for A2S_PLAYER and A2S_RULES response bodies."""

from __future__ import annotations

import base64
import binascii
import math
import re
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Mapping

from .bread import ByteReader, ReadError
from .protocol import InsufficientDataError, PlayerReadError, RuleReadError

_INT = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_TRUE = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE = {"0", "f", "F", "FALSE", "false", "False"}


def _nanoseconds(value: timedelta) -> int:
    return (value.days * 86400 + value.seconds) * 10**9 + value.microseconds * 1000


@dataclass
class Player:
    """One entry of an A2S_PLAYER response."""

    name: str = ""
    duration: timedelta = timedelta(0)
    score: int = 0
    index: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Return the non-empty fields; the duration is in nanoseconds."""
        data = {
            "name": self.name,
            "duration": _nanoseconds(self.duration),
            "score": self.score,
            "index": self.index,
        }
        return {key: value for key, value in data.items() if value}


@dataclass
class TheShipPlayer:
    """One entry of an A2S_PLAYER response from a The Ship server."""

    name: str = ""
    duration: timedelta = timedelta(0)
    score: int = 0
    deaths: int = 0
    money: int = 0
    index: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Return the non-empty fields; the duration is in nanoseconds."""
        data = {
            "name": self.name,
            "duration": _nanoseconds(self.duration),
            "score": self.score,
            "deaths": self.deaths,
            "money": self.money,
            "index": self.index,
        }
        return {key: value for key, value in data.items() if value}


def _read_player_fields(reader: ByteReader) -> dict[str, Any]:
    fields: dict[str, Any] = {}
    for name, read in (
        ("index", reader.byte),
        ("name", reader.string),
        ("score", reader.uint32),
        ("duration", reader.duration32),
    ):
        try:
            fields[name] = read()
        except ReadError as exc:
            raise PlayerReadError(f" {name}: {exc}") from exc
    return fields


def _read_count(reader: ByteReader) -> int:
    try:
        return reader.byte()
    except ReadError as exc:
        raise PlayerReadError(f" count: {exc}") from exc


def parse_players(data: bytes) -> list[Player]:
    """Read the players listed in an A2S_PLAYER body."""
    reader = ByteReader(data)
    count = _read_count(reader)
    return [Player(**_read_player_fields(reader)) for _ in range(count)]


def parse_theship_players(data: bytes) -> list[TheShipPlayer]:
    """Read the players listed in a The Ship A2S_PLAYER body."""
    reader = ByteReader(data)
    count = _read_count(reader)
    players = []
    for _ in range(count):
        fields = _read_player_fields(reader)
        for name in ("deaths", "money"):
            try:
                fields[name] = reader.uint32()
            except ReadError as exc:
                raise PlayerReadError(f" {name}: {exc}") from exc
        players.append(TheShipPlayer(**fields))
    return players


def parse_rules(data: bytes) -> dict[str, str]:
    """Read the key/value pairs of an A2S_RULES body."""
    reader = ByteReader(data)
    try:
        count = reader.uint16()
    except ReadError as exc:
        raise RuleReadError(f" rules count: 0x{bytes(data[:4]).hex().upper()}") from exc

    rules: dict[str, str] = {}
    for i in range(count):
        if len(reader) < 4:
            raise InsufficientDataError(f" in rule {i}")
        try:
            key = reader.string()
        except ReadError as exc:
            raise RuleReadError(f" key: {exc}") from exc
        try:
            value = reader.string()
        except ReadError as exc:
            raise RuleReadError(f" value for key '{key}': {exc}") from exc
        rules[key] = value
    return rules


def _as_int(value: str) -> int | None:
    if _INT.fullmatch(value):
        number = int(value)
        if _INT64_MIN <= number <= _INT64_MAX:
            return number
    return None


def _as_float(value: str) -> float | None:
    if not value or value != value.strip() or "_" in value:
        return None
    try:
        number = float(value)
    except ValueError:
        if "p" not in value.lower():
            return None
        try:
            number = float.fromhex(value)
        except (ValueError, OverflowError):
            return None
    if math.isinf(number) and "inf" not in value.lower():
        return None
    return number


def _as_base64_text(value: str) -> str | None:
    try:
        decoded = base64.b64decode(
            value.replace("\r", "").replace("\n", ""), validate=True
        )
        return decoded.decode("utf-8")
    except (binascii.Error, ValueError):
        return None


def parse_rule_value(value: str) -> Any:
    """Convert a rule value to int, float, bool or decoded base64 text, else keep it."""
    number = _as_int(value)
    if number is not None:
        return number
    real = _as_float(value.removesuffix("f"))
    if real is not None:
        return real
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    text = _as_base64_text(value)
    if text is not None:
        return text
    return value


def parse_rule_values(rules: Mapping[str, str]) -> dict[str, Any]:
    """Apply :func:`parse_rule_value` to every rule."""
    return {key: parse_rule_value(value) for key, value in rules.items()}