"""Parsers for the keyword tags that servers report in A2S_INFO."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from datetime import timedelta
from fractions import Fraction
from typing import Any, Iterable, Union

from .types import GameType, Platform, ServerLang, ServerState

_ARMA3_APP_ID = 107410
_DAYZ_APP_ID = 221100
_DAYZ_EXP_APP_ID = 1024020

_DIGITS = re.compile(r"[0-9]+")
_COORDINATES = re.compile(r"\s*([+-]?[0-9_]+)-\s*([+-]?[0-9_]+)")
_DURATION_PART = re.compile(r"([0-9]*)(?:\.([0-9]*))?(ns|us|µs|μs|ms|s|m|h)")
_DURATION_UNITS = {
    "ns": 1,
    "us": 10**3,
    "µs": 10**3,
    "μs": 10**3,
    "ms": 10**6,
    "s": 10**9,
    "m": 60 * 10**9,
    "h": 3600 * 10**9,
}
_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1


class UnsupportedAppError(ValueError):
    """No keyword parser exists for the application ID."""


def _parse_bool(val: str) -> bool:
    return val == "t"


def _parse_unsigned(val: str, bits: int) -> int:
    if _DIGITS.fullmatch(val):
        number = int(val)
        if number < 1 << bits:
            return number
    return 0


def parse_uint8(val: str) -> int:
    """Parse a decimal 8-bit unsigned number, 0 when invalid or too large."""
    return _parse_unsigned(val, 8)


def parse_uint16(val: str) -> int:
    """Parse a decimal 16-bit unsigned number, 0 when invalid or too large."""
    return _parse_unsigned(val, 16)


def _parse_uint32(val: str) -> int:
    return _parse_unsigned(val, 32)


def _parse_float64(val: str) -> float:
    if not val or val != val.strip() or "_" in val:
        return 0.0
    try:
        number = float(val)
    except ValueError:
        if "p" not in val.lower():
            return 0.0
        try:
            number = float.fromhex(val)
        except (ValueError, OverflowError):
            return 0.0
    if math.isinf(number) and "inf" not in val.lower():
        return 0.0
    return number


def parse_coordinates(val: str) -> tuple[int, int]:
    """Parse ``lon-lat`` where either part may be negative, e.g. ``-21--52``."""
    match = _COORDINATES.match(val)
    if not match:
        return 0, 0
    parts = match.groups()
    if any("_" in part or not part.lstrip("+-") for part in parts):
        return 0, 0
    lon, lat = (int(part) for part in parts)
    if not all(_INT32_MIN <= n <= _INT32_MAX for n in (lon, lat)):
        return 0, 0
    return lon, lat


def _parse_duration(text: str) -> timedelta | None:
    """Parse a duration such as ``15m`` or ``13h38m``; None when invalid."""
    sign = 1
    if text and text[0] in "+-":
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    if text == "0":
        return timedelta(0)
    if not text:
        return None

    total = Fraction(0)
    pos = 0
    while pos < len(text):
        match = _DURATION_PART.match(text, pos)
        if not match or not (match.group(1) or match.group(2)):
            return None
        whole, frac, unit = match.groups()
        value = Fraction(int(whole or "0"))
        if frac:
            value += Fraction(int(frac), 10 ** len(frac))
        total += value * _DURATION_UNITS[unit]
        pos = match.end()

    nanoseconds = int(total)
    limit = 2**63 if sign < 0 else 2**63 - 1
    if nanoseconds > limit:
        return None
    return timedelta(microseconds=sign * (nanoseconds // 1000))


def _nanoseconds(value: timedelta) -> int:
    return (value.days * 86400 + value.seconds) * 10**9 + value.microseconds * 1000


def _without_empty(data: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if value}


@dataclass
class Arma3Keywords:
    """Values carried in Arma 3 keyword tags."""

    game_type: GameType | None = None
    platform: Platform | None = None
    loaded_content_hash: str = ""
    country: str = ""
    island: str = ""
    unknowns: list[str] = field(default_factory=list)
    time_left: timedelta = timedelta(0)
    required_version: int = 0
    required_build_no: int = 0
    language: ServerLang | None = None
    longitude: int = 0
    latitude: int = 0
    server_state: ServerState = ServerState.NO_SERVER
    battleye: bool = False
    difficulty: int = 0
    equal_mod_required: bool = False
    lock: bool = False
    verify_signatures: bool = False
    dedicated: bool = False
    param_1: int = 0
    param_2: int = 0
    allowed_file_patching: bool = False

    def parse(self, keywords: Iterable[str]) -> None:
        """Fill fields from tags whose first letter names the value."""
        for tag in keywords:
            if not tag:
                continue
            key, val = tag[0], tag[1:]
            match key:
                case "b":
                    self.battleye = _parse_bool(val)
                case "r":
                    self.required_version = _parse_uint32(val)
                case "n":
                    self.required_build_no = _parse_uint32(val)
                case "s":
                    self.server_state = ServerState(parse_uint8(val))
                case "i":
                    self.difficulty = parse_uint8(val)
                case "m":
                    self.equal_mod_required = _parse_bool(val)
                case "l":
                    self.lock = _parse_bool(val)
                case "v":
                    self.verify_signatures = _parse_bool(val)
                case "d":
                    self.dedicated = _parse_bool(val)
                case "t":
                    self.game_type = GameType(val)
                case "g":
                    self.language = ServerLang(_parse_uint32(val))
                case "c":
                    self.longitude, self.latitude = parse_coordinates(val)
                case "p":
                    self.platform = Platform(val)
                case "h":
                    self.loaded_content_hash = val
                case "o":
                    self.country = val
                case "e":
                    duration = _parse_duration(val + "m")
                    if duration is not None:
                        self.time_left = duration
                case "j" | "k":
                    # both tags land in the first parameter
                    self.param_1 = parse_uint8(val)
                case "f":
                    self.allowed_file_patching = _parse_bool(val)
                case "y":
                    self.island = val
                case _:
                    self.unknowns.append(tag)

    def to_dict(self) -> dict[str, Any]:
        """Return the non-empty fields keyed by their JSON names."""
        return _without_empty(
            {
                "gametype": self.game_type.label() if self.game_type else None,
                "platform": self.platform.label() if self.platform else None,
                "loaded_content_hash": self.loaded_content_hash,
                "country": self.country,
                "island": self.island,
                "unknowns": list(self.unknowns),
                "time_left": _nanoseconds(self.time_left),
                "required_version": self.required_version,
                "required_buildno": self.required_build_no,
                "language": self.language.label() if self.language else None,
                "longitude": self.longitude,
                "latitude": self.latitude,
                "server_state": (
                    self.server_state.label() if self.server_state else None
                ),
                "battleye": self.battleye,
                "difficulty": self.difficulty,
                "equal_mod_required": self.equal_mod_required,
                "lock": self.lock,
                "verify_signatures": self.verify_signatures,
                "dedicated": self.dedicated,
                "param_1": self.param_1,
                "param_2": self.param_2,
                "allowed_filepatching": self.allowed_file_patching,
            }
        )


@dataclass
class DayZKeywords:
    """Values carried in DayZ keyword tags."""

    shard: str = ""
    unknowns: list[str] = field(default_factory=list)
    time: timedelta = timedelta(0)
    time_day_accel: float = 0.0
    time_night_accel: float = 0.0
    game_port: int = 0
    players_queue: int = 0
    battleye: bool = False
    no_third_person: bool = False
    external: bool = False
    private_hive: bool = False
    modded: bool = False
    whitelist: bool = False
    file_patching: bool = False
    dlc: bool = False

    def parse(self, keywords: Iterable[str]) -> None:
        """Fill fields from flag tags and prefixed value tags."""
        for tag in keywords:
            if not tag:
                continue
            if tag == "battleye":
                self.battleye = True
            elif tag == "no3rd":
                self.no_third_person = True
            elif tag == "external":
                self.external = True
            elif tag == "privHive":
                self.private_hive = True
            elif tag.startswith("shard"):
                self.shard = tag[len("shard"):]
            elif tag.startswith("lqs"):
                self.players_queue = parse_uint8(tag[3:])
            elif tag.startswith("etm"):
                self.time_day_accel = _parse_float64(tag[3:])
            elif tag.startswith("entm"):
                self.time_night_accel = _parse_float64(tag[4:])
            elif tag == "mod":
                self.modded = True
            elif tag.startswith("port"):
                self.game_port = parse_uint16(tag[4:])
            elif tag == "whitelisting":
                self.whitelist = True
            elif tag == "allowedFilePatching":
                self.file_patching = True
            elif tag == "isDLC":
                self.dlc = True
            elif len(tag.encode("utf-8")) == 5 and ":" in tag:
                if tag.isascii():
                    duration = _parse_duration(f"{tag[:2]}h{tag[3:]}m")
                    if duration is not None:
                        self.time = duration
            else:
                self.unknowns.append(tag)

    def to_dict(self) -> dict[str, Any]:
        """Return the non-empty fields keyed by their JSON names."""
        return _without_empty(
            {
                "shard": self.shard,
                "unknowns": list(self.unknowns),
                "time": _nanoseconds(self.time),
                "etm": self.time_day_accel,
                "entm": self.time_night_accel,
                "port": self.game_port,
                "lqs": self.players_queue,
                "battleye": self.battleye,
                "no3rd": self.no_third_person,
                "external": self.external,
                "private": self.private_hive,
                "mod": self.modded,
                "whitelist": self.whitelist,
                "file_patching": self.file_patching,
                "dlc": self.dlc,
            }
        )


def parse_arma3(keywords: Iterable[str]) -> Arma3Keywords:
    data = Arma3Keywords()
    data.parse(keywords)
    return data


def parse_dayz(keywords: Iterable[str]) -> DayZKeywords:
    data = DayZKeywords()
    data.parse(keywords)
    return data


def parse(
    app_id: int, keywords: Iterable[str]
) -> Union[Arma3Keywords, DayZKeywords]:
    """Parse keywords with the parser for the game ``app_id``."""
    if app_id == _ARMA3_APP_ID:
        return parse_arma3(keywords)
    if app_id in (_DAYZ_APP_ID, _DAYZ_EXP_APP_ID):
        return parse_dayz(keywords)
    raise UnsupportedAppError(f"unsupported application ID {app_id}")