"""A2S_RULES responses that carry the Arma 3 server browser protocol (Arma 3 and DayZ)."""

from __future__ import annotations

import re
from dataclasses import asdict, astuple, dataclass, field
from typing import Any, Callable, TypeVar

from .a3sb_content import DLCInfo, Mod, read_dlc, read_mods
from .a3sb_fields import (
    Difficulty,
    Flags,
    read_difficulty,
    read_flags,
    read_signatures,
    read_version,
)
from .bread import ByteReader, ReadError, escape_sequences
from .protocol import (
    DEFAULT_BUFFER_SIZE,
    A3SBError,
    AppID,
    Flag,
    ProtocolVersionError,
    RulesDataRemainsError,
    RulesDayZError,
    RulesError,
)
from .types import ServerLang

T = TypeVar("T")

_RULES_BUFFER_SIZE = 8192
_MAX_VALUE_LENGTH = 127
_DIGITS = re.compile(r"[0-9]+")


def _compact(data: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if value}


@dataclass
class Rules:
    """Data read from an Arma 3 or DayZ A2S_RULES response."""

    version: int = 0
    app_id: int = 0
    flags: Flags | None = None
    difficulty: Difficulty | None = None
    dlc: list[DLCInfo] = field(default_factory=list)
    creator_dlc: list[DLCInfo] = field(default_factory=list)
    mods: list[Mod] = field(default_factory=list)
    signatures: list[str] = field(default_factory=list)
    description: str = ""
    extra_rules: dict[str, str] = field(default_factory=dict)
    island: str = ""
    platform: str = ""
    language: ServerLang | None = None
    allowed_build: int = 0
    client_port: int = 0
    required_build: int = 0
    required_version: int = 0
    time_left: int = 0
    dedicated: bool = False
    # pages of the reader: first page count byte, page count, blank keys, oversized values
    stats: tuple[int, int, int, int] = (0, 0, 0, 0)

    def to_dict(self) -> dict[str, Any]:
        """Return the fields keyed by their JSON names, empty ones left out."""
        flags = None
        if self.flags is not None:
            flags = {str(bit): True for bit, value in enumerate(astuple(self.flags)) if value}
        difficulty = None
        if self.difficulty is not None:
            difficulty = {
                "level": self.difficulty.level,
                "level_ai": self.difficulty.ai_level,
                "advance_flight": self.difficulty.advance_flight,
                "third_person": self.difficulty.third_person,
                "crosshair": self.difficulty.crosshair,
            }
        data = _compact(
            {
                "flags": flags,
                "difficulty": difficulty,
                "extra_rules": dict(self.extra_rules),
                "description": self.description,
                "island": self.island,
                "platform": self.platform,
                "dlcs": [_compact(asdict(dlc)) for dlc in self.dlc],
                "creator_dlc": [_compact(asdict(dlc)) for dlc in self.creator_dlc],
                "mods": [_compact(asdict(mod)) for mod in self.mods],
                "signatures": list(self.signatures),
                "language": self.language.label() if self.language is not None else None,
                "allowed_build": self.allowed_build,
                "client_port": self.client_port,
                "required_build": self.required_build,
                "required_version": self.required_version,
                "time_left": self.time_left,
                "dedicated": self.dedicated,
            }
        )
        data["version"] = self.version
        return data


def _wrapped(label: str, read: Callable[[], T]) -> T:
    try:
        return read()
    except ProtocolVersionError:
        raise
    except ReadError as exc:
        raise A3SBError(f" {label}: {exc}") from exc


def _read_a3sb(rules: Rules, data: bytes) -> None:
    reader = ByteReader(data)

    version, app_id = _wrapped("version", lambda: read_version(reader, rules.app_id))
    rules.version = version
    rules.app_id = app_id

    rules.flags = _wrapped("flags", lambda: read_flags(reader))
    dlc_mask = _wrapped("DLC", reader.uint16)
    rules.difficulty = _wrapped("difficulty", lambda: read_difficulty(reader, app_id))
    if dlc_mask:
        rules.dlc = _wrapped("DLC", lambda: read_dlc(reader, app_id, dlc_mask))
    rules.mods, rules.creator_dlc = _wrapped("mod", lambda: read_mods(reader))
    rules.signatures = _wrapped("signature", lambda: read_signatures(reader))

    # Arma 3 stops here, DayZ goes on with a description
    if len(reader) == 0:
        return

    length = _wrapped("description length", reader.byte)
    rules.description = _wrapped("description", lambda: reader.string_len(length))

    if len(reader) > 0:
        rest = bytes(reader.rest())
        text = rest.decode("utf-8", errors="replace")
        raise RulesDataRemainsError(f": 0x{rest.hex().upper()} ({text})")


def _parse_unsigned(text: str, bits: int) -> int:
    if not _DIGITS.fullmatch(text):
        raise ValueError(f'parsing "{text}": invalid syntax')
    number = int(text)
    if number >= 1 << bits:
        raise ValueError(f'parsing "{text}": value out of range')
    return number


_UINT16_RULES = {
    "allowedBuild": "allowed_build",
    "clientPort": "client_port",
    "requiredBuild": "required_build",
    "requiredVersion": "required_version",
    "timeLeft": "time_left",
}


def _platform_name(value: str) -> str:
    if value == "win":
        return "Windows"
    if value in ("lin", "?"):
        return "Linux"
    return "Other"


def _apply_dayz_rules(rules: Rules, raw: dict[str, str]) -> None:
    extra: dict[str, str] = {}
    for key, value in raw.items():
        if key in _UINT16_RULES:
            setattr(rules, _UINT16_RULES[key], _parse_unsigned(value, 16))
        elif key == "dedicated":
            rules.dedicated = value == "0"
        elif key == "island":
            rules.island = value
        elif key == "language":
            rules.language = ServerLang(_parse_unsigned(value, 32))
        elif key == "platform":
            rules.platform = _platform_name(value)
        else:
            extra[key] = value
    if extra:
        rules.extra_rules = extra


def parse_rules(data: bytes, app_id: int = 0) -> Rules:
    """Read an A2S_RULES body holding server browser protocol pages and plain rules.

    ``app_id`` picks the game; 0 lets the protocol version decide.
    """
    data = bytes(data)
    reader = ByteReader(data)
    try:
        count = reader.uint16()
    except ReadError as exc:
        raise RulesError(f" count: 0x{data[:4].hex().upper()}") from exc

    stats = [data[3] if len(data) > 3 else 0, 0, 0, 0]
    pages = bytearray()
    raw: dict[str, str] = {}

    for _ in range(count):
        try:
            key = reader.bytes_page()
        except ReadError as exc:
            raise RulesError(f" key: {exc}") from exc
        try:
            value = reader.bytes_page()
        except ReadError as exc:
            raise RulesError(f" value: {exc}") from exc

        if not key:
            stats[2] = (stats[2] + 1) & 0xFF
            continue
        if len(value) > _MAX_VALUE_LENGTH:
            stats[3] = (stats[3] + 1) & 0xFF

        # a two-byte key is page number and page count of the protocol data
        if len(key) == 2 and key[0] <= key[1]:
            pages += escape_sequences(value)
        else:
            raw[key.decode("utf-8", errors="replace")] = value.decode(
                "utf-8", errors="replace"
            )

        if stats[1] == 0 and len(key) > 1:
            stats[1] = key[1]

    if len(reader) != 0:
        raise RulesDataRemainsError()

    rules = Rules(app_id=app_id, stats=tuple(stats))
    _read_a3sb(rules, bytes(pages))
    try:
        _apply_dayz_rules(rules, raw)
    except ValueError as exc:
        raise RulesDayZError(f": {exc}") from exc
    return rules


def get_rules(client, app_id: int = 0) -> Rules:
    """Query the rules of an Arma 3 or DayZ server through ``client``."""
    if client.buffer_size == DEFAULT_BUFFER_SIZE:
        client.buffer_size = _RULES_BUFFER_SIZE
    data, _, _ = client.get(Flag.RULES_REQUEST)
    return parse_rules(data, app_id)


def get_rules_arma3(client) -> Rules:
    return get_rules(client, int(AppID.ARMA3))


def get_rules_dayz(client) -> Rules:
    return get_rules(client, int(AppID.DAYZ))