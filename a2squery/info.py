"""Reader for A2S_INFO response bodies in Source and GoldSource formats."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Callable, TypeVar

from .bread import ByteReader, ReadError
from .protocol import (
    EDF,
    AppID,
    Environment,
    Flag,
    InfoFormat,
    InfoReadError,
    ServerType,
    TheShipMode,
)

T = TypeVar("T")

_OMIT_EMPTY = frozenset(
    {
        "the_ship",
        "mod",
        "game",
        "source_tv_port",
        "address",
        "keywords",
        "steam_id",
        "port",
        "source_tv_name",
        "bots",
        "EDF",
    }
)


def _nanoseconds(value: timedelta) -> int:
    return (value.days * 86400 + value.seconds) * 10**9 + value.microseconds * 1000


def _field(label: str, read: Callable[[], T]) -> T:
    try:
        return read()
    except ReadError as exc:
        raise ReadError(f"{label}: {exc}") from exc


@dataclass
class TheShip:
    """Extra A2S_INFO data sent by The Ship servers."""

    mode: TheShipMode = TheShipMode.HUNT
    witnesses: int = 0
    duration: int = 0


@dataclass
class ModInfo:
    """Mod details of a modded GoldSource server."""

    link: str = ""
    download_link: str = ""
    version: int = 0
    size: int = 0
    multiplayer_only: bool = False
    custom_dll: bool = False


@dataclass
class Info:
    """Server information from an A2S_INFO response."""

    format: InfoFormat = InfoFormat.SOURCE
    ping: timedelta = timedelta(0)
    protocol: int = 0
    name: str = ""
    map: str = ""
    folder: str = ""
    game: str = ""
    id: int = 0
    players: int = 0
    max_players: int = 0
    bots: int = 0
    server_type: ServerType = ServerType.DEDICATED
    environment: Environment = Environment.LINUX
    visibility: bool = False
    vac: bool = False
    version: str = ""
    the_ship: TheShip | None = None
    mod: ModInfo | None = None
    address: str = ""
    edf: EDF = EDF(0)
    port: int = 0
    steam_id: int = 0
    source_tv_port: int = 0
    source_tv_name: str = ""
    keywords: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Return the fields keyed by their JSON names, empty optional ones left out."""
        the_ship = None
        if self.the_ship is not None:
            the_ship = {
                "mode": self.the_ship.mode.label(),
                "witnesses": self.the_ship.witnesses,
                "duration": self.the_ship.duration,
            }
        mod = None
        if self.mod is not None:
            mod = {
                "link": self.mod.link,
                "download_link": self.mod.download_link,
                "version": self.mod.version,
                "size": self.mod.size,
                "type": self.mod.multiplayer_only,
                "dll": self.mod.custom_dll,
            }
        data = {
            "the_ship": the_ship,
            "mod": mod,
            "name": self.name,
            "map": self.map,
            "folder": self.folder,
            "game": self.game,
            "version": self.version,
            # the SourceTV keys are crossed in the established JSON layout
            "source_tv_port": self.source_tv_name,
            "address": self.address,
            "keywords": list(self.keywords),
            "ping": _nanoseconds(self.ping),
            "id": self.id,
            "steam_id": self.steam_id,
            "port": self.port,
            "source_tv_name": self.source_tv_port,
            "format": self.format.label(),
            "protocol": self.protocol,
            "players": self.players,
            "max_players": self.max_players,
            "bots": self.bots,
            "type": self.server_type.label(),
            "environment": self.environment.label(),
            "public": self.visibility,
            "vac": self.vac,
            "EDF": int(self.edf),
        }
        return {
            key: value
            for key, value in data.items()
            if key not in _OMIT_EMPTY or value
        }


def _read_theship(reader: ByteReader) -> TheShip:
    return TheShip(
        mode=TheShipMode(reader.byte()),
        witnesses=reader.byte(),
        duration=reader.byte(),
    )


def _read_mod(reader: ByteReader) -> ModInfo:
    return ModInfo(
        link=_field("link", reader.string),
        download_link=_field("download link", reader.string),
        version=_field("version", reader.uint32),
        size=_field("size", reader.uint32),
        multiplayer_only=_field("type", reader.bool),
        custom_dll=_field("DLL", reader.bool),
    )


def _read_edf(info: Info, reader: ByteReader, edf: EDF) -> None:
    info.edf = edf
    if edf & EDF.PORT:
        info.port = _field("game port", reader.uint16)
    if edf & EDF.STEAM_ID:
        info.steam_id = _field("SteamID", reader.uint64)
    if edf & EDF.SOURCE_TV:
        info.source_tv_port = _field("SourceTV port", reader.uint16)
        info.source_tv_name = _field("SourceTV name", reader.string)
    if edf & EDF.KEYWORDS:
        info.keywords = _field("keywords name", reader.string).split(",")
    if edf & EDF.GAME_ID:
        info.id = _field("GameID", reader.uint64)


def _read_source(info: Info, reader: ByteReader) -> None:
    info.protocol = _field("protocol", reader.byte)
    info.name = _field("server name", reader.string)
    info.map = _field("map name", reader.string)
    info.folder = _field("folder name", reader.string)
    info.game = _field("game name", reader.string)
    info.id = _field("game ID", reader.uint16)
    info.players = _field("player count", reader.byte)
    info.max_players = _field("max player count", reader.byte)
    info.bots = _field("bots count", reader.byte)
    info.server_type = ServerType(_field("server type", reader.byte))
    info.environment = Environment(_field("environment type", reader.byte))
    info.visibility = _field("server visibility", reader.bool)
    info.vac = _field("VAC status", reader.bool)
    if info.id == AppID.THE_SHIP:
        info.the_ship = _field("TheShip data", lambda: _read_theship(reader))
    info.version = _field("version", reader.string)
    edf = _field("extra data flag", reader.byte)
    if edf:
        _field("EDF", lambda: _read_edf(info, reader, EDF(edf)))


def _read_goldsource(info: Info, reader: ByteReader) -> None:
    info.address = _field("server address", reader.string)
    info.name = _field("server name", reader.string)
    info.map = _field("map name", reader.string)
    info.folder = _field("folder name", reader.string)
    info.game = _field("game name", reader.string)
    info.players = _field("player count", reader.byte)
    info.max_players = _field("max player count", reader.byte)
    info.protocol = _field("protocol", reader.byte)
    info.server_type = ServerType(_field("server type", reader.byte))
    info.environment = Environment(_field("environment type", reader.byte))
    info.visibility = _field("server visibility", reader.bool)
    if _field("modded status", reader.bool):
        info.mod = _field("mod data", lambda: _read_mod(reader))
    info.vac = _field("VAC", reader.bool)
    info.bots = _field("bots count", reader.byte)


def parse_info(
    data: bytes, response_format: int, ping: timedelta = timedelta(0)
) -> Info:
    """Read an A2S_INFO body whose response type byte is ``response_format``."""
    if response_format == Flag.INFO_RESPONSE_SOURCE:
        reader_func, kind = _read_source, "Source"
    elif response_format == Flag.INFO_RESPONSE_GOLDSOURCE:
        reader_func, kind = _read_goldsource, "GoldSource"
    else:
        raise InfoReadError(f" header: unsupported format 0x{response_format:X}")

    info = Info(format=InfoFormat(response_format), ping=ping)
    try:
        reader_func(info, ByteReader(data))
    except ReadError as exc:
        raise InfoReadError(f" {kind} response: {exc}") from exc
    return info