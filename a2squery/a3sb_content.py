"""DLC and mod lists of the Arma 3 server browser protocol."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Mapping

from .bread import ByteReader, ReadError
from .protocol import AppID


@dataclass(frozen=True)
class DLCInfo:
    """A DLC the server has loaded."""

    name: str = ""
    id: int = 0
    hash: int = 0


@dataclass(frozen=True)
class Mod:
    """A Workshop mod the server has loaded."""

    name: str = ""
    id: int = 0
    hash: int = 0


_DAYZ_DLC = {
    0x1: DLCInfo(id=1151700, name="Livonia"),
    0x2: DLCInfo(id=2968040, name="Frost Line"),
    0x4: DLCInfo(id=830660, name="Survivor GameZ"),
}

_ARMA3_DLC = {
    0x1: DLCInfo(id=288520, name="Karts"),
    0x2: DLCInfo(id=332350, name="Marksmen"),
    0x4: DLCInfo(id=304380, name="Helicopters"),
    0x8: DLCInfo(id=275700, name="Zeus"),
    0x10: DLCInfo(id=395180, name="Apex"),
    0x20: DLCInfo(id=601670, name="Jets"),
    0x40: DLCInfo(id=571710, name="Laws of War"),
    0x80: DLCInfo(id=639600, name="Malden"),
    0x100: DLCInfo(id=744950, name="Tac-Ops Mission Pack"),
    0x200: DLCInfo(id=798390, name="Tanks"),
    0x400: DLCInfo(id=1021790, name="Enoch"),
    0x800: DLCInfo(id=1021790, name="Contact (Platform)"),
    0x1000: DLCInfo(id=1325500, name="Art of War"),
}

_ARMA3_CREATOR_DLC = {
    1042220: "Creator DLC: Global Mobilization - Cold War Germany",
    1175380: "Creator DLC: Spearhead 1944",
    1227700: "Creator DLC: S.O.G. Prairie Fire",
    1294440: "Creator DLC: CSLA Iron Curtain",
    1681170: "Creator DLC: Western Sahara",
    2647760: "Creator DLC: Reaction Forces",
    2647830: "Creator DLC: Expeditionary Forces",
}

_CREATOR_DLC_ID_LENGTH = 19


def known_dlc(app_id: int) -> dict[int, DLCInfo]:
    """Return the DLC bit table for the game ``app_id``; empty when unknown."""
    if app_id == AppID.ARMA3:
        return dict(_ARMA3_DLC)
    if app_id in (AppID.DAYZ, AppID.DAYZ_EXP):
        return dict(_DAYZ_DLC)
    return {}


def parse_dlc(mask: int, known: Mapping[int, DLCInfo]) -> list[DLCInfo]:
    """List the DLCs whose bits are set in ``mask``; unknown bits get a placeholder."""
    result = []
    for bit in sorted(known):
        if mask & bit:
            result.append(replace(known[bit]))
            mask &= ~bit
    bit = 1
    while mask:
        if mask & bit:
            result.append(DLCInfo(id=0, name=f"Unknown DLC {bit}"))
            mask &= ~bit
        bit <<= 1
    return result


def read_dlc(reader: ByteReader, app_id: int, mask: int) -> list[DLCInfo]:
    """List the DLCs in ``mask`` and read one 4-byte hash for each of them."""
    dlcs = parse_dlc(mask, known_dlc(app_id))
    hashes = [reader.uint32() for _ in dlcs]
    return [replace(dlc, hash=value) for dlc, value in zip(dlcs, hashes)]


def _read_mod_id(reader: ByteReader, length: int, i: int) -> int:
    readers = {1: reader.byte, 4: reader.uint32, 8: reader.uint64,
               _CREATOR_DLC_ID_LENGTH: reader.uint32}
    try:
        read = readers[length]
    except KeyError:
        raise ReadError(f"mod {i} id length ({length}) unknown") from None
    try:
        return read()
    except ReadError as exc:
        raise ReadError(f"mod {i} id length: {exc}") from exc


def read_mods(reader: ByteReader) -> tuple[list[Mod], list[DLCInfo]]:
    """Read the mod block; return the mods and the creator DLCs it lists."""
    try:
        count = reader.byte()
    except ReadError as exc:
        raise ReadError(f"mod count: {exc}") from exc

    mods: list[Mod] = []
    creator_dlc: list[DLCInfo] = []
    for i in range(count):
        try:
            mod_hash = reader.uint32()
        except ReadError as exc:
            raise ReadError(f"mod {i} hash: {exc}") from exc
        try:
            id_length = reader.byte()
        except ReadError as exc:
            raise ReadError(f"mod {i} id length: {exc}") from exc

        mod_id = _read_mod_id(reader, id_length, i)
        if id_length == _CREATOR_DLC_ID_LENGTH:
            creator_dlc.append(
                DLCInfo(id=mod_id, name=_ARMA3_CREATOR_DLC.get(mod_id, ""))
            )
            continue

        try:
            name_length = reader.byte()
        except ReadError as exc:
            raise ReadError(f"mod {i} name length: {exc}") from exc
        name = ""
        if name_length:
            try:
                name = reader.string_len(name_length)
            except ReadError as exc:
                raise ReadError(f"mod {i} hash: {exc}") from exc
        mods.append(Mod(name=name, id=mod_id, hash=mod_hash))
    return mods, creator_dlc