"""Constants, value types, errors, request headers and response checks of the query protocol."""

from __future__ import annotations

import struct
from enum import IntEnum, IntFlag

DEFAULT_DEADLINE_TIMEOUT = 5
DEFAULT_BUFFER_SIZE = 1400

SINGLE_PACKET = 0xFFFFFFFF
MULTI_PACKET = 0xFFFFFFFE

INFO_PAYLOAD = b"Source Engine Query"


class Flag(IntEnum):
    """Request and response type byte that follows the packet header."""

    INFO_REQUEST = 0x54
    INFO_RESPONSE_GOLDSOURCE = 0x6D
    INFO_RESPONSE_SOURCE = 0x49
    PLAYER_REQUEST = 0x55
    PLAYER_RESPONSE = 0x44
    RULES_REQUEST = 0x56
    RULES_RESPONSE = 0x45
    CHALLENGE_REQUEST = 0x57
    CHALLENGE_RESPONSE = 0x41
    PING_REQUEST = 0x69
    PING_RESPONSE = 0x6A


class EDF(IntFlag):
    """Extra data flag bits of an A2S_INFO response."""

    GAME_ID = 0x01
    STEAM_ID = 0x10
    KEYWORDS = 0x20
    SOURCE_TV = 0x40
    PORT = 0x80


class AppID(IntEnum):
    """Steam application IDs that change how responses are read."""

    THE_SHIP = 2400
    ARMA3 = 107410
    DAYZ = 221100
    DAYZ_EXP = 1024020


def _byte_missing(cls, value):
    if isinstance(value, int) and 0 <= value <= 0xFF:
        member = int.__new__(cls, value)
        member._name_ = f"OTHER_{value}"
        member._value_ = value
        return member
    return None


class InfoFormat(IntEnum):
    """Engine format of an A2S_INFO response."""

    SOURCE = 0x49
    GOLDSOURCE = 0x6D

    @classmethod
    def _missing_(cls, value):
        return _byte_missing(cls, value)

    def label(self) -> str:
        return _INFO_FORMAT_LABELS.get(self.value, "unknown")


_INFO_FORMAT_LABELS = {0x49: "Source", 0x6D: "GoldSource"}


class ServerType(IntEnum):
    """Server kind letter; upper and lower case mean the same."""

    DEDICATED = ord("d")
    LOCAL = ord("l")
    PROXY = ord("p")

    @classmethod
    def _missing_(cls, value):
        return _byte_missing(cls, value)

    def label(self) -> str:
        return _SERVER_TYPE_LABELS.get(chr(self.value).lower(), "Unknown")


_SERVER_TYPE_LABELS = {"d": "Dedicated", "l": "Local", "p": "Proxy"}


class Environment(IntEnum):
    """Server operating system letter; upper and lower case mean the same."""

    LINUX = ord("l")
    WINDOWS = ord("w")
    MAC = ord("m")
    OTHER = ord("o")

    @classmethod
    def _missing_(cls, value):
        return _byte_missing(cls, value)

    def label(self) -> str:
        return _ENVIRONMENT_LABELS.get(chr(self.value).lower(), "Unknown")


_ENVIRONMENT_LABELS = {"l": "Linux", "w": "Windows", "m": "Mac", "o": "Other"}


class TheShipMode(IntEnum):
    """Game mode reported by The Ship servers."""

    HUNT = 0
    ELIMINATION = 1
    DUEL = 2
    DEATHMATCH = 3
    VIP_TEAM = 4
    TEAM_ELIMINATION = 5

    @classmethod
    def _missing_(cls, value):
        return _byte_missing(cls, value)

    def label(self) -> str:
        return _SHIP_MODE_LABELS.get(self.value, "Unknown")


_SHIP_MODE_LABELS = {
    0: "Hunt",
    1: "Elimination",
    2: "Duel",
    3: "Deathmatch",
    4: "VIP Team",
    5: "Team Elimination",
}


class A2SError(Exception):
    """A server query failed; the text is the error's message followed by detail."""

    message = "A2S query failed"

    def __init__(self, detail: str = "") -> None:
        super().__init__(self.message + detail)
        self.detail = detail


class InfoReadError(A2SError):
    message = "A2S_INFO: failed to read"


class PlayerReadError(A2SError):
    message = "A2S_PLAYER: failed to read player"


class RuleReadError(A2SError):
    message = "A2S_RULES: failed to read"


class PingReadError(A2SError):
    message = "A2S_PING: failed to read"


class ChallengeReadError(A2SError):
    message = "A2S_SERVERQUERY_GETCHALLENGE: failed to read"


class SinglePacketError(A2SError):
    message = "received single packet data is too short"


class MultiPacketError(A2SError):
    message = "received multi packet data is too short"


class WrongByteError(A2SError):
    message = "unexpected response byte"


class WrongRequestError(A2SError):
    message = "unsupported request type"


class InsufficientDataError(A2SError):
    message = "insufficient data length"


class MultiPacketInvalidError(A2SError):
    message = "received invalid packet identifier in response"


class MultiPacketMismatchError(A2SError):
    message = "mismatched number of packets received"


class Bzip2Error(A2SError):
    message = "response compressed with bzip2: not implemented"


class A3SBError(A2SError):
    """The Arma 3 server browser protocol data could not be read."""

    message = "fail read Arma 3 server browser protocol"


class RulesError(A3SBError):
    message = "A2S_RULES: fail read rules"


class RulesDayZError(A3SBError):
    message = "A2S_RULES: fail parse DayZ rules"


class RulesDataRemainsError(A3SBError):
    message = "A2S_RULES: not all data was read from the buffer"


class ProtocolVersionError(A3SBError):
    """The server answered with a protocol version that cannot be read."""

    def __init__(self, version: int, for_dayz: bool = False) -> None:
        self.version = version
        if version == 1:
            self.message = (
                "got protocol version v1, this is the oldest version "
                "and it is not supported"
            )
            detail = ""
        elif version == 3 and for_dayz:
            self.message = (
                "got v3 protocol for DayZ, contact the author on the project "
                "issues page to update the library"
            )
            detail = ""
        else:
            self.message = (
                "got the latest version of the protocol, contact the author "
                "on the project issues page"
            )
            detail = f": protocol version {version}"
        super().__init__(detail)


def create_header(request_type: int, challenge: int = SINGLE_PACKET) -> bytes:
    """Build the request packet for ``request_type`` with an optional challenge."""
    header = struct.pack(">I", SINGLE_PACKET)
    if request_type == Flag.INFO_REQUEST:
        request = header + bytes([request_type]) + INFO_PAYLOAD + b"\x00"
        if challenge != SINGLE_PACKET:
            request += struct.pack(">I", challenge)
        return request
    if request_type in (Flag.PLAYER_REQUEST, Flag.RULES_REQUEST):
        return header + bytes([request_type]) + struct.pack(">I", challenge)
    if request_type in (Flag.PING_REQUEST, Flag.CHALLENGE_REQUEST):
        return header + bytes([request_type])
    raise WrongRequestError(f": 0x{request_type:X}")


def is_multi_packet(data: bytes) -> bool:
    """Check the packet header; True when the response is split into packets."""
    if len(data) < 4:
        raise SinglePacketError()
    header = struct.unpack_from("<I", data)[0]
    if header == SINGLE_PACKET:
        if len(data) < 5:
            raise SinglePacketError()
        return False
    if header == MULTI_PACKET:
        if len(data) < 10:
            raise MultiPacketError()
        return True
    raise WrongByteError(f" in header: 0x{header:X}")


_EXPECTED_RESPONSES = {
    Flag.INFO_REQUEST: (
        (Flag.INFO_RESPONSE_SOURCE, Flag.INFO_RESPONSE_GOLDSOURCE),
        "A2S_INFO",
    ),
    Flag.PLAYER_REQUEST: ((Flag.PLAYER_RESPONSE,), "A2S_PLAYER"),
    Flag.RULES_REQUEST: ((Flag.RULES_RESPONSE,), "A2S_RULES"),
    Flag.PING_REQUEST: ((Flag.PING_RESPONSE,), "A2A_PING"),
    Flag.CHALLENGE_REQUEST: (
        (Flag.CHALLENGE_RESPONSE,),
        "A2S_SERVERQUERY_GETCHALLENGE",
    ),
}


def validate_response_type(request: int, response: int) -> None:
    """Raise when ``response`` is not an answer to ``request``."""
    try:
        allowed, name = _EXPECTED_RESPONSES[Flag(request)]
    except (ValueError, KeyError):
        raise WrongRequestError(f": 0x{request:X}") from None
    if response not in allowed:
        raise WrongByteError(f": 0x{response:X} for {name}")