"""Values encoded in server keywords and rules: game type, language, platform, state.

Each type's ``label()`` is its readable name and is what JSON output shows.
Values outside the known set are kept and get a fallback label.
"""

from __future__ import annotations

from enum import Enum, IntEnum


class GameType(str, Enum):
    """Arma 3 game mode short name."""

    APEX = "apex"
    COOP = "coop"
    CTF = "ctf"
    CTI = "cti"
    DM = "dm"
    ENDGAME = "endgame"
    ESCAPE = "escape"
    KOTH = "koth"
    LASTMAN = "lastman"
    PATROL = "patrol"
    RPG = "rpg"
    SANDBOX = "sandbox"
    SC = "sc"
    SUPPORT = "support"
    SURVIVE = "survive"
    TDM = "tdm"
    UNKNOWN = "unknown"
    VANGUAR = "vanguar"
    WARLORD = "warlord"
    ZEUS = "zeus"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            member = str.__new__(cls, value)
            member._name_ = f"OTHER_{value}"
            member._value_ = value
            return member
        return None

    def label(self) -> str:
        return _GAME_TYPE_LABELS.get(self.value, "None")


_GAME_TYPE_LABELS = {
    "apex": "Campaign - Apex Protocol",
    "coop": "Cooperative Mission",
    "ctf": "Capture The Flag",
    "cti": "Capture The Island",
    "dm": "Deathmatch",
    "endgame": "End Game",
    "escape": "Escape",
    "koth": "King Of The Hill",
    "lastman": "Last Man Standing",
    "patrol": "Combat Patrol",
    "rpg": "Role-Playing Game",
    "sandbox": "Sandbox",
    "sc": "Sector Control",
    "support": "Support",
    "survive": "Survival",
    "tdm": "Team Deathmatch",
    "unknown": "Undefined Game Mode",
    "vanguar": "Vanguard",
    "warlord": "Warlords",
    "zeus": "Zeus",
}


class ServerLang(IntEnum):
    """Server language code used by DayZ rules and Arma 3 keywords."""

    ENGLISH = 65545
    CZECH = 65541
    GERMAN = 65543
    RUSSIAN = 65561
    POLISH = 65557
    HUNGARIAN = 65550
    ITALIAN = 65552
    SPANISH = 65546
    FRENCH = 65548
    CHINESE = 65540
    JAPANESE = 65553
    PORTUGUESE = 65558

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, int) and 0 <= value <= 0xFFFFFFFF:
            member = int.__new__(cls, value)
            member._name_ = f"OTHER_{value}"
            member._value_ = value
            return member
        return None

    def label(self) -> str:
        return _LANG_LABELS.get(self.value, "English")


_LANG_LABELS = {
    65545: "English",
    65541: "Czech",
    65543: "German",
    65561: "Russian",
    65557: "Polish",
    65550: "Hungarian",
    65552: "Italian",
    65546: "Spanish",
    65548: "French",
    65540: "Chinese",
    65553: "Japanese",
    65558: "Portuguese",
}


class Platform(str, Enum):
    """Server operating system letter."""

    LINUX = "l"
    MAC = "m"
    OTHER = "o"
    WINDOWS = "w"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            member = str.__new__(cls, value)
            member._name_ = f"OTHER_{value}"
            member._value_ = value
            return member
        return None

    def label(self) -> str:
        return _PLATFORM_LABELS.get(self.value, "Undefined")


_PLATFORM_LABELS = {
    "l": "Linux",
    "m": "MacOS",
    "o": "Other",
    "w": "Windows",
}


class ServerState(IntEnum):
    """Arma 3 server state."""

    NO_SERVER = 0
    SERVER_CREATED = 1
    EDITING = 2
    ASSIGNING_ROLES = 3
    SENDING = 4
    LOADING = 5
    BRIEFING = 6
    PLAYING = 7
    DEBRIEFING = 8
    ABORTED = 9

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, int) and 0 <= value <= 0xFF:
            member = int.__new__(cls, value)
            member._name_ = f"OTHER_{value}"
            member._value_ = value
            return member
        return None

    def label(self) -> str:
        return _STATE_LABELS.get(self.value, "NONE")


_STATE_LABELS = {
    0: "NONE",
    1: "SELECTING MISSION",
    2: "EDITING MISSION",
    3: "ASSIGNING ROLES",
    4: "SENDING MISSION",
    5: "LOADING GAME",
    6: "BRIEFING",
    7: "PLAYING",
    8: "DEBRIEFING",
    9: "MISSION ABORTED",
}