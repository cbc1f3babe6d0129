import pytest

from a2squery.types import GameType, Platform, ServerLang, ServerState


@pytest.mark.parametrize(
    "code, label",
    [
        ("zeus", "Zeus"),
        ("apex", "Campaign - Apex Protocol"),
        ("unknown", "Undefined Game Mode"),
        ("vanguar", "Vanguard"),
    ],
)
def test_game_type_labels(code, label):
    assert GameType(code).label() == label


def test_game_type_unknown_code_is_kept():
    value = GameType("somemode")
    assert value.value == "somemode"
    assert value.label() == "None"


def test_game_type_member_identity():
    assert GameType("zeus") is GameType.ZEUS


@pytest.mark.parametrize(
    "code, label",
    [
        (65541, "Czech"),
        (65561, "Russian"),
        (65558, "Portuguese"),
        (65545, "English"),
    ],
)
def test_server_lang_labels(code, label):
    assert ServerLang(code).label() == label


def test_server_lang_unknown_defaults_to_english():
    value = ServerLang(12)
    assert value == 12
    assert value.label() == "English"


def test_server_lang_rejects_out_of_range():
    with pytest.raises(ValueError):
        ServerLang(-1)


@pytest.mark.parametrize(
    "code, label",
    [("l", "Linux"), ("m", "MacOS"), ("o", "Other"), ("w", "Windows")],
)
def test_platform_labels(code, label):
    assert Platform(code).label() == label


def test_platform_unknown():
    assert Platform("x").label() == "Undefined"


@pytest.mark.parametrize(
    "code, label",
    [
        (0, "NONE"),
        (1, "SELECTING MISSION"),
        (7, "PLAYING"),
        (9, "MISSION ABORTED"),
    ],
)
def test_server_state_labels(code, label):
    assert ServerState(code).label() == label


def test_server_state_unknown():
    value = ServerState(42)
    assert value == 42
    assert value.label() == "NONE"


def test_server_state_rejects_non_byte():
    with pytest.raises(ValueError):
        ServerState(256)