from datetime import timedelta

import pytest

from a2squery.keywords import (
    Arma3Keywords,
    DayZKeywords,
    UnsupportedAppError,
    parse,
    parse_arma3,
    parse_coordinates,
    parse_dayz,
    parse_uint8,
    parse_uint16,
)
from a2squery.types import GameType, Platform, ServerState

DAYZ_KW = [
    "unknown", "battleye", "no3rd", "shard001", "lqs0", "port777",
    "etm2.300000", "entm6.800000", "isDLC", "13:38",
]

ARMA_KW = [
    "bt", "r218", "n150779", "s3", "i1", "mf", "lf", "vt", "dt", "tzeus", "g65541",
    "h285fa806", "oDE", "f0", "c-25--25", "pw", "e15", "j0", "k0", "x1", "z1",
]


def test_dayz_keywords():
    data = parse_dayz(DAYZ_KW)
    assert len(data.unknowns) == 1
    assert data.unknowns == ["unknown"]
    assert data.battleye
    assert data.no_third_person
    assert data.game_port == 777
    assert data.shard == "001"
    assert data.time_night_accel == 6.8
    assert data.time_day_accel == 2.3
    assert data.players_queue == 0
    assert data.dlc
    assert data.time == timedelta(hours=13, minutes=38)


def test_dayz_to_dict():
    result = parse_dayz(DAYZ_KW).to_dict()
    assert result["time"] == 4.908e13
    assert result["port"] == 777
    assert result["shard"] == "001"
    assert result["no3rd"] is True
    assert "lqs" not in result
    assert "external" not in result


def test_arma_keywords():
    data = parse_arma3(ARMA_KW)
    assert len(data.unknowns) == 2
    assert data.unknowns == ["x1", "z1"]
    assert data.battleye
    assert data.language.label() == "Czech"
    assert data.country == "DE"
    assert data.game_type is GameType.ZEUS
    assert data.time_left == timedelta(minutes=15)
    assert data.required_version == 218
    assert data.required_build_no == 150779
    assert data.server_state == ServerState.ASSIGNING_ROLES
    assert data.difficulty == 1
    assert not data.equal_mod_required
    assert not data.lock
    assert data.verify_signatures
    assert data.dedicated
    assert data.loaded_content_hash == "285fa806"
    assert (data.longitude, data.latitude) == (-25, -25)
    assert data.platform is Platform.WINDOWS
    assert not data.allowed_file_patching


def test_arma_to_dict():
    result = parse_arma3(ARMA_KW).to_dict()
    assert result["time_left"] == 9e11
    assert result["gametype"] == "Zeus"
    assert result["language"] == "Czech"
    assert result["platform"] == "Windows"
    assert result["server_state"] == "ASSIGNING ROLES"
    assert "lock" not in result
    assert "param_1" not in result


def test_arma_invalid_time_left_is_ignored():
    data = parse_arma3(["eabc", ""])
    assert data.time_left == timedelta(0)
    assert data.unknowns == []


def test_dayz_invalid_time_is_ignored():
    data = parse_dayz(["ab:cd"])
    assert data.time == timedelta(0)
    assert data.unknowns == []


def test_any_keywords():
    kw_a = [
        "bt", "r218", "n150779", "s3", "i1", "mf", "lf", "vt", "dt", "tzeus", "g65541",
        "h285fa806", "f0", "c-2147483648--2147483648", "pw", "e15", "j0", "k0",
    ]
    data_a = parse(107410, kw_a)
    assert isinstance(data_a, Arma3Keywords)
    assert (data_a.longitude, data_a.latitude) == (-2147483648, -2147483648)

    data_d = parse(1024020, DAYZ_KW)
    assert isinstance(data_d, DayZKeywords)
    assert data_d.shard == "001"

    assert isinstance(parse(221100, DAYZ_KW), DayZKeywords)

    with pytest.raises(UnsupportedAppError):
        parse(1337, ["some"])


@pytest.mark.parametrize(
    "text, expected",
    [
        ("-1-1", (-1, 1)),
        ("-1--1", (-1, -1)),
        ("1-1", (1, 1)),
        ("1--1", (1, -1)),
        ("-21--52", (-21, -52)),
        ("abc", (0, 0)),
        ("5", (0, 0)),
        ("2147483648-1", (0, 0)),
    ],
)
def test_coordinates(text, expected):
    assert parse_coordinates(text) == expected


@pytest.mark.parametrize(
    "text, expected",
    [("255", 255), ("0", 0), ("256", 0), ("-1", 0), ("abc", 0), ("", 0)],
)
def test_parse_uint8(text, expected):
    assert parse_uint8(text) == expected


@pytest.mark.parametrize(
    "text, expected",
    [("65535", 65535), ("777", 777), ("65536", 0), ("x1", 0)],
)
def test_parse_uint16(text, expected):
    assert parse_uint16(text) == expected