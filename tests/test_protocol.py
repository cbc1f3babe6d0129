import struct

import pytest

from a2squery.protocol import (
    EDF,
    A2SError,
    A3SBError,
    AppID,
    Environment,
    Flag,
    InfoFormat,
    MultiPacketError,
    ProtocolVersionError,
    RulesDataRemainsError,
    ServerType,
    SinglePacketError,
    TheShipMode,
    WrongByteError,
    WrongRequestError,
    create_header,
    is_multi_packet,
    validate_response_type,
)


def test_info_header_without_challenge():
    assert create_header(Flag.INFO_REQUEST) == b"\xff\xff\xff\xffTSource Engine Query\x00"


def test_info_header_with_challenge_appends_big_endian():
    header = create_header(Flag.INFO_REQUEST, 0x01020304)
    assert header.endswith(b"Source Engine Query\x00\x01\x02\x03\x04")


@pytest.mark.parametrize("flag", [Flag.PLAYER_REQUEST, Flag.RULES_REQUEST])
def test_player_and_rules_headers_carry_challenge(flag):
    header = create_header(flag, 0xAABBCCDD)
    assert header[:5] == b"\xff\xff\xff\xff" + bytes([flag])
    assert struct.unpack(">I", header[5:])[0] == 0xAABBCCDD


@pytest.mark.parametrize("flag", [Flag.PING_REQUEST, Flag.CHALLENGE_REQUEST])
def test_ping_and_challenge_headers_are_bare(flag):
    assert create_header(flag) == b"\xff\xff\xff\xff" + bytes([flag])


def test_unknown_request_header_raises():
    with pytest.raises(WrongRequestError, match="unsupported request type"):
        create_header(0x10)


def test_single_packet_detected():
    assert is_multi_packet(b"\xff\xff\xff\xffI") is False


def test_multi_packet_detected():
    assert is_multi_packet(b"\xfe\xff\xff\xff" + bytes(6)) is True


def test_short_single_packet_raises():
    with pytest.raises(SinglePacketError):
        is_multi_packet(b"\xff\xff\xff\xff")


def test_short_multi_packet_raises():
    with pytest.raises(MultiPacketError):
        is_multi_packet(b"\xfe\xff\xff\xff\x00")


def test_unknown_packet_header_raises():
    with pytest.raises(WrongByteError, match="in header"):
        is_multi_packet(b"\x00\x00\x00\x00\x00")


@pytest.mark.parametrize(
    "request_type, response",
    [
        (Flag.INFO_REQUEST, Flag.INFO_RESPONSE_SOURCE),
        (Flag.INFO_REQUEST, Flag.INFO_RESPONSE_GOLDSOURCE),
        (Flag.PLAYER_REQUEST, Flag.PLAYER_RESPONSE),
        (Flag.RULES_REQUEST, Flag.RULES_RESPONSE),
        (Flag.PING_REQUEST, Flag.PING_RESPONSE),
        (Flag.CHALLENGE_REQUEST, Flag.CHALLENGE_RESPONSE),
    ],
)
def test_matching_response_accepted(request_type, response):
    assert validate_response_type(request_type, response) is None


def test_mismatched_response_raises_with_name():
    with pytest.raises(WrongByteError, match="for A2S_PLAYER"):
        validate_response_type(Flag.PLAYER_REQUEST, Flag.RULES_RESPONSE)


def test_unknown_request_in_validation_raises():
    with pytest.raises(WrongRequestError):
        validate_response_type(0x01, Flag.PING_RESPONSE)


def test_errors_share_base():
    with pytest.raises(A2SError, match="for A2S_RULES"):
        validate_response_type(Flag.RULES_REQUEST, Flag.PLAYER_RESPONSE)
    with pytest.raises(A2SError, match="in header"):
        is_multi_packet(b"\x01\x02\x03\x04\x05")
    assert issubclass(RulesDataRemainsError, A3SBError)


def test_info_format_labels():
    assert InfoFormat(0x49).label() == "Source"
    assert InfoFormat(0x6D).label() == "GoldSource"
    assert InfoFormat(0x12).label() == "unknown"


def test_server_type_labels_ignore_case():
    assert ServerType(ord("D")).label() == "Dedicated"
    assert ServerType(ord("l")).label() == "Local"
    assert ServerType(ord("P")).label() == "Proxy"
    assert ServerType(ord("z")).label() == "Unknown"


def test_environment_labels_ignore_case():
    assert Environment(ord("W")).label() == "Windows"
    assert Environment(ord("m")).label() == "Mac"
    assert Environment(ord("x")).label() == "Unknown"


def test_ship_mode_labels():
    assert TheShipMode(4).label() == "VIP Team"
    assert TheShipMode(9).label() == "Unknown"


def test_edf_bits_combine():
    edf = EDF(0xB1)
    assert EDF.PORT in edf
    assert EDF.KEYWORDS in edf
    assert EDF.SOURCE_TV not in edf


def test_app_ids():
    assert AppID(107410) is AppID.ARMA3
    assert AppID(1024020) is AppID.DAYZ_EXP


def test_protocol_version_messages():
    assert "oldest version" in str(ProtocolVersionError(1))
    assert "for DayZ" in str(ProtocolVersionError(3, for_dayz=True))
    newest = ProtocolVersionError(4)
    assert str(newest).endswith("protocol version 4")
    assert newest.version == 4