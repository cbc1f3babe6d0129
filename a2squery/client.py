"""UDP client that sends server queries and reassembles their responses."""

from __future__ import annotations

import socket
import struct
import time
from datetime import timedelta
from typing import Any

from .bread import ByteReader, ReadError
from .info import Info, parse_info
from .protocol import (
    DEFAULT_BUFFER_SIZE,
    DEFAULT_DEADLINE_TIMEOUT,
    SINGLE_PACKET,
    Bzip2Error,
    ChallengeReadError,
    Flag,
    InsufficientDataError,
    MultiPacketError,
    MultiPacketInvalidError,
    MultiPacketMismatchError,
    PingReadError,
    SinglePacketError,
    create_header,
    is_multi_packet,
    validate_response_type,
)
from .replies import (
    Player,
    TheShipPlayer,
    parse_players,
    parse_rule_values,
    parse_rules,
    parse_theship_players,
)

_COMPRESSED_BIT = 0x80000000


def _split_host_port(addr: str) -> tuple[str, int]:
    if addr.startswith("["):
        end = addr.find("]")
        if end < 0:
            raise ValueError(f"address {addr}: missing ']' in address")
        host, rest = addr[1:end], addr[end + 1:]
        if not rest.startswith(":"):
            raise ValueError(f"address {addr}: missing port in address")
        port_text = rest[1:]
    else:
        host, sep, port_text = addr.rpartition(":")
        if not sep:
            raise ValueError(f"address {addr}: missing port in address")
        if ":" in host:
            raise ValueError(f"address {addr}: too many colons in address")
    if not port_text.isdigit() or int(port_text) > 0xFFFF:
        raise ValueError(f"address {addr}: invalid port")
    return host, int(port_text)


class Client:
    """Sends queries to one game server over UDP."""

    def __init__(
        self,
        host: str,
        port: int,
        timeout: float = DEFAULT_DEADLINE_TIMEOUT,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
    ) -> None:
        self.host = host
        self.port = port
        self.timeout = timeout
        self.buffer_size = buffer_size
        self._sock: socket.socket | None = None

    @classmethod
    def from_string(cls, addr: str) -> "Client":
        """Create a connected client from ``host:port`` or ``[ipv6]:port``."""
        host, port = _split_host_port(addr)
        client = cls(host, port)
        client.connect()
        return client

    @property
    def address(self) -> str:
        if ":" in self.host:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"

    def connect(self) -> None:
        """Open the UDP socket towards the server."""
        self.close()
        family, kind, proto, _, sockaddr = socket.getaddrinfo(
            self.host or None, self.port, type=socket.SOCK_DGRAM
        )[0]
        sock = socket.socket(family, kind, proto)
        try:
            sock.connect(sockaddr)
        except OSError:
            sock.close()
            raise
        self._sock = sock

    def close(self) -> None:
        if self._sock is not None:
            self._sock.close()
            self._sock = None

    def __enter__(self) -> "Client":
        if self._sock is None:
            self.connect()
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def _socket(self) -> socket.socket:
        if self._sock is None:
            self.connect()
        assert self._sock is not None
        return self._sock

    def _receive(self, sock: socket.socket) -> bytes:
        return sock.recv(self.buffer_size)

    def _request(self, request_type: int, challenge: int) -> tuple[bytes, timedelta]:
        request = create_header(request_type, challenge)
        sock = self._socket()
        sock.settimeout(self.timeout)

        started = time.perf_counter()
        sock.send(request)
        response = self._receive(sock)
        duration = timedelta(seconds=time.perf_counter() - started)

        if not is_multi_packet(response):
            return response, duration

        packet_id = struct.unpack_from("<I", response, 4)[0]
        packet_count = response[8] & 0x0F
        if packet_id & _COMPRESSED_BIT:
            raise Bzip2Error()

        packets = {response[9] & 0x0F: response[12:]}
        while len(packets) < packet_count:
            response = self._receive(sock)
            if len(response) < 10:
                raise MultiPacketError()
            if struct.unpack_from("<I", response, 4)[0] != packet_id:
                raise MultiPacketInvalidError()
            packets.setdefault(response[9] & 0x0F, response[12:])

        try:
            assembled = b"".join(packets[i] for i in range(packet_count))
        except KeyError:
            raise MultiPacketMismatchError() from None
        return assembled, duration

    def get(self, request_type: int) -> tuple[bytes, int, timedelta]:
        """Run a query, answering a challenge if the server sends one.

        Returns the response body without its header, the response type
        byte and the time from sending the request to reading the reply.
        """
        response, duration = self._request(request_type, SINGLE_PACKET)
        if len(response) < 5:
            raise SinglePacketError()
        flag = response[4]

        if flag == Flag.CHALLENGE_RESPONSE:
            if len(response) < 9:
                raise InsufficientDataError(" in challenge response")
            challenge = struct.unpack_from(">I", response, 5)[0]
            response, _ = self._request(request_type, challenge)
            if len(response) < 5:
                raise SinglePacketError()
            flag = response[4]

        validate_response_type(request_type, flag)
        return response[5:], flag, duration

    def get_info(self) -> Info:
        data, response_format, duration = self.get(Flag.INFO_REQUEST)
        return parse_info(data, response_format, duration)

    def get_players(self) -> list[Player]:
        data, _, _ = self.get(Flag.PLAYER_REQUEST)
        return parse_players(data)

    def get_theship_players(self) -> list[TheShipPlayer]:
        data, _, _ = self.get(Flag.PLAYER_REQUEST)
        return parse_theship_players(data)

    def get_rules(self) -> dict[str, str]:
        data, _, _ = self.get(Flag.RULES_REQUEST)
        return parse_rules(data)

    def get_parsed_rules(self) -> dict[str, Any]:
        """Return the rules with values converted to int, float, bool or text."""
        return parse_rule_values(self.get_rules())

    def get_ping(self) -> timedelta:
        """Send the deprecated A2A_PING and return the response time."""
        data, _, duration = self.get(Flag.PING_REQUEST)
        try:
            ByteReader(data).string()
        except ReadError as exc:
            raise PingReadError(f" payload: {exc}") from exc
        return duration

    def get_challenge(self) -> int:
        """Request a challenge number with the deprecated challenge query."""
        data, _, _ = self.get(Flag.CHALLENGE_REQUEST)
        try:
            return ByteReader(data).uint32()
        except ReadError as exc:
            raise ChallengeReadError(f" challenge: {exc}") from exc