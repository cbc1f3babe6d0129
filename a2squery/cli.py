"""Command line tool that queries a game server with A2S requests."""

from __future__ import annotations

import argparse
import os
import sys
from typing import Callable, Sequence

from .bread import ReadError
from .client import Client
from .ping import start as start_ping
from .protocol import A2SError
from .report import print_info, print_players, print_rules

VERSION = ""
COMMIT = ""
BUILD_TIME = ""
URL = ""

_HELP = """Description:
  CLI for querying Steam A2S server information.

Usage:
  {prog} [OPTIONS] <command> <host(:query port)> <query port>

Example:
  {prog} ping 127.0.0.1 27016
  {prog} -j info 127.0.0.1:27016 | jq '.players'

Commands:
  info     Retrieve server information A2S_INFO;
  rules    Retrieve server rules A2S_RULES;
  players  Retrieve player list A2S_PLAYERS;
  all      Retrieve all available server information;
  ping     Ping the server with A2S_INFO.

Options:
  -j, --json               Output in JSON format;
  -r, --raw                Disable parse A2S_RULES values to types;
  -t, --deadline-timeout=  Set connection timeout in seconds;
  -b, --buffer-size=       Set connection buffer size;
  -c, --ping-count=        Set the number of ping requests to send;
  -p, --ping-period=       Set the period between pings in seconds;
  -v, --version            Show version, commit, and build time;
  -h, --help               Prints this help message.
"""

_QUERY_ERRORS = (A2SError, ReadError, OSError, ValueError)


class _UsageError(Exception):
    pass


class _Parser(argparse.ArgumentParser):
    def error(self, message: str):
        raise _UsageError(message)


def _uint16(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number {text!r}") from None
    if not 0 <= value <= 0xFFFF:
        raise argparse.ArgumentTypeError(f"value {text} out of range")
    return value


def build_parser() -> argparse.ArgumentParser:
    """Build the option parser; positional words land in ``args``."""
    parser = _Parser(add_help=False, allow_abbrev=False)
    parser.add_argument("-t", "--deadline-timeout", dest="timeout", type=int, default=3)
    parser.add_argument("-c", "--ping-count", dest="ping_count", type=int, default=0)
    parser.add_argument("-p", "--ping-period", dest="ping_period", type=int, default=1)
    parser.add_argument("-b", "--buffer-size", dest="buffer_size", type=_uint16, default=8096)
    parser.add_argument("-j", "--json", action="store_true")
    parser.add_argument("-r", "--raw", action="store_true")
    parser.add_argument("-h", "--help", action="store_true")
    parser.add_argument("-v", "--version", action="store_true")
    parser.add_argument("args", nargs="*")
    return parser


def create_client(host: str, timeout: int, buffer_size: int) -> Client:
    """Open a client for ``host:port``; a timeout of 0 or less keeps the default."""
    client = Client.from_string(host)
    if timeout > 0:
        client.timeout = timeout
    client.buffer_size = buffer_size
    return client


def _prog() -> str:
    return os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "a2s"


def _print_help() -> None:
    sys.stdout.write(_HELP.format(prog=_prog()))


def _print_version() -> None:
    sys.stdout.write(
        f"file:     {sys.argv[0] if sys.argv else ''}\n"
        f"version:  {VERSION}\n"
        f"commit:   {COMMIT}\n"
        f"built:    {BUILD_TIME}\n"
        f"project:  {URL}\n"
    )


def _fatal(message: str) -> int:
    print(message, file=sys.stderr)
    return 1


def _actions(command: str, client: Client, opts) -> list[tuple[Callable[[], None], str]] | None:
    info = (lambda: print_info(client, opts.json), "Failed to get server info")
    rules = (lambda: print_rules(client, opts.json, opts.raw), "Failed to get rules")
    players = (lambda: print_players(client, opts.json), "Failed to get players")
    ping = (lambda: start_ping(client, opts.ping_count, opts.ping_period), "Failed to ping")
    return {
        "info": [info],
        "rules": [rules],
        "players": [players],
        "all": [info, rules, players],
        "ping": [ping],
    }.get(command)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line tool and return its exit status."""
    try:
        opts = build_parser().parse_intermixed_args(argv)
    except _UsageError as exc:
        return _fatal(str(exc))

    if opts.help:
        _print_help()
        return 0
    if opts.version:
        _print_version()
        return 0

    args = opts.args
    if not args:
        _print_help()
        return _fatal("Command must be provided")
    if len(args) < 2:
        return _fatal("Host and port must be provided as positional arguments")
    if len(args) > 3:
        return _fatal(f"Extra command passed [{' '.join(args[3:])}]")

    host = args[1]
    if len(args) > 2:
        host += ":" + args[2]

    try:
        client = create_client(host, opts.timeout, opts.buffer_size)
    except (OSError, ValueError) as exc:
        return _fatal(f"Failed to create client: {exc}")

    try:
        actions = _actions(args[0], client, opts)
        if actions is None:
            return _fatal(f"Unknown command '{args[0]}'")
        for action, failure in actions:
            try:
                action()
            except _QUERY_ERRORS as exc:
                return _fatal(f"{failure}: {exc}")
    finally:
        client.close()
    return 0