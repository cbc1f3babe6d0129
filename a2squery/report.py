"""Tables and JSON output for A2S_INFO, A2S_PLAYER and A2S_RULES responses."""

from __future__ import annotations

import json
import math
from datetime import timedelta
from decimal import Decimal
from typing import Any, Mapping, Sequence

from .bread import format_duration
from .info import Info
from .protocol import EDF, InfoFormat
from .replies import Player
from .tableprinter import TablePrinter, join_with_limit


def _jsonable(data: Any) -> Any:
    if hasattr(data, "to_dict"):
        return data.to_dict()
    if isinstance(data, Mapping):
        return {str(key): _jsonable(data[key]) for key in sorted(data)}
    if isinstance(data, (list, tuple)):
        return [_jsonable(item) for item in data]
    return data


def print_json(data: Any) -> None:
    """Print ``data`` as indented JSON; mappings are printed with sorted keys."""
    print(json.dumps(_jsonable(data), indent=2, ensure_ascii=False))


def _flag(value: bool) -> str:
    return "true" if value else "false"


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return _flag(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "+Inf" if value > 0 else "-Inf"
        number = Decimal(repr(value))
        if -4 <= number.adjusted() < 21:
            return format(number.normalize(), "f")
        return repr(value)
    return str(value)


def info_table(info: Info) -> TablePrinter:
    """Build the property table for a server's information."""
    table = TablePrinter(["Property", "Value"], "=")
    table.add_rows(
        [
            ["Query type:", info.format.label()],
            ["Protocol:", str(info.protocol)],
            ["Server name:", info.name],
            ["Map on server:", info.map],
            ["Game folder:", info.folder],
            ["Game name:", info.game],
            ["Steam AppID:", str(info.id)],
            ["Players/Slots:", f"{info.players}/{info.max_players}"],
            ["Bots count:", str(info.bots)],
            ["Server type:", info.server_type.label()],
            ["Server OS:", info.environment.label()],
            ["Need password:", _flag(info.visibility)],
            ["VAC protected:", _flag(info.vac)],
            ["Game version:", info.version],
        ]
    )

    if info.format == InfoFormat.GOLDSOURCE:
        table.add_row(["Server address:", info.address])
        if info.mod is not None:
            table.add_rows(
                [
                    ["Mod URL:", info.mod.link],
                    ["Download URL:", info.mod.download_link],
                    ["Mod Version:", str(info.mod.version)],
                    ["Mod Size:", str(info.mod.size)],
                    ["Multiplayer only:", _flag(info.mod.multiplayer_only)],
                    ["Custom DLL:", _flag(info.mod.custom_dll)],
                ]
            )

    if info.edf:
        if info.port:
            table.add_row(["Port:", str(info.port)])
        if info.steam_id:
            table.add_row(["Server SteamID:", str(info.steam_id)])
        if info.edf & EDF.SOURCE_TV:
            table.add_rows(
                [
                    ["SourceTV Port:", str(info.source_tv_port)],
                    ["SourceTV Name:", info.source_tv_name],
                ]
            )
        if info.keywords:
            limit = max(len(info.name), 60)
            for i, line in enumerate(join_with_limit(info.keywords, ", ", limit)):
                table.add_row(["Keywords:" if i == 0 else "", line])

    milliseconds = info.ping // timedelta(milliseconds=1)
    table.add_row(["Server ping:", f"{milliseconds} ms"])
    return table


def players_table(players: Sequence[Player]) -> TablePrinter:
    """Build the player table, leaving out columns no player has a value for."""
    show_time = any(player.duration for player in players)
    show_score = any(player.score for player in players)
    show_name = any(player.name for player in players)
    show_index = any(player.index for player in players)

    columns = ["  #"]
    if show_time:
        columns.append("PlayTime")
    if show_score:
        columns.append("Score")
    if show_name:
        columns.append("Name")
    if show_index:
        columns.append("Index")

    table = TablePrinter(columns, "=")
    for number, player in enumerate(players, start=1):
        row = [f"{number:3d}"]
        if show_time:
            row.append(format_duration(player.duration))
        if show_score:
            row.append(str(player.score))
        if show_name:
            row.append(player.name)
        if show_index:
            row.append(str(player.index))
        table.add_row(row)
    return table


def rules_table(rules: Mapping[str, Any], raw: bool) -> TablePrinter:
    """Build the rule table; raw values are shown as they came."""
    table = TablePrinter(["Rule", "Value"], "=")
    for key, value in rules.items():
        table.add_row([key, value if raw else _format_value(value)])
    return table


def print_info(client, as_json: bool) -> None:
    info = client.get_info()
    if as_json:
        print_json(info)
        return
    info_table(info).print()
    print(f"A2S_INFO response for {client.address}")


def print_players(client, as_json: bool) -> None:
    players = client.get_players()
    if as_json:
        print_json(players)
        return
    if not players:
        print("The server is empty and there are no players to print ...")
        return
    players_table(players).print()
    print(f"A2S_PLAYERS response for {client.address}")


def print_rules(client, as_json: bool, raw: bool) -> None:
    """Print the rules; parsed values are shown sorted by rule name."""
    rules = client.get_rules() if raw else client.get_parsed_rules()
    if as_json:
        print_json(rules)
        return
    table = rules_table(rules, raw)
    if raw:
        table.print()
    else:
        table.print_sorted(0)
    print(f"A2S_RULES response for {client.address}")