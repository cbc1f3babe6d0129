import json
from datetime import timedelta

from a2squery.bread import format_duration
from a2squery.info import Info, ModInfo
from a2squery.protocol import EDF, InfoFormat
from a2squery.replies import Player
from a2squery.report import (
    info_table,
    players_table,
    print_info,
    print_json,
    print_players,
    print_rules,
    rules_table,
)

ADDRESS = "127.0.0.1:27016"


class FakeClient:
    address = ADDRESS

    def __init__(self, info=None, players=None, rules=None, parsed=None):
        self.info = info
        self.players = players or []
        self.rules = rules or {}
        self.parsed = parsed or {}

    def get_info(self):
        return self.info

    def get_players(self):
        return self.players

    def get_rules(self):
        return self.rules

    def get_parsed_rules(self):
        return self.parsed


def make_info(**kwargs):
    values = dict(
        format=InfoFormat.SOURCE,
        name="Test Server",
        map="de_dust",
        folder="cstrike",
        game="Counter-Strike",
        ping=timedelta(milliseconds=12),
    )
    values.update(kwargs)
    return Info(**values)


def test_info_table_source():
    text = info_table(make_info()).render()
    assert "Query type:" in text
    assert "Source" in text
    assert "Test Server" in text
    assert "12 ms" in text
    assert "Server address:" not in text
    assert "Keywords:" not in text


def test_info_table_goldsource_with_mod():
    info = make_info(
        format=InfoFormat.GOLDSOURCE,
        address="10.0.0.1:27015",
        mod=ModInfo(link="mod.example.com", download_link="dl.example.com"),
    )
    text = info_table(info).render()
    assert "Server address:" in text
    assert "10.0.0.1:27015" in text
    assert "Mod URL:" in text
    assert "dl.example.com" in text


def test_info_table_keywords_wrap():
    keywords = [f"keyword{i:02d}" for i in range(20)]
    info = make_info(edf=EDF.KEYWORDS | EDF.PORT, port=2302, keywords=keywords)
    text = info_table(info).render()
    assert text.count("Keywords:") == 1
    assert "2302" in text
    assert all(word in text for word in keywords)
    lines = [line for line in text.splitlines() if "keyword" in line]
    assert len(lines) > 1


def test_players_table_hides_empty_columns():
    text = players_table([Player(name="Bob"), Player(name="Alice")]).render()
    header = text.splitlines()[1]
    assert "Name" in header
    assert "Score" not in header
    assert "PlayTime" not in header


def test_players_table_durations():
    duration = timedelta(seconds=90)
    text = players_table([Player(name="Bob", duration=duration, score=4)]).render()
    assert "PlayTime" in text
    assert format_duration(duration) in text
    assert "Score" in text


def test_rules_table_row_count():
    table = rules_table({"a": "1", "b": "2"}, raw=True)
    lines = table.render().strip("\n").splitlines()
    assert len(lines) == 5


def test_print_rules_parsed_sorted(capsys):
    client = FakeClient(parsed={"b": True, "a": 2.5, "c": 100.0})
    print_rules(client, as_json=False, raw=False)
    out = capsys.readouterr().out
    assert out.index("a ") < out.index("b ") < out.index("c ")
    assert "true" in out
    assert "2.5" in out
    assert "100.0" not in out
    assert out.rstrip().endswith(f"A2S_RULES response for {ADDRESS}")


def test_print_rules_raw_json(capsys):
    rules = {"z": "1", "a": "x"}
    print_rules(FakeClient(rules=rules), as_json=True, raw=True)
    out = capsys.readouterr().out
    data = json.loads(out)
    assert data == rules
    assert list(data) == sorted(rules)


def test_print_players_empty(capsys):
    print_players(FakeClient(), as_json=False)
    out = capsys.readouterr().out
    assert out == "The server is empty and there are no players to print ...\n"


def test_print_players_table(capsys):
    print_players(FakeClient(players=[Player(name="Bob")]), as_json=False)
    out = capsys.readouterr().out
    assert "Bob" in out
    assert out.rstrip().endswith(f"A2S_PLAYERS response for {ADDRESS}")


def test_print_info_json(capsys):
    info = make_info()
    print_info(FakeClient(info=info), as_json=True)
    data = json.loads(capsys.readouterr().out)
    assert data == info.to_dict()


def test_print_info_table(capsys):
    print_info(FakeClient(info=make_info()), as_json=False)
    out = capsys.readouterr().out
    assert "Server name:" in out
    assert out.rstrip().endswith(f"A2S_INFO response for {ADDRESS}")


def test_print_json_players(capsys):
    players = [Player(name="Bob", score=3)]
    print_json(players)
    assert json.loads(capsys.readouterr().out) == [players[0].to_dict()]