# a2squery

A client for the Steam A2S server query protocol. It asks a game server for
its information (`A2S_INFO`), the players it has (`A2S_PLAYER`) and the rules
it runs (`A2S_RULES`). It also decodes the Arma 3 / DayZ server browser
protocol that these games pack into their rules reply, and the keyword tags
that they put into `A2S_INFO`.

It needs nothing beyond the standard library.

## Installation

```
pip install .
```

## Command line

```
a2squery [OPTIONS] <command> <host(:query port)> [query port]
```

The host and port can be given as one `host:port` word (`[ipv6]:port` for
IPv6) or as two words.

Commands:

| command   | what it does                                  |
|-----------|-----------------------------------------------|
| `info`    | server information (`A2S_INFO`)               |
| `rules`   | server rules (`A2S_RULES`)                    |
| `players` | player list (`A2S_PLAYER`)                    |
| `all`     | info, rules and players one after another     |
| `ping`    | repeated `A2S_INFO` with response-time stats  |

Options:

| option                      | meaning                                             |
|-----------------------------|-----------------------------------------------------|
| `-j`, `--json`              | print indented JSON instead of tables               |
| `-r`, `--raw`               | keep rule values as strings, do not convert them    |
| `-t`, `--deadline-timeout=` | read timeout in seconds (default 3; 0 or less keeps the client's 5) |
| `-b`, `--buffer-size=`      | receive buffer size, 0 to 65535 (default 8096)      |
| `-c`, `--ping-count=`       | number of pings, 0 for no limit (default 0)         |
| `-p`, `--ping-period=`      | seconds between pings (default 1)                   |
| `-v`, `--version`           | show version information                            |
| `-h`, `--help`              | show help                                           |

Examples:

```
a2squery info 127.0.0.1 27016
a2squery -j players 127.0.0.1:27016
a2squery -c 5 ping 127.0.0.1 27016
```

Without `--raw`, rule values are converted to integers, floats, booleans or
decoded base64 text where they parse as such, and the table is sorted by rule
name; with `--raw` they are shown as received. The players table leaves out
columns that no player has a value for.

`ping` stops after the given count, or on Ctrl+C / SIGTERM, and then prints
how many requests were sent, answered and failed, with the minimum, maximum
and average response time. Failures are logged and counted, not fatal.

The command exits with status 0 on success and 1 on an error, which is
printed to standard error.

## Library

```python
from a2squery.client import Client

with Client.from_string("127.0.0.1:27016") as client:
    info = client.get_info()
    print(info.to_dict())

    for player in client.get_players():
        print(player.to_dict())

    rules = client.get_rules()               # dict of str -> str
    parsed = client.get_parsed_rules()       # ints, floats, bools, decoded base64
```

`Client(host, port, timeout=5, buffer_size=1400)` creates a client that
connects on first use or with `connect()`; `Client.from_string` parses the
address and connects at once. The client answers server challenges by itself
and reassembles replies split over several packets. Besides the calls above
it offers `get_theship_players()`, `get_ping()` and `get_challenge()`, and the
lower-level `get(request_type)`, which returns the body, the response type
byte and the response time.

Protocol and parse errors are raised as subclasses of
`a2squery.protocol.A2SError`. Network failures and timeouts come through as
`OSError`, and a malformed address as `ValueError`.

The response bodies can also be decoded without a socket:
`a2squery.info.parse_info`, `a2squery.replies.parse_players`,
`parse_theship_players`, `parse_rules` and `parse_rule_values`.

### Arma 3 and DayZ

```python
from a2squery import a3sb, keywords
from a2squery.client import Client

with Client.from_string("127.0.0.1:27016") as client:
    rules = a3sb.get_rules_dayz(client)
    print(rules.to_dict())

    info = client.get_info()
    print(info.to_dict())

print(keywords.parse_dayz(["battleye", "shard001", "port2302", "13:38"]).to_dict())
```

`a3sb.get_rules(client, app_id)` takes a Steam AppID; with `0` the game is
guessed from the protocol version in the reply (v3 Arma 3, v2 DayZ). If the
client still has the default 1400-byte buffer it is raised to 8192 first.
`a3sb.parse_rules(data, app_id)` decodes a body already received.

`keywords.parse(app_id, keywords)` picks the Arma 3 or DayZ keyword parser by
AppID and raises `keywords.UnsupportedAppError` for any other game;
`parse_arma3` and `parse_dayz` call a parser directly.

### Ping statistics

`a2squery.ping.start(client, count, period)` runs the same loop as the `ping`
command. `PingBuffer` keeps the last 65535 response times and
`calculate_stats` returns their minimum, maximum and average.

### Tables

```python
from a2squery.tableprinter import TablePrinter

table = TablePrinter(["Name", "Score"], "=")
table.add_rows([["alice", "10"], ["bob", "7"]])
table.print_sorted(0)
```

`render()` and `render_sorted(col)` return the text instead of printing it.

## Limitations

- Multi-packet replies compressed with bzip2 are not decoded; they raise
  `a2squery.protocol.Bzip2Error`.
- The command line tool shows plain A2S data only. Decoding the Arma 3 / DayZ
  server browser protocol and the game keyword tags is available from the
  library, not as a command.

## Tests

```
pip install ".[test]"
pytest
```