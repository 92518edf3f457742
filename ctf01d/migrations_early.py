"""Schema steps that create the game tables and load their first test data."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .migration import Migration


class _Raw(str):
    """SQL text that goes into a statement as it is."""


def _literal(value: object) -> str:
    if isinstance(value, _Raw):
        return str(value)
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, int):
        return str(value)
    text = str(value).replace("'", "''")
    return f"'{text}'"


def _id_of(table: str, column: str, value: str) -> _Raw:
    return _Raw(f"(SELECT id FROM {table} WHERE {column} = {_literal(value)})")


def _create_table(
    table: str, columns: Iterable[tuple[str, str]], primary_key: Sequence[str] = ()
) -> str:
    parts = [f"{name} {kind}" for name, kind in columns]
    if primary_key:
        parts.append(f"PRIMARY KEY ({', '.join(primary_key)})")
    body = ",\n    ".join(parts)
    return f"CREATE TABLE {table} (\n    {body}\n);"


def _insert(table: str, columns: Sequence[str], rows: Iterable[Sequence[object]]) -> str:
    values = ",\n".join(f"({', '.join(_literal(v) for v in row)})" for row in rows)
    return f"INSERT INTO {table} ({', '.join(columns)}) VALUES\n{values};"


def _link_table(table: str, first: tuple[str, str], second: tuple[str, str]) -> str:
    columns = [(name, f"INTEGER REFERENCES {target}(id)") for name, target in (first, second)]
    return _create_table(table, columns, primary_key=(first[0], second[0]))


_VARCHAR = "VARCHAR(255)"

_TEAMS = (
    ("HackersX", "Specialized in network attacks and defense", 401),
    ("CodeRed", "Expert in cryptography and steganography", 402),
    ("NullByte", "Skilled in web security and binary exploitation", 403),
)

_SERVICES = (
    ("NetAttack", "Phantom", "Simulated network attack platform"),
    ("CryptoBox", "Enigma", "Cryptography challenge service"),
)

_GAMES = (
    ("2023-10-01", "Capture the Network Flags"),
    ("2023-10-02", "Decrypt the Hidden Messages"),
)

_MEMBERS = {
    "HackersX": ("Neo", "Morpheus", "Trinity"),
    "CodeRed": ("Cipher", "Seraph", "Smith"),
    "NullByte": ("Oracle", "Sati", "Dozer"),
}

_TEAM_GAMES = (("HackersX", 1), ("CodeRed", 1), ("NullByte", 2), ("HackersX", 2))

_GAME_SERVICES = ((1, "NetAttack"), (2, "CryptoBox"))

_MIGRATIONS = (
    Migration(
        "update0005",
        "update0006",
        "Added table teams",
        sql=_create_table(
            "teams",
            [
                ("id", "SERIAL PRIMARY KEY"),
                ("name", f"{_VARCHAR} UNIQUE NOT NULL"),
                ("description", f"{_VARCHAR} NOT NULL"),
                ("university_id", "INTEGER REFERENCES universities(id)"),
                ("social_links", "TEXT"),
                ("avatar_url", _VARCHAR),
            ],
        ),
    ),
    Migration(
        "update0006",
        "update0006testdata",
        "Insert test data teams",
        sql=_insert(
            "teams",
            ("name", "description", "university_id", "social_links", "avatar_url"),
            [
                (name, about, university, "", "https://robohash.org/" + name.lower())
                for name, about, university in _TEAMS
            ],
        ),
    ),
    Migration(
        "update0006",
        "update0007",
        "Added table services",
        sql=_create_table(
            "services",
            [
                ("id", "SERIAL PRIMARY KEY"),
                ("name", f"{_VARCHAR} NOT NULL"),
                ("author", f"{_VARCHAR} NOT NULL"),
                ("logo_url", _VARCHAR),
                ("description", "TEXT"),
                ("is_public", "BOOLEAN NOT NULL"),
            ],
        ),
    ),
    Migration(
        "update0007",
        "update0007testdata",
        "Added table services",
        sql=_insert(
            "services",
            ("name", "author", "logo_url", "description", "is_public"),
            [(name, author, "", about, True) for name, author, about in _SERVICES],
        ),
    ),
    Migration(
        "update0007",
        "update0008",
        "Added table games",
        sql=_create_table(
            "games",
            [
                ("id", "SERIAL PRIMARY KEY"),
                ("start_time", "TIMESTAMP NOT NULL"),
                ("end_time", "TIMESTAMP NOT NULL"),
                ("description", "TEXT"),
            ],
        ),
    ),
    Migration(
        "update0008",
        "update0008testdata",
        "Insert test data games",
        sql=_insert(
            "games",
            ("start_time", "end_time", "description"),
            [(f"{day} 12:00:00", f"{day} 15:00:00", about) for day, about in _GAMES],
        ),
    ),
    Migration(
        "update0008",
        "update0009",
        "Added table results",
        sql=_create_table(
            "results",
            [
                ("id", "SERIAL PRIMARY KEY"),
                ("team_id", "INTEGER REFERENCES teams(id)"),
                ("game_id", "INTEGER REFERENCES games(id)"),
                ("score", "INTEGER NOT NULL"),
                ("rank", "INTEGER NOT NULL"),
            ],
        ),
    ),
    Migration(
        "update0009",
        "update0010",
        "Added table team_members",
        sql=_link_table("team_members", ("user_id", "users"), ("team_id", "teams")),
    ),
    Migration(
        "update0010",
        "update0010testdata",
        "Insert test data team_members",
        sql=_insert(
            "team_members",
            ("user_id", "team_id"),
            [
                (_id_of("users", "user_name", user), _id_of("teams", "name", team))
                for team, users in _MEMBERS.items()
                for user in users
            ],
        ),
    ),
    Migration(
        "update0010",
        "update0011",
        "Added table team_games",
        sql=_link_table("team_games", ("team_id", "teams"), ("game_id", "games")),
    ),
    Migration(
        "update0011",
        "update0011testdata",
        "Insert testdata team_games",
        sql=_insert(
            "team_games",
            ("team_id", "game_id"),
            [(_id_of("teams", "name", team), game) for team, game in _TEAM_GAMES],
        ),
    ),
    Migration(
        "update0011",
        "update0012",
        "Added table game_services",
        sql=_link_table("game_services", ("game_id", "games"), ("service_id", "services")),
    ),
    Migration(
        "update0012",
        "update0012testdata",
        "Insert test data to game_services",
        sql=_insert(
            "game_services",
            ("game_id", "service_id"),
            [(game, _id_of("services", "name", service)) for game, service in _GAME_SERVICES],
        ),
    ),
    Migration(
        "update0012",
        "update0013",
        "Added column display_name to users",
        sql=f"ALTER TABLE users ADD COLUMN display_name {_VARCHAR.lower()};",
    ),
)


def migrations() -> list[Migration]:
    """Return the steps from update0005 to update0013, in the order they apply."""
    return list(_MIGRATIONS)