"""Storage of games, the teams playing in them, and their results."""

from __future__ import annotations

import re
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from .model import Game, GameDetails, Result, Team

_PLACEHOLDER = re.compile(r"\$(\d+)")
_PARAMSTYLES = ("qmark", "numeric", "named", "format", "pyformat")


def _adapt(value: Any) -> Any:
    return str(value) if isinstance(value, UUID) else value


def _as_uuid(value: Any) -> UUID:
    return value if isinstance(value, UUID) else UUID(str(value))


def _as_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, bytes):
        value = value.decode()
    return datetime.fromisoformat(str(value))


def _as_optional_datetime(value: Any) -> Optional[datetime]:
    return None if value is None else _as_datetime(value)


class _Database:
    """Runs ``$n``-numbered SQL on a DB-API connection with any parameter style."""

    def __init__(self, conn: Any, paramstyle: str = "qmark") -> None:
        if paramstyle not in _PARAMSTYLES:
            raise ValueError(f"unsupported paramstyle: {paramstyle!r}")
        self._conn = conn
        self._paramstyle = paramstyle
        self._in_transaction = False

    def _prepare(self, sql: str, args: Sequence[Any]) -> tuple[str, Any]:
        style = self._paramstyle
        if style in ("format", "pyformat"):
            sql = sql.replace("%", "%%")
        positions: list[int] = []

        def substitute(match: re.Match[str]) -> str:
            number = int(match.group(1))
            if not 1 <= number <= len(args):
                raise ValueError(f"placeholder ${number} has no argument")
            positions.append(number)
            return {
                "qmark": "?",
                "numeric": f":{number}",
                "named": f":p{number}",
                "format": "%s",
                "pyformat": f"%(p{number})s",
            }[style]

        text = _PLACEHOLDER.sub(substitute, sql)
        if style in ("named", "pyformat"):
            return text, {f"p{n}": _adapt(args[n - 1]) for n in positions}
        if style == "numeric":
            return text, [_adapt(arg) for arg in args]
        return text, [_adapt(args[n - 1]) for n in positions]

    def _run(self, sql: str, args: Sequence[Any], fetch: str) -> Any:
        text, params = self._prepare(sql, args)
        cursor = self._conn.cursor()
        try:
            cursor.execute(text, params)
            if fetch == "one":
                return cursor.fetchone()
            if fetch == "all":
                return cursor.fetchall()
            return None
        finally:
            cursor.close()

    def _write(self, sql: str, args: Sequence[Any], fetch: str) -> Any:
        try:
            outcome = self._run(sql, args, fetch)
        except Exception:
            if not self._in_transaction:
                self._conn.rollback()
            raise
        if not self._in_transaction:
            self._conn.commit()
        return outcome

    def fetch_one(self, sql: str, *args: Any) -> tuple:
        """Return the first row, raising LookupError when there is none."""
        row = self._run(sql, args, "one")
        if row is None:
            raise LookupError("no rows in result set")
        return tuple(row)

    def fetch_all(self, sql: str, *args: Any) -> list[tuple]:
        return [tuple(row) for row in self._run(sql, args, "all")]

    def write_returning(self, sql: str, *args: Any) -> tuple:
        """Run a modifying statement and return the first row it yields."""
        rows = self._write(sql, args, "all")
        if not rows:
            raise LookupError("no rows in result set")
        return tuple(rows[0])

    def execute(self, sql: str, *args: Any) -> None:
        self._write(sql, args, "none")

    @contextmanager
    def transaction(self) -> Iterator[_Database]:
        """Group statements: commit on success, roll back on any error."""
        if self._in_transaction:
            raise RuntimeError("a transaction is already open")
        self._in_transaction = True
        try:
            yield self
        except BaseException:
            self._conn.rollback()
            raise
        else:
            self._conn.commit()
        finally:
            self._in_transaction = False


def _game_from_row(row: Sequence[Any]) -> Game:
    game_id, start_time, end_time, description = row[:4]
    return Game(
        id=_as_uuid(game_id),
        start_time=_as_datetime(start_time),
        end_time=_as_datetime(end_time),
        description=description,
    )


def _team_from_row(team_id: Any, name: Any, description: Any) -> Team:
    return Team(id=_as_uuid(team_id), name=name or "", description=description or "")


def _result_from_row(row: Sequence[Any]) -> Result:
    result_id, team_id, game_id, score = row
    return Result(
        id=_as_uuid(result_id),
        team_id=_as_uuid(team_id),
        game_id=_as_uuid(game_id),
        score=float(score),
    )


class GameRepository:
    """Games and the teams taking part in them."""

    def __init__(self, conn: Any, paramstyle: str = "qmark") -> None:
        self._db = _Database(conn, paramstyle)

    def create(self, game: Game) -> Game:
        """Insert ``game`` and fill it with the stored values."""
        row = self._db.write_returning(
            """INSERT INTO games (start_time, end_time, description)
               VALUES ($1, $2, $3)
               RETURNING id, start_time, end_time, description""",
            game.start_time,
            game.end_time,
            game.description,
        )
        stored = _game_from_row(row)
        game.id, game.start_time = stored.id, stored.start_time
        game.end_time, game.description = stored.end_time, stored.description
        return game

    def list_games_details(self) -> list[GameDetails]:
        rows = self._db.fetch_all(
            """SELECT g.id, g.start_time, g.end_time, g.description,
                      t.id AS team_id, t.name AS team_name, t.description AS team_description
               FROM games g
               LEFT JOIN team_games tg ON g.id = tg.game_id
               LEFT JOIN teams t ON tg.team_id = t.id"""
        )
        details: dict[UUID, GameDetails] = {}
        for row in rows:
            game = _game_from_row(row)
            entry = details.get(game.id)
            if entry is None:
                entry = GameDetails(
                    id=game.id,
                    start_time=game.start_time,
                    end_time=game.end_time,
                    description=game.description,
                )
                details[game.id] = entry
            team_id, team_name, team_description = row[4:7]
            if team_id is not None:
                entry.teams.append(_team_from_row(team_id, team_name, team_description))
        return list(details.values())

    def get_game_details(self, game_id: UUID) -> GameDetails:
        """Return the game with its distinct teams; an unknown id gives empty details."""
        rows = self._db.fetch_all(
            """SELECT g.id, g.start_time, g.end_time, g.description, t.id, t.name, t.description
               FROM games g
               LEFT JOIN team_games tg ON g.id = tg.game_id
               LEFT JOIN teams t ON tg.team_id = t.id
               WHERE g.id = $1""",
            game_id,
        )
        details = GameDetails()
        teams: dict[UUID, Team] = {}
        for row in rows:
            game = _game_from_row(row)
            details.id = game_id
            details.start_time = game.start_time
            details.end_time = game.end_time
            details.description = game.description
            team_id, team_name, team_description = row[4:7]
            if team_id is not None:
                team = _team_from_row(team_id, team_name, team_description)
                teams[team.id] = team
        details.teams = list(teams.values())
        return details

    def get_by_id(self, game_id: UUID) -> Game:
        row = self._db.fetch_one(
            "SELECT id, start_time, end_time, description FROM games WHERE id = $1", game_id
        )
        return _game_from_row(row)

    def update(self, game: Game) -> None:
        self._db.execute(
            "UPDATE games SET start_time = $1, end_time = $2, description = $3 WHERE id = $4",
            game.start_time,
            game.end_time,
            game.description,
            game.id,
        )

    def delete(self, game_id: UUID) -> None:
        self._db.execute("DELETE FROM games WHERE id = $1", game_id)

    def list(self) -> list[Game]:
        rows = self._db.fetch_all("SELECT id, start_time, end_time, description FROM games")
        return [_game_from_row(row) for row in rows]


class ResultRepository:
    """Scores of teams in games."""

    def __init__(self, conn: Any, paramstyle: str = "qmark") -> None:
        self._db = _Database(conn, paramstyle)

    def create(self, result: Result) -> Result:
        """Insert ``result`` and fill it with the stored values."""
        row = self._db.write_returning(
            """INSERT INTO results (team_id, game_id, score)
               VALUES ($1, $2, $3)
               RETURNING id, team_id, game_id, score""",
            result.team_id,
            result.game_id,
            result.score,
        )
        stored = _result_from_row(row)
        result.id, result.team_id = stored.id, stored.team_id
        result.game_id, result.score = stored.game_id, stored.score
        return result

    def get_by_id(self, game_id: UUID) -> Result:
        """Return the best-scoring result of the game."""
        row = self._db.fetch_one(
            "SELECT id, team_id, game_id, score FROM results WHERE game_id = $1 ORDER BY score DESC",
            game_id,
        )
        return _result_from_row(row)

    def update(self, result: Result) -> None:
        self._db.execute(
            "UPDATE results SET team_id = $1, game_id = $2, score = $3 WHERE id = $4",
            result.team_id,
            result.game_id,
            result.score,
            result.id,
        )

    def delete(self, result_id: str) -> None:
        self._db.execute("DELETE FROM results WHERE id = $1", str(result_id))

    def list(self, game_id: UUID) -> list[Result]:
        """Return the game's results, highest score first."""
        rows = self._db.fetch_all(
            "SELECT id, team_id, game_id, score FROM results WHERE game_id = $1 ORDER BY score DESC",
            game_id,
        )
        return [_result_from_row(row) for row in rows]