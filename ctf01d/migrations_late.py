"""Schema steps that add membership requests, seed results and tidy the results table."""

from __future__ import annotations

import random
import uuid
from typing import Any

from .migration import Migration
from .repo_games import _Database

_NEW_TEAMS = (
    ("CyberWarriors", "Experts in cyber warfare and defense"),
    ("ByteBandits", "Masters of data breaches and exfiltration"),
)
_NEW_GAMES = (
    ("2023-10-03 12:00:00", "2023-10-03 15:00:00", "Break the Encryption"),
    ("2023-10-04 12:00:00", "2023-10-04 15:00:00", "Find the Exploit"),
)


def _seed_results(conn: Any) -> None:
    """Add teams and games, then give every team a random result in every game."""
    db = _Database(conn)
    with db.transaction() as tx:
        tx.execute("DELETE FROM team_games")
        for name, description in _NEW_TEAMS:
            tx.execute(
                "INSERT INTO teams (name, description) VALUES ($1, $2)",
                name,
                description,
            )
        for start_time, end_time, description in _NEW_GAMES:
            tx.execute(
                "INSERT INTO games (start_time, end_time, description) VALUES ($1, $2, $3)",
                start_time,
                end_time,
                description,
            )
        teams = tx.fetch_all("SELECT id, name FROM teams")
        games = tx.fetch_all("SELECT id, description FROM games")
        for game_id, _ in games:
            for rank, (team_id, _) in enumerate(teams, start=1):
                tx.execute(
                    "INSERT INTO results (score, rank, id, team_id, game_id) "
                    "VALUES ($1, $2, $3, $4, $5)",
                    random.random() * 100,
                    rank,
                    str(uuid.uuid4()),
                    team_id,
                    game_id,
                )
                tx.execute(
                    "INSERT INTO team_games (team_id, game_id) VALUES ($1, $2)",
                    team_id,
                    game_id,
                )


_MIGRATIONS = (
    Migration(
        "update0019",
        "update0019testdata",
        "clear robo-hash url",
        sql="""
        BEGIN;
        update users set avatar_url = null;
        update teams set avatar_url = null;
        update services set logo_url = null;
        COMMIT;
        """,
    ),
    Migration(
        "update0019",
        "update0020",
        "add table team_member_requests",
        sql="""
        CREATE TABLE team_member_requests (
            id SERIAL PRIMARY KEY,
            team_id UUID NOT NULL,
            user_id UUID NOT NULL,
            role VARCHAR(50) NOT NULL, -- role in the team (player, captain)
            status VARCHAR(50) NOT NULL DEFAULT 'pending',  -- request status (pending, approved, rejected)
            created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
        );
        """,
    ),
    Migration(
        "update0020",
        "update0020testdata",
        "Add test data with new teams, games, and results",
        apply=_seed_results,
    ),
    Migration(
        "update0020",
        "update0021",
        "Remove rank column from results table",
        sql="""
        BEGIN;
        ALTER TABLE results DROP COLUMN rank;
        COMMIT;
        """,
    ),
    Migration(
        "update0021",
        "update0022",
        "Add cascade delete for results when deleting games",
        sql="""
        BEGIN;
        ALTER TABLE results DROP CONSTRAINT IF EXISTS results_game_id_fkey;
        ALTER TABLE results ADD CONSTRAINT results_game_id_fkey
            FOREIGN KEY (game_id) REFERENCES games(id) ON DELETE CASCADE;
        COMMIT;
        """,
    ),
)


def migrations() -> list[Migration]:
    """Return the steps from update0019 to update0022, in the order they apply."""
    return list(_MIGRATIONS)