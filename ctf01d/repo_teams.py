"""Storage of teams, their members and universities."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Optional
from uuid import UUID

from .model import NIL_UUID, Team, University, User
from .repo_games import _as_uuid, _Database

_UNIVERSITY_LIMIT = 10


def _optional_uuid(value: Any) -> UUID:
    return NIL_UUID if value is None else _as_uuid(value)


def _team_from_row(row: Sequence[Any], university: Optional[str] = None) -> Team:
    team_id, name, description, university_id, social_links, avatar_url = row
    return Team(
        id=_as_uuid(team_id),
        name=name,
        description=description,
        university_id=_optional_uuid(university_id),
        social_links=social_links,
        avatar_url=avatar_url,
        university=university,
    )


def _member_from_row(row: Sequence[Any]) -> User:
    user_id, display_name, user_name, role, avatar_url, status = row
    return User(
        id=_as_uuid(user_id),
        display_name=display_name,
        username=user_name,
        role=role,
        avatar_url=avatar_url,
        status=status,
    )


def _university_from_row(row: Sequence[Any]) -> University:
    university_id, name = row
    return University(id=_as_uuid(university_id), name=name)


class TeamRepository:
    """Teams and requests of users to join them."""

    def __init__(self, conn: Any, paramstyle: str = "qmark") -> None:
        self._db = _Database(conn, paramstyle)

    def create(self, team: Team) -> Team:
        """Insert ``team`` and fill it with the stored values."""
        row = self._db.write_returning(
            """INSERT INTO teams (name, description, university_id, social_links, avatar_url)
               VALUES ($1, $2, $3, $4, $5)
               RETURNING id, name, description, university_id, social_links, avatar_url""",
            team.name,
            team.description,
            team.university_id,
            team.social_links,
            team.avatar_url,
        )
        stored = _team_from_row(row)
        team.id, team.name, team.description = stored.id, stored.name, stored.description
        team.university_id = stored.university_id
        team.social_links, team.avatar_url = stored.social_links, stored.avatar_url
        return team

    def get_by_id(self, team_id: UUID) -> Team:
        """Return the team with the name of its university, if it has one."""
        row = self._db.fetch_one(
            """SELECT t.id, t.name, t.description, t.social_links, t.avatar_url,
                      u.name AS university_name
               FROM teams t
               LEFT JOIN universities u ON t.university_id = u.id
               WHERE t.id = $1""",
            team_id,
        )
        found_id, name, description, social_links, avatar_url, university = row
        return Team(
            id=_as_uuid(found_id),
            name=name,
            description=description,
            social_links=social_links,
            avatar_url=avatar_url,
            university=university,
        )

    def update(self, team: Team) -> None:
        self._db.execute(
            """UPDATE teams SET name = $1, description = $2, university_id = $3,
                   social_links = $4, avatar_url = $5 WHERE id = $6""",
            team.name,
            team.description,
            team.university_id,
            team.social_links,
            team.avatar_url,
            team.id,
        )

    def delete(self, team_id: UUID) -> None:
        self._db.execute("DELETE FROM teams WHERE id = $1", team_id)

    def list(self) -> list[Team]:
        rows = self._db.fetch_all(
            """SELECT t.id, t.name, t.description, t.university_id, t.social_links,
                      t.avatar_url, u.name AS university_name
               FROM teams t
               LEFT JOIN universities u ON t.university_id = u.id"""
        )
        return [_team_from_row(row[:6], row[6]) for row in rows]

    def connect_user_team(self, team_id: UUID, user_id: UUID, role: str) -> None:
        """File a pending request of the user to join the team with ``role``."""
        self._db.execute(
            """INSERT INTO team_member_requests (team_id, user_id, role, status)
               VALUES ($1, $2, $3, 'pending')""",
            team_id,
            user_id,
            role,
        )

    def approve_user_team(self, team_id: UUID, user_id: UUID) -> None:
        """Approve a pending request and make the user a team member.

        Raises LookupError, changing nothing, when no request can be approved.
        """
        with self._db.transaction() as tx:
            tx.execute(
                """UPDATE team_member_requests SET status = 'approved'
                   WHERE team_id = $1 AND user_id = $2 AND status = 'pending'""",
                team_id,
                user_id,
            )
            (role,) = tx.fetch_one(
                """SELECT role FROM team_member_requests
                   WHERE team_id = $1 AND user_id = $2 AND status = 'approved'""",
                team_id,
                user_id,
            )
            tx.execute(
                "INSERT INTO profiles (current_team_id, user_id, role) VALUES ($1, $2, $3)",
                team_id,
                user_id,
                role,
            )

    def leave_user_from_team(self, team_id: UUID, user_id: UUID) -> None:
        self._db.execute(
            "DELETE FROM profiles WHERE current_team_id = $1 AND user_id = $2",
            team_id,
            user_id,
        )

    def team_members(self, team_id: UUID) -> list[User]:
        """Return the team's members, each with their role in the team."""
        rows = self._db.fetch_all(
            """SELECT u.id, u.display_name, u.user_name, tm.role, u.avatar_url, u.status
               FROM profiles tm
               JOIN users u ON tm.user_id = u.id
               WHERE tm.current_team_id = $1""",
            team_id,
        )
        return [_member_from_row(row) for row in rows]


class UniversityRepository:
    """Universities that teams belong to."""

    def __init__(self, conn: Any, paramstyle: str = "qmark") -> None:
        self._db = _Database(conn, paramstyle)

    def search(self, query: str) -> list[University]:
        """Return up to ten universities whose name contains ``query``, ignoring case."""
        rows = self._db.fetch_all(
            f"""SELECT id, name FROM universities
                WHERE LOWER(name) LIKE '%' || LOWER($1) || '%'
                LIMIT {_UNIVERSITY_LIMIT}""",
            query,
        )
        return [_university_from_row(row) for row in rows]

    def list(self) -> list[University]:
        """Return up to ten universities."""
        rows = self._db.fetch_all(
            f"SELECT id, name FROM universities LIMIT {_UNIVERSITY_LIMIT}"
        )
        return [_university_from_row(row) for row in rows]