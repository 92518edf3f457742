"""Storage of users and their team profiles."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any
from uuid import UUID

from .model import Profile, ProfileTeams, ProfileWithHistory, User
from .repo_games import _as_datetime, _as_optional_datetime, _as_uuid, _Database

_USER_COLUMNS = "id, display_name, user_name, avatar_url, role, status"
_UPDATED_COLUMNS = ("user_name", "avatar_url", "role", "status", "password_hash", "display_name")
_UPDATE_SQL = "UPDATE users SET {} WHERE id = ${}".format(
    ", ".join(f"{column} = ${index}" for index, column in enumerate(_UPDATED_COLUMNS, start=1)),
    len(_UPDATED_COLUMNS) + 1,
)


def _user_from_row(row: Sequence[Any]) -> User:
    user_id, display_name, user_name, avatar_url, role, status = row[:6]
    return User(
        id=_as_uuid(user_id),
        display_name=display_name,
        username=user_name,
        avatar_url=avatar_url,
        role=role,
        status=status,
    )


class UserRepository:
    """Registered users."""

    def __init__(self, conn: Any, paramstyle: str = "qmark") -> None:
        self._db = _Database(conn, paramstyle)

    def create(self, user: User) -> User:
        """Insert ``user`` and fill it with the stored values."""
        row = self._db.write_returning(
            f"""INSERT INTO users (display_name, user_name, avatar_url, role, status, password_hash)
                VALUES ($1, $2, $3, $4, $5, $6)
                RETURNING {_USER_COLUMNS}, password_hash""",
            user.display_name,
            user.username,
            user.avatar_url,
            user.role,
            user.status,
            user.password_hash,
        )
        stored = _user_from_row(row)
        user.id, user.display_name, user.username = stored.id, stored.display_name, stored.username
        user.avatar_url, user.role, user.status = stored.avatar_url, stored.role, stored.status
        user.password_hash = row[6]
        return user

    def add_user_to_teams(self, user_id: UUID, team_ids: Iterable[UUID]) -> None:
        """Give the user a profile in each of the teams, stopping at the first failure."""
        for team_id in team_ids:
            self._db.execute(
                "INSERT INTO profiles (user_id, current_team_id) VALUES ($1, $2)",
                user_id,
                team_id,
            )

    def get_profile_with_history(self, user_id: UUID) -> ProfileWithHistory:
        """Return the user's current team profile and the teams they have been in."""
        profile_id, team_name, role, created_at, updated_at = self._db.fetch_one(
            """SELECT profiles.id, teams.name, role, created_at, updated_at
               FROM profiles JOIN teams ON profiles.current_team_id = teams.id
               WHERE profiles.user_id = $1""",
            user_id,
        )
        profile = Profile(
            id=_as_uuid(profile_id),
            current_team=team_name,
            role=role,
            created_at=_as_datetime(created_at),
            updated_at=_as_datetime(updated_at),
        )
        rows = self._db.fetch_all(
            """SELECT joined_at, left_at, name, role
               FROM team_history
               JOIN teams ON teams.id = team_history.team_id
               WHERE user_id = $1""",
            user_id,
        )
        history = [
            ProfileTeams(
                joined_at=_as_datetime(joined_at),
                left_at=_as_optional_datetime(left_at),
                name=name,
                role=history_role,
            )
            for joined_at, left_at, name, history_role in rows
        ]
        return ProfileWithHistory(profile=profile, history=history)

    def get_by_id(self, user_id: UUID) -> User:
        row = self._db.fetch_one(f"SELECT {_USER_COLUMNS} FROM users WHERE id = $1", user_id)
        return _user_from_row(row)

    def get_by_user_name(self, name: str) -> User:
        """Return only the id and password hash of the user with this name."""
        row = self._db.fetch_one("SELECT id, password_hash FROM users WHERE user_name = $1", name)
        return User(id=_as_uuid(row[0]), password_hash=row[1])

    def update(self, user: User) -> None:
        self._db.execute(
            _UPDATE_SQL,
            user.username,
            user.avatar_url,
            user.role,
            user.status,
            user.password_hash,
            user.display_name,
            user.id,
        )

    def delete(self, user_id: UUID) -> None:
        """Remove the user together with their profiles, all or nothing."""
        with self._db.transaction() as tx:
            tx.execute("DELETE FROM profiles WHERE user_id = $1", user_id)
            tx.execute("DELETE FROM users WHERE id = $1", user_id)

    def list(self) -> list[User]:
        rows = self._db.fetch_all(f"SELECT {_USER_COLUMNS} FROM users")
        return [_user_from_row(row) for row in rows]