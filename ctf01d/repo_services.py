"""Storage of game services and login sessions."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timedelta
from typing import Any
from uuid import UUID

from .model import Service
from .repo_games import _as_uuid, _Database

SESSION_LIFETIME = timedelta(hours=96)

_SERVICE_COLUMNS = "id, name, author, logo_url, description, is_public"


def _service_from_row(row: Sequence[Any]) -> Service:
    service_id, name, author, logo_url, description, is_public = row
    return Service(
        id=_as_uuid(service_id),
        name=name,
        author=author,
        logo_url=logo_url,
        description=description,
        is_public=bool(is_public),
    )


class ServiceRepository:
    """Vulnerable services offered in games."""

    def __init__(self, conn: Any, paramstyle: str = "qmark") -> None:
        self._db = _Database(conn, paramstyle)

    def create(self, service: Service) -> Service:
        """Insert ``service`` and fill it with the stored values."""
        row = self._db.write_returning(
            f"""INSERT INTO services (name, author, logo_url, description, is_public)
                VALUES ($1, $2, $3, $4, $5)
                RETURNING {_SERVICE_COLUMNS}""",
            service.name,
            service.author,
            service.logo_url,
            service.description,
            service.is_public,
        )
        stored = _service_from_row(row)
        service.id, service.name, service.author = stored.id, stored.name, stored.author
        service.logo_url, service.description = stored.logo_url, stored.description
        service.is_public = stored.is_public
        return service

    def get_by_id(self, service_id: UUID) -> Service:
        row = self._db.fetch_one(
            f"SELECT {_SERVICE_COLUMNS} FROM services WHERE id = $1", service_id
        )
        return _service_from_row(row)

    def update(self, service: Service) -> None:
        self._db.execute(
            """UPDATE services SET name = $1, author = $2, logo_url = $3,
                   description = $4, is_public = $5 WHERE id = $6""",
            service.name,
            service.author,
            service.logo_url,
            service.description,
            service.is_public,
            service.id,
        )

    def delete(self, service_id: UUID) -> None:
        self._db.execute("DELETE FROM services WHERE id = $1", service_id)

    def list(self) -> list[Service]:
        rows = self._db.fetch_all(f"SELECT {_SERVICE_COLUMNS} FROM services")
        return [_service_from_row(row) for row in rows]


class SessionRepository:
    """Login sessions that expire a fixed time after they are stored."""

    def __init__(self, conn: Any, paramstyle: str = "qmark") -> None:
        self._db = _Database(conn, paramstyle)

    def get_user_id(self, session_id: str) -> UUID:
        """Return the user of a live session; LookupError if unknown or expired."""
        row = self._db.fetch_one(
            "SELECT user_id FROM sessions WHERE id = $1 AND expires_at > $2",
            str(session_id),
            datetime.now(),
        )
        return _as_uuid(row[0])

    def store(self, user_id: UUID) -> str:
        """Open a session for the user and return its id."""
        row = self._db.write_returning(
            """INSERT INTO sessions (user_id, expires_at)
               VALUES ($1, $2)
               RETURNING id""",
            user_id,
            datetime.now() + SESSION_LIFETIME,
        )
        return str(row[0])

    def delete(self, session_id: str) -> None:
        self._db.execute("DELETE FROM sessions WHERE id = $1", str(session_id))