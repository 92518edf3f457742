"""A single versioned step of the database schema and its test data."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, NamedTuple, Optional

logger = logging.getLogger(__name__)


class MigrationInfo(NamedTuple):
    from_id: str
    to_id: str
    description: str


@dataclass(frozen=True)
class Migration:
    """Moves the database from version ``from_id`` to ``to_id``.

    A migration either runs a fixed SQL text or calls ``apply`` with the
    connection; exactly one of the two must be given.
    """

    from_id: str
    to_id: str
    description: str
    sql: str = ""
    apply: Optional[Callable[[Any], None]] = None

    def __post_init__(self) -> None:
        if not self.from_id or not self.to_id:
            raise ValueError("a migration needs both a source and a target version")
        if bool(self.sql.strip()) == (self.apply is not None):
            raise ValueError("a migration needs either SQL or an apply function, not both")

    @property
    def name(self) -> str:
        return f"{self.from_id}_{self.to_id}"

    def info(self) -> MigrationInfo:
        """Describe the migration without touching any database."""
        return MigrationInfo(self.from_id, self.to_id, self.description)

    def run(self, conn: Any) -> MigrationInfo:
        """Apply the migration on a DB-API connection and commit it.

        On failure the connection is rolled back, the problem is logged and
        the original error is raised.
        """
        try:
            if self.apply is not None:
                self.apply(conn)
            else:
                cursor = conn.cursor()
                try:
                    cursor.execute(self.sql)
                finally:
                    cursor.close()
        except Exception as exc:
            conn.rollback()
            logger.error(
                "Problem with update %s, query: %s\n   error: %s",
                self.name,
                self.sql,
                exc,
            )
            raise
        conn.commit()
        return self.info()