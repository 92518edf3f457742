"""Scaffold the next schema step in a directory of migration modules."""

from __future__ import annotations

import argparse
import re
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Optional

DEFAULT_DIRECTORY = "migrations"

_STEP_NAME = re.compile(r"update(\d{4})_update(\d{4})\.py")


def latest_update(names: Iterable[str]) -> int:
    """Return the highest target version among step file names, or 0 if none."""
    latest = 0
    for name in names:
        match = _STEP_NAME.search(name)
        if match:
            latest = max(latest, int(match.group(2)))
    return latest


def _template(from_id: str, to_id: str) -> str:
    return f'''"""Schema step {from_id} to {to_id}."""

from ctf01d.migration import Migration

# Do not change a step once other developers or production have applied it.
# To correct the database, add a new step instead.

MIGRATION = Migration(
    "{from_id}",
    "{to_id}",
    "",
    sql="""
    -- describe the change here
    """,
)
'''


def create_migration(directory: str | Path) -> Path:
    """Write a skeleton for the step after the latest one and return its path."""
    folder = Path(directory)
    names = [entry.name for entry in folder.iterdir()]
    latest = latest_update(names)
    from_id = f"update{latest:04d}"
    to_id = f"update{latest + 1:04d}"
    path = folder / f"{from_id}_{to_id}.py"
    path.write_text(_template(from_id, to_id), encoding="utf-8")
    path.chmod(0o644)
    return path


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Create the next migration step.")
    parser.add_argument("directory", nargs="?", default=DEFAULT_DIRECTORY)
    args = parser.parse_args(argv)
    try:
        path = create_migration(args.directory)
    except OSError as exc:
        print(exc, file=sys.stderr)
        return 1
    print(f"Created new migration file: {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())