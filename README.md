# ctf01d

The core of a service that tracks capture-the-flag games: the teams taking
part, the services they attack and defend, the results of each game, and the
users and their team history.

The package has no runtime dependencies beyond the Python standard library.

## What is inside

- `ctf01d.avatar`: deterministic identicon-style avatars.
  `generate_avatar(username, x_max, y_max, block_size, steps)` returns PNG
  bytes: a horizontally mirrored block pattern coloured from a gradient
  derived from the name's MD5 hash. Blocks that are not painted stay
  transparent. A non-positive size, block size or step count raises
  `ValueError`. `generate_gradient`, `render` and `generate_hash` are the
  building blocks it uses.
- `ctf01d.model`: the records the service works with (`Game`, `GameDetails`,
  `Profile`, `ProfileTeams`, `ProfileWithHistory`, `Result`, `Service`,
  `Team`, `University`, `User`), as dataclasses. Their `to_response` methods
  return plain dictionaries for an API response. `Team`, `Service` and `User`
  take a callable that maps a name to a default picture URL, used when the
  record has none. `scoreboard_from_results` ranks results in the order
  given, starting at 1; `games_to_response`, `teams_to_response`,
  `services_to_response`, `universities_to_response` and `users_to_response`
  convert whole lists.
- `ctf01d.view`: `session_from_user` builds the session response (id, name,
  role) for a signed-in user.
- Repositories over a DB-API connection: `GameRepository` and
  `ResultRepository` (`ctf01d.repo_games`), `ServiceRepository` and
  `SessionRepository` (`ctf01d.repo_services`), `TeamRepository` and
  `UniversityRepository` (`ctf01d.repo_teams`), and `UserRepository`
  (`ctf01d.repo_users`). Each is built as `Repository(conn, paramstyle="qmark")`;
  the parameter style may be any DB-API style (`qmark`, `numeric`, `named`,
  `format`, `pyformat`). Single-row lookups raise `LookupError` when nothing
  matches. Writes are committed at once; `TeamRepository.approve_user_team`
  and `UserRepository.delete` run in one transaction and roll back on error.
  Sessions expire 96 hours after they are stored; university lists and
  searches return at most ten entries.
- `ctf01d.migration`: a `Migration` is one step of the schema, from
  `from_id` to `to_id`. `info()` returns a `MigrationInfo` (from, to,
  description) without touching the database; `run(conn)` applies the step,
  commits, and on failure rolls back, logs and re-raises the error.
- `ctf01d.migrations_early.migrations()` returns the steps from `update0005`
  to `update0013`, and `ctf01d.migrations_late.migrations()` those from
  `update0019` to `update0022`, each in the order they apply. Their SQL is
  written for PostgreSQL.

## Example

```python
from ctf01d.avatar import generate_avatar

png = generate_avatar("neo", 64, 64, 8, 5)
with open("neo.png", "wb") as fh:
    fh.write(png)
```

The same name always gives the same picture.

```python
import sqlite3
from ctf01d.repo_games import GameRepository

conn = sqlite3.connect("games.db")
games = GameRepository(conn)          # qmark placeholders, as sqlite3 uses
for game in games.list():
    print(game.to_response())
```

## Adding a migration

```
ctf01d-create-migration [directory]
```

It looks through the directory (`migrations` by default), finds the highest
target number among files named `updateNNNN_updateMMMM.py`, and writes a new
file for the next step holding a `MIGRATION` with empty SQL to fill in. The
same is available from Python as
`ctf01d.create_migration.create_migration(directory)`, which returns the path
written; `latest_update(names)` reports the highest target number among file
names, or 0.

## What the package does not do

- It has no web server or HTTP API; the response dictionaries are meant for
  one built elsewhere.
- It does not include the schema steps from `update0013` to `update0019`, so
  the two migration lists do not reach the final schema on their own.
- It has no migration runner: nothing records which steps a database has
  already had, and files written by `ctf01d-create-migration` are not picked
  up by `migrations()`.

## Running the tests

```
pip install -e ".[test]"
pytest
```