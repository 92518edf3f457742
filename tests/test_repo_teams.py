import sqlite3
import uuid

import pytest

from ctf01d.model import NIL_UUID, Team
from ctf01d.repo_teams import TeamRepository, UniversityRepository

_UUID_DEFAULT = (
    "(lower(hex(randomblob(4))) || '-' || lower(hex(randomblob(2))) || '-' || "
    "lower(hex(randomblob(2))) || '-' || lower(hex(randomblob(2))) || '-' || "
    "lower(hex(randomblob(6))))"
)

_SCHEMA = f"""
CREATE TABLE universities (id TEXT PRIMARY KEY DEFAULT {_UUID_DEFAULT}, name TEXT NOT NULL);
CREATE TABLE teams (
    id TEXT PRIMARY KEY DEFAULT {_UUID_DEFAULT},
    name TEXT UNIQUE NOT NULL,
    description TEXT NOT NULL,
    university_id TEXT,
    social_links TEXT,
    avatar_url TEXT
);
CREATE TABLE users (
    id TEXT PRIMARY KEY DEFAULT {_UUID_DEFAULT},
    display_name TEXT,
    user_name TEXT UNIQUE NOT NULL,
    avatar_url TEXT,
    role TEXT,
    status TEXT,
    password_hash TEXT
);
CREATE TABLE profiles (
    id TEXT DEFAULT {_UUID_DEFAULT},
    user_id TEXT,
    current_team_id TEXT,
    role TEXT NOT NULL DEFAULT 'player',
    created_at TEXT DEFAULT CURRENT_TIMESTAMP,
    updated_at TEXT DEFAULT CURRENT_TIMESTAMP
);
CREATE TABLE team_member_requests (
    id INTEGER PRIMARY KEY,
    team_id TEXT NOT NULL,
    user_id TEXT NOT NULL,
    role TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'pending'
);
"""


@pytest.fixture
def conn():
    connection = sqlite3.connect(":memory:")
    connection.executescript(_SCHEMA)
    yield connection
    connection.close()


def _add_user(conn, name):
    user_id = uuid.uuid4()
    conn.execute(
        "INSERT INTO users (id, display_name, user_name, role, status) VALUES (?, ?, ?, ?, ?)",
        (str(user_id), name.title(), name, "player", "active"),
    )
    conn.commit()
    return user_id


def _add_university(conn, name):
    university_id = uuid.uuid4()
    conn.execute("INSERT INTO universities (id, name) VALUES (?, ?)", (str(university_id), name))
    conn.commit()
    return university_id


def test_create_fills_id_and_get_by_id_round_trips(conn):
    university_id = _add_university(conn, "Tomsk State")
    repo = TeamRepository(conn)
    team = Team(name="HackersX", description="network", university_id=university_id,
                social_links="links", avatar_url=None)
    created = repo.create(team)
    assert created is team
    assert team.id != NIL_UUID
    fetched = repo.get_by_id(team.id)
    assert fetched.id == team.id
    assert fetched.name == "HackersX"
    assert fetched.description == "network"
    assert fetched.social_links == "links"
    assert fetched.avatar_url is None
    assert fetched.university == "Tomsk State"


def test_get_by_id_unknown_raises(conn):
    with pytest.raises(LookupError):
        TeamRepository(conn).get_by_id(uuid.uuid4())


def test_list_includes_university_name(conn):
    university_id = _add_university(conn, "Tomsk State")
    repo = TeamRepository(conn)
    repo.create(Team(name="A", description="a", university_id=university_id))
    repo.create(Team(name="B", description="b", university_id=uuid.uuid4()))
    teams = {team.name: team for team in repo.list()}
    assert set(teams) == {"A", "B"}
    assert teams["A"].university == "Tomsk State"
    assert teams["A"].university_id == university_id
    assert teams["B"].university is None


def test_update_and_delete(conn):
    repo = TeamRepository(conn)
    team = repo.create(Team(name="Old", description="d"))
    team.name = "New"
    team.avatar_url = "avatar.png"
    repo.update(team)
    fetched = repo.get_by_id(team.id)
    assert (fetched.name, fetched.avatar_url) == ("New", "avatar.png")
    repo.delete(team.id)
    with pytest.raises(LookupError):
        repo.get_by_id(team.id)


def test_create_duplicate_name_raises(conn):
    repo = TeamRepository(conn)
    repo.create(Team(name="Same", description="d"))
    with pytest.raises(sqlite3.IntegrityError):
        repo.create(Team(name="Same", description="d"))


def test_request_approve_and_members(conn):
    repo = TeamRepository(conn)
    team = repo.create(Team(name="CodeRed", description="crypto"))
    user_id = _add_user(conn, "neo")
    repo.connect_user_team(team.id, user_id, "captain")
    assert repo.team_members(team.id) == []
    repo.approve_user_team(team.id, user_id)
    members = repo.team_members(team.id)
    assert [member.id for member in members] == [user_id]
    assert members[0].role == "captain"
    assert members[0].username == "neo"


def test_approve_without_request_raises_and_changes_nothing(conn):
    repo = TeamRepository(conn)
    team = repo.create(Team(name="NullByte", description="web"))
    user_id = _add_user(conn, "trinity")
    with pytest.raises(LookupError):
        repo.approve_user_team(team.id, user_id)
    assert repo.team_members(team.id) == []


def test_leave_removes_member(conn):
    repo = TeamRepository(conn)
    team = repo.create(Team(name="Team", description="d"))
    first = _add_user(conn, "morpheus")
    second = _add_user(conn, "cipher")
    for user_id in (first, second):
        repo.connect_user_team(team.id, user_id, "player")
        repo.approve_user_team(team.id, user_id)
    repo.leave_user_from_team(team.id, first)
    assert [member.id for member in repo.team_members(team.id)] == [second]


def test_university_search_is_case_insensitive(conn):
    _add_university(conn, "Moscow State")
    _add_university(conn, "Tomsk Polytechnic")
    found = UniversityRepository(conn).search("mOsCoW")
    assert [university.name for university in found] == ["Moscow State"]


def test_university_list_and_search_are_limited(conn):
    for number in range(12):
        _add_university(conn, f"Institute {number}")
    repo = UniversityRepository(conn)
    assert len(repo.list()) == 10
    assert len(repo.search("institute")) == 10
    assert repo.search("absent") == []