"""Domain records and their conversion to API response payloads."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

NIL_UUID = UUID(int=0)
ZERO_TIME = datetime.min

DefaultImage = Callable[[str], str]
Response = dict[str, Any]


@dataclass
class Game:
    id: UUID = NIL_UUID
    start_time: datetime = ZERO_TIME
    end_time: datetime = ZERO_TIME
    description: str = ""

    def to_response(self) -> Response:
        return {
            "id": self.id,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "description": self.description,
        }


@dataclass
class Team:
    id: UUID = NIL_UUID
    name: str = ""
    description: str = ""
    university_id: UUID = NIL_UUID
    social_links: Optional[str] = None
    avatar_url: Optional[str] = None
    university: Optional[str] = None

    def to_response(self, default_avatar: DefaultImage) -> Response:
        avatar = self.avatar_url if self.avatar_url is not None else default_avatar(self.name)
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "university": self.university,
            "social_links": self.social_links or "",
            "avatar_url": avatar,
        }


@dataclass
class GameDetails(Game):
    teams: list[Team] = field(default_factory=list)

    def to_response_game_details(self) -> Response:
        response = self.to_response()
        response["teams"] = [
            {"id": team.id, "name": team.name, "description": team.description}
            for team in self.teams
        ]
        return response


@dataclass
class Profile:
    id: UUID = NIL_UUID
    current_team: str = ""
    created_at: datetime = ZERO_TIME
    updated_at: datetime = ZERO_TIME
    role: str = ""


@dataclass
class ProfileTeams:
    joined_at: datetime = ZERO_TIME
    left_at: Optional[datetime] = None
    role: str = ""
    name: str = ""


@dataclass
class ProfileWithHistory:
    profile: Profile = field(default_factory=Profile)
    history: list[ProfileTeams] = field(default_factory=list)

    def to_response(self) -> Response:
        return {
            "id": self.profile.id,
            "created_at": self.profile.created_at,
            "updated_at": self.profile.updated_at,
            "team_name": self.profile.current_team,
            "team_role": self.profile.role,
            "team_history": [
                {"join": entry.joined_at, "left": entry.left_at, "name": entry.name, "role": entry.role}
                for entry in self.history
            ],
        }


@dataclass
class Result:
    id: UUID = NIL_UUID
    team_id: UUID = NIL_UUID
    game_id: UUID = NIL_UUID
    score: float = 0.0

    def to_response(self, rank: int) -> Response:
        return {
            "id": self.id,
            "game_id": self.game_id,
            "rank": rank,
            "score": self.score,
            "team_id": self.team_id,
        }


@dataclass
class Service:
    id: UUID = NIL_UUID
    name: str = ""
    author: str = ""
    logo_url: Optional[str] = None
    description: str = ""
    is_public: bool = False

    def to_response(self, default_logo: DefaultImage) -> Response:
        logo = self.logo_url if self.logo_url is not None else default_logo(self.name)
        return {
            "id": self.id,
            "name": self.name,
            "author": self.author,
            "logo_url": logo,
            "description": self.description,
            "is_public": self.is_public,
        }


@dataclass
class University:
    id: UUID = NIL_UUID
    name: str = ""

    def to_response(self) -> Response:
        return {"id": self.id, "name": self.name}


@dataclass
class User:
    id: UUID = NIL_UUID
    display_name: Optional[str] = None
    username: str = ""
    role: str = ""
    avatar_url: Optional[str] = None
    status: str = ""
    password_hash: str = ""

    def to_response(self, default_avatar: DefaultImage) -> Response:
        avatar = self.avatar_url if self.avatar_url is not None else default_avatar(self.username)
        return {
            "id": self.id,
            "user_name": self.username,
            "display_name": self.display_name or "",
            "role": self.role,
            "avatar_url": avatar,
            "status": self.status,
        }


def games_to_response(games: Iterable[Game]) -> list[Response]:
    return [game.to_response() for game in games]


def scoreboard_from_results(results: Iterable[Result]) -> list[Response]:
    """Rank results in the given order, starting from 1."""
    return [result.to_response(rank) for rank, result in enumerate(results, start=1)]


def services_to_response(services: Iterable[Service], default_logo: DefaultImage) -> list[Response]:
    return [service.to_response(default_logo) for service in services]


def teams_to_response(teams: Iterable[Team], default_avatar: DefaultImage) -> list[Response]:
    return [team.to_response(default_avatar) for team in teams]


def universities_to_response(universities: Iterable[University]) -> list[Response]:
    return [university.to_response() for university in universities]


def users_to_response(users: Iterable[User], default_avatar: DefaultImage) -> list[Response]:
    return [user.to_response(default_avatar) for user in users]