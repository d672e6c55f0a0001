"""Typed records for the CFC player / event / crosstable exports."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional


def _blank(v) -> str:
    return "" if v is None else str(v)


@dataclass(frozen=True)
class Player:
    player_id: str
    regular_rating: Optional[int]
    membership_expiry: Optional[date]
    quick_rating: Optional[int] = None
    name: str = ""
    province: str = ""
    postal_code: str = ""


@dataclass(frozen=True)
class Event:
    event_id: str
    end_date: Optional[date]
    name: str
    jurisdiction: str
    player_count: Optional[int]
    organizer_id: str
    arbiter_id: str = ""


@dataclass(frozen=True)
class ResultRow:
    player_id: str
    event_id: str
    rating_type: str
    games_played: int
    performance_rating: Optional[int]
    rating_indicator: Optional[int]
    score: str
    post_event_rating: Optional[int]
    results: str = ""  # per-round symbols: + win, - loss, = draw


@dataclass(frozen=True)
class EventDetails:
    """Event fields rendered for reports. Unknown events carry only the id."""
    event_id: str
    date: str = ""
    name: str = ""
    location: str = ""
    num_players: str = ""
    organizer: str = ""

    @classmethod
    def from_event(cls, event: Event) -> "EventDetails":
        return cls(
            event_id=event.event_id,
            date=event.end_date.isoformat() if event.end_date else "",
            name=event.name,
            location=event.jurisdiction,
            num_players=_blank(event.player_count),
            organizer=event.organizer_id,
        )

    @property
    def found(self) -> bool:
        return any((self.date, self.name, self.location, self.num_players, self.organizer))


@dataclass(frozen=True)
class TournamentDetail:
    event: EventDetails
    performance_rating: int

    def serialize(self) -> str:
        e = self.event
        return ":".join([
            e.event_id, e.date, e.name, e.location, e.num_players, e.organizer,
            str(self.performance_rating),
        ])


HISTORY_COLUMNS = [
    "eventId", "eventDate", "eventName", "eventLocation", "numPlayers",
    "organizer", "score", "ratingPerf", "ratingPost", "ratingType",
]


@dataclass(frozen=True)
class RatingHistoryEntry:
    event: EventDetails
    score: str
    performance_rating: Optional[int]
    post_event_rating: Optional[int]
    rating_type: str

    def as_row(self) -> dict:
        e = self.event
        return {
            "eventId": e.event_id,
            "eventDate": e.date,
            "eventName": e.name,
            "eventLocation": e.location,
            "numPlayers": e.num_players,
            "organizer": e.organizer,
            "score": self.score,
            "ratingPerf": _blank(self.performance_rating),
            "ratingPost": _blank(self.post_event_rating),
            "ratingType": self.rating_type,
        }


@dataclass
class PlayerAggregate:
    player_id: str
    total_regular_games: int = 0
    qualifying_performance_count: int = 0
    best_rating_indicator: int = 0
    qualifying_tournaments: list[TournamentDetail] = field(default_factory=list)
