"""
masters_engine.py — National Master qualification over the CFC crosstable.

One synchronous pass over the Results stream:

  1. rows of players outside the eligible (regular-rated) set are dropped
  2. rows of tracked players are captured into their rating history
  3. non-Regular rows stop here unless EngineConfig says otherwise
  4. Regular rows add games_played to total_regular_games
  5. performance >= norm_threshold counts a norm and records the tournament
  6. indicator >= indicator_record_min raises best_rating_indicator

The title predicate is only evaluated after the stream is exhausted:

  total_regular_games >= 25 AND
    ((norms >= 3 AND best_indicator >= 2200) OR best_indicator >= 2300)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional

import pandas as pd

from cfc_models import (
    Event,
    PlayerAggregate,
    RatingHistoryEntry,
    ResultRow,
    TournamentDetail,
)
from event_index import lookup

REGULAR = "R"

NORM_THRESHOLD = 2300
INDICATOR_THRESHOLD = 2300
INDICATOR_FLOOR = 2200
MIN_REGULAR_GAMES = 25
MIN_NORMS = 3

MASTERS_COLUMNS = ["cfc_id", "tournaments"]


@dataclass(frozen=True)
class EngineConfig:
    regular_type: str = REGULAR
    norm_threshold: int = NORM_THRESHOLD
    indicator_threshold: int = INDICATOR_THRESHOLD
    indicator_floor: int = INDICATOR_FLOOR
    # Indicators below this never reach best_rating_indicator.
    indicator_record_min: int = INDICATOR_FLOOR
    min_regular_games: int = MIN_REGULAR_GAMES
    min_norms: int = MIN_NORMS
    # False: norms/indicators count on every row of an eligible player;
    # games are still only summed from Regular rows.
    gate_qualification_on_rating_type: bool = True
    # A tournament shorter than this never yields a norm or an indicator.
    min_games_for_norm: int = 0
    tracked: frozenset = frozenset()
    track_all: bool = False

    def is_tracked(self, player_id: str) -> bool:
        return self.track_all or player_id in self.tracked


@dataclass
class EngineResult:
    aggregates: dict[str, PlayerAggregate] = field(default_factory=dict)
    histories: dict[str, list[RatingHistoryEntry]] = field(default_factory=dict)
    rows_read: int = 0
    rows_skipped: int = 0


def _history_entry(row: ResultRow, events: Mapping[str, Event]) -> RatingHistoryEntry:
    return RatingHistoryEntry(
        event=lookup(events, row.event_id),
        score=row.score,
        performance_rating=row.performance_rating,
        post_event_rating=row.post_event_rating,
        rating_type=row.rating_type,
    )


def _accumulate(agg: PlayerAggregate, row: ResultRow, is_regular: bool,
                events: Mapping[str, Event], config: EngineConfig) -> None:
    if is_regular:
        agg.total_regular_games += row.games_played

    if row.games_played < config.min_games_for_norm:
        return

    perf = row.performance_rating
    if perf is not None and perf >= config.norm_threshold:
        agg.qualifying_performance_count += 1
        agg.qualifying_tournaments.append(
            TournamentDetail(event=lookup(events, row.event_id), performance_rating=perf)
        )

    ind = row.rating_indicator
    if ind is not None and ind >= config.indicator_record_min:
        agg.best_rating_indicator = max(agg.best_rating_indicator, ind)


def process(
    results: Iterable[ResultRow],
    eligible: set[str],
    events: Mapping[str, Event],
    config: Optional[EngineConfig] = None,
) -> EngineResult:
    config = config or EngineConfig()
    out = EngineResult()

    for row in results:
        out.rows_read += 1
        pid = row.player_id
        if pid not in eligible:
            out.rows_skipped += 1
            continue

        if config.is_tracked(pid):
            out.histories.setdefault(pid, []).append(_history_entry(row, events))

        is_regular = row.rating_type == config.regular_type
        if not is_regular and config.gate_qualification_on_rating_type:
            continue

        agg = out.aggregates.get(pid)
        if agg is None:
            agg = out.aggregates[pid] = PlayerAggregate(player_id=pid)
        _accumulate(agg, row, is_regular, events, config)

    return out


def is_national_master(agg: PlayerAggregate, config: Optional[EngineConfig] = None) -> bool:
    config = config or EngineConfig()
    if agg.total_regular_games < config.min_regular_games:
        return False
    norm_route = (
        agg.qualifying_performance_count >= config.min_norms
        and agg.best_rating_indicator >= config.indicator_floor
    )
    return norm_route or agg.best_rating_indicator >= config.indicator_threshold


def national_masters(result: EngineResult, config: Optional[EngineConfig] = None) -> list[str]:
    """Qualifying ids in the order each player was first seen in the crosstable."""
    return [pid for pid, agg in result.aggregates.items() if is_national_master(agg, config)]


def serialize_tournaments(tournaments: Iterable[TournamentDetail], limit: Optional[int] = None) -> str:
    items = list(tournaments)
    if limit is not None:
        items = items[:limit]
    return "; ".join(t.serialize() for t in items)


def title_achieved(agg: PlayerAggregate, config: Optional[EngineConfig] = None) -> str:
    """
    Date the title was earned, from the recorded tournaments.

    Only the first min_norms norms in crosstable order are considered.
    Norm route: latest of their dates, once all of them are dated.
    Indicator route: latest of whichever of them are dated.
    Blank when the dates needed are missing.
    """
    config = config or EngineConfig()
    first = agg.qualifying_tournaments[:config.min_norms]
    dates = sorted(t.event.date for t in first if t.event.date)
    if agg.qualifying_performance_count >= config.min_norms:
        if len(dates) >= config.min_norms:
            return dates[-1]
        return ""
    if agg.best_rating_indicator >= config.indicator_threshold and dates:
        return dates[-1]
    return ""


def national_masters_table(
    result: EngineResult,
    config: Optional[EngineConfig] = None,
    with_title_date: bool = False,
    max_listed: Optional[int] = None,
) -> pd.DataFrame:
    columns = MASTERS_COLUMNS + (["title_achieved"] if with_title_date else [])
    rows = []
    for pid in national_masters(result, config):
        agg = result.aggregates[pid]
        row = {
            "cfc_id": pid,
            "tournaments": serialize_tournaments(agg.qualifying_tournaments, max_listed),
        }
        if with_title_date:
            row["title_achieved"] = title_achieved(agg, config)
        rows.append(row)
    return pd.DataFrame(rows, columns=columns)
