"""
rating_history.py — Per-player tournament / rating trajectories.

Histories are captured by masters_engine.process() for tracked players.
Two modes:

  single player   EngineConfig(tracked={id})
  all masters     EngineConfig(track_all=True), then select_histories()
                  down to the qualifying ids (one pass, no second read
                  of the crosstable)

Rows are kept in crosstable order; sort_by_event_date() gives the
chronological view. One CSV per player: rating_history_<id>.csv.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Mapping, Optional

import pandas as pd

from cfc_common import ReportWriteError, error, warn, write_csv
from cfc_models import HISTORY_COLUMNS, RatingHistoryEntry
from masters_engine import EngineConfig, EngineResult, national_masters


def single_player_config(player_id: str, **kwargs) -> EngineConfig:
    return EngineConfig(tracked=frozenset({player_id}), **kwargs)


def all_masters_config(**kwargs) -> EngineConfig:
    return EngineConfig(track_all=True, **kwargs)


def sort_by_event_date(entries: Iterable[RatingHistoryEntry]) -> list[RatingHistoryEntry]:
    # ISO dates sort chronologically as text; undated rows go last, in original order
    return sorted(entries, key=lambda e: (e.event.date == "", e.event.date))


def select_histories(result: EngineResult, player_ids: Iterable[str]) -> dict[str, list[RatingHistoryEntry]]:
    return {pid: list(result.histories.get(pid, [])) for pid in player_ids}


def master_histories(result: EngineResult, config: Optional[EngineConfig] = None) -> dict[str, list[RatingHistoryEntry]]:
    return select_histories(result, national_masters(result, config))


def history_frame(entries: Iterable[RatingHistoryEntry]) -> pd.DataFrame:
    return pd.DataFrame([e.as_row() for e in entries], columns=HISTORY_COLUMNS)


def history_path(out_dir: Path, player_id: str) -> Path:
    return Path(out_dir) / f"rating_history_{player_id}.csv"


def write_histories(
    histories: Mapping[str, list[RatingHistoryEntry]],
    out_dir: Path,
    chronological: bool = False,
    skip_empty: bool = True,
) -> tuple[dict[str, Path], dict[str, ReportWriteError]]:
    """
    Write one report per player. A failed write is recorded and the
    remaining reports are still attempted.
    """
    written: dict[str, Path] = {}
    failures: dict[str, ReportWriteError] = {}

    for pid, entries in histories.items():
        if not entries and skip_empty:
            warn(f"No rating history found for CFC ID {pid}")
            continue
        if chronological:
            entries = sort_by_event_date(entries)
        try:
            p = write_csv(history_frame(entries), history_path(out_dir, pid))
        except ReportWriteError as e:
            error(str(e))
            failures[pid] = e
            continue
        written[pid] = p
        print(f"Rating history for CFC ID {pid} saved to {p} ({len(entries)} rows)")

    return written, failures
