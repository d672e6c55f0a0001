"""
loaders.py — Read the three CFC exports into typed records.

Players and Events are small reference tables and are loaded eagerly.
The crosstable (Results) is streamed: iter_results() never holds more
than one row.

No validation beyond type coercion: unparsable numbers become None
(games_played becomes 0), unparsable dates become None, missing optional
columns read as blank.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, Optional

import pandas as pd

from cfc_common import iter_csv_rows, load_csv, to_date, to_int
from cfc_models import Event, Player, ResultRow


def _col(df: pd.DataFrame, name: str) -> pd.Series:
    if name in df.columns:
        return df[name].astype(str)
    return pd.Series([""] * len(df), index=df.index, dtype=str)


def _full_name(first: str, last: str) -> str:
    return f"{(first or '').strip()} {(last or '').strip()}".strip()


def players_from_frame(df: pd.DataFrame) -> list[Player]:
    out = []
    for pid, reg, exp, quick, first, last, prov, postal in zip(
        _col(df, "cfc_id"),
        _col(df, "regular_rating"),
        _col(df, "cfc_expiry"),
        _col(df, "quick_indicator"),
        _col(df, "name_first"),
        _col(df, "name_last"),
        _col(df, "addr_province"),
        _col(df, "addr_postal_code"),
    ):
        pid = pid.strip()
        if not pid:
            continue
        out.append(Player(
            player_id=pid,
            regular_rating=to_int(reg),
            membership_expiry=to_date(exp),
            quick_rating=to_int(quick),
            name=_full_name(first, last),
            province=prov.strip(),
            postal_code=postal.strip(),
        ))
    return out


def load_players(path: Path) -> list[Player]:
    return players_from_frame(load_csv(path))


def events_from_frame(df: pd.DataFrame) -> list[Event]:
    out = []
    for eid, end, name, prov, n, org, arb in zip(
        _col(df, "id"),
        _col(df, "date_end"),
        _col(df, "name"),
        _col(df, "province"),
        _col(df, "n_players"),
        _col(df, "organizer_id"),
        _col(df, "arbiter_id"),
    ):
        eid = eid.strip()
        if not eid:
            continue
        out.append(Event(
            event_id=eid,
            end_date=to_date(end),
            name=name,
            jurisdiction=prov,
            player_count=to_int(n),
            organizer_id=org.strip(),
            arbiter_id=arb.strip(),
        ))
    return out


def load_events(path: Path) -> list[Event]:
    return events_from_frame(load_csv(path))


def _results_key(row: dict) -> Optional[str]:
    for k in row:
        if k and k.strip().lower() == "results":
            return k
    return None


def result_from_row(row: dict, results_key: Optional[str] = None) -> ResultRow:
    def g(k: str) -> str:
        return (row.get(k) or "").strip()

    return ResultRow(
        player_id=g("cfc_id"),
        event_id=g("event_id"),
        rating_type=g("rating_type"),
        games_played=to_int(g("games_played")) or 0,
        performance_rating=to_int(g("rating_perf")),
        rating_indicator=to_int(g("rating_indicator")),
        score=row.get("score") or "",
        post_event_rating=to_int(g("rating_post")),
        results=(row.get(results_key) or "") if results_key else "",
    )


def _parse_rows(rows: Iterator[dict]) -> Iterator[ResultRow]:
    results_key = None
    first = True
    for row in rows:
        if first:
            results_key = _results_key(row)
            first = False
        yield result_from_row(row, results_key)


def iter_results(path: Path) -> Iterator[ResultRow]:
    return _parse_rows(iter_csv_rows(path))
