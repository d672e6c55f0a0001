#!/usr/bin/env python3
"""
organizer_stats.py — Organizer and arbiter leaderboards from event.csv.

Writes:
  - out/top_organizers.csv
  - out/top_arbiters.csv

Columns: id, name, num_tournaments, total_players, avg_players_per_tournament.
Ranking: most tournaments first, then most players. An id of "0" or blank
means no one was recorded for the role. Names come from person.csv (id,name)
when it exists, otherwise "Person ID <id>".
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional, Sequence

import pandas as pd

from cfc_common import DATA, OUT, MissingSourceFile, ReportWriteError, error, fail, load_csv, ok, warn, write_csv

LEADERBOARD_COLUMNS = ["id", "name", "num_tournaments", "total_players", "avg_players_per_tournament"]


def load_person_names(path: Path) -> dict[str, str]:
    """id -> name from person.csv. Missing file means no names."""
    try:
        df = load_csv(path)
    except MissingSourceFile:
        return {}
    if df.empty or len(df.columns) < 2:
        return {}
    ids = df.iloc[:, 0].astype(str).str.strip()
    names = df.iloc[:, 1].astype(str).str.strip()
    return {i: n for i, n in zip(ids, names) if i}


def _player_counts(events: pd.DataFrame) -> pd.Series:
    if "n_players" not in events.columns:
        return pd.Series(0, index=events.index, dtype=int)
    return pd.to_numeric(events["n_players"], errors="coerce").fillna(0).astype(int)


def role_leaderboard(events: pd.DataFrame, role_column: str, names: Optional[dict[str, str]] = None) -> pd.DataFrame:
    if role_column not in events.columns or events.empty:
        return pd.DataFrame(columns=LEADERBOARD_COLUMNS)

    df = pd.DataFrame({
        "id": events[role_column].astype(str).str.strip(),
        "n_players": _player_counts(events),
    })
    df = df[df["id"].ne("") & df["id"].ne("0")]
    if df.empty:
        return pd.DataFrame(columns=LEADERBOARD_COLUMNS)

    g = (
        df.groupby("id", sort=False)
        .agg(num_tournaments=("n_players", "size"), total_players=("n_players", "sum"))
        .reset_index()
    )
    g = g.sort_values(["num_tournaments", "total_players"], ascending=[False, False], kind="mergesort")

    names = names or {}
    g["name"] = g["id"].map(lambda i: names.get(i) or f"Person ID {i}")
    g["avg_players_per_tournament"] = (g["total_players"] / g["num_tournaments"]).map(lambda v: f"{v:.2f}")
    return g[LEADERBOARD_COLUMNS].reset_index(drop=True)


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Organizer and arbiter leaderboards.")
    ap.add_argument("--data-dir", default=str(DATA), help="Directory holding the CFC exports.")
    ap.add_argument("--events", default=None, help="Events CSV (default: <data-dir>/event.csv).")
    ap.add_argument("--persons", default=None, help="Person names CSV (default: <data-dir>/person.csv).")
    ap.add_argument("--out-dir", default=str(OUT), help="Output directory.")
    ap.add_argument("--top", type=int, default=10, help="Rows printed per leaderboard.")
    args = ap.parse_args(argv)

    data_dir = Path(args.data_dir)
    events_csv = Path(args.events) if args.events else data_dir / "event.csv"
    persons_csv = Path(args.persons) if args.persons else data_dir / "person.csv"
    out_dir = Path(args.out_dir)

    try:
        events = load_csv(events_csv)
    except MissingSourceFile as e:
        fail(str(e))

    names = load_person_names(persons_csv)
    if not names:
        warn(f"{persons_csv} missing or empty; using placeholder names")

    failed = 0
    for role, title, fname in (
        ("organizer_id", "Organizers", "top_organizers.csv"),
        ("arbiter_id", "Arbiters", "top_arbiters.csv"),
    ):
        board = role_leaderboard(events, role, names)
        print(f"\nTop {args.top} {title} by Number of Tournaments:")
        print(board.head(args.top).to_string(index=False))
        try:
            ok(f"Wrote {write_csv(board, out_dir / fname)} ({len(board)} rows)")
        except ReportWriteError as e:
            error(str(e))
            failed += 1

    if failed:
        error(f"{failed} report(s) could not be written")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
