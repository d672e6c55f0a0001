#!/usr/bin/env python3
"""
player_stats.py — Membership and rating summaries from the CFC exports.

Writes:
  - out/active_players.csv        players whose cfc_expiry is after --as-of
  - out/rating_distribution.csv   Rating Range, Count, Percentage
  - out/player_winrate_<id>.csv   only with --win-rate ID (reads the crosstable)

Prints the number of players rated above 2200.
"""

from __future__ import annotations

import argparse
from datetime import date
from pathlib import Path
from typing import Iterable, Optional, Sequence

import pandas as pd

from cfc_common import (
    DATA,
    OUT,
    MissingSourceFile,
    ReportWriteError,
    error,
    fail,
    load_csv,
    ok,
    to_date,
    write_csv,
)
from cfc_models import Player, ResultRow
from loaders import iter_results, players_from_frame

HIGH_RATING = 2200

RATING_BUCKETS = [
    ("0-799", 800),
    ("800-1399", 1400),
    ("1400-1799", 1800),
    ("1800-2199", 2200),
    ("2200+", None),
]


def count_high_rated(players: Iterable[Player], threshold: int = HIGH_RATING) -> int:
    return sum(1 for p in players if p.regular_rating is not None and p.regular_rating > threshold)


def _expires_after(value, as_of: date) -> bool:
    d = to_date(value)
    return d is not None and d > as_of


def active_players(df: pd.DataFrame, as_of: Optional[date] = None) -> pd.DataFrame:
    """Rows of the players table with a membership expiring after as_of. Columns kept as exported."""
    as_of = as_of or date.today()
    if "cfc_expiry" not in df.columns:
        return df.iloc[0:0].copy()
    mask = df["cfc_expiry"].map(lambda v: _expires_after(v, as_of)).astype(bool)
    return df.loc[mask].copy()


def _bucket(rating: int) -> str:
    for label, upper in RATING_BUCKETS:
        if upper is None or rating < upper:
            return label
    return RATING_BUCKETS[-1][0]


def rating_distribution(players: Iterable[Player]) -> pd.DataFrame:
    """Bucket players by the higher of their regular and quick ratings (missing = 0)."""
    counts = {label: 0 for label, _ in RATING_BUCKETS}
    for p in players:
        counts[_bucket(max(p.regular_rating or 0, p.quick_rating or 0))] += 1

    total = sum(counts.values())
    rows = []
    for label, n in counts.items():
        pct = f"{n / total * 100:.2f}" if total else "0.00"
        rows.append({"Rating Range": label, "Count": n, "Percentage": pct})
    return pd.DataFrame(rows, columns=["Rating Range", "Count", "Percentage"])


def parse_round_results(s: str) -> tuple[int, int, int]:
    """(wins, losses, draws) from a crosstable results string such as 'W12+ B7= W3-'."""
    s = s or ""
    return s.count("+"), s.count("-"), s.count("=")


def win_rates(results: Iterable[ResultRow], player_id: str) -> dict[str, int]:
    won = lost = drawn = 0
    for row in results:
        if row.player_id != player_id:
            continue
        w, l, d = parse_round_results(row.results)
        won += w
        lost += l
        drawn += d
    return {
        "games_played": won + lost + drawn,
        "games_won": won,
        "games_lost": lost,
        "games_drawn": drawn,
    }


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Player membership and rating summaries.")
    ap.add_argument("--data-dir", default=str(DATA), help="Directory holding the CFC exports.")
    ap.add_argument("--players", default=None, help="Players CSV (default: <data-dir>/player.csv).")
    ap.add_argument("--crosstable", default=None, help="Crosstable CSV (default: <data-dir>/crosstable.csv).")
    ap.add_argument("--out-dir", default=str(OUT), help="Output directory.")
    ap.add_argument("--as-of", default=None, help="Membership reference date YYYY-MM-DD (default: today).")
    ap.add_argument("--win-rate", default=None, metavar="CFC_ID", help="Also write W/L/D totals for this player.")
    args = ap.parse_args(argv)

    data_dir = Path(args.data_dir)
    players_csv = Path(args.players) if args.players else data_dir / "player.csv"
    crosstable_csv = Path(args.crosstable) if args.crosstable else data_dir / "crosstable.csv"
    out_dir = Path(args.out_dir)

    as_of = None
    if args.as_of:
        as_of = to_date(args.as_of)
        if as_of is None:
            fail(f"invalid --as-of date: {args.as_of!r}")

    try:
        frame = load_csv(players_csv)
    except MissingSourceFile as e:
        fail(str(e))
    players = players_from_frame(frame)

    print(f"Number of people with regular ratings greater than {HIGH_RATING}: {count_high_rated(players)}")

    active = active_players(frame, as_of)
    print(f"Total number of players with an active CFC membership: {len(active)}")

    failed = 0
    reports = [
        (active, out_dir / "active_players.csv"),
        (rating_distribution(players), out_dir / "rating_distribution.csv"),
    ]

    if args.win_rate:
        try:
            stats = win_rates(iter_results(crosstable_csv), args.win_rate)
        except MissingSourceFile as e:
            fail(str(e))
        if stats["games_played"] == 0:
            print(f"No results found for CFC ID {args.win_rate}")
        reports.append((pd.DataFrame([stats]), out_dir / f"player_winrate_{args.win_rate}.csv"))

    for df, path in reports:
        try:
            ok(f"Wrote {write_csv(df, path)} ({len(df)} rows)")
        except ReportWriteError as e:
            error(str(e))
            failed += 1

    if failed:
        error(f"{failed} report(s) could not be written")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
