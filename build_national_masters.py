#!/usr/bin/env python3
"""
build_national_masters.py — National Master list + rating histories.

Reads:
  - data/player.csv      (cfc_id, regular_rating, cfc_expiry, ...)
  - data/event.csv       (id, date_end, name, province, n_players, organizer_id)
  - data/crosstable.csv  (cfc_id, event_id, rating_type, games_played,
                          rating_perf, rating_indicator, score, rating_post)

Writes:
  - out/national_masters.csv                      (cfc_id, tournaments)
  - out/rating_histories/rating_history_<id>.csv  (one per tracked player)

Players and events are loaded completely before the crosstable is
streamed; the crosstable is read exactly once.

Usage:
  python build_national_masters.py                 # history for 167084
  python build_national_masters.py 123456          # history for 123456
  python build_national_masters.py --all-masters   # history for every master
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional, Sequence

from cfc_common import (
    DATA,
    DEFAULT_PLAYER_ID,
    OUT,
    MissingSourceFile,
    ReportWriteError,
    error,
    fail,
    require,
    write_csv,
)
from eligible_players import build_eligible_set
from event_index import build_event_index
from loaders import iter_results, load_events, load_players
from masters_engine import EngineConfig, INDICATOR_THRESHOLD, national_masters_table, process
from rating_history import master_histories, select_histories, write_histories


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Derive National Masters and rating histories from CFC exports.")
    ap.add_argument("player_id", nargs="?", default=DEFAULT_PLAYER_ID,
                    help=f"CFC id whose rating history is written (default: {DEFAULT_PLAYER_ID}).")
    ap.add_argument("--all-masters", action="store_true",
                    help="Write a rating history for every National Master instead of one player.")
    ap.add_argument("--data-dir", default=str(DATA), help="Directory holding the CFC exports.")
    ap.add_argument("--players", default=None, help="Players CSV (default: <data-dir>/player.csv).")
    ap.add_argument("--events", default=None, help="Events CSV (default: <data-dir>/event.csv).")
    ap.add_argument("--crosstable", default=None, help="Crosstable CSV (default: <data-dir>/crosstable.csv).")
    ap.add_argument("--out-dir", default=str(OUT), help="Output directory.")
    ap.add_argument("--qualify-all-rating-types", action="store_true",
                    help="Count norms and indicators from every rating type (games still Regular only).")
    ap.add_argument("--min-norm-games", type=int, default=0,
                    help="Ignore norms/indicators from tournaments with fewer games (default: 0).")
    ap.add_argument("--strict-indicator", action="store_true",
                    help=f"Only record rating indicators >= {INDICATOR_THRESHOLD}.")
    ap.add_argument("--with-title-date", action="store_true",
                    help="Add a title_achieved column to national_masters.csv.")
    ap.add_argument("--max-listed", type=int, default=None,
                    help="List at most N tournaments per master.")
    ap.add_argument("--chronological", action="store_true",
                    help="Sort rating histories by event date instead of crosstable order.")
    return ap


def config_from_args(args: argparse.Namespace) -> EngineConfig:
    kwargs = dict(
        gate_qualification_on_rating_type=not args.qualify_all_rating_types,
        min_games_for_norm=args.min_norm_games,
    )
    if args.strict_indicator:
        kwargs["indicator_record_min"] = INDICATOR_THRESHOLD
    if args.all_masters:
        return EngineConfig(track_all=True, **kwargs)
    return EngineConfig(tracked=frozenset({args.player_id}), **kwargs)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    data_dir = Path(args.data_dir)
    players_csv = Path(args.players) if args.players else data_dir / "player.csv"
    events_csv = Path(args.events) if args.events else data_dir / "event.csv"
    crosstable_csv = Path(args.crosstable) if args.crosstable else data_dir / "crosstable.csv"
    out_dir = Path(args.out_dir)

    config = config_from_args(args)

    try:
        for p in (players_csv, events_csv, crosstable_csv):
            require(p)
        events = build_event_index(load_events(events_csv))
        print(f"Loaded {len(events)} events")
        eligible = build_eligible_set(load_players(players_csv))
        print(f"Loaded {len(eligible)} regular-rated players")
        result = process(iter_results(crosstable_csv), eligible, events, config)
    except MissingSourceFile as e:
        fail(str(e))

    print(f"Processed {result.rows_read} crosstable rows ({result.rows_skipped} skipped, not regular-rated)")

    failed = 0
    masters = national_masters_table(result, config, with_title_date=args.with_title_date, max_listed=args.max_listed)
    try:
        p = write_csv(masters, out_dir / "national_masters.csv")
        print(f"National masters saved to {p} ({len(masters)} rows)")
    except ReportWriteError as e:
        error(str(e))
        failed += 1

    if args.all_masters:
        histories = master_histories(result, config)
        print(f"Saving rating histories for {len(histories)} players...")
    else:
        histories = select_histories(result, [args.player_id])

    _, failures = write_histories(histories, out_dir / "rating_histories", chronological=args.chronological)
    failed += len(failures)

    if failed:
        error(f"{failed} report(s) could not be written")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
