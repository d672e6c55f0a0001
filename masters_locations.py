#!/usr/bin/env python3
"""
masters_locations.py — Join National Masters to postal-code coordinates.

Reads:
  - out/national_masters.csv   (cfc_id, tournaments[, postal_code])
  - data/player.csv            (addr_postal_code; used when the masters file has no postal_code)
  - data/CA-postal.csv         (postal_code, latitude, longitude, place_name)

Writes:
  - out/masters_locations.csv  (postal_code, latitude, longitude, place_name, count)

The coordinates table is an external lookup; nothing is geocoded here.
Codes without coordinates are listed on stderr and left out.
"""

from __future__ import annotations

import argparse
import re
from collections import Counter
from pathlib import Path
from typing import Iterable, Mapping, Optional, Sequence

import pandas as pd

from cfc_common import (
    DATA,
    OUT,
    MissingSourceFile,
    ReportWriteError,
    fail,
    iter_csv_rows,
    load_csv,
    ok,
    warn,
    write_csv,
)
from cfc_models import Player
from loaders import players_from_frame

LOCATION_COLUMNS = ["postal_code", "latitude", "longitude", "place_name", "count"]

_RE_WS = re.compile(r"\s+")


def normalize_postal_code(code: str) -> str:
    return _RE_WS.sub("", code or "").upper()


def count_postal_codes(codes: Iterable[str]) -> Counter:
    counts: Counter = Counter()
    for c in codes:
        c = normalize_postal_code(c)
        if c:
            counts[c] += 1
    return counts


def load_postal_coordinates(path: Path) -> dict[str, dict]:
    coords: dict[str, dict] = {}
    for row in iter_csv_rows(path):
        code = normalize_postal_code(row.get("postal_code") or "")
        lat = (row.get("latitude") or "").strip()
        lon = (row.get("longitude") or "").strip()
        if not (code and lat and lon):
            continue
        try:
            coords[code] = {
                "latitude": float(lat),
                "longitude": float(lon),
                "place_name": row.get("place_name") or "",
            }
        except ValueError:
            continue
    return coords


def master_postal_codes(masters: pd.DataFrame, players: Iterable[Player]) -> list[str]:
    """One postal code per master: the masters table's own column if present, else the player record."""
    if "postal_code" in masters.columns:
        return list(masters["postal_code"].astype(str))
    by_id = {p.player_id: p.postal_code for p in players}
    return [by_id.get(str(pid).strip(), "") for pid in masters.get("cfc_id", [])]


def join_locations(counts: Mapping[str, int], coords: Mapping[str, dict]) -> tuple[pd.DataFrame, list[str]]:
    rows = []
    missing = []
    for code, n in counts.items():
        c = coords.get(code)
        if c is None:
            missing.append(code)
            continue
        rows.append({"postal_code": code, **c, "count": n})
    return pd.DataFrame(rows, columns=LOCATION_COLUMNS), missing


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Count National Masters per postal code with coordinates.")
    ap.add_argument("--data-dir", default=str(DATA), help="Directory holding the CFC exports.")
    ap.add_argument("--masters", default=str(OUT / "national_masters.csv"), help="National masters CSV.")
    ap.add_argument("--players", default=None, help="Players CSV (default: <data-dir>/player.csv).")
    ap.add_argument("--postal-codes", default=None, help="Coordinates CSV (default: <data-dir>/CA-postal.csv).")
    ap.add_argument("--out", default=str(OUT / "masters_locations.csv"), help="Output CSV.")
    args = ap.parse_args(argv)

    data_dir = Path(args.data_dir)
    players_csv = Path(args.players) if args.players else data_dir / "player.csv"
    postal_csv = Path(args.postal_codes) if args.postal_codes else data_dir / "CA-postal.csv"

    try:
        masters = load_csv(Path(args.masters))
        players = [] if "postal_code" in masters.columns else players_from_frame(load_csv(players_csv))
        coords = load_postal_coordinates(postal_csv)
    except MissingSourceFile as e:
        fail(str(e))

    counts = count_postal_codes(master_postal_codes(masters, players))
    print(f"Found {len(counts)} unique postal codes among {len(masters)} national masters")
    print(f"Loaded coordinates for {len(coords)} postal codes")

    locations, missing = join_locations(counts, coords)
    for code in missing:
        warn(f"No coordinates found for postal code: {code}")
    print(f"Mapped {len(locations)} postal codes, missing coordinates for {len(missing)}")

    try:
        ok(f"Wrote {write_csv(locations, Path(args.out))} ({len(locations)} rows)")
    except ReportWriteError as e:
        fail(str(e), code=1)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
