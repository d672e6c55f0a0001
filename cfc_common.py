from __future__ import annotations

import csv
import re
import sys
from pathlib import Path
from typing import Iterator, Optional

import pandas as pd

ROOT = Path(".")
DATA = ROOT / "data"
OUT = ROOT / "out"
HISTORIES = OUT / "rating_histories"

PLAYERS = DATA / "player.csv"
EVENTS = DATA / "event.csv"
CROSSTABLE = DATA / "crosstable.csv"
PERSONS = DATA / "person.csv"
POSTAL_CODES = DATA / "CA-postal.csv"

NATIONAL_MASTERS = OUT / "national_masters.csv"
ACTIVE_PLAYERS = OUT / "active_players.csv"
RATING_DISTRIBUTION = OUT / "rating_distribution.csv"
TOP_ORGANIZERS = OUT / "top_organizers.csv"
TOP_ARBITERS = OUT / "top_arbiters.csv"
MASTERS_LOCATIONS = OUT / "masters_locations.csv"

DEFAULT_PLAYER_ID = "167084"

# Leading integer, as the federation exports mix "2350", "2350.0" and " 2350 "
_RE_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class MissingSourceFile(FileNotFoundError):
    """A required input table is absent."""

    def __init__(self, path: Path):
        self.path = Path(path)
        super().__init__(f"Missing required file: {self.path}")


class ReportWriteError(OSError):
    """A single report could not be written."""

    def __init__(self, path: Path, cause: OSError):
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"Failed to write {self.path}: {cause}")


def require(path: Path) -> Path:
    path = Path(path)
    if not path.exists():
        raise MissingSourceFile(path)
    return path


def load_csv(path: Path, dtype=str) -> pd.DataFrame:
    require(path)
    try:
        return pd.read_csv(path, dtype=dtype, encoding="utf-8-sig").fillna("")
    except UnicodeDecodeError:
        return pd.read_csv(path, dtype=dtype, encoding="cp1252").fillna("")


def _stream_rows(path: Path) -> Iterator[dict]:
    # Exports come from Windows tools too: drop a BOM, never stop on a stray byte
    with path.open("r", encoding="utf-8-sig", errors="replace", newline="") as f:
        for row in csv.DictReader(f):
            yield row


def iter_csv_rows(path: Path) -> Iterator[dict]:
    """Stream a CSV one row at a time. Existence is checked before the first pull."""
    return _stream_rows(require(path))


def write_csv(df: pd.DataFrame, path: Path) -> Path:
    p = Path(path)
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(p, index=False)
    except OSError as e:
        raise ReportWriteError(p, e) from e
    return p


def to_int(value) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    m = _RE_LEADING_INT.match(str(value))
    if not m:
        return None
    return int(m.group(1))


def to_date(value):
    """Parse a date cell; anything unparsable is None."""
    s = ("" if value is None else str(value)).strip()
    if not s:
        return None
    ts = pd.to_datetime(s, errors="coerce")
    if pd.isna(ts):
        return None
    return ts.date()


def fail(msg: str, code: int = 2) -> None:
    print(f"ERROR: {msg}", file=sys.stderr)
    raise SystemExit(code)


def error(msg: str) -> None:
    print(f"ERROR: {msg}", file=sys.stderr)


def warn(msg: str) -> None:
    print(f"WARN: {msg}", file=sys.stderr)


def ok(msg: str = "OK") -> None:
    print(msg)
