"""Fixtures: small CFC exports written to tmp_path."""

import csv
from pathlib import Path

import pytest

from cfc_models import Event, ResultRow

PLAYER_HEADER = ["cfc_id", "name_first", "name_last", "regular_rating", "quick_indicator",
                 "cfc_expiry", "addr_province", "addr_postal_code"]
EVENT_HEADER = ["id", "date_end", "name", "province", "n_players", "organizer_id", "arbiter_id"]
CROSSTABLE_HEADER = ["cfc_id", "event_id", "rating_type", "games_played", "rating_perf",
                     "rating_indicator", "score", "rating_post", "results"]


def write_rows(path: Path, header: list, rows: list) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(f, fieldnames=header)
        w.writeheader()
        for r in rows:
            w.writerow({k: r.get(k, "") for k in header})
    return path


def result(pid="1", eid="E1", rating_type="R", games=10, perf=None, ind=None,
           score="", post=None, results=""):
    return ResultRow(
        player_id=pid,
        event_id=eid,
        rating_type=rating_type,
        games_played=games,
        performance_rating=perf,
        rating_indicator=ind,
        score=score,
        post_event_rating=post,
        results=results,
    )


def event(eid="E1", end=None, name="Cup", province="ON", n=10, organizer="O1", arbiter=""):
    return Event(
        event_id=eid,
        end_date=end,
        name=name,
        jurisdiction=province,
        player_count=n,
        organizer_id=organizer,
        arbiter_id=arbiter,
    )


@pytest.fixture
def data_dir(tmp_path):
    d = tmp_path / "data"
    write_rows(d / "player.csv", PLAYER_HEADER, [
        {"cfc_id": "1", "name_first": "Ada", "name_last": "King", "regular_rating": "2000",
         "quick_indicator": "2100", "cfc_expiry": "2030-01-01", "addr_postal_code": "m5v 2t6"},
        {"cfc_id": "2", "name_first": "Bo", "name_last": "Lee", "regular_rating": "2400",
         "cfc_expiry": "2019-05-01", "addr_postal_code": "K1A0B1"},
        {"cfc_id": "3", "regular_rating": "0", "cfc_expiry": ""},
        {"cfc_id": "4", "regular_rating": "n/a", "quick_indicator": "900", "cfc_expiry": "garbage"},
    ])
    write_rows(d / "event.csv", EVENT_HEADER, [
        {"id": "E1", "date_end": "2020-03-01", "name": "Spring Open", "province": "ON",
         "n_players": "40", "organizer_id": "O1", "arbiter_id": "A1"},
        {"id": "E2", "date_end": "2019-06-15", "name": "Summer Open", "province": "QC",
         "n_players": "20", "organizer_id": "O1", "arbiter_id": "0"},
        {"id": "E3", "date_end": "2021-11-20", "name": "Fall Classic", "province": "BC",
         "n_players": "12", "organizer_id": "O2", "arbiter_id": "A1"},
    ])
    write_rows(d / "crosstable.csv", CROSSTABLE_HEADER, [
        {"cfc_id": "1", "event_id": "E1", "rating_type": "R", "games_played": "10",
         "rating_perf": "2350", "rating_indicator": "2250", "score": "7.5", "rating_post": "2050",
         "results": "W2+ B3+ W4="},
        {"cfc_id": "1", "event_id": "E2", "rating_type": "R", "games_played": "10",
         "rating_perf": "2310", "rating_indicator": "2240", "score": "7", "rating_post": "2080",
         "results": "B5- W6+"},
        {"cfc_id": "1", "event_id": "E3", "rating_type": "R", "games_played": "10",
         "rating_perf": "2400", "rating_indicator": "2200", "score": "8", "rating_post": "2120"},
        {"cfc_id": "1", "event_id": "E9", "rating_type": "Q", "games_played": "9",
         "rating_perf": "2500", "rating_indicator": "", "score": "9", "rating_post": "2000"},
        {"cfc_id": "2", "event_id": "E1", "rating_type": "R", "games_played": "20",
         "rating_perf": "2500", "rating_indicator": "2450", "score": "15", "rating_post": "2420"},
        {"cfc_id": "3", "event_id": "E1", "rating_type": "R", "games_played": "40",
         "rating_perf": "2600", "rating_indicator": "2600", "score": "30", "rating_post": "2600"},
        {"cfc_id": "99", "event_id": "E1", "rating_type": "R", "games_played": "40",
         "rating_perf": "2600", "rating_indicator": "2600", "score": "30", "rating_post": "2600"},
    ])
    return d
