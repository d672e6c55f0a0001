import pandas as pd
import pytest

import build_national_masters


def run(data_dir, out_dir, *extra):
    return build_national_masters.main(["--data-dir", str(data_dir), "--out-dir", str(out_dir), *extra])


def read(path):
    return pd.read_csv(path, dtype=str).fillna("")


def test_single_player_run(data_dir, tmp_path):
    out = tmp_path / "out"
    assert run(data_dir, out, "1") == 0

    masters = read(out / "national_masters.csv")
    assert list(masters.columns) == ["cfc_id", "tournaments"]
    assert list(masters["cfc_id"]) == ["1"]
    assert masters.loc[0, "tournaments"].split("; ") == [
        "E1:2020-03-01:Spring Open:ON:40:O1:2350",
        "E2:2019-06-15:Summer Open:QC:20:O1:2310",
        "E3:2021-11-20:Fall Classic:BC:12:O2:2400",
    ]

    hist = read(out / "rating_histories" / "rating_history_1.csv")
    assert list(hist["eventId"]) == ["E1", "E2", "E3", "E9"]
    assert hist.loc[3, "eventName"] == ""


def test_default_player_without_rows_writes_no_history(data_dir, tmp_path, capsys):
    out = tmp_path / "out"
    assert run(data_dir, out) == 0
    assert not (out / "rating_histories" / "rating_history_167084.csv").exists()
    assert "No rating history found for CFC ID 167084" in capsys.readouterr().err


def test_all_masters_run(data_dir, tmp_path):
    out = tmp_path / "out"
    assert run(data_dir, out, "--all-masters", "--chronological", "--with-title-date") == 0

    masters = read(out / "national_masters.csv")
    assert masters.loc[0, "title_achieved"] == "2021-11-20"
    files = sorted(p.name for p in (out / "rating_histories").iterdir())
    assert files == ["rating_history_1.csv"]
    hist = read(out / "rating_histories" / "rating_history_1.csv")
    assert list(hist["eventId"]) == ["E2", "E1", "E3", "E9"]


def test_qualify_all_rating_types(data_dir, tmp_path):
    out = tmp_path / "out"
    assert run(data_dir, out, "--qualify-all-rating-types", "--max-listed", "3") == 0
    masters = read(out / "national_masters.csv")
    assert masters.loc[0, "tournaments"].count("; ") == 2


def test_missing_input_exits_nonzero(data_dir, tmp_path, capsys):
    (data_dir / "event.csv").unlink()
    with pytest.raises(SystemExit) as exc:
        run(data_dir, tmp_path / "out")
    assert exc.value.code == 2
    assert "event.csv" in capsys.readouterr().err
    assert not (tmp_path / "out" / "national_masters.csv").exists()


@pytest.mark.parametrize("encoding", ["utf-8-sig", "cp1252"])
def test_windows_exported_crosstable(data_dir, tmp_path, encoding):
    lines = ["cfc_id,event_id,rating_type,games_played,rating_perf,rating_indicator,score,rating_post"]
    lines += [f"1,{eid},R,10,2350,2250,7\xbd,2050" for eid in ("E1", "E2", "E3")]
    (data_dir / "crosstable.csv").write_bytes(("\n".join(lines) + "\n").encode(encoding))

    out = tmp_path / "out"
    assert run(data_dir, out, "1") == 0
    masters = read(out / "national_masters.csv")
    assert list(masters["cfc_id"]) == ["1"]
    assert masters.loc[0, "tournaments"].count("; ") == 2
    assert len(read(out / "rating_histories" / "rating_history_1.csv")) == 3
