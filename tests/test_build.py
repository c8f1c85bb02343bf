"""Tests for the pipeline orchestrator."""

import json

from pipeline import build
from pipeline.transform import FALLBACK_NOTICE, LoadResult


def test_run_exports_bundle(tmp_path, monkeypatch, alameda_records, capsys):
    monkeypatch.setattr(build, "ingest", lambda **kwargs: None)
    monkeypatch.setattr(build, "load_records", lambda path: LoadResult(records=alameda_records))
    out = tmp_path / "export" / "bundle.json"

    bundle = build.run(json_path=out)

    assert len(bundle.units_by_year) == 2
    data = json.loads(out.read_text())
    assert data["averageAduJobValueByYear"] == [
        {"year": "2020", "avgAduValue": 200, "count": 1},
        {"year": "2021", "avgAduValue": 300, "count": 1},
    ]
    stdout = capsys.readouterr().out
    assert "Top county by ADUs: Alameda" in stdout
    assert "Pipeline complete" in stdout


def test_run_reports_sample_fallback(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(build, "ingest", lambda **kwargs: None)
    monkeypatch.setenv("HOUSING_DATA_CSV", str(tmp_path / "missing.csv"))

    bundle = build.run()

    assert bundle.units_by_year
    assert FALLBACK_NOTICE in capsys.readouterr().out


def test_main_parses_args(monkeypatch):
    seen = {}
    monkeypatch.setattr(build, "run", lambda **kwargs: seen.update(kwargs))
    build.main(["--force", "--json", "out.json"])
    assert seen["force"] is True
    assert str(seen["json_path"]) == "out.json"
