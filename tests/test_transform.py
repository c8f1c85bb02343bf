"""Tests for CSV loading, quarantine, and the sample-data fallback."""

import logging

import pytest

from pipeline.aggregate import counts_by_year
from pipeline.models import Classification
from pipeline.sample import COUNTIES, YEARS, sample_records
from pipeline.transform import FALLBACK_NOTICE, load_records, read_permits

CSV = """\
YEAR,COUNTY,STATE,Classification,JOB_VALUE
2020,Alameda,CA,ADU,200000
2020,Alameda,CA,NON_ADU,400000
2021,Alameda,CA,ADU,
2021,Orange,CA,GARAGE,100
,Orange,CA,ADU,5000
"""


@pytest.fixture
def csv_path(tmp_path):
    path = tmp_path / "housing_data.csv"
    path.write_text(CSV)
    return path


# ---------------------------------------------------------------------------
# read_permits
# ---------------------------------------------------------------------------

class TestReadPermits:
    def test_valid_rows_loaded(self, csv_path):
        records, _ = read_permits(csv_path)
        assert [(r.year, r.county, r.classification) for r in records] == [
            (2020, "Alameda", Classification.ADU),
            (2020, "Alameda", Classification.NON_ADU),
            (2021, "Alameda", Classification.ADU),
        ]

    def test_blank_value_is_none(self, csv_path):
        records, _ = read_permits(csv_path)
        assert records[0].permit_value == 200_000
        assert records[2].permit_value is None

    def test_bad_rows_quarantined(self, csv_path):
        _, rejected = read_permits(csv_path)
        assert rejected == 2

    def test_quarantine_logged(self, csv_path, caplog):
        with caplog.at_level(logging.WARNING, logger="pipeline.transform"):
            read_permits(csv_path)
        assert "Quarantined 2 of 5 rows" in caplog.text

    def test_non_numeric_year(self, tmp_path):
        path = tmp_path / "bad_year.csv"
        path.write_text(
            "YEAR,COUNTY,Classification,JOB_VALUE\n"
            "2020,Kern,ADU,100\n"
            "unknown,Kern,ADU,100\n"
        )
        records, rejected = read_permits(path)
        assert [r.year for r in records] == [2020]
        assert rejected == 1

    def test_bad_cells_after_long_good_run(self, tmp_path):
        path = tmp_path / "long.csv"
        path.write_text(
            "YEAR,COUNTY,Classification,JOB_VALUE\n"
            + "2020,Kern,NON_ADU,1000\n" * 30_000
            + "2021,Kern,ADU,N/A\n"
            + "unknown,Kern,ADU,100\n"
        )
        records, rejected = read_permits(path)
        assert len(records) == 30_001
        assert rejected == 1
        last = records[-1]
        assert (last.year, last.classification, last.permit_value) == (2021, Classification.ADU, None)
        assert counts_by_year(records)[-1].model_dump() == {
            "year": "2021",
            "adu": 1,
            "non_adu": 0,
            "potential_adu_conversion": 0,
        }

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_permits(tmp_path / "nope.csv")


# ---------------------------------------------------------------------------
# load_records
# ---------------------------------------------------------------------------

class TestLoadRecords:
    def test_csv_source(self, csv_path):
        result = load_records(csv_path)
        assert result.source == "csv"
        assert len(result.records) == 3
        assert result.rejected == 2
        assert result.notice is None

    def test_env_override(self, csv_path, monkeypatch):
        monkeypatch.setenv("HOUSING_DATA_CSV", str(csv_path))
        assert load_records().source == "csv"

    def test_missing_file_falls_back_to_sample(self, tmp_path):
        result = load_records(tmp_path / "missing.csv")
        assert result.source == "sample"
        assert result.notice == FALLBACK_NOTICE
        assert len(result.records) == 300

    def test_missing_columns_falls_back_to_sample(self, tmp_path):
        path = tmp_path / "wrong.csv"
        path.write_text("a,b\n1,2\n")
        result = load_records(path)
        assert result.source == "sample"
        assert result.notice == FALLBACK_NOTICE


# ---------------------------------------------------------------------------
# sample_records
# ---------------------------------------------------------------------------

class TestSampleRecords:
    def test_shape(self):
        records = sample_records(n=50, seed=1)
        assert len(records) == 50
        assert all(r.year in YEARS for r in records)
        assert all(r.county in COUNTIES for r in records)
        assert all(100_000 <= r.permit_value < 400_000 for r in records)

    def test_seeded_is_deterministic(self):
        assert sample_records(n=20, seed=5) == sample_records(n=20, seed=5)
