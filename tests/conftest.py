"""Shared test fixtures."""

import pytest

from pipeline.models import Classification, PermitRecord


def rec(year, county, classification, value=None) -> PermitRecord:
    return PermitRecord(
        year=year,
        county=county,
        classification=Classification(classification),
        permit_value=value,
    )


@pytest.fixture
def alameda_records() -> list[PermitRecord]:
    """Two years of Alameda permits: 2020 ADU + NON_ADU, 2021 ADU."""
    return [
        rec(2020, "Alameda", "ADU", 200_000),
        rec(2020, "Alameda", "NON_ADU", 400_000),
        rec(2021, "Alameda", "ADU", 300_000),
    ]


@pytest.fixture(autouse=True)
def _no_data_env(monkeypatch):
    """Keep tests off any real CSV or download URL configured in the shell."""
    monkeypatch.delenv("HOUSING_DATA_URL", raising=False)
    monkeypatch.delenv("HOUSING_DATA_CSV", raising=False)
