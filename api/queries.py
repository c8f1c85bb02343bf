"""Shared query layer.

Used by the Streamlit dashboard, FastAPI app, and MCP server.
Each call reloads the CSV and recomputes the views from scratch, then returns
plain dicts keyed by the dashboard field names.
"""

from __future__ import annotations

from pipeline import aggregate as agg
from pipeline.models import PermitRecord
from pipeline.transform import LoadResult, load_records


def _filter(
    records: list[PermitRecord],
    yr_min: int | None = None,
    yr_max: int | None = None,
    county: str | None = None,
) -> list[PermitRecord]:
    """Apply optional filter params. County matches exactly."""
    out = records
    if yr_min is not None:
        out = [r for r in out if r.year >= int(yr_min)]
    if yr_max is not None:
        out = [r for r in out if r.year <= int(yr_max)]
    if county:
        out = [r for r in out if r.county == county]
    return out


def _records(yr_min: int | None = None, yr_max: int | None = None, county: str | None = None) -> list[PermitRecord]:
    return _filter(load_records().records, yr_min, yr_max, county)


def _dump(rows) -> list[dict]:
    return [r.model_dump(by_alias=True) for r in rows]


# ── Dataset ──


def get_dataset_info() -> dict:
    """Where the records came from, how many loaded, how many were quarantined."""
    result: LoadResult = load_records()
    return {
        "source": result.source,
        "record_count": len(result.records),
        "rejected_count": result.rejected,
        "notice": result.notice,
    }


def get_filter_options() -> dict:
    """Return available filter values: years and counties."""
    records = load_records().records
    return {
        "years": sorted({r.year for r in records}),
        "counties": sorted({r.county for r in records}),
    }


# ── Bundle + headline ──


def get_bundle(yr_min: int | None = None, yr_max: int | None = None, county: str | None = None) -> dict:
    """All seven views in one payload."""
    return agg.aggregate(_records(yr_min, yr_max, county)).model_dump(by_alias=True)


def get_overview(yr_min: int | None = None, yr_max: int | None = None, county: str | None = None) -> dict:
    """Latest ADU share, latest average ADU value, their trends, and the top county."""
    bundle = agg.aggregate(_records(yr_min, yr_max, county))
    return agg.headline_metrics(bundle).model_dump(by_alias=True)


# ── Views ──


def get_units_by_year(
    yr_min: int | None = None,
    yr_max: int | None = None,
    county: str | None = None,
) -> list[dict]:
    """Permit counts per classification per year."""
    return _dump(agg.counts_by_year(_records(yr_min, yr_max, county)))


def get_adu_percentage_by_year(
    yr_min: int | None = None,
    yr_max: int | None = None,
    county: str | None = None,
) -> list[dict]:
    """ADU share of permits per year."""
    counts = agg.counts_by_year(_records(yr_min, yr_max, county))
    return _dump(agg.percentage_by_year(counts))


def get_units_by_jurisdiction(
    yr_min: int | None = None,
    yr_max: int | None = None,
) -> list[dict]:
    """Top counties by ADU permit count."""
    return _dump(agg.top_jurisdictions_by_adu_count(_records(yr_min, yr_max)))


def get_job_value_share_by_year(
    yr_min: int | None = None,
    yr_max: int | None = None,
    county: str | None = None,
) -> list[dict]:
    """Total vs ADU permit value per year."""
    return _dump(agg.value_share_by_year(_records(yr_min, yr_max, county)))


def get_average_job_value_by_type(
    yr_min: int | None = None,
    yr_max: int | None = None,
    county: str | None = None,
) -> list[dict]:
    """Mean permit value (dollars) by classification and year."""
    return _dump(agg.average_value_by_type_and_year(_records(yr_min, yr_max, county)))


def get_job_value_by_county(
    yr_min: int | None = None,
    yr_max: int | None = None,
) -> list[dict]:
    """Top counties by mean ADU permit value (thousands)."""
    return _dump(agg.top_jurisdictions_by_avg_adu_value(_records(yr_min, yr_max)))


def get_average_adu_job_value_by_year(
    yr_min: int | None = None,
    yr_max: int | None = None,
    county: str | None = None,
) -> list[dict]:
    """Mean ADU permit value per year (thousands)."""
    return _dump(agg.average_adu_value_by_year(_records(yr_min, yr_max, county)))
