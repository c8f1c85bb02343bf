"""FastAPI app — thin wrappers around the shared query layer."""

from __future__ import annotations

from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware

from api import queries
from api.models import DatasetInfo, FilterOptions
from pipeline.models import (
    AggregateBundle,
    AverageAduValueByYear,
    AverageValueByTypeAndYear,
    CountsByYear,
    HeadlineMetrics,
    JurisdictionAduCount,
    JurisdictionAvgAduValue,
    PercentageByYear,
    ValueShareByYear,
)

app = FastAPI(
    title="California ADU Permits API",
    description=(
        "Aggregate views over California housing permits classified as ADU, "
        "non-ADU, or potential ADU conversion: counts and ADU share by year, "
        "top counties, and permit values by year, type and county. "
        "Values in the by-county and by-year ADU averages are in thousands of dollars."
    ),
    version="0.1.0",
)
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])


@app.get("/health")
def health():
    """Debug endpoint — shows the CSV path the loader reads and whether it exists."""
    from pipeline.transform import resolve_csv_path

    path = resolve_csv_path()
    return {"csv_path": str(path), "exists": path.exists()}


@app.get("/")
def root():
    return {
        "message": "California ADU Permits API",
        "docs": "/docs",
        "endpoints": [
            "/filters",
            "/dataset",
            "/overview",
            "/bundle",
            "/units-by-year",
            "/adu-percentage-by-year",
            "/units-by-jurisdiction",
            "/job-value-share-by-year",
            "/average-job-value-by-type",
            "/job-value-by-county",
            "/average-adu-job-value-by-year",
        ],
    }


@app.get("/filters", response_model=FilterOptions)
def filters():
    """Available years and counties."""
    return queries.get_filter_options()


@app.get("/dataset", response_model=DatasetInfo)
def dataset():
    """Data source (csv or sample), record count, quarantined rows, fallback notice."""
    return queries.get_dataset_info()


@app.get("/overview", response_model=HeadlineMetrics)
def overview(
    yr_min: int | None = Query(None, description="Minimum year"),
    yr_max: int | None = Query(None, description="Maximum year"),
    county: str | None = Query(None, description="Filter by county (exact match)"),
):
    """Latest ADU share and average ADU value, their year-over-year change, top county."""
    return queries.get_overview(yr_min, yr_max, county)


@app.get("/bundle", response_model=AggregateBundle)
def bundle(
    yr_min: int | None = Query(None),
    yr_max: int | None = Query(None),
    county: str | None = Query(None),
):
    """All seven views in one response."""
    return queries.get_bundle(yr_min, yr_max, county)


@app.get("/units-by-year", response_model=list[CountsByYear])
def units_by_year(
    yr_min: int | None = Query(None),
    yr_max: int | None = Query(None),
    county: str | None = Query(None),
):
    """Permit counts per classification per year."""
    return queries.get_units_by_year(yr_min, yr_max, county)


@app.get("/adu-percentage-by-year", response_model=list[PercentageByYear])
def adu_percentage_by_year(
    yr_min: int | None = Query(None),
    yr_max: int | None = Query(None),
    county: str | None = Query(None),
):
    """ADU share of all permits per year."""
    return queries.get_adu_percentage_by_year(yr_min, yr_max, county)


@app.get("/units-by-jurisdiction", response_model=list[JurisdictionAduCount])
def units_by_jurisdiction(
    yr_min: int | None = Query(None),
    yr_max: int | None = Query(None),
):
    """Top 8 counties by ADU permit count."""
    return queries.get_units_by_jurisdiction(yr_min, yr_max)


@app.get("/job-value-share-by-year", response_model=list[ValueShareByYear])
def job_value_share_by_year(
    yr_min: int | None = Query(None),
    yr_max: int | None = Query(None),
    county: str | None = Query(None),
):
    """Total vs ADU permit value per year (USD) and ADU's share."""
    return queries.get_job_value_share_by_year(yr_min, yr_max, county)


@app.get("/average-job-value-by-type", response_model=list[AverageValueByTypeAndYear])
def average_job_value_by_type(
    yr_min: int | None = Query(None),
    yr_max: int | None = Query(None),
    county: str | None = Query(None),
):
    """Mean permit value (USD) per classification per year."""
    return queries.get_average_job_value_by_type(yr_min, yr_max, county)


@app.get("/job-value-by-county", response_model=list[JurisdictionAvgAduValue])
def job_value_by_county(
    yr_min: int | None = Query(None),
    yr_max: int | None = Query(None),
):
    """Top 8 counties by mean ADU permit value (thousands USD)."""
    return queries.get_job_value_by_county(yr_min, yr_max)


@app.get("/average-adu-job-value-by-year", response_model=list[AverageAduValueByYear])
def average_adu_job_value_by_year(
    yr_min: int | None = Query(None),
    yr_max: int | None = Query(None),
    county: str | None = Query(None),
):
    """Mean ADU permit value per year (thousands USD)."""
    return queries.get_average_adu_job_value_by_year(yr_min, yr_max, county)
