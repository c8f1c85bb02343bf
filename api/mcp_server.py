"""MCP server for California ADU permit aggregates.

Exposes the aggregate views as tools. Uses FastMCP (v2) with stdio transport.
"""

from __future__ import annotations

from fastmcp import FastMCP

from api import queries

mcp = FastMCP(
    "California ADU Permits",
    instructions=(
        "California housing permit records classified as ADU, NON_ADU, or "
        "POTENTIAL_ADU_CONVERSION, aggregated by year and county. Call "
        "get_filter_options first to see available years and counties. "
        "County names match exactly (no case folding). Raw values are US dollars; "
        "avgValue and avgAduValue are in thousands of dollars."
    ),
)


@mcp.tool()
def get_filter_options() -> dict:
    """Get available filter values.

    Returns years (int) and counties (str). Call this first to discover valid filter values.
    """
    return queries.get_filter_options()


@mcp.tool()
def get_dataset_info() -> dict:
    """Get data source ('csv' or 'sample'), record_count, rejected_count, and any notice."""
    return queries.get_dataset_info()


@mcp.tool()
def get_overview(
    yr_min: int | None = None,
    yr_max: int | None = None,
    county: str | None = None,
) -> dict:
    """Get headline metrics: latest ADU %, its trend, latest avg ADU value (thousands), its trend, top county."""
    return queries.get_overview(yr_min, yr_max, county)


@mcp.tool()
def get_bundle(
    yr_min: int | None = None,
    yr_max: int | None = None,
    county: str | None = None,
) -> dict:
    """Get all seven views in one call.

    Keys: unitsByYear, aduPercentageByYear, unitsByJurisdiction, jobValueShareByYear,
    averageJobValueByType, jobValueByCounty, averageAduJobValueByYear.
    """
    return queries.get_bundle(yr_min, yr_max, county)


@mcp.tool()
def get_units_by_year(
    yr_min: int | None = None,
    yr_max: int | None = None,
    county: str | None = None,
) -> list[dict]:
    """Get permit counts per classification per year.

    Returns year, ADU, NON_ADU, POTENTIAL_ADU_CONVERSION.
    """
    return queries.get_units_by_year(yr_min, yr_max, county)


@mcp.tool()
def get_adu_percentage_by_year(
    yr_min: int | None = None,
    yr_max: int | None = None,
    county: str | None = None,
) -> list[dict]:
    """Get ADU share of all permits per year.

    Returns year, aduCount, totalCount, aduPercentage (integer percent).
    """
    return queries.get_adu_percentage_by_year(yr_min, yr_max, county)


@mcp.tool()
def get_units_by_jurisdiction(
    yr_min: int | None = None,
    yr_max: int | None = None,
) -> list[dict]:
    """Get the top 8 counties by ADU permit count.

    Returns county, total, ADU.
    """
    return queries.get_units_by_jurisdiction(yr_min, yr_max)


@mcp.tool()
def get_job_value_share_by_year(
    yr_min: int | None = None,
    yr_max: int | None = None,
    county: str | None = None,
) -> list[dict]:
    """Get total and ADU permit value (USD) per year.

    Returns year, totalJobValue, aduJobValue, aduJobValuePercentage.
    """
    return queries.get_job_value_share_by_year(yr_min, yr_max, county)


@mcp.tool()
def get_average_job_value_by_type(
    yr_min: int | None = None,
    yr_max: int | None = None,
    county: str | None = None,
) -> list[dict]:
    """Get mean permit value (USD) per classification per year; 0 where none are valued."""
    return queries.get_average_job_value_by_type(yr_min, yr_max, county)


@mcp.tool()
def get_job_value_by_county(
    yr_min: int | None = None,
    yr_max: int | None = None,
) -> list[dict]:
    """Get the top 8 counties by mean ADU permit value.

    Returns county, avgValue (thousands USD), count of valued ADU permits.
    """
    return queries.get_job_value_by_county(yr_min, yr_max)


@mcp.tool()
def get_average_adu_job_value_by_year(
    yr_min: int | None = None,
    yr_max: int | None = None,
    county: str | None = None,
) -> list[dict]:
    """Get mean ADU permit value per year.

    Returns year, avgAduValue (thousands USD), count of valued ADU permits.
    """
    return queries.get_average_adu_job_value_by_year(yr_min, yr_max, county)


def main():
    mcp.run()


if __name__ == "__main__":
    main()
