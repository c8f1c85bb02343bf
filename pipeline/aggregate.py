"""Aggregate permit records into the seven dashboard views.

Every function is pure: it loads the records into a fresh in-memory DuckDB
connection, runs one GROUP BY, and returns new view models. Nothing is cached
between calls.

Units differ on purpose: ``average_value_by_type_and_year`` reports raw
dollars, the two ADU value views report thousands.

Top-N views break ties by the first appearance of the county in the input.
That is the order the grouping produced, not a documented sort key, so
callers should not rely on it for equal counts.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

import duckdb
import pandas as pd

from pipeline.models import (
    AggregateBundle,
    AverageAduValueByYear,
    AverageValueByTypeAndYear,
    CountsByYear,
    HeadlineMetrics,
    JurisdictionAduCount,
    JurisdictionAvgAduValue,
    PercentageByYear,
    PermitRecord,
    ValueShareByYear,
)

TOP_N = 8

# _frame stores unvalued records (PermitRecord.is_valued false) as 0
_VALUED_ADU = "classification = 'ADU' AND permit_value <> 0"


# ── Helpers ──────────────────────────────────────────────────


def round_half_up(x: float) -> int:
    """Round to the nearest integer, .5 going up (not banker's rounding)."""
    return math.floor(x + 0.5)


def percentage(numerator: float, denominator: float) -> int:
    """Integer percentage; 0 when the denominator is 0."""
    if not denominator:
        return 0
    return round_half_up(100 * numerator / denominator)


def _frame(records: Sequence[PermitRecord]) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "idx": range(len(records)),
            "year": [r.year for r in records],
            "county": [r.county for r in records],
            "classification": [r.classification.value for r in records],
            "permit_value": [float(r.permit_value) if r.is_valued else 0.0 for r in records],
        }
    ).astype({"idx": "int64", "year": "int64", "permit_value": "float64"})


def _q(records: Iterable[PermitRecord], sql: str) -> list[dict]:
    """Run SQL against a ``permits`` table built from records; return row dicts."""
    records = list(records)
    if not records:
        return []
    con = duckdb.connect()
    try:
        con.register("permits", _frame(records))
        cur = con.execute(sql)
        cols = [d[0] for d in cur.description]
        return [dict(zip(cols, row)) for row in cur.fetchall()]
    finally:
        con.close()


# ── 1. Counts by year ──


def counts_by_year(records: Iterable[PermitRecord]) -> list[CountsByYear]:
    """Permit count per classification for each year, ascending by year."""
    rows = _q(records, """
        SELECT
            year,
            COUNT(*) FILTER (WHERE classification = 'ADU')                      AS adu,
            COUNT(*) FILTER (WHERE classification = 'NON_ADU')                  AS non_adu,
            COUNT(*) FILTER (WHERE classification = 'POTENTIAL_ADU_CONVERSION') AS potential_adu_conversion
        FROM permits
        GROUP BY year
        ORDER BY year
    """)
    return [CountsByYear.model_validate(r) for r in rows]


# ── 2. ADU percentage by year ──


def percentage_by_year(counts: Iterable[CountsByYear]) -> list[PercentageByYear]:
    """ADU share of all permits per year, derived from ``counts_by_year``."""
    out = []
    for c in counts:
        total = c.adu + c.non_adu + c.potential_adu_conversion
        out.append(
            PercentageByYear(
                year=c.year,
                adu_count=c.adu,
                total_count=total,
                adu_percentage=percentage(c.adu, total),
            )
        )
    return out


# ── 3. Top jurisdictions by ADU count ──


def top_jurisdictions_by_adu_count(
    records: Iterable[PermitRecord], limit: int = TOP_N
) -> list[JurisdictionAduCount]:
    """Counties ranked by number of ADU permits, top ``limit``."""
    rows = _q(records, f"""
        SELECT
            county,
            COUNT(*)                                        AS total,
            COUNT(*) FILTER (WHERE classification = 'ADU')  AS adu
        FROM permits
        GROUP BY county
        ORDER BY adu DESC, MIN(idx)
        LIMIT {int(limit)}
    """)
    return [JurisdictionAduCount.model_validate(r) for r in rows]


# ── 4. ADU share of permit value by year ──


def value_share_by_year(records: Iterable[PermitRecord]) -> list[ValueShareByYear]:
    """Total and ADU permit value per year, plus ADU's rounded percentage."""
    rows = _q(records, """
        WITH by_year AS (
            SELECT
                year,
                SUM(permit_value)                                                   AS total_job_value,
                COALESCE(SUM(permit_value) FILTER (WHERE classification = 'ADU'), 0) AS adu_job_value
            FROM permits
            GROUP BY year
        )
        SELECT
            year,
            total_job_value,
            adu_job_value,
            CASE
                WHEN total_job_value > 0
                THEN CAST(FLOOR(100 * adu_job_value / total_job_value + 0.5) AS BIGINT)
                ELSE 0
            END AS adu_job_value_percentage
        FROM by_year
        ORDER BY year
    """)
    return [ValueShareByYear.model_validate(r) for r in rows]


# ── 5. Average value by classification and year ──


def average_value_by_type_and_year(
    records: Iterable[PermitRecord],
) -> list[AverageValueByTypeAndYear]:
    """Mean permit value (dollars) per classification per year; 0 when none valued."""
    rows = _q(records, """
        SELECT
            year,
            COALESCE(CAST(FLOOR(AVG(permit_value) FILTER (
                WHERE classification = 'ADU' AND permit_value <> 0) + 0.5) AS BIGINT), 0)
                AS adu,
            COALESCE(CAST(FLOOR(AVG(permit_value) FILTER (
                WHERE classification = 'NON_ADU' AND permit_value <> 0) + 0.5) AS BIGINT), 0)
                AS non_adu,
            COALESCE(CAST(FLOOR(AVG(permit_value) FILTER (
                WHERE classification = 'POTENTIAL_ADU_CONVERSION' AND permit_value <> 0) + 0.5) AS BIGINT), 0)
                AS potential_adu_conversion
        FROM permits
        GROUP BY year
        ORDER BY year
    """)
    return [AverageValueByTypeAndYear.model_validate(r) for r in rows]


# ── 6. Top jurisdictions by average ADU value ──


def top_jurisdictions_by_avg_adu_value(
    records: Iterable[PermitRecord], limit: int = TOP_N
) -> list[JurisdictionAvgAduValue]:
    """Counties ranked by mean valued-ADU permit value (thousands), top ``limit``.

    Counties without a single valued ADU permit are left out, not zero-filled.
    """
    rows = _q(records, f"""
        SELECT
            county,
            CAST(FLOOR(SUM(permit_value) / COUNT(*) / 1000 + 0.5) AS BIGINT) AS avg_value,
            COUNT(*) AS "count"
        FROM permits
        WHERE {_VALUED_ADU}
        GROUP BY county
        ORDER BY avg_value DESC, MIN(idx)
        LIMIT {int(limit)}
    """)
    return [JurisdictionAvgAduValue.model_validate(r) for r in rows]


# ── 7. Average ADU value by year ──


def average_adu_value_by_year(records: Iterable[PermitRecord]) -> list[AverageAduValueByYear]:
    """Mean valued-ADU permit value per year, in thousands."""
    rows = _q(records, f"""
        SELECT
            year,
            CAST(FLOOR(SUM(permit_value) / COUNT(*) / 1000 + 0.5) AS BIGINT) AS avg_adu_value,
            COUNT(*) AS "count"
        FROM permits
        WHERE {_VALUED_ADU}
        GROUP BY year
        ORDER BY year
    """)
    return [AverageAduValueByYear.model_validate(r) for r in rows]


# ── Bundle ──


def aggregate(records: Iterable[PermitRecord]) -> AggregateBundle:
    """Compute all seven views from one record collection."""
    records = list(records)
    units_by_year = counts_by_year(records)
    return AggregateBundle(
        units_by_year=units_by_year,
        adu_percentage_by_year=percentage_by_year(units_by_year),
        units_by_jurisdiction=top_jurisdictions_by_adu_count(records),
        job_value_share_by_year=value_share_by_year(records),
        average_job_value_by_type=average_value_by_type_and_year(records),
        job_value_by_county=top_jurisdictions_by_avg_adu_value(records),
        average_adu_job_value_by_year=average_adu_value_by_year(records),
    )


def headline_metrics(bundle: AggregateBundle) -> HeadlineMetrics:
    """Latest-year figures and their change from the year before.

    With a single year the previous value counts as 0, so the trend equals
    the latest value.
    """
    pct = bundle.adu_percentage_by_year
    val = bundle.average_adu_job_value_by_year
    latest_pct = pct[-1].adu_percentage if pct else 0
    prev_pct = pct[-2].adu_percentage if len(pct) > 1 else 0
    latest_val = val[-1].avg_adu_value if val else 0
    prev_val = val[-2].avg_adu_value if len(val) > 1 else 0
    return HeadlineMetrics(
        latest_adu_percentage=latest_pct,
        adu_percentage_trend=latest_pct - prev_pct,
        latest_avg_adu_value=latest_val,
        avg_adu_value_trend=latest_val - prev_val,
        top_county=bundle.units_by_jurisdiction[0].county if bundle.units_by_jurisdiction else "N/A",
    )
