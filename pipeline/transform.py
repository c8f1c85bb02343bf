"""Parse the raw permit CSV into PermitRecords.

Rows that do not fit the closed record type (missing or non-numeric year,
unknown classification, negative value) are quarantined: counted, logged,
and left out. When the CSV is missing or unreadable the loader falls back
to synthetic sample data and returns a notice for the UI to show.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import duckdb
from pydantic import ValidationError

from pipeline.ingest import CSV_PATH
from pipeline.models import PermitRecord
from pipeline.sample import sample_records

logger = logging.getLogger(__name__)

CSV_PATH_ENV = "HOUSING_DATA_CSV"
FALLBACK_NOTICE = "Unable to retrieve the CSV file. Displaying sample data instead."

_MAX_LOGGED_REJECTS = 5


@dataclass
class LoadResult:
    records: list[PermitRecord] = field(default_factory=list)
    source: str = "csv"  # "csv" or "sample"
    rejected: int = 0
    notice: str | None = None


def resolve_csv_path(path: Path | str | None = None) -> Path:
    """The CSV the loader reads: argument, then $HOUSING_DATA_CSV, then the ingest default."""
    return Path(path or os.environ.get(CSV_PATH_ENV) or CSV_PATH)


def read_permits(path: Path | str) -> tuple[list[PermitRecord], int]:
    """Read a permit CSV. Returns (records, number of quarantined rows).

    Only YEAR, COUNTY, Classification and JOB_VALUE are used; other columns
    pass through unread. A JOB_VALUE that is not a number reads as None.
    Raises FileNotFoundError or duckdb.Error when the file cannot be read
    at all.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(path)

    src = str(path).replace("'", "''")
    con = duckdb.connect()
    try:
        # all_varchar keeps a late bad cell from being dropped by type sniffing;
        # per-row validation decides instead
        rows = con.execute(f"""
            SELECT
                YEAR                            AS year,
                COUNTY                          AS county,
                Classification                  AS classification,
                TRY_CAST(JOB_VALUE AS DOUBLE)   AS permit_value
            FROM read_csv('{src}', header = true, all_varchar = true)
        """).fetchall()
    finally:
        con.close()

    records: list[PermitRecord] = []
    rejected = 0
    for i, (year, county, classification, permit_value) in enumerate(rows, start=1):
        try:
            records.append(
                PermitRecord(
                    year=year,
                    county=county,
                    classification=classification,
                    permit_value=permit_value,
                )
            )
        except ValidationError as e:
            rejected += 1
            if rejected <= _MAX_LOGGED_REJECTS:
                logger.warning("Quarantined row %d: %s", i, e.errors()[0]["msg"])
    if rejected:
        logger.warning("Quarantined %d of %d rows from %s", rejected, len(rows), path.name)
    return records, rejected


def load_records(path: Path | str | None = None) -> LoadResult:
    """Load permit records, falling back to sample data if the CSV is unavailable."""
    path = resolve_csv_path(path)
    try:
        records, rejected = read_permits(path)
    except (FileNotFoundError, duckdb.Error) as e:
        logger.warning("Error loading %s (%s); using sample data", path, e)
        return LoadResult(
            records=sample_records(),
            source="sample",
            notice=FALLBACK_NOTICE,
        )
    logger.info("Loaded %d permit records from %s", len(records), path.name)
    return LoadResult(records=records, source="csv", rejected=rejected)


if __name__ == "__main__":
    result = load_records()
    print(f"  {len(result.records):,} records ({result.source}), {result.rejected:,} quarantined")
