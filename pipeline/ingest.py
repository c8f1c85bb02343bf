"""Download the statewide permit CSV."""

from __future__ import annotations

import os
from pathlib import Path

import httpx

RAW_DIR = Path(__file__).resolve().parent.parent / "data" / "raw"
CSV_PATH = RAW_DIR / "housing_data.csv"

# No public default: point this at the published housing_data.csv export.
SOURCE_URL_ENV = "HOUSING_DATA_URL"


def download(url: str, dest: Path = CSV_PATH, *, force: bool = False) -> Path:
    """Download a single CSV. Skips if file exists and force=False."""
    if dest.exists() and not force:
        print(f"  [skip] {dest.name} (already exists, {dest.stat().st_size:,} bytes)")
        return dest

    print(f"  [download] {dest.name} ...")
    dest.parent.mkdir(parents=True, exist_ok=True)
    with httpx.stream("GET", url, follow_redirects=True, timeout=300) as r:
        r.raise_for_status()
        with open(dest, "wb") as f:
            for chunk in r.iter_bytes(chunk_size=1 << 20):
                f.write(chunk)
    print(f"  [done] {dest.name} -> {dest.stat().st_size:,} bytes")
    return dest


def ingest(*, force: bool = False, url: str | None = None) -> Path | None:
    """Fetch the CSV into data/raw. Returns its path, or None if nothing is available."""
    url = url or os.environ.get(SOURCE_URL_ENV)
    if not url:
        if CSV_PATH.exists():
            print(f"  [skip] {SOURCE_URL_ENV} not set, using existing {CSV_PATH.name}")
            return CSV_PATH
        print(f"  [skip] {SOURCE_URL_ENV} not set and no local CSV")
        return None
    try:
        return download(url, CSV_PATH, force=force)
    except httpx.HTTPStatusError as e:
        if e.response.status_code in (403, 404):
            print(f"  [warn] {CSV_PATH.name}: {e.response.status_code}, skipping")
            return CSV_PATH if CSV_PATH.exists() else None
        raise


if __name__ == "__main__":
    ingest()
