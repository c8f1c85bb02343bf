"""Synthetic permit records, shown when the real CSV cannot be loaded."""

from __future__ import annotations

import random

from pipeline.models import Classification, PermitRecord

COUNTIES: list[str] = [
    "Santa Clara",
    "Los Angeles",
    "San Diego",
    "Alameda",
    "Orange",
    "San Francisco",
    "Riverside",
]
YEARS: list[int] = [2018, 2019, 2020, 2021, 2022, 2023]


def sample_records(n: int = 300, seed: int | None = None) -> list[PermitRecord]:
    """Generate ``n`` random records: uniform year/county/classification, value in [100K, 400K)."""
    rng = random.Random(seed)
    classifications = list(Classification)
    return [
        PermitRecord(
            year=rng.choice(YEARS),
            county=rng.choice(COUNTIES),
            classification=rng.choice(classifications),
            permit_value=float(rng.randrange(100_000, 400_000)),
        )
        for _ in range(n)
    ]
