"""Pydantic response models for FastAPI's auto-generated OpenAPI docs.

The seven aggregate views and the headline metrics are defined once in
``pipeline.models``; this module holds the API-only payloads.
"""

from __future__ import annotations

from pydantic import BaseModel


class FilterOptions(BaseModel):
    years: list[int]
    counties: list[str]


class DatasetInfo(BaseModel):
    source: str
    record_count: int
    rejected_count: int
    notice: str | None
