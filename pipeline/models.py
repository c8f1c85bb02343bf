"""Permit record and aggregate view models.

Views serialize with the field names the dashboard charts key on
(``aduPercentage``, ``avgValue``, ``ADU`` ...) and accept snake_case on input.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Classification(str, Enum):
    ADU = "ADU"
    NON_ADU = "NON_ADU"
    POTENTIAL_ADU_CONVERSION = "POTENTIAL_ADU_CONVERSION"


class PermitRecord(BaseModel):
    """One permit. Closed: unknown fields and classifications are rejected."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    year: int
    county: str
    classification: Classification
    permit_value: float | None = Field(default=None, ge=0, allow_inf_nan=False)

    @property
    def is_valued(self) -> bool:
        return bool(self.permit_value)


class _View(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class _YearKeyed(_View):
    year: str

    @field_validator("year", mode="before")
    @classmethod
    def _year_key(cls, v):
        return str(v) if isinstance(v, int) else v


class _ByType(_YearKeyed):
    adu: int = Field(0, alias="ADU")
    non_adu: int = Field(0, alias="NON_ADU")
    potential_adu_conversion: int = Field(0, alias="POTENTIAL_ADU_CONVERSION")


class CountsByYear(_ByType):
    pass


class PercentageByYear(_YearKeyed):
    adu_count: int
    total_count: int
    adu_percentage: int


class JurisdictionAduCount(_View):
    county: str
    total: int
    adu: int = Field(alias="ADU")


class ValueShareByYear(_YearKeyed):
    total_job_value: float
    adu_job_value: float
    adu_job_value_percentage: int


class AverageValueByTypeAndYear(_ByType):
    """Mean permit value per classification, raw monetary units."""


class JurisdictionAvgAduValue(_View):
    """Mean ADU permit value in thousands."""

    county: str
    avg_value: int
    count: int


class AverageAduValueByYear(_YearKeyed):
    """Mean ADU permit value in thousands."""

    avg_adu_value: int
    count: int


class AggregateBundle(_View):
    units_by_year: list[CountsByYear] = []
    adu_percentage_by_year: list[PercentageByYear] = []
    units_by_jurisdiction: list[JurisdictionAduCount] = []
    job_value_share_by_year: list[ValueShareByYear] = []
    average_job_value_by_type: list[AverageValueByTypeAndYear] = []
    job_value_by_county: list[JurisdictionAvgAduValue] = []
    average_adu_job_value_by_year: list[AverageAduValueByYear] = []


class HeadlineMetrics(_View):
    latest_adu_percentage: int = 0
    adu_percentage_trend: int = 0
    latest_avg_adu_value: int = 0
    avg_adu_value_trend: int = 0
    top_county: str = "N/A"
