from datetime import datetime
from pydantic import BaseModel
from typing import List


class SeriesBreakdown(BaseModel):
    patients: List[int]
    appointments: List[int]
    reports: List[int]
    results: List[int]
    prescriptions: List[int]


class SeriesTotals(BaseModel):
    patients: int
    appointments: int
    reports: int
    results: int
    prescriptions: int


class HospitalStatistics(BaseModel):
    type: str  # "year" | "quarter" | "month"
    period: str
    start: datetime
    end: datetime  # exclusive
    buckets: List[str]
    series: SeriesBreakdown
    totals: SeriesTotals


class ErrorMessage(BaseModel):
    message: str


class ServerErrorMessage(BaseModel):
    message: str
    error: str
