# apps/backend/app/schemas/stats.py
from __future__ import annotations

from typing import List

from pydantic import BaseModel


class Counts(BaseModel):
    starts: int = 0
    wins: int = 0
    regs: int = 0
    views: int = 0
    clicks: int = 0


class DayCounts(Counts):
    date: str


class Rates(BaseModel):
    winRate: float
    regRateFromStarts: float
    regRateFromWins: float


class FunnelStep(BaseModel):
    label: str
    value: int


class StatsOut(BaseModel):
    totals: Counts
    rates: Rates
    series: List[DayCounts]
    funnel: List[FunnelStep]
