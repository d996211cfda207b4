# src/carryback/api/schemas.py
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class ScheduleRowOut(BaseModel):
    month: int
    payment: float
    interest: float
    principal: float
    balance: float
    is_balloon: bool = False


class TaxRowOut(BaseModel):
    month: int
    cap_gain_tax: float
    interest_tax: float
    recapture_tax: float


class AnalyzeResponse(BaseModel):
    """
    Response for /analyze: headline numbers plus both row tables.

    Permissive so new summary keys don't break clients.
    """
    model_config = ConfigDict(extra="allow")

    summary: dict[str, float]
    all_cash_tax: dict[str, float]
    schedule: list[ScheduleRowOut]
    tax_rows: list[TaxRowOut]
    inputs: dict[str, Any]


class ShareResponse(BaseModel):
    code: str
    url: str


class ScenarioItem(BaseModel):
    name: str
    state: dict[str, Any]
    saved_at: str
