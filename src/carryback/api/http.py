# src/carryback/api/http.py
from __future__ import annotations

from dataclasses import asdict
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.responses import HTMLResponse, PlainTextResponse

from carryback.adapters.config import config
from carryback.adapters.logging_utils import ctx, get_logger
from carryback.domain.deal import DealInputs
from carryback.domain.results import DerivedResult
from carryback.services.export import render_print_html, schedule_csv
from carryback.services.recompute import check_horizons, recompute
from carryback.services.scenarios import ScenarioService, build_repository
from carryback.services.share import encode_state, inputs_from_share, share_url
from .schemas import AnalyzeResponse, ScenarioItem, ShareResponse

logger = get_logger(__name__)

app = FastAPI(title="carryback")

_scenarios = ScenarioService(build_repository(config))


def get_scenarios() -> ScenarioService:
    return _scenarios


def _recompute(payload: DealInputs) -> DerivedResult:
    try:
        check_horizons(payload, config.MAX_TERM_YEARS)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return recompute(payload)


def _analyze_payload(inputs: DealInputs, derived: DerivedResult) -> dict[str, Any]:
    return {
        "summary": derived.summary(),
        "all_cash_tax": asdict(derived.all_cash_tax),
        "schedule": [asdict(r) for r in derived.schedule],
        "tax_rows": [asdict(t) for t in derived.installment.rows],
        "inputs": inputs.model_dump(),
    }


@app.post("/analyze", response_model=AnalyzeResponse)
def analyze_endpoint(payload: DealInputs) -> AnalyzeResponse:
    derived = _recompute(payload)
    return AnalyzeResponse(**_analyze_payload(payload, derived))


@app.post("/schedule.csv", response_class=PlainTextResponse)
def schedule_csv_endpoint(payload: DealInputs) -> PlainTextResponse:
    body = schedule_csv(_recompute(payload))
    return PlainTextResponse(
        body,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="amortization_schedule.csv"'},
    )


@app.post("/print", response_class=HTMLResponse)
def print_endpoint(payload: DealInputs) -> HTMLResponse:
    return HTMLResponse(render_print_html(_recompute(payload), payload))


# -----------------------------
# Sharing
# -----------------------------
@app.post("/share", response_model=ShareResponse)
def share_endpoint(payload: DealInputs) -> ShareResponse:
    return ShareResponse(code=encode_state(payload), url=share_url(payload, config.SHARE_BASE_URL))


@app.get("/share/{code}")
def share_decode_endpoint(code: str) -> dict[str, Any]:
    # malformed codes fall back to defaults
    return inputs_from_share(code).model_dump()


# -----------------------------
# Scenarios
# -----------------------------
@app.get("/scenarios", response_model=list[ScenarioItem])
def list_scenarios(svc: ScenarioService = Depends(get_scenarios)) -> list[ScenarioItem]:
    return [ScenarioItem(**rec) for rec in svc.list().values()]


@app.put("/scenarios/{name}", response_model=ScenarioItem)
def save_scenario(
    name: str,
    payload: DealInputs,
    svc: ScenarioService = Depends(get_scenarios),
) -> ScenarioItem:
    try:
        rec = svc.save(name, payload)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return ScenarioItem(**rec)


@app.get("/scenarios/{name}")
def load_scenario(name: str, svc: ScenarioService = Depends(get_scenarios)) -> dict[str, Any]:
    inputs = svc.load(name)
    if inputs is None:
        raise HTTPException(status_code=404, detail=f"unknown scenario: {name}")
    return inputs.model_dump()


@app.delete("/scenarios/{name}")
def delete_scenario(name: str, svc: ScenarioService = Depends(get_scenarios)) -> dict[str, Any]:
    svc.delete(name)
    return {"deleted": name}


@app.get("/scenarios-compare")
def compare_scenarios(
    names: list[str] = Query(default=[]),
    svc: ScenarioService = Depends(get_scenarios),
) -> dict[str, Any]:
    df = svc.compare(names)
    logger.info("scenarios_compared", extra=ctx(requested=len(names), found=len(df.columns)))
    return {
        "fields": list(df.index),
        "scenarios": {col: [float(v) for v in df[col]] for col in df.columns},
    }
