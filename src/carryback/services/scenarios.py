from __future__ import annotations

from typing import Callable, Iterable

import pandas as pd

from carryback.adapters.config import AppConfig, config
from carryback.adapters.logging_utils import ctx, get_logger
from carryback.domain.deal import DealInputs
from carryback.domain.ports import ScenarioRecord, ScenarioRepository
from carryback.services.share import apply_state

logger = get_logger(__name__)

# Rows of the side-by-side compare table: label -> getter on the saved state.
COMPARE_ROWS: list[tuple[str, Callable[[DealInputs], float]]] = [
    ("Price", lambda s: s.purchase_price),
    ("Down %", lambda s: s.down_pct),
    ("Rate %", lambda s: s.rate_pct),
    ("Term (yrs)", lambda s: s.term_years),
    ("Balloon", lambda s: s.balloon),
]


class ScenarioService:
    """
    Named snapshots of DealInputs on top of any ScenarioRepository.
    """

    def __init__(self, repo: ScenarioRepository) -> None:
        self.repo = repo

    def save(self, name: str | None, inputs: DealInputs) -> ScenarioRecord:
        name = (name or "").strip()
        if not name:
            raise ValueError("Name your scenario first.")
        rec = self.repo.save(name, inputs.model_dump())
        logger.info("scenario_saved", extra=ctx(name=name))
        return rec

    def list(self) -> dict[str, ScenarioRecord]:
        return self.repo.load_all()

    def load(self, name: str, base: DealInputs | None = None) -> DealInputs | None:
        rec = self.repo.load_all().get((name or "").strip())
        if rec is None:
            return None
        return apply_state(base or DealInputs(), rec.get("state"))

    def delete(self, name: str) -> None:
        name = (name or "").strip()
        self.repo.delete(name)
        logger.info("scenario_deleted", extra=ctx(name=name))

    def compare(self, names: Iterable[str]) -> pd.DataFrame:
        """
        Field-by-field table, one column per saved scenario. Unknown names are
        skipped; duplicates collapse to one column.
        """
        saved = self.repo.load_all()
        picked: list[str] = []
        for n in names:
            if n in saved and n not in picked:
                picked.append(n)

        data = {}
        for n in picked:
            st = apply_state(DealInputs(), saved[n].get("state"))
            data[n] = [getter(st) for _, getter in COMPARE_ROWS]

        return pd.DataFrame(data, index=[label for label, _ in COMPARE_ROWS])


def build_repository(cfg: AppConfig = config) -> ScenarioRepository:
    """Repository selected by CARRYBACK_SCENARIO_BACKEND."""
    if cfg.SCENARIO_BACKEND == "memory":
        from carryback.adapters.memory_repo import InMemoryScenarioRepository

        return InMemoryScenarioRepository()
    if cfg.SCENARIO_BACKEND == "json":
        from carryback.adapters.json_repo import JsonScenarioRepository

        return JsonScenarioRepository(cfg.SCENARIO_FILE)

    from carryback.adapters.sql_repo import SqlScenarioRepository

    return SqlScenarioRepository(cfg.DB_URI)
