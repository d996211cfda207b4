from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from carryback.adapters.logging_utils import ctx, get_logger
from carryback.domain.ports import ScenarioRecord

logger = get_logger(__name__)

STORE_VERSION = "seller-finance-scenarios-v1"


class JsonScenarioRepository:
    """
    All scenarios in one JSON document keyed by name:

        {"version": "...", "scenarios": {"<name>": {"name", "state", "saved_at"}}}

    A missing or unreadable file reads as an empty store.
    """

    def __init__(self, path: str | Path = "scenarios.json") -> None:
        self.path = Path(path)

    def _read(self) -> dict[str, ScenarioRecord]:
        if not self.path.exists():
            return {}
        try:
            doc = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, ValueError) as e:
            logger.warning("scenario_store_unreadable", extra=ctx(path=str(self.path), error=str(e)))
            return {}
        scenarios = doc.get("scenarios") if isinstance(doc, dict) else None
        if not isinstance(scenarios, dict):
            return {}
        out: dict[str, ScenarioRecord] = {}
        for name, rec in scenarios.items():
            if not isinstance(rec, dict) or not isinstance(rec.get("state"), dict):
                continue
            # Hand-edited or older files may omit the bookkeeping fields.
            out[name] = {
                "name": name,
                "state": rec["state"],
                "saved_at": str(rec.get("saved_at") or ""),
            }
        return out

    def _write(self, scenarios: dict[str, ScenarioRecord]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        doc = {"version": STORE_VERSION, "scenarios": scenarios}
        self.path.write_text(json.dumps(doc, indent=2), encoding="utf-8")

    def save(self, name: str, state: dict[str, Any]) -> ScenarioRecord:
        all_ = self._read()
        rec: ScenarioRecord = {
            "name": name,
            "state": dict(state),
            "saved_at": datetime.now(timezone.utc).isoformat(),
        }
        all_[name] = rec
        self._write(all_)
        return rec

    def load_all(self) -> dict[str, ScenarioRecord]:
        return self._read()

    def delete(self, name: str) -> None:
        all_ = self._read()
        if all_.pop(name, None) is not None:
            self._write(all_)
