# src/carryback/domain/ports.py
from __future__ import annotations

from typing import Any, Protocol, TypedDict


# ----------------------------
# Scenario persistence
# ----------------------------

class ScenarioRecord(TypedDict):
    name: str
    state: dict[str, Any]   # flat DealInputs dump
    saved_at: str           # ISO-8601, UTC


class ScenarioRepository(Protocol):
    def save(self, name: str, state: dict[str, Any]) -> ScenarioRecord:
        """Create or overwrite the scenario stored under ``name``."""
        ...

    def load_all(self) -> dict[str, ScenarioRecord]:
        ...

    def delete(self, name: str) -> None:
        ...
