from datetime import datetime, timezone
from typing import Any

from carryback.domain.ports import ScenarioRecord, ScenarioRepository


class InMemoryScenarioRepository(ScenarioRepository):
    def __init__(self) -> None:
        self._items: dict[str, ScenarioRecord] = {}

    def save(self, name: str, state: dict[str, Any]) -> ScenarioRecord:
        rec: ScenarioRecord = {
            "name": name,
            "state": dict(state),
            "saved_at": datetime.now(timezone.utc).isoformat(),
        }
        self._items[name] = rec
        return rec

    def load_all(self) -> dict[str, ScenarioRecord]:
        return {k: {**v, "state": dict(v["state"])} for k, v in self._items.items()}

    def delete(self, name: str) -> None:
        self._items.pop(name, None)
