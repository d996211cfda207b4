# src/carryback/adapters/sql_repo.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlmodel import JSON, Column, Field, Session, SQLModel, create_engine, select

from carryback.domain.ports import ScenarioRecord


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ScenarioRow(SQLModel, table=True):
    __tablename__ = "scenarios"

    name: str = Field(primary_key=True)
    saved_at: datetime = Field(default_factory=_utcnow, index=True)
    state: dict[str, Any] = Field(sa_column=Column(JSON))

    def to_record(self) -> ScenarioRecord:
        return {
            "name": self.name,
            "state": dict(self.state or {}),
            "saved_at": self.saved_at.isoformat(),
        }


class SqlScenarioRepository:
    def __init__(self, uri: str = "sqlite:///carryback.db"):
        self.engine = create_engine(uri, echo=False)
        SQLModel.metadata.create_all(self.engine)

    def save(self, name: str, state: dict[str, Any]) -> ScenarioRecord:
        with Session(self.engine) as session:
            row = session.get(ScenarioRow, name)
            if row is None:
                row = ScenarioRow(name=name, state=dict(state))
            else:
                # re-save overwrites
                row.state = dict(state)
                row.saved_at = _utcnow()
            session.add(row)
            session.commit()
            session.refresh(row)
            return row.to_record()

    def load_all(self) -> dict[str, ScenarioRecord]:
        with Session(self.engine) as session:
            stmt = select(ScenarioRow).order_by(ScenarioRow.name)
            return {row.name: row.to_record() for row in session.exec(stmt)}

    def delete(self, name: str) -> None:
        with Session(self.engine) as session:
            row = session.get(ScenarioRow, name)
            if row is not None:
                session.delete(row)
                session.commit()
