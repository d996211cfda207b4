# tests/conftest.py
import os

# keep the API's module-level repository off disk
os.environ.setdefault("CARRYBACK_SCENARIO_BACKEND", "memory")

import pytest
from fastapi.testclient import TestClient

from carryback.adapters.memory_repo import InMemoryScenarioRepository
from carryback.api.http import app, get_scenarios  # ensures imports resolve; run tests from repo root
from carryback.domain.deal import DealInputs
from carryback.services.scenarios import ScenarioService


@pytest.fixture
def scenario_service():
    return ScenarioService(InMemoryScenarioRepository())


@pytest.fixture
def client(scenario_service):
    app.dependency_overrides[get_scenarios] = lambda: scenario_service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def default_inputs():
    return DealInputs()
