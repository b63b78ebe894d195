import pytest
from fastapi.testclient import TestClient


@pytest.fixture()
def client() -> TestClient:
    from pipeline_canvas.main import app

    return TestClient(app)


@pytest.fixture(autouse=True)
def _clear_in_memory_stores():
    # Ensure deterministic tests across runs.
    from pipeline_canvas.services import session_store

    session_store._session_store.clear()
    yield
    session_store._session_store.clear()
