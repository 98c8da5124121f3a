"""Pytest configuration and fixtures."""
import pytest
from fastapi.testclient import TestClient

from quizweb.app import app
from quizweb.dependencies import get_outcome_log, get_question_bank, get_session_store
from quizweb.question_bank import Question, QuestionBank
from quizweb.services.outcome_log import OutcomeLog
from quizweb.session_store import InMemorySessionStore


@pytest.fixture
def sample_bank() -> QuestionBank:
    """Three-question bank used across tests."""
    return QuestionBank(
        questions=(
            Question(correct_index=2, text="Capital of France?", options=("Berlin", "Paris", "Rome")),
            Question(correct_index=1, text="Red planet?", options=("Mars", "Venus")),
            Question(correct_index=3, text="Sides of a hexagon?", options=("4", "5", "6", "8")),
        )
    )


@pytest.fixture
def session_store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def outcome_log(tmp_path) -> OutcomeLog:
    return OutcomeLog(tmp_path / "quiz.log")


@pytest.fixture
def client(sample_bank, session_store, outcome_log):
    """Create test client wired to isolated bank, store and log."""
    app.dependency_overrides[get_question_bank] = lambda: sample_bank
    app.dependency_overrides[get_session_store] = lambda: session_store
    app.dependency_overrides[get_outcome_log] = lambda: outcome_log
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def started_client(client: TestClient) -> TestClient:
    """Create a client that has already started a quiz as 'Alice'."""
    client.post("/start", data={"name": "Alice"})
    return client
