from __future__ import annotations

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from greenquest.database.connection import init_db, make_engine, make_session_factory
from greenquest.main import create_app
from greenquest.services import auth
from greenquest.services.llm import GroqClient
from greenquest.utils.session import Identity


class LLMStub:
    """Programmable stand-in for the chat-completions endpoint."""

    def __init__(self) -> None:
        self.status_code = 200
        self.content = "[]"
        self.body = None
        self.error = None
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(json.loads(request.content))
        if self.error is not None:
            raise self.error
        body = self.body if self.body is not None else {"choices": [{"message": {"content": self.content}}]}
        return httpx.Response(self.status_code, json=body)

    def client(self, api_key: str = "test-key") -> GroqClient:
        return GroqClient(
            api_key=api_key,
            model="test-model",
            api_url="https://llm.test/openai/v1/chat/completions",
            transport=httpx.MockTransport(self.handler),
        )


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'greenquest-test.db'}"


@pytest.fixture
def session_factory(database_url):
    engine = make_engine(database_url)
    init_db(engine)
    yield make_session_factory(engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def player(db):
    user = auth.create_user(db, "alice", "s3cret")
    return Identity(user_id=user.id, username=user.username)


@pytest.fixture
def llm():
    return LLMStub()


@pytest.fixture
def client(database_url, llm):
    app = create_app(database_url=database_url, llm_client=llm.client())
    with TestClient(app) as test_client:
        yield test_client


def signup(client: TestClient, username: str = "alice", password: str = "s3cret") -> dict:
    response = client.post("/api/signup", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return response.json()
