"""Shared test fixtures: sample agent replies and a fake agent API."""

from __future__ import annotations

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from src.web import agent_client


class FakeAgentApi:
    """Stands in for the hosted agent API. Records requests, returns a canned reply."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.body: dict | str = {"response": ""}
        self.error: Exception | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if isinstance(self.body, str):
            return httpx.Response(self.status_code, text=self.body)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    @property
    def last_json(self) -> dict:
        return json.loads(self.last_request.content)


@pytest.fixture
def fake_agent_api(monkeypatch) -> FakeAgentApi:
    """Route agent_client traffic to an in-memory fake with an API key set."""
    api = FakeAgentApi()
    monkeypatch.setattr(agent_client, "LYZR_API_KEY", "test-key")
    monkeypatch.setattr(
        agent_client,
        "_make_client",
        lambda: httpx.AsyncClient(transport=httpx.MockTransport(api.handler)),
    )
    return api


@pytest.fixture
def client():
    from src.web.app import app
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def fenced_reply() -> str:
    """A typical agent reply: fenced JSON with literal escape sequences and a trailing comma."""
    return '```json\\n{\\n  "result": "Roses are red",\\n  "confidence": 0.9,\\n}\\n```'


@pytest.fixture
def prose_reply() -> str:
    return "Here is your answer: {'result': 'ok', count: 3}"
