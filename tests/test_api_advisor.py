"""
Tests for the advisor API endpoints.

Uses FastAPI's TestClient with the dispatcher dependency overridden
by one wired to in-memory ports, so no datastore or LLM is contacted.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from kalshorb.application.advisor.chat import ChatUseCase
from kalshorb.application.advisor.dispatch import AdvisorDispatcher
from kalshorb.application.advisor.quick_action import QuickActionUseCase
from kalshorb.core.config import Settings
from kalshorb.domain.advisor.entities import AccountContext, Portfolio, Role
from kalshorb.interfaces.advisor.dependencies import get_advisor_dispatcher
from kalshorb.main import app, create_app
from tests.fakes import (
    InMemorySessionStore,
    StaticContextReader,
    StubCompletion,
)

ENDPOINT = "/api/v1/kalshorb"


@pytest.fixture
def completion() -> StubCompletion:
    return StubCompletion(enabled=False)


@pytest.fixture
def client(message_store, completion):
    context = AccountContext(portfolio=Portfolio(kelly_fraction=0.25))
    dispatcher = AdvisorDispatcher(
        chat=ChatUseCase(
            message_store=message_store,
            session_store=InMemorySessionStore(),
            context_reader=StaticContextReader(context),
            completion=completion,
        ),
        quick_action=QuickActionUseCase(completion=completion),
    )
    app.dependency_overrides[get_advisor_dispatcher] = lambda: dispatcher
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestChatEndpoint:
    def test_market_basics_fallback(self, client, message_store):
        response = client.post(
            ENDPOINT,
            json={
                "user_id": "u1",
                "session_id": "s1",
                "message": "What is a prediction market?",
            },
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["confidence"] == 92
        assert data["session_id"] == "s1"
        assert [a["action"] for a in data["suggested_actions"]] == [
            "learn_strategies",
            "navigate",
        ]
        assert [r.role for r in message_store.records] == [Role.USER, Role.ASSISTANT]

    def test_unset_fields_are_omitted(self, client):
        response = client.post(
            ENDPOINT,
            json={"user_id": "u1", "session_id": "s1", "message": "What is a prediction market?"},
        )
        data = response.json()["data"]
        assert "market_data" not in data
        first, second = data["suggested_actions"]
        assert "path" not in first
        assert "ticker" not in first
        assert second["path"] == "/markets"

    def test_context_personalizes_reply(self, client):
        response = client.post(
            ENDPOINT,
            json={"user_id": "u1", "session_id": "s1", "message": "explain kelly"},
        )
        assert "Kelly fraction is set to 25%" in response.json()["data"]["message"]

    def test_include_context_false(self, client):
        response = client.post(
            ENDPOINT,
            json={
                "user_id": "u1",
                "session_id": "s1",
                "message": "explain kelly",
                "include_context": False,
            },
        )
        assert "Kelly fraction is set to 50%" in response.json()["data"]["message"]

    def test_llm_reply(self, client, completion):
        completion._enabled = True
        completion.reply = "Model answer"
        response = client.post(
            ENDPOINT,
            json={"user_id": "u1", "session_id": "s1", "message": "Will it rain?"},
        )
        data = response.json()["data"]
        assert data["message"] == "Model answer"
        assert data["confidence"] == 65


class TestQuickActionEndpoint:
    def test_without_message_falls_back_to_greeting(self, client):
        response = client.post(ENDPOINT, json={"user_id": "u1", "action": "quick_action"})
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["confidence"] == 85
        assert len(data["suggested_actions"]) == 3
        assert "session_id" not in data

    def test_does_not_persist(self, client, message_store):
        client.post(
            ENDPOINT,
            json={"user_id": "u1", "action": "quick_action", "message": "check_risk"},
        )
        assert message_store.records == []


class TestErrors:
    @pytest.mark.parametrize(
        "body, message",
        [
            ({"message": "hi", "session_id": "s1"}, "User ID is required"),
            ({"user_id": "u1", "message": "hi"}, "Message and session ID are required"),
            ({"user_id": "u1", "action": "dance"}, "Unknown action: dance"),
        ],
    )
    def test_error_shape(self, client, body, message):
        response = client.post(ENDPOINT, json=body)
        assert response.status_code == 500
        assert response.json() == {
            "error": {"code": "KALSHORB_ERROR", "message": message}
        }

    def test_malformed_body(self, client):
        response = client.post(
            ENDPOINT,
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 500
        assert response.json()["error"]["code"] == "KALSHORB_ERROR"


class TestCorsAndHealth:
    def test_options_preflight(self, client):
        response = client.options(ENDPOINT)
        assert response.status_code == 200
        assert response.headers["Access-Control-Allow-Origin"] == "*"
        assert "apikey" in response.headers["Access-Control-Allow-Headers"]

    def test_options_any_path(self, client):
        assert client.options("/anything").status_code == 200

    def test_cors_headers_on_post(self, client):
        response = client.post(ENDPOINT, json={"user_id": "u1", "action": "quick_action"})
        assert response.headers["Access-Control-Allow-Origin"] == "*"
        assert response.headers["X-Content-Type-Options"] == "nosniff"

    def test_cors_headers_on_error(self, client):
        response = client.post(ENDPOINT, json={})
        assert response.status_code == 500
        assert response.headers["Access-Control-Allow-Origin"] == "*"

    def test_health(self, client):
        response = client.get("/api/v1/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_cors_headers_on_unexpected_error(self):
        dispatcher = AsyncMock(spec=AdvisorDispatcher)
        dispatcher.dispatch.side_effect = RuntimeError("boom")
        app.dependency_overrides[get_advisor_dispatcher] = lambda: dispatcher
        try:
            response = TestClient(app, raise_server_exceptions=False).post(
                ENDPOINT, json={"user_id": "u1", "action": "quick_action"}
            )
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        assert response.json() == {
            "error": {"code": "KALSHORB_ERROR", "message": "Internal server error"}
        }
        assert response.headers["Access-Control-Allow-Origin"] == "*"
        assert response.headers["X-Content-Type-Options"] == "nosniff"


class TestCreateApp:
    """create_app honors the settings it is given."""

    @pytest.fixture
    def config(self) -> Settings:
        return Settings(
            version="9.9.9",
            cors_allow_origin="https://app.example.test",
            openrouter_api_key="",
            rate_limit_enabled=False,
        )

    def test_health_reports_configured_version(self, config):
        response = TestClient(create_app(config)).get("/api/v1/health")
        assert response.json() == {"status": "ok", "version": "9.9.9"}

    def test_configured_cors_origin(self, config):
        response = TestClient(create_app(config)).options(ENDPOINT)
        assert response.headers["Access-Control-Allow-Origin"] == "https://app.example.test"

    def test_dispatcher_is_built_once(self, config):
        custom = create_app(config)
        request = SimpleNamespace(app=custom)

        assert custom.state.settings is config
        assert get_advisor_dispatcher(request) is custom.state.advisor_dispatcher
        assert get_advisor_dispatcher(request) is get_advisor_dispatcher(request)

    def test_dispatcher_uses_configured_llm_key(self, config):
        # No OpenRouter key configured, so quick actions use the template fallback.
        response = TestClient(create_app(config)).post(
            ENDPOINT, json={"user_id": "u1", "action": "quick_action"}
        )
        assert response.status_code == 200
        assert response.json()["data"]["confidence"] == 85
