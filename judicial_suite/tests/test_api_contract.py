"""
Tests for API Contract
======================

Drives the three views' flows through HTTP and checks error mapping.
Each test gets a fresh app (fresh stores, demo data seeded).
"""

import pytest
from fastapi.testclient import TestClient

from judicial_suite.api import create_app
from judicial_suite.config import Settings

JUDGE_HEADERS = {"X-Principal-Name": "Judge Judy", "X-Principal-Credential": "judgepass"}


@pytest.fixture
def client():
    """Create test client"""
    app = create_app(Settings(seed_demo_data=True, generator_timeout=5))
    with TestClient(app) as c:
        yield c


@pytest.fixture
def lawyer_headers(client):
    client.post("/auth/register", json={"name": "Ann", "role": "Lawyer", "password": "pw"})
    return {"X-Principal-Name": "ann", "X-Principal-Credential": "pw"}


# =============================================================================
# Health
# =============================================================================

class TestHealthEndpoint:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["generator_mode"] == "scripted"
        assert data["cases"] == 2


# =============================================================================
# Auth
# =============================================================================

class TestAuthEndpoints:
    def test_register_and_login(self, client):
        response = client.post("/auth/register", json={"name": "Bob", "role": "Public", "password": "pw"})
        assert response.status_code == 201
        assert response.json() == {"name": "Bob", "role": "Public"}

        response = client.post("/auth/login", json={"name": "BOB", "password": "pw"})
        assert response.status_code == 200
        assert response.json()["name"] == "Bob"

    def test_duplicate_register(self, client):
        response = client.post("/auth/register", json={"name": "judge judy", "role": "Judge", "password": "x"})
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "duplicate_principal"

    def test_bad_role(self, client):
        response = client.post("/auth/register", json={"name": "Bob", "role": "Bailiff", "password": "pw"})
        assert response.status_code == 400

    def test_wrong_password(self, client):
        response = client.post("/auth/login", json={"name": "Judge Judy", "password": "nope"})
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "invalid_credentials"

    def test_bad_headers_rejected(self, client):
        response = client.post(
            "/cases",
            json={"title": "x"},
            headers={"X-Principal-Name": "Judge Judy", "X-Principal-Credential": "wrong"},
        )
        assert response.status_code == 401
        assert len(client.get("/cases").json()["cases"]) == 2


# =============================================================================
# Cases
# =============================================================================

class TestCaseEndpoints:
    def test_list_seeded_cases(self, client):
        data = client.get("/cases").json()
        assert [c["id"] for c in data["cases"]] == ["CASE-002", "CASE-001"]
        assert data["default_case_id"] == "CASE-002"

    def test_explicit_selection(self, client):
        assert client.get("/cases", params={"selected": "CASE-001"}).json()["default_case_id"] == "CASE-001"

    def test_create_case(self, client, lawyer_headers):
        response = client.post(
            "/cases",
            json={"title": "Lease dispute", "description": "Unpaid rent", "tags": "lease, civil"},
            headers=lawyer_headers,
        )
        assert response.status_code == 201
        data = response.json()
        assert data["id"] == "CASE-003"
        assert data["status"] == "Submitted"
        assert data["tags"] == ["lease", "civil"]
        assert data["timeline"][0]["actor"] == "Lawyer:Ann"
        assert data["timeline"][0]["action"] == "Submitted case"

        assert client.get("/cases").json()["default_case_id"] == "CASE-003"

    def test_create_case_empty_title(self, client):
        response = client.post("/cases", json={"title": "  ", "description": "desc", "tags": []})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "invalid_input"
        assert len(client.get("/cases").json()["cases"]) == 2

    def test_malformed_body_is_invalid_input(self, client):
        response = client.post("/cases", json={"description": "no title"})
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "invalid_input"
        assert "title" in error["message"]
        assert len(client.get("/cases").json()["cases"]) == 2

    def test_null_description_is_invalid_input(self, client):
        response = client.post("/cases", json={"title": "x", "description": None})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "invalid_input"

    def test_get_unknown_case(self, client):
        response = client.get("/cases/CASE-999")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "not_found"

    def test_post_message(self, client, lawyer_headers):
        response = client.post(
            "/cases/CASE-001/messages",
            json={"text": "Exhibit B attached", "to": "Judge"},
            headers=lawyer_headers,
        )
        assert response.status_code == 201
        assert response.json()["sender"] == "Lawyer:Ann"

        timeline = client.get("/cases/CASE-001/timeline").json()
        assert timeline[0]["action"] == "Message to Judge"
        assert timeline[-1]["action"] == "Imported"

    def test_anonymous_message(self, client):
        response = client.post("/cases/CASE-002/messages", json={"text": "hello"})
        assert response.status_code == 201
        assert response.json()["sender"] == "Anon"
        assert response.json()["to"] == "All"

    def test_empty_message(self, client):
        response = client.post("/cases/CASE-001/messages", json={"text": ""})
        assert response.status_code == 400


# =============================================================================
# Assistant
# =============================================================================

class TestAssistantEndpoints:
    def test_ask_on_case(self, client, lawyer_headers):
        response = client.post(
            "/assistant", json={"prompt": "Summarize", "case_id": "CASE-001"}, headers=lawyer_headers
        )
        assert response.status_code == 200
        data = response.json()
        assert data["user_turn"]["sender"] == "Ann"
        assert data["assistant_turn"]["text"].startswith("Summary — Breach of Contract")

        client.post("/assistant", json={"prompt": "what should I do?", "case_id": "CASE-001"})
        history = client.get("/cases/CASE-001/assistant").json()
        assert len(history) == 4
        assert history[2]["sender"] == "Guest"

    def test_ask_without_case(self, client):
        response = client.post("/assistant", json={"prompt": "Hello"})
        assert response.status_code == 200
        assert response.json()["case_id"] is None

    def test_empty_history(self, client):
        assert client.get("/cases/CASE-002/assistant").json() == []

    def test_blank_prompt(self, client):
        assert client.post("/assistant", json={"prompt": " "}).status_code == 400

    def test_missing_prompt(self, client):
        response = client.post("/assistant", json={"case_id": "CASE-001"})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "invalid_input"
        assert client.get("/cases/CASE-001/assistant").json() == []


# =============================================================================
# Adjudication
# =============================================================================

class TestRulingEndpoint:
    def test_judge_rules(self, client):
        before = len(client.get("/cases/CASE-001").json()["timeline"])

        response = client.post("/cases/CASE-001/ruling", json={"favored_party": "plaintiff"}, headers=JUDGE_HEADERS)

        assert response.status_code == 201
        assert response.json()["judge_name"] == "Judge Judy"
        case = client.get("/cases/CASE-001").json()
        assert case["status"] == "Ruled"
        assert case["ruling"]["id"] == response.json()["id"]
        assert len(case["timeline"]) == before + 1

    def test_lawyer_forbidden(self, client, lawyer_headers):
        response = client.post("/cases/CASE-001/ruling", json={"favored_party": "plaintiff"}, headers=lawyer_headers)
        assert response.status_code == 403
        assert response.json()["error"]["code"] == "unauthorized"

        case = client.get("/cases/CASE-001").json()
        assert case["status"] == "Under Review"
        assert case["ruling"] is None

    def test_anonymous_forbidden(self, client):
        assert client.post("/cases/CASE-002/ruling", json={"favored_party": "split"}).status_code == 403

    def test_unknown_case(self, client):
        response = client.post("/cases/CASE-404/ruling", json={"favored_party": "split"}, headers=JUDGE_HEADERS)
        assert response.status_code == 404

    def test_bad_favored_party(self, client):
        response = client.post("/cases/CASE-001/ruling", json={"favored_party": "jury"}, headers=JUDGE_HEADERS)
        assert response.status_code == 400
