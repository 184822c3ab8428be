"""Integration tests for the API with a scripted LLM."""

import base64
import json

import pytest
from conftest import MockLLM, RecordingNotifier, text_response, tool_call_response
from fastapi.testclient import TestClient

from construction_ai.agents.models import AgentEvent
from construction_ai.api.routes import _event_payload
from construction_ai.core.di_container import container as di_container
from construction_ai.documents.models import Citation
from construction_ai.main import create_app
from construction_ai.storage.blob import LocalBlobStore
from construction_ai.storage.memory import create_in_memory_repositories

USER = {"X-User-Id": "user-1"}
OTHER_USER = {"X-User-Id": "user-2"}


@pytest.fixture
def api_llm() -> MockLLM:
    return MockLLM()


@pytest.fixture
def client(api_llm, test_config, tmp_path):
    """Test client wired to in-memory storage and the scripted LLM."""
    di_container.reset_singletons()
    with (
        di_container.config.override(test_config),
        di_container.llm.override(api_llm),
        di_container.repositories.override(create_in_memory_repositories()),
        di_container.blob_store.override(LocalBlobStore(tmp_path / "blobs")),
        di_container.notifier.override(RecordingNotifier()),
        TestClient(create_app()) as test_client,
    ):
        yield test_client
    di_container.reset_singletons()


class TestHealthAPI:
    def test_health_endpoint(self, client):
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["llm_provider"] == "openai"
        assert data["storage_backend"] == "in_memory"

    def test_root(self, client):
        assert client.get("/").json()["health"] == "/api/v1/health"


class TestAuthAPI:
    def test_missing_user_header(self, client):
        response = client.get("/api/v1/documents")

        assert response.status_code == 401


class TestCalculationAPI:
    def test_area(self, client):
        response = client.post(
            "/api/v1/calculations",
            json={"calculation_type": "area", "values": {"length": 4, "width": 5}},
            headers=USER,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["result"] == 20
        assert data["explanation"] == "Area = 4 × 5 = 20 square units"
        assert data["error"] is None

    def test_missing_values(self, client):
        response = client.post(
            "/api/v1/calculations",
            json={"calculation_type": "volume", "values": {"length": 4}},
            headers=USER,
        )

        assert response.status_code == 200
        assert "Missing required values" in response.json()["error"]

    def test_unknown_calculation_type_rejected(self, client):
        response = client.post(
            "/api/v1/calculations",
            json={"calculation_type": "torque", "values": {}},
            headers=USER,
        )

        assert response.status_code == 422


class TestDocumentAPI:
    def test_upload_and_list(self, client):
        payload = {
            "file_name": "specs.txt",
            "file_type": "txt",
            "file_data": base64.b64encode(b"Concrete shall reach 4000 psi in 28 days for all footings.").decode(),
        }

        response = client.post("/api/v1/documents", json=payload, headers=USER)

        assert response.status_code == 201
        document = response.json()
        assert document["original_name"] == "specs.txt"
        assert document["processing_status"] in {"pending", "processing", "completed"}

        listed = client.get("/api/v1/documents", headers=USER).json()
        assert [d["id"] for d in listed] == [document["id"]]
        assert client.get("/api/v1/documents", headers=OTHER_USER).json() == []

    def test_multipart_upload(self, client):
        response = client.post(
            "/api/v1/documents/file",
            files={"file": ("schedule.txt", b"Milestone: foundation complete on day 40.", "text/plain")},
            data={"document_type": "cpm_schedule"},
            headers=USER,
        )

        assert response.status_code == 201
        assert response.json()["document_type"] == "cpm_schedule"

    def test_multipart_unsupported_extension(self, client):
        response = client.post(
            "/api/v1/documents/file",
            files={"file": ("drawing.dwg", b"binary", "application/octet-stream")},
            headers=USER,
        )

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_invalid_base64(self, client):
        payload = {"file_name": "specs.txt", "file_type": "txt", "file_data": "%%%"}

        response = client.post("/api/v1/documents", json=payload, headers=USER)

        assert response.status_code == 422
        assert response.json()["error"]["details"] == {"field": "file_data"}

    def test_other_users_document_is_not_found(self, client):
        payload = {"file_name": "specs.txt", "file_type": "txt", "file_data": base64.b64encode(b"x").decode()}
        document_id = client.post("/api/v1/documents", json=payload, headers=USER).json()["id"]

        response = client.get(f"/api/v1/documents/{document_id}", headers=OTHER_USER)

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    def test_delete(self, client):
        payload = {"file_name": "specs.txt", "file_type": "txt", "file_data": base64.b64encode(b"x").decode()}
        document_id = client.post("/api/v1/documents", json=payload, headers=USER).json()["id"]

        assert client.delete(f"/api/v1/documents/{document_id}", headers=USER).status_code == 200
        assert client.get(f"/api/v1/documents/{document_id}", headers=USER).status_code == 404


class TestConversationAPI:
    def test_conversation_lifecycle(self, client, api_llm):
        api_llm.script.append(text_response("Hello! Ask me about your documents."))

        created = client.post("/api/v1/conversations", json={}, headers=USER)
        assert created.status_code == 201
        conversation_id = created.json()["id"]
        assert created.json()["title"] == "New Chat"

        turn = client.post(
            f"/api/v1/conversations/{conversation_id}/messages",
            json={"message": "hello"},
            headers=USER,
        )
        assert turn.status_code == 200
        assert turn.json()["assistant_message"]["content"] == "Hello! Ask me about your documents."

        detail = client.get(f"/api/v1/conversations/{conversation_id}", headers=USER).json()
        assert detail["title"] == "hello"
        assert [m["role"] for m in detail["messages"]] == ["user", "assistant"]

        renamed = client.patch(f"/api/v1/conversations/{conversation_id}", json={"title": "Site A"}, headers=USER)
        assert renamed.json()["title"] == "Site A"

        assert client.delete(f"/api/v1/conversations/{conversation_id}", headers=USER).status_code == 200
        assert client.get(f"/api/v1/conversations/{conversation_id}", headers=USER).status_code == 404

    def test_message_to_other_users_conversation(self, client):
        conversation_id = client.post("/api/v1/conversations", json={}, headers=USER).json()["id"]

        response = client.post(
            f"/api/v1/conversations/{conversation_id}/messages",
            json={"message": "hi"},
            headers=OTHER_USER,
        )

        assert response.status_code == 404

    def test_stream_unknown_conversation(self, client):
        response = client.post(
            "/api/v1/conversations/missing/messages/stream",
            json={"message": "hi"},
            headers=USER,
        )

        assert response.status_code == 404

    def test_empty_message_rejected(self, client):
        conversation_id = client.post("/api/v1/conversations", json={}, headers=USER).json()["id"]

        response = client.post(
            f"/api/v1/conversations/{conversation_id}/messages",
            json={"message": ""},
            headers=USER,
        )

        assert response.status_code == 422

    def test_quick_ask(self, client, api_llm):
        api_llm.script.append(
            tool_call_response(("calculate_quantity", {"calculation_type": "area", "values": {"length": 4, "width": 5}}))
        )
        api_llm.script.append(text_response("The area is 20 square feet."))

        response = client.post("/api/v1/chat/quick-ask", json={"message": "Area of 4 by 5?"}, headers=USER)

        assert response.status_code == 200
        data = response.json()
        assert data["response"] == "The area is 20 square feet."
        assert data["tool_calls"][0]["tool"] == "calculate_quantity"
        assert data["tool_calls"][0]["output"]["result"] == 20


class TestReportAPI:
    def test_generate_and_fetch(self, client, api_llm):
        api_llm.script.append(text_response("# Requirements\nNone found."))

        created = client.post("/api/v1/reports", json={"report_type": "requirements_summary"}, headers=USER)

        assert created.status_code == 201
        report = created.json()
        assert report["title"] == "REQUIREMENTS SUMMARY Report"
        assert client.get(f"/api/v1/reports/{report['id']}", headers=USER).json()["content"].startswith("#")
        assert client.get(f"/api/v1/reports/{report['id']}", headers=OTHER_USER).status_code == 404


class TestStreamPayload:
    def test_content_event(self):
        payload = _event_payload(AgentEvent("content", "one two three"))

        assert payload == {"event": "content", "data": json.dumps({"content": "one two three"})}

    def test_citation_event(self):
        citation = Citation(document_id="d1", document_name="specs.txt", excerpt="Concrete", page_number=2)

        payload = _event_payload(AgentEvent("citation", citation))

        assert json.loads(payload["data"])["document_name"] == "specs.txt"
