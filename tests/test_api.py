"""Tests for the REST API."""

import asyncio
import time

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from json_form_builder.api.app import create_app
from json_form_builder.api.server import JSONFormServer, set_server
from json_form_builder.models.errors import TransportException

from conftest import FakeTransport

URL = "https://api.example.test/posts"


@pytest.fixture
def fake_transport():
    return FakeTransport(payload={"id": 101})


@pytest.fixture
def server(server_config, fake_transport):
    server = JSONFormServer(config=server_config, transport=fake_transport, start_cleanup=False)
    yield server
    set_server(None)


@pytest.fixture
def client(server):
    return TestClient(create_app(server))


@pytest.fixture
def session_id(client):
    response = client.post("/sessions")
    assert response.status_code == 201
    return response.json()["session_id"]


def error_code(response):
    return response.json()["detail"]["error_code"]


class TestServerEndpoints:

    def test_root(self, client):
        body = client.get("/").json()
        assert body["name"] == "JSON Form Builder API"
        assert "POST /sessions/{id}/call" in body["endpoints"]

    def test_health(self, client, session_id):
        body = client.get("/health").json()
        assert body["status"] == "healthy"
        assert body["active_sessions"] == 1
        assert body["components"]["template_catalog"]["templates"] == 6
        assert body["components"]["transport"]["type"] == "FakeTransport"

    def test_info(self, client):
        body = client.get("/info").json()
        assert body["name"] == "json-form-builder"
        assert body["config"]["max_document_size"] == 2048
        assert [example["method"] for example in body["examples"]] == ["GET", "POST", "PUT"]


class TestCatalogEndpoints:

    def test_list_templates(self, client):
        body = client.get("/templates").json()
        assert body["total"] == 6
        assert [group["group"] for group in body["groups"]] == ["User Data", "E-commerce", "API Responses"]

    def test_get_template(self, client):
        body = client.get("/templates/api-error").json()
        assert body["method"] == "GET"
        assert body["data"]["error"]["code"] == 404

    def test_unknown_template(self, client):
        response = client.get("/templates/nope")
        assert response.status_code == 404
        assert error_code(response) == "TEMPLATE_NOT_FOUND"
        assert response.json()["detail"]["error_type"] == "template"

    def test_example_for_method(self, client):
        body = client.get("/examples/put").json()
        assert body == {
            "method": "PUT",
            "url": "https://jsonplaceholder.typicode.com/posts/1",
            "description": "Update an existing post (JSON will be sent in request body)",
        }

    def test_example_for_unsupported_method(self, client):
        response = client.get("/examples/delete")
        assert response.status_code == 400
        assert error_code(response) == "UNSUPPORTED_METHOD"


class TestStatelessEndpoints:

    def test_validate_valid_text(self, client):
        body = client.post("/validate", json={"text": '{"a": 1, "b": {"c": 2, "d": 3}}'}).json()
        assert body["validity"] == "valid"
        assert body["parsed"] == {"a": 1, "b": {"c": 2, "d": 3}}
        assert body["formatted"].startswith('{\n  "a": 1')
        assert body["stats"] == {"line_count": 1, "char_count": 25, "key_count": 4}

    def test_validate_invalid_text(self, client):
        body = client.post("/validate", json={"text": '{"a": '}).json()
        assert body["validity"] == "invalid"
        assert body["diagnostic"]
        assert body["stats"] is None

    def test_validate_empty_text(self, client):
        body = client.post("/validate", json={"text": ""}).json()
        assert body["validity"] == "empty"
        assert body["diagnostic"] is None

    def test_oversized_text_is_rejected(self, client):
        response = client.post("/validate", json={"text": " " * 3000})
        assert response.status_code == 413

    def test_highlight(self, client):
        body = client.post("/highlight", json={"text": '{"a": true}'}).json()
        assert [token["category"] for token in body["tokens"]] == ["structural", "key", "boolean", "structural"]
        assert body["tokens"][1] == {"start": 1, "end": 5, "category": "key", "text": '"a":'}


class TestSessionEndpoints:

    def test_create_session_snapshot(self, client):
        body = client.post("/sessions").json()
        assert len(body["session_id"]) == 32
        assert body["validity"] == "empty"
        assert body["method"] == "POST"
        assert body["call_state"] == "ready"
        assert body["can_call"] is False

    def test_list_sessions(self, client, session_id):
        body = client.get("/sessions").json()
        assert body["active_sessions"] == 1
        assert body["sessions"][session_id]["method"] == "POST"
        assert body["sessions"][session_id]["validity"] == "empty"

    def test_listing_sessions_does_not_extend_their_ttl(self, client, server, session_id):
        manager = server.session_manager
        controller, _ = manager._sessions[session_id]
        manager._sessions[session_id] = (controller, time.time() + 5)

        for _ in range(3):
            assert session_id in client.get("/sessions").json()["sessions"]

        assert manager.get_ttl(session_id) <= 5

        manager._sessions[session_id] = (controller, time.time() - 1)
        assert client.get("/sessions").json()["active_sessions"] == 0

    def test_unknown_session(self, client):
        response = client.get("/sessions/missing")
        assert response.status_code == 404
        assert error_code(response) == "SESSION_NOT_FOUND"

    def test_delete_session(self, client, session_id):
        assert client.delete(f"/sessions/{session_id}").status_code == 200
        assert client.get(f"/sessions/{session_id}").status_code == 404
        assert client.delete(f"/sessions/{session_id}").status_code == 404

    def test_edit_document(self, client, session_id):
        body = client.put(f"/sessions/{session_id}/document", json={"document": '{"x": [1, 2]}'}).json()
        assert body["validity"] == "valid"
        assert body["stats"]["key_count"] == 1
        assert body["can_format"] is True
        assert body["document_tokens"]

    def test_edit_oversized_document(self, client, session_id):
        response = client.put(f"/sessions/{session_id}/document", json={"document": "x" * 3000})
        assert response.status_code == 413

    def test_format_document(self, client, session_id):
        client.put(f"/sessions/{session_id}/document", json={"document": '{"a":1}'})
        body = client.post(f"/sessions/{session_id}/format").json()
        assert body["document"] == '{\n  "a": 1\n}'

    def test_format_invalid_document(self, client, session_id):
        client.put(f"/sessions/{session_id}/document", json={"document": '{"a":'})
        response = client.post(f"/sessions/{session_id}/format")
        assert response.status_code == 400
        assert error_code(response) == "DOCUMENT_NOT_VALID"

    def test_template_locks_request_until_reset(self, client, session_id):
        body = client.post(f"/sessions/{session_id}/template", json={"template_id": "user-detailed"}).json()
        assert body["template_locked"] is True
        assert body["method"] == "PUT"
        assert body["url"] == "https://jsonplaceholder.typicode.com/users/1"

        response = client.put(f"/sessions/{session_id}/request", json={"url": URL})
        assert response.status_code == 400
        assert error_code(response) == "TEMPLATE_LOCKED"

        body = client.post(f"/sessions/{session_id}/reset").json()
        assert body["template_locked"] is False
        assert body["document"] == ""
        assert body["url"] == ""
        assert body["method"] == "PUT"

    def test_unknown_template_for_session(self, client, session_id):
        response = client.post(f"/sessions/{session_id}/template", json={"template_id": "nope"})
        assert response.status_code == 404

    def test_update_request(self, client, session_id):
        body = client.put(f"/sessions/{session_id}/request", json={"method": "GET", "url": URL}).json()
        assert body["method"] == "GET"
        assert body["url"] == URL
        assert body["can_call"] is True

    def test_update_request_rejects_unknown_method(self, client, session_id):
        response = client.put(f"/sessions/{session_id}/request", json={"method": "PATCH"})
        assert response.status_code == 422

    def test_load_example(self, client, session_id):
        body = client.post(f"/sessions/{session_id}/example").json()
        assert body["url"] == "https://jsonplaceholder.typicode.com/posts"

    def test_copy_document(self, client, session_id):
        assert client.post(f"/sessions/{session_id}/copy").json() == {"copied": False, "text": None}
        client.put(f"/sessions/{session_id}/document", json={"document": '{"a": 1}'})
        assert client.post(f"/sessions/{session_id}/copy").json() == {"copied": True, "text": '{"a": 1}'}


class TestCallEndpoint:

    def test_get_call(self, client, session_id, fake_transport):
        client.put(f"/sessions/{session_id}/document", json={"document": '{"a": {"b": 1}, "c": [1, 2]}'})
        client.put(f"/sessions/{session_id}/request", json={"method": "GET", "url": URL})

        body = client.post(f"/sessions/{session_id}/call").json()

        assert body["dispatched"] is True
        assert body["session"]["call_state"] == "succeeded"
        assert body["session"]["response"]["status_code"] == 200
        assert body["session"]["response"]["payload"] == {"id": 101}
        assert body["session"]["response_tokens"]
        assert fake_transport.requests[0]["url"] == f"{URL}?a.b=1&c=1%2C2"

    def test_post_call(self, client, session_id, fake_transport):
        client.put(f"/sessions/{session_id}/document", json={"document": '{"title": "hi"}'})
        client.put(f"/sessions/{session_id}/request", json={"url": URL})

        body = client.post(f"/sessions/{session_id}/call").json()

        assert body["session"]["call_state"] == "succeeded"
        assert fake_transport.requests[0]["body"] == '{"title":"hi"}'

    def test_call_without_url(self, client, session_id):
        client.put(f"/sessions/{session_id}/document", json={"document": "{}"})
        response = client.post(f"/sessions/{session_id}/call")
        assert response.status_code == 400
        assert error_code(response) == "MISSING_URL"

    def test_post_call_without_valid_document(self, client, session_id):
        client.put(f"/sessions/{session_id}/request", json={"url": URL})
        response = client.post(f"/sessions/{session_id}/call")
        assert response.status_code == 400
        assert error_code(response) == "MISSING_BODY"

    def test_failed_call_is_reported_in_session(self, client, session_id, fake_transport):
        fake_transport.error = TransportException("CONNECTION_ERROR", "Request failed: refused")
        client.put(f"/sessions/{session_id}/document", json={"document": "{}"})
        client.put(f"/sessions/{session_id}/request", json={"url": URL})

        response = client.post(f"/sessions/{session_id}/call")

        assert response.status_code == 200
        assert response.json()["session"]["call_state"] == "failed"
        assert response.json()["session"]["call_error"] == "Request failed: refused"

    async def test_call_in_flight_conflicts(self, server, fake_transport):
        controller = server.session_manager.create_session()
        controller.edit("{}")
        controller.set_url(URL)
        fake_transport.gate = asyncio.Event()

        task = asyncio.create_task(server.call_api(controller.session_id))
        await fake_transport.started.wait()

        with pytest.raises(HTTPException) as exc_info:
            await server.call_api(controller.session_id)
        assert exc_info.value.status_code == 409
        assert exc_info.value.detail["error_code"] == "CALL_IN_PROGRESS"

        fake_transport.gate.set()
        result = await task
        assert result["dispatched"] is True
        assert len(fake_transport.requests) == 1
