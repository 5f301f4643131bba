"""Integration tests for the HTTP endpoints."""

import httpx

from src.config import LYZR_API_URL, LYZR_UPLOAD_URL
from src.web import agent_client


class TestHealth:
    def test_health(self, client):
        res = client.get("/api/health")
        assert res.status_code == 200
        assert res.json() == {"status": "ok"}

    def test_preflight(self, client):
        for path in ("/api/agent", "/api/upload"):
            res = client.options(path)
            assert res.status_code == 200
            assert res.headers["access-control-allow-origin"] == "*"
            assert "POST" in res.headers["access-control-allow-methods"]


class TestParseEndpoint:
    def test_recovers_with_defaults(self, client):
        res = client.post("/api/parse", json={"text": "Here: {'a': 1}"})
        assert res.status_code == 200
        body = res.json()
        assert body["succeeded"] is True
        assert body["strategy_used"] == "extracted+fixed"
        assert body["value"]["data"] == {"a": 1}

    def test_options_applied(self, client):
        res = client.post("/api/parse", json={"text": "{a: 1}", "options": {"attempt_fix": False}})
        assert res.json()["succeeded"] is False

    def test_failure_keeps_text(self, client):
        res = client.post("/api/parse", json={"text": "nothing here"})
        body = res.json()
        assert body["succeeded"] is False
        assert body["value"] is None
        assert body["original_text"] == "nothing here"

    def test_missing_text(self, client):
        res = client.post("/api/parse", json={"options": {}})
        assert res.status_code == 400

    def test_invalid_options(self, client):
        res = client.post("/api/parse", json={"text": "{}", "options": {"max_blocks": "lots"}})
        assert res.status_code == 422


class TestAgentEndpoint:
    def test_not_configured(self, client, monkeypatch):
        monkeypatch.setattr(agent_client, "LYZR_API_KEY", "")
        res = client.post("/api/agent", json={"message": "hi", "agent_id": "a1"})
        assert res.status_code == 500
        assert "LYZR_API_KEY" in res.json()["error"]

    def test_missing_fields(self, client, fake_agent_api):
        res = client.post("/api/agent", json={"message": "hi"})
        assert res.status_code == 400
        assert res.json()["success"] is False
        assert fake_agent_api.requests == []

    def test_forwards_payload(self, client, fake_agent_api):
        fake_agent_api.body = {"response": '{"result": "ok"}'}
        res = client.post("/api/agent", json={
            "message": {"question": "why"},
            "agent_id": "a1",
            "assets": ["asset-1"],
        })
        assert res.status_code == 200

        req = fake_agent_api.last_request
        assert str(req.url) == LYZR_API_URL
        assert req.headers["x-api-key"] == "test-key"
        sent = fake_agent_api.last_json
        assert sent["message"] == '{"question": "why"}'
        assert sent["agent_id"] == "a1"
        assert sent["assets"] == ["asset-1"]
        assert sent["user_id"].startswith("user-")
        assert sent["session_id"].startswith("session-")

    def test_keeps_caller_ids(self, client, fake_agent_api):
        fake_agent_api.body = {"response": "hi"}
        res = client.post("/api/agent", json={
            "message": "hi", "agent_id": "a1", "user_id": "u9", "session_id": "s9",
        })
        body = res.json()
        assert body["user_id"] == "u9"
        assert body["session_id"] == "s9"
        assert "assets" not in fake_agent_api.last_json

    def test_fenced_reply_parsed(self, client, fake_agent_api, fenced_reply):
        fake_agent_api.body = {"response": fenced_reply}
        body = client.post("/api/agent", json={"message": "poem", "agent_id": "a1"}).json()
        assert body["success"] is True
        assert body["response"] == {"result": "Roses are red", "confidence": 0.9}
        assert body["raw_response"] == fenced_reply
        assert body["_parse_succeeded"] is True
        assert body["_has_valid_data"] is True

    def test_plain_text_reply(self, client, fake_agent_api):
        fake_agent_api.body = {"response": "Hello there!"}
        body = client.post("/api/agent", json={"message": "hi", "agent_id": "a1"}).json()
        assert body["response"] == "Hello there!"
        assert body["_has_valid_data"] is True

    def test_object_reply_passthrough(self, client, fake_agent_api):
        fake_agent_api.body = {"response": {"answer": 42}}
        body = client.post("/api/agent", json={"message": "q", "agent_id": "a1"}).json()
        assert body["response"] == {"answer": 42}
        assert body["_has_valid_data"] is True

    def test_upstream_error(self, client, fake_agent_api):
        fake_agent_api.status_code = 503
        fake_agent_api.body = "upstream down"
        res = client.post("/api/agent", json={"message": "hi", "agent_id": "a1"})
        assert res.status_code == 503
        body = res.json()
        assert body["success"] is False
        assert body["error"] == "API returned status 503"
        assert body["details"] == "upstream down"

    def test_transport_error(self, client, fake_agent_api):
        fake_agent_api.error = httpx.ConnectError("refused")
        res = client.post("/api/agent", json={"message": "hi", "agent_id": "a1"})
        assert res.status_code == 500
        assert res.json()["error"] == "Internal server error"


class TestUploadEndpoint:
    def test_forwards_files(self, client, fake_agent_api):
        fake_agent_api.body = {
            "results": [
                {"success": True, "asset_id": "as-1", "file_name": "a.txt"},
                {"success": False, "file_name": "b.png"},
            ],
            "total_files": 2,
            "successful_uploads": 1,
            "failed_uploads": 1,
        }
        res = client.post("/api/upload", files=[
            ("files", ("a.txt", b"hello", "text/plain")),
            ("files", ("b.png", b"\x89PNG", "image/png")),
        ])
        assert res.status_code == 200
        body = res.json()
        assert body["asset_ids"] == ["as-1"]
        assert body["total_files"] == 2
        assert body["failed_uploads"] == 1
        assert body["message"] == "Successfully uploaded 1 file(s)"

        req = fake_agent_api.last_request
        assert str(req.url) == LYZR_UPLOAD_URL
        assert req.headers["x-api-key"] == "test-key"
        assert b"hello" in req.content
        assert b'filename="b.png"' in req.content

    def test_no_files(self, client, fake_agent_api):
        res = client.post("/api/upload", data={"other": "x"})
        assert res.status_code == 400
        assert fake_agent_api.requests == []

    def test_upstream_error(self, client, fake_agent_api):
        fake_agent_api.status_code = 413
        fake_agent_api.body = "too big"
        res = client.post("/api/upload", files=[("files", ("a.txt", b"x", "text/plain"))])
        assert res.status_code == 413
        assert res.json()["error"] == "Upload failed with status 413"
