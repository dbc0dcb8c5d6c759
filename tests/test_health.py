"""Tests for /, /health and /api/test endpoints."""


class TestHealth:

    def test_health_returns_200(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "healthy"
        assert data["db"] == "ok"
        assert "uptime_seconds" in data
        assert "version" in data
        assert data["note_count"] == 0

    def test_health_counts_visible_notes(self, client, alice):
        client.post("/api/notes", json={"title": "a"}, headers=alice)
        note = client.post("/api/notes", json={"title": "b"}, headers=alice).json()["note"]
        client.delete(f"/api/notes/{note['note_id']}", headers=alice)
        assert client.get("/health").json()["note_count"] == 1

    def test_root_returns_api_info(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        assert resp.json()["name"] == "tgvault API"

    def test_smoke_endpoint(self, client):
        resp = client.get("/api/test")
        assert resp.status_code == 200
        assert "timestamp" in resp.json()


class TestResponseHeaders:

    def test_response_includes_middleware_headers(self, client):
        resp = client.get("/health")
        assert "x-request-id" in resp.headers
        assert "x-response-time" in resp.headers

    def test_request_id_is_propagated(self, client):
        resp = client.get("/", headers={"X-Request-ID": "abc123"})
        assert resp.headers["x-request-id"] == "abc123"
