"""Tests for the /api/vector-collections/{username} endpoints."""

import pytest

BASE = "/api/vector-collections"


def _register(client, name, owner="alice", **extra):
    resp = client.post(f"{BASE}/{owner}", json={"name": name, **extra})
    assert resp.status_code == 201, resp.text
    return resp.json()


class TestRegistry:

    def test_list_empty(self, client):
        resp = client.get(f"{BASE}/alice")
        assert resp.status_code == 200
        assert resp.json() == {"rows": []}

    def test_register_and_list_sorted_by_name(self, client):
        _register(client, "zeta.txt")
        _register(client, "alpha.txt")
        rows = client.get(f"{BASE}/alice").json()["rows"]
        assert [r["name"] for r in rows] == ["alpha.txt", "zeta.txt"]
        assert all(r["active"] for r in rows)
        assert len({r["uuid"] for r in rows}) == 2

    def test_duplicate_name_returns_400(self, client):
        _register(client, "a.txt")
        resp = client.post(f"{BASE}/alice", json={"name": "a.txt"})
        assert resp.status_code == 400

    def test_same_name_for_other_owner_is_fine(self, client):
        _register(client, "a.txt")
        _register(client, "a.txt", owner="bob")
        assert len(client.get(f"{BASE}/bob").json()["rows"]) == 1

    def test_register_into_foreign_folder_returns_404(self, client):
        folder = client.post("/api/folders/bob", json={"name": "Private"}).json()
        resp = client.post(f"{BASE}/alice", json={"name": "a.txt", "folder_id": folder["id"]})
        assert resp.status_code == 404

    @pytest.mark.parametrize("name", ["", "   ", "a/b"])
    def test_bad_names_return_400(self, client, name):
        resp = client.post(f"{BASE}/alice", json={"name": name})
        assert resp.status_code == 400


class TestToggle:

    def test_toggle_off_and_on(self, client):
        _register(client, "a.txt")
        resp = client.post(f"{BASE}/alice/toggle", json={"name": "a.txt", "active": False})
        assert resp.status_code == 200
        assert resp.json() == {"success": True, "updated": 1}
        assert client.get(f"{BASE}/alice").json()["rows"][0]["active"] is False

        client.post(f"{BASE}/alice/toggle", json={"name": "a.txt", "active": True})
        assert client.get(f"{BASE}/alice").json()["rows"][0]["active"] is True

    def test_toggle_unknown_name_is_silent(self, client):
        resp = client.post(f"{BASE}/alice/toggle", json={"name": "ghost", "active": False})
        assert resp.status_code == 200
        assert resp.json()["updated"] == 0

    def test_toggle_does_not_cross_owners(self, client):
        _register(client, "a.txt", owner="bob")
        resp = client.post(f"{BASE}/alice/toggle", json={"name": "a.txt", "active": False})
        assert resp.json()["updated"] == 0
        assert client.get(f"{BASE}/bob").json()["rows"][0]["active"] is True

    def test_missing_active_returns_400(self, client):
        resp = client.post(f"{BASE}/alice/toggle", json={"name": "a.txt"})
        assert resp.status_code == 400
        assert resp.json()["error"] == "VALIDATION_ERROR"


class TestMove:

    def test_move_into_folder_and_back_out(self, client):
        _register(client, "a.txt")
        folder = client.post("/api/folders/alice", json={"name": "Work"}).json()

        resp = client.post(f"{BASE}/alice/move", json={"name": "a.txt", "folder_id": folder["id"]})
        assert resp.status_code == 200
        assert resp.json()["folder_id"] == folder["id"]

        resp = client.post(f"{BASE}/alice/move", json={"name": "a.txt", "folder_id": None})
        assert resp.json()["folder_id"] is None

    def test_move_unknown_item_returns_404(self, client):
        resp = client.post(f"{BASE}/alice/move", json={"name": "ghost", "folder_id": None})
        assert resp.status_code == 404
        assert resp.json()["error"] == "ITEM_NOT_FOUND"

    def test_move_into_foreign_folder_returns_404(self, client):
        _register(client, "a.txt")
        folder = client.post("/api/folders/bob", json={"name": "Private"}).json()
        resp = client.post(f"{BASE}/alice/move", json={"name": "a.txt", "folder_id": folder["id"]})
        assert resp.status_code == 404
        assert resp.json()["error"] == "FOLDER_NOT_FOUND"


class TestVectorsAndDelete:

    def test_append_vectors_accumulates(self, client):
        _register(client, "a.txt")
        chunks = [{"content": "one", "embedding": [0.1, 0.2]}, {"content": "two"}]
        resp = client.post(f"{BASE}/alice/a.txt/vectors", json={"chunks": chunks})
        assert resp.status_code == 201
        assert resp.json() == {"success": True, "appended": 2, "total": 2}

        resp = client.post(f"{BASE}/alice/a.txt/vectors", json={"chunks": [{"content": "three"}]})
        assert resp.json()["total"] == 3

    def test_append_to_unknown_item_returns_404(self, client):
        resp = client.post(f"{BASE}/alice/ghost/vectors", json={"chunks": [{"content": "x"}]})
        assert resp.status_code == 404

    def test_delete_removes_item_and_vectors(self, client):
        _register(client, "a.txt")
        client.post(f"{BASE}/alice/a.txt/vectors", json={"chunks": [{"content": "x"}, {"content": "y"}]})

        resp = client.delete(f"{BASE}/alice/a.txt")

        assert resp.status_code == 200
        assert resp.json() == {"success": True, "deleted_vectors": 2}
        assert client.get(f"{BASE}/alice").json()["rows"] == []

    def test_delete_unknown_returns_404(self, client):
        assert client.delete(f"{BASE}/alice/ghost").status_code == 404

    def test_tree_matches_folder_tree(self, client):
        _register(client, "a.txt")
        assert client.get(f"{BASE}/alice/tree").json() == client.get("/api/folders/alice/tree").json()
