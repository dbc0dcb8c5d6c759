"""Tests for the notes wiki: CRUD, soft delete, tree, search and attributes."""

from tests.conftest import owner_headers


def _note(client, headers, title="Note", parent_id=None, content=""):
    resp = client.post(
        "/api/notes",
        json={"title": title, "parent_id": parent_id, "content": content},
        headers=headers,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["note"]


class TestOwnerToken:

    def test_missing_token_returns_401(self, client):
        resp = client.get("/api/notes")
        assert resp.status_code == 401
        assert resp.json()["error"] == "UNAUTHORIZED"

    def test_garbage_token_returns_401(self, client):
        resp = client.get("/api/notes", headers={"Authorization": "Bearer not-a-token!"})
        assert resp.status_code == 401


class TestNoteCrud:

    def test_list_empty(self, client, alice):
        resp = client.get("/api/notes", headers=alice)
        assert resp.status_code == 200
        assert resp.json() == {"rows": []}

    def test_create_defaults(self, client, alice):
        resp = client.post("/api/notes", json={}, headers=alice)
        assert resp.status_code == 201
        note = resp.json()["note"]
        assert note["title"] == "Новая заметка"
        assert note["content"] == ""
        assert note["type"] == "note"
        assert note["owner"] == "alice"
        assert note["parent_note_id"] is None

    def test_get_includes_attributes(self, client, alice):
        note = _note(client, alice, "Recipes")
        client.post(
            f"/api/notes/{note['note_id']}/attributes",
            json={"name": "tag", "value": "food"},
            headers=alice,
        )
        resp = client.get(f"/api/notes/{note['note_id']}", headers=alice)
        assert resp.status_code == 200
        body = resp.json()
        assert body["title"] == "Recipes"
        assert [(a["name"], a["value"]) for a in body["attributes"]] == [("tag", "food")]

    def test_other_owner_cannot_read(self, client, alice, bob):
        note = _note(client, alice, "Secret")
        resp = client.get(f"/api/notes/{note['note_id']}", headers=bob)
        assert resp.status_code == 404
        assert resp.json()["error"] == "NOTE_NOT_FOUND"

    def test_create_under_foreign_parent_returns_400(self, client, alice, bob):
        parent = _note(client, alice, "Mine")
        resp = client.post("/api/notes", json={"parent_id": parent["note_id"]}, headers=bob)
        assert resp.status_code == 400

    def test_update_title_and_content(self, client, alice):
        note = _note(client, alice, "Draft")
        resp = client.put(
            f"/api/notes/{note['note_id']}",
            json={"title": "Final", "content": "<p>done</p>"},
            headers=alice,
        )
        assert resp.status_code == 200
        assert resp.json()["title"] == "Final"
        assert resp.json()["content"] == "<p>done</p>"

    def test_update_empty_body_returns_400(self, client, alice):
        note = _note(client, alice)
        resp = client.put(f"/api/notes/{note['note_id']}", json={}, headers=alice)
        assert resp.status_code == 400
        assert resp.json()["error"] == "NO_FIELDS_SUPPLIED"

    def test_reparent_and_move_to_root(self, client, alice):
        a = _note(client, alice, "A")
        b = _note(client, alice, "B")
        resp = client.put(f"/api/notes/{b['note_id']}", json={"parent_id": a["note_id"]}, headers=alice)
        assert resp.json()["parent_note_id"] == a["note_id"]
        resp = client.put(f"/api/notes/{b['note_id']}", json={"parent_id": None}, headers=alice)
        assert resp.json()["parent_note_id"] is None

    def test_reparent_under_descendant_rejected(self, client, alice):
        a = _note(client, alice, "A")
        b = _note(client, alice, "B", a["note_id"])
        resp = client.put(f"/api/notes/{a['note_id']}", json={"parent_id": b["note_id"]}, headers=alice)
        assert resp.status_code == 400

    def test_reparent_through_deleted_descendant_rejected(self, client, alice):
        """A -> B (deleted) -> C: moving A under C would close a hidden loop."""
        a = _note(client, alice, "A")
        b = _note(client, alice, "B", a["note_id"])
        c = _note(client, alice, "C", b["note_id"])
        client.delete(f"/api/notes/{b['note_id']}", headers=alice)

        resp = client.put(f"/api/notes/{a['note_id']}", json={"parent_id": c["note_id"]}, headers=alice)

        assert resp.status_code == 400
        assert client.get(f"/api/notes/{a['note_id']}", headers=alice).json()["parent_note_id"] is None

    def test_reparent_under_itself_rejected(self, client, alice):
        a = _note(client, alice, "A")
        resp = client.put(f"/api/notes/{a['note_id']}", json={"parent_id": a["note_id"]}, headers=alice)
        assert resp.status_code == 400


class TestSoftDelete:

    def test_soft_deleted_middle_note(self, client, alice):
        """R -> C1 -> C2; deleting C1 hides it and surfaces C2 at the root."""
        root = _note(client, alice, "R")
        c1 = _note(client, alice, "C1", root["note_id"])
        c2 = _note(client, alice, "C2", c1["note_id"])

        resp = client.delete(f"/api/notes/{c1['note_id']}", headers=alice)
        assert resp.status_code == 200
        assert resp.json() == {"success": True}

        rows = client.get("/api/notes", headers=alice).json()["rows"]
        assert {r["note_id"] for r in rows} == {root["note_id"], c2["note_id"]}
        assert client.get(f"/api/notes/{c1['note_id']}", headers=alice).status_code == 404

        stored = client.get(f"/api/notes/{c2['note_id']}", headers=alice).json()
        assert stored["parent_note_id"] == c1["note_id"]

        tree = client.get("/api/notes/tree", headers=alice).json()
        by_id = {n["note_id"]: n for n in tree}
        assert set(by_id) == {root["note_id"], c2["note_id"]}
        assert by_id[root["note_id"]]["children"] == []

    def test_delete_twice_returns_404(self, client, alice):
        note = _note(client, alice)
        client.delete(f"/api/notes/{note['note_id']}", headers=alice)
        assert client.delete(f"/api/notes/{note['note_id']}", headers=alice).status_code == 404


class TestNoteTree:

    def test_nested_tree(self, client, alice):
        root = _note(client, alice, "Root")
        child = _note(client, alice, "Child", root["note_id"])
        _note(client, alice, "Grandchild", child["note_id"])

        tree = client.get("/api/notes/tree", headers=alice).json()

        assert len(tree) == 1
        assert tree[0]["title"] == "Root"
        assert tree[0]["children"][0]["title"] == "Child"
        assert tree[0]["children"][0]["children"][0]["title"] == "Grandchild"

    def test_tree_is_owner_scoped(self, client, alice):
        _note(client, alice, "Mine")
        assert client.get("/api/notes/tree", headers=owner_headers("carol")).json() == []


class TestSearch:

    def test_matches_title_and_content_at_any_depth(self, client, alice):
        root = _note(client, alice, "Travel")
        deep = _note(client, alice, "Packing", root["note_id"], content="bring a PASSPORT")
        _note(client, alice, "Groceries")

        resp = client.get("/api/notes/search", params={"q": "passport"}, headers=alice)

        assert resp.status_code == 200
        results = resp.json()
        assert [r["note_id"] for r in results] == [deep["note_id"]]
        assert results[0]["matched_in"] == ["content"]

    def test_matches_attributes(self, client, alice):
        note = _note(client, alice, "Soup")
        client.post(f"/api/notes/{note['note_id']}/attributes", json={"name": "cuisine", "value": "Georgian"}, headers=alice)
        results = client.get("/api/notes/search", params={"q": "georgian"}, headers=alice).json()
        assert results[0]["matched_in"] == ["attributes"]

    def test_does_not_return_other_owners_notes(self, client, alice, bob):
        _note(client, alice, "Shared word")
        assert client.get("/api/notes/search", params={"q": "shared"}, headers=bob).json() == []

    def test_empty_query_returns_400(self, client, alice):
        assert client.get("/api/notes/search", params={"q": ""}, headers=alice).status_code == 400

    def test_whitespace_query_returns_400(self, client, alice):
        _note(client, alice, "Anything")
        resp = client.get("/api/notes/search", params={"q": "   "}, headers=alice)
        assert resp.status_code == 400
        assert resp.json()["details"]["field"] == "q"

    def test_matches_visible_text_not_markup(self, client, alice):
        note = _note(client, alice, "Groceries", content="<p><strong>milk</strong></p>")

        hits = client.get("/api/notes/search", params={"q": "milk"}, headers=alice).json()
        assert [(r["note_id"], r["matched_in"]) for r in hits] == [(note["note_id"], ["content"])]

        for markup in ("strong", "p", "<p>"):
            resp = client.get("/api/notes/search", params={"q": markup}, headers=alice)
            assert resp.json() == [], markup


class TestAttributes:

    def test_update_and_delete(self, client, alice):
        note = _note(client, alice)
        attr = client.post(
            f"/api/notes/{note['note_id']}/attributes",
            json={"name": "status", "value": "draft"},
            headers=alice,
        ).json()
        assert attr["type"] == "label"

        resp = client.put(f"/api/attributes/{attr['id']}", json={"value": "done"}, headers=alice)
        assert resp.status_code == 200
        assert resp.json()["value"] == "done"
        assert resp.json()["name"] == "status"

        assert client.delete(f"/api/attributes/{attr['id']}", headers=alice).status_code == 204
        detail = client.get(f"/api/notes/{note['note_id']}", headers=alice).json()
        assert detail["attributes"] == []

    def test_other_owner_gets_404(self, client, alice, bob):
        note = _note(client, alice)
        attr = client.post(
            f"/api/notes/{note['note_id']}/attributes", json={"name": "k"}, headers=alice
        ).json()
        assert client.put(f"/api/attributes/{attr['id']}", json={"value": "x"}, headers=bob).status_code == 404
        assert client.delete(f"/api/attributes/{attr['id']}", headers=bob).status_code == 404

    def test_update_without_fields_returns_400(self, client, alice):
        note = _note(client, alice)
        attr = client.post(
            f"/api/notes/{note['note_id']}/attributes", json={"name": "k"}, headers=alice
        ).json()
        assert client.put(f"/api/attributes/{attr['id']}", json={}, headers=alice).status_code == 400
