def _create_note(client, headers, title="t1", content="c1", tags=None):
    r = client.post("/api/notes", headers=headers, json={"title": title, "content": content, "tags": tags})
    assert r.status_code == 201, r.text
    return r.json()["id"]


def test_note_access_is_isolated_per_user(client, login_as):
    user_a = login_as("userAAAA")
    user_b = login_as("userBBBB")

    note_id = _create_note(client, user_a)

    # userA can list and see the note
    r = client.get("/api/notes", headers=user_a)
    assert r.status_code == 200
    assert any(n["id"] == note_id for n in r.json()["notes"])

    # userB cannot read, modify or favorite it (no existence leak)
    assert client.get(f"/api/notes/{note_id}", headers=user_b).status_code == 404
    r = client.put(f"/api/notes/{note_id}", headers=user_b, json={"title": "x", "content": "y"})
    assert r.status_code == 404
    assert client.put(f"/api/notes/{note_id}/favorites", headers=user_b).status_code == 404

    # and deleting it is a silent no-op
    assert client.delete(f"/api/notes/{note_id}", headers=user_b).status_code == 200
    r = client.get(f"/api/notes/{note_id}", headers=user_a)
    assert r.status_code == 200
    assert r.json()["title"] == "t1"


def test_invalid_note_id_is_rejected(client, auth_headers):
    # malformed identifier is rejected before business logic
    r = client.get("/api/notes/not-an-int", headers=auth_headers)
    assert r.status_code == 422


def test_duplicate_title_is_400(client, auth_headers):
    _create_note(client, auth_headers, title="Groceries", content="milk, eggs")
    r = client.post("/api/notes", headers=auth_headers, json={"title": "Groceries", "content": "bread"})
    assert r.status_code == 400
    assert r.json()["code"] == "validation"


def test_update_and_search(client, auth_headers):
    note_id = _create_note(client, auth_headers, title="Groceries", content="milk")
    _create_note(client, auth_headers, title="Work", content="report", tags=["office"])

    r = client.put(
        f"/api/notes/{note_id}",
        headers=auth_headers,
        json={"title": "Groceries", "content": "milk, eggs", "tags": ["home"]},
    )
    assert r.status_code == 200

    r = client.get("/api/notes/search", headers=auth_headers, params={"query": "eggs"})
    assert [n["id"] for n in r.json()["notes"]] == [note_id]

    r = client.get("/api/notes/search", headers=auth_headers, params={"query": "office"})
    assert [n["title"] for n in r.json()["notes"]] == ["Work"]

    r = client.get("/api/notes/search", headers=auth_headers)
    assert r.status_code == 422


def test_favorites_endpoints(client, auth_headers):
    note_id = _create_note(client, auth_headers)

    assert client.put(f"/api/notes/{note_id}/favorites", headers=auth_headers).status_code == 200
    r = client.get("/api/notes/favorites", headers=auth_headers)
    assert [n["id"] for n in r.json()["notes"]] == [note_id]
    assert r.json()["notes"][0]["is_favorite"] is True

    assert client.delete(f"/api/notes/{note_id}/favorites", headers=auth_headers).status_code == 200
    assert client.get("/api/notes/favorites", headers=auth_headers).json()["notes"] == []

    assert client.put("/api/notes/9999/favorites", headers=auth_headers).status_code == 404


def test_move_note_and_notebook(client, auth_headers):
    r = client.post("/api/folders", headers=auth_headers, json={"title": "F"})
    assert r.status_code == 201
    folder_id = r.json()["id"]

    note1 = _create_note(client, auth_headers, title="note1")
    note2 = _create_note(client, auth_headers, title="note2")

    r = client.put(f"/api/notes/{note1}/move", headers=auth_headers, json={"folder_id": folder_id})
    assert r.status_code == 200

    r = client.put(f"/api/notes/{note2}/move", headers=auth_headers, json={"folder_id": 9999})
    assert r.status_code == 404

    r = client.get("/api/notebook", headers=auth_headers)
    assert r.status_code == 200
    body = r.json()
    assert [f["id"] for f in body["folders"]] == [folder_id]
    assert [n["id"] for n in body["folders"][0]["notes"]] == [note1]
    assert [n["id"] for n in body["notes"]] == [note2]

    r = client.put(f"/api/notes/{note1}/move", headers=auth_headers, json={"folder_id": None})
    assert r.status_code == 200
    body = client.get("/api/notebook", headers=auth_headers).json()
    assert body["folders"][0]["notes"] == []
    assert sorted(n["id"] for n in body["notes"]) == [note1, note2]


def test_folder_endpoints(client, login_as):
    user_a = login_as("userAAAA")
    user_b = login_as("userBBBB")

    folder_id = client.post("/api/folders", headers=user_a, json={"title": "X"}).json()["id"]
    # same title for another user is fine
    assert client.post("/api/folders", headers=user_b, json={"title": "X"}).status_code == 201
    assert client.post("/api/folders", headers=user_a, json={"title": "X"}).status_code == 400

    assert client.put(f"/api/folders/{folder_id}", headers=user_b, json={"title": "Y"}).status_code == 404
    assert client.put(f"/api/folders/{folder_id}", headers=user_a, json={"title": "Y"}).status_code == 200

    assert client.delete(f"/api/folders/{folder_id}", headers=user_a).status_code == 200
    assert client.delete(f"/api/folders/{folder_id}", headers=user_a).status_code == 200
    assert client.get("/api/notebook", headers=user_a).json()["folders"] == []


def test_sql_backend_serves_same_api(tmp_path, monkeypatch):
    from fastapi.testclient import TestClient

    from notes_api.config import load_settings
    from notes_api.main import create_app

    monkeypatch.setenv("STORAGE_BACKEND", "sql")
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'notes.db'}")

    with TestClient(create_app(load_settings())) as client:
        r = client.post(
            "/api/user",
            json={"login": "userAAAA", "password": "StrongPassw0rd!", "name": "A", "surname": "B"},
        )
        assert r.status_code == 201
        token = client.post(
            "/api/auth/login", json={"login": "userAAAA", "password": "StrongPassw0rd!"}
        ).json()["access_token"]
        headers = {"Authorization": f"Bearer {token}"}

        note_id = _create_note(client, headers, tags=["x"])
        r = client.get(f"/api/notes/{note_id}", headers=headers)
        assert r.status_code == 200
        assert r.json()["tags"] == ["x"]
