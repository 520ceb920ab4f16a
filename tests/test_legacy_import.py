import json

from utils.legacy_import import import_document

LEGACY = {
    "users": [
        {"id": 212401, "username": "jsmith", "password": "pw1", "title": "Elder",
         "firstName": "John", "lastName": "Smith", "enabled": True},
        {"id": 212402, "username": "bob", "password": "pw2", "enabled": False},
        {"id": 212403, "username": "admin", "password": "clash"},
        {"username": "nopass"},
    ],
    "dates": [
        {"date": "2030-01-06",
         "opening": {"title": "Elder", "name": "Smith", "userId": 212401},
         "closing": {"title": "", "name": "Ghost", "userId": 1}},
        {"date": "2030-01-13",
         "opening": {"title": "Elder", "name": "Smith", "userId": 212401}},
        {"date": "06/01/2030"},
    ],
    "cancellations": [
        {"userId": 212402, "date": "2029-12-30", "slotType": "closing",
         "reason": "sick", "timestamp": "2029-12-27T10:00:00.000Z"},
    ],
    "auditLog": [
        {"action": "ADD_DATE", "userId": 212400, "context": {"date": "2030-01-06"},
         "timestamp": "2029-12-01T09:00:00.000Z"},
    ],
}


def test_import_document_counts(app):
    with app.app_context():
        counts = import_document(LEGACY)

    assert counts == {
        "users": 2,
        "dates": 2,
        "bookings": 1,
        "cancellations": 1,
        "audit": 1,
        # admin clash, nopass, ghost booking, second jsmith booking, bad date
        "skipped": 5,
    }


def test_imported_state_is_served(app, client, admin_headers):
    with app.app_context():
        import_document(LEGACY)

    doc = client.get("/admin/data", headers=admin_headers).get_json()
    assert [u["username"] for u in doc["users"]] == ["admin", "jsmith", "bob"]
    assert doc["dates"] == [
        {"date": "2030-01-06", "opening": {"title": "Elder", "name": "Smith", "userId": 212401}},
        {"date": "2030-01-13"},
    ]
    [c] = doc["cancellations"]
    assert c["timestamp"] == "2029-12-27T10:00:00"
    assert any(a["action"] == "ADD_DATE" for a in doc["auditLog"])


def test_imported_passwords_are_hashed(app, client, document):
    with app.app_context():
        import_document(LEGACY)

    assert client.post("/login", json={"username": "jsmith", "password": "pw1"}).status_code == 200
    # disabled in the legacy document
    assert client.post("/login", json={"username": "bob", "password": "pw2"}).status_code == 401

    assert "pw1" not in json.dumps(document())


def test_next_user_id_continues_after_import(app, add_user):
    with app.app_context():
        import_document(LEGACY)
    assert add_user("newcomer") == 212403


def test_import_data_cli(app, tmp_path):
    path = tmp_path / "data.json"
    path.write_text(json.dumps(LEGACY), encoding="utf-8")

    result = app.test_cli_runner().invoke(args=["import-data", str(path)])
    assert result.exit_code == 0, result.output
    assert "users=2" in result.output


def test_import_data_cli_rejects_bad_json(app, tmp_path):
    path = tmp_path / "data.json"
    path.write_text("{not json", encoding="utf-8")

    result = app.test_cli_runner().invoke(args=["import-data", str(path)])
    assert result.exit_code != 0
    assert "not valid JSON" in result.output


def test_create_admin_cli_resets_password(app, client):
    result = app.test_cli_runner().invoke(args=["create-admin", "--password", "new-pass"])
    assert result.exit_code == 0, result.output
    assert "updated" in result.output

    resp = client.post("/admin/login", json={"username": "admin", "password": "new-pass"})
    assert resp.status_code == 200
