SUNDAY = "2030-01-06"


def _actions(client, headers, **params):
    resp = client.get("/admin/audit-log", query_string=params, headers=headers)
    assert resp.status_code == 200
    return [row["action"] for row in resp.get_json()]


def test_admin_actions_are_audited(client, admin_headers, add_user, add_date):
    add_user("jsmith")
    add_date(SUNDAY)
    client.post("/admin/toggle-user", json={"username": "jsmith"}, headers=admin_headers)
    client.post("/admin/delete-date", json={"date": SUNDAY}, headers=admin_headers)
    client.post("/admin/delete-user", json={"username": "jsmith"}, headers=admin_headers)

    actions = _actions(client, admin_headers)
    for action in ("ADMIN_LOGIN_SUCCESS", "USER_ADD", "DATE_ADD", "USER_TOGGLE", "DATE_DELETE", "USER_DELETE"):
        assert action in actions
    # newest first
    assert actions[0] == "USER_DELETE"


def test_audit_entries_carry_actor_and_context(client, admin_headers, add_user):
    add_user("jsmith", lastName="Smith")

    [row] = client.get("/admin/audit-log?action=USER_ADD", headers=admin_headers).get_json()
    assert row["userId"] == 212400
    assert row["context"] == {"username": "jsmith", "id": 212401}
    assert row["timestamp"]


def test_booking_and_cancellation_are_audited(client, admin_headers, add_user, add_date, book):
    user_id = add_user("jsmith")
    add_date(SUNDAY)
    book(user_id, SUNDAY, "closing")
    client.post("/api/cancel-booking", json={
        "userId": user_id, "date": SUNDAY, "slotType": "closing", "reason": "ill",
    })

    rows = client.get(f"/admin/audit-log?userId={user_id}", headers=admin_headers).get_json()
    assert [r["action"] for r in rows] == ["BOOKING_CANCEL", "BOOKING_CREATE"]
    assert rows[0]["context"] == {"date": SUNDAY, "slotType": "closing", "reason": "ill"}


def test_rejected_operations_are_not_audited(client, admin_headers):
    client.post("/admin/delete-user", json={"username": "admin"}, headers=admin_headers)
    client.post("/admin/add-date", json={"date": "2030-01-07"}, headers=admin_headers)

    actions = _actions(client, admin_headers)
    assert "USER_DELETE" not in actions
    assert "DATE_ADD" not in actions


def test_failed_login_is_audited(client, admin_headers):
    client.post("/login", json={"username": "ghost", "password": "x"})
    [row] = client.get("/admin/audit-log?action=LOGIN_FAIL", headers=admin_headers).get_json()
    assert row["userId"] is None
    assert row["context"]["username"] == "ghost"


def test_audit_limit_is_clamped(client, admin_headers, add_user):
    for i in range(3):
        add_user(f"user{i}")

    assert len(_actions(client, admin_headers, limit=2)) == 2
    assert len(_actions(client, admin_headers)) == 4
    assert len(_actions(client, admin_headers, limit=0)) == 1
    assert len(_actions(client, admin_headers, limit=-5)) == 1
