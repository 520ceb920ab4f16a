SUNDAY = "2030-01-06"
NEXT_SUNDAY = "2030-01-13"


def test_book_date(client, add_user, add_date, book, document):
    user_id = add_user("jsmith")
    add_date(SUNDAY)

    resp = book(user_id, SUNDAY, "opening", title="Elder", name="Smith")
    assert resp.status_code == 200
    assert document()["dates"] == [
        {"date": SUNDAY, "opening": {"title": "Elder", "name": "Smith", "userId": user_id}}
    ]


def test_same_slot_by_another_user_is_409(add_user, add_date, book, document):
    first = add_user("first")
    second = add_user("second")
    add_date(SUNDAY)

    assert book(first, SUNDAY, "opening").status_code == 200
    resp = book(second, SUNDAY, "opening")
    assert resp.status_code == 409
    assert document()["dates"][0]["opening"]["userId"] == first


def test_rebooking_own_slot_is_idempotent(add_user, add_date, book, document):
    user_id = add_user("jsmith")
    add_date(SUNDAY)

    assert book(user_id, SUNDAY, "closing", name="Smith").status_code == 200
    assert book(user_id, SUNDAY, "closing", name="J. Smith").status_code == 200
    assert document()["dates"][0]["closing"]["name"] == "J. Smith"


def test_user_cannot_hold_two_slots(add_user, add_date, book):
    user_id = add_user("jsmith")
    add_date(SUNDAY)
    add_date(NEXT_SUNDAY)

    assert book(user_id, SUNDAY, "opening").status_code == 200
    assert book(user_id, SUNDAY, "closing").status_code == 409
    assert book(user_id, NEXT_SUNDAY, "opening").status_code == 409


def test_string_user_id_is_accepted(add_user, add_date, book):
    user_id = add_user("jsmith")
    add_date(SUNDAY)
    assert book(str(user_id), SUNDAY, "opening").status_code == 200


def test_book_date_validation(client, add_user, add_date, book):
    user_id = add_user("jsmith")
    add_date(SUNDAY)

    resp = client.post("/book-date", json={"userId": user_id, "date": SUNDAY, "type": "opening"})
    assert resp.status_code == 400
    assert book(user_id, SUNDAY, "midday").status_code == 400
    assert book("abc", SUNDAY, "opening").status_code == 400
    assert book(user_id, "not-a-date", "opening").status_code == 400


def test_book_unknown_date_or_user_is_404(add_user, add_date, book):
    user_id = add_user("jsmith")
    add_date(SUNDAY)

    assert book(user_id, NEXT_SUNDAY, "opening").status_code == 404
    assert book(999999, SUNDAY, "opening").status_code == 404


def test_disabled_user_cannot_book(client, admin_headers, add_user, add_date, book):
    user_id = add_user("jsmith")
    add_date(SUNDAY)
    client.post("/admin/toggle-user", json={"username": "jsmith"}, headers=admin_headers)

    assert book(user_id, SUNDAY, "opening").status_code == 403


def test_admin_book_slot_uses_user_record(client, admin_headers, add_user, add_date, document):
    with_last = add_user("jsmith", title="Elder", lastName="Smith")
    without_last = add_user("bob")
    add_date(SUNDAY)

    resp = client.post("/admin/book-slot", json={"date": SUNDAY, "slot": "opening", "userId": with_last},
                       headers=admin_headers)
    assert resp.status_code == 200
    resp = client.post("/admin/book-slot", json={"date": SUNDAY, "slot": "closing", "userId": without_last},
                       headers=admin_headers)
    assert resp.status_code == 200

    day = document()["dates"][0]
    assert day["opening"] == {"title": "Elder", "name": "Smith", "userId": with_last}
    assert day["closing"] == {"title": "", "name": "bob", "userId": without_last}


def test_admin_book_slot_enforces_one_slot_per_user(client, admin_headers, add_user, add_date, book):
    user_id = add_user("jsmith")
    add_date(SUNDAY)
    add_date(NEXT_SUNDAY)
    book(user_id, SUNDAY, "opening")

    resp = client.post("/admin/book-slot", json={"date": NEXT_SUNDAY, "slot": "closing", "userId": user_id},
                       headers=admin_headers)
    assert resp.status_code == 409


def test_admin_book_slot_taken_by_other_user_is_409(client, admin_headers, add_user, add_date, book):
    first = add_user("first")
    second = add_user("second")
    add_date(SUNDAY)
    book(first, SUNDAY, "closing")

    resp = client.post("/admin/book-slot", json={"date": SUNDAY, "slot": "closing", "userId": second},
                       headers=admin_headers)
    assert resp.status_code == 409


def test_admin_book_slot_errors(client, admin_headers, add_user, add_date):
    user_id = add_user("jsmith")
    add_date(SUNDAY)

    def post(payload):
        return client.post("/admin/book-slot", json=payload, headers=admin_headers).status_code

    assert post({"date": SUNDAY, "slot": "opening"}) == 400
    assert post({"date": SUNDAY, "slot": "midday", "userId": user_id}) == 400
    assert post({"date": NEXT_SUNDAY, "slot": "opening", "userId": user_id}) == 404
    assert post({"date": SUNDAY, "slot": "opening", "userId": 999999}) == 404
