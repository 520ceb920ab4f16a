import pytest

from app import create_app
from config import Config
from models import db
from utils.seed import ensure_admin

ADMIN_PASSWORD = "admin-pass"


@pytest.fixture
def app(tmp_path):
    app = create_app(Config, overrides={
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite:///" + str(tmp_path / "test.db"),
        # keep hashing fast in tests
        "BCRYPT_ROUNDS": 4,
    })
    with app.app_context():
        db.create_all()
        ensure_admin(ADMIN_PASSWORD)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()

@pytest.fixture
def client(app):
    return app.test_client()

@pytest.fixture
def admin_headers(client):
    resp = client.post("/admin/login", json={"username": "admin", "password": ADMIN_PASSWORD})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.get_json()['token']}"}

@pytest.fixture
def add_user(client, admin_headers):
    def _add(username, password="secret", **fields):
        payload = {"username": username, "password": password}
        payload.update(fields)
        resp = client.post("/admin/add-user", json=payload, headers=admin_headers)
        assert resp.status_code == 200, resp.get_data(as_text=True)
        return resp.get_json()["id"]
    return _add

@pytest.fixture
def add_date(client, admin_headers):
    def _add(day):
        resp = client.post("/admin/add-date", json={"date": day}, headers=admin_headers)
        assert resp.status_code == 200, resp.get_data(as_text=True)
    return _add

@pytest.fixture
def book(client):
    def _book(user_id, day, slot_type, title="Brother", name="Smith"):
        return client.post("/book-date", json={
            "title": title,
            "name": name,
            "userId": user_id,
            "date": day,
            "type": slot_type,
        })
    return _book

@pytest.fixture
def document(client, admin_headers):
    def _get():
        resp = client.get("/admin/data", headers=admin_headers)
        assert resp.status_code == 200
        return resp.get_json()
    return _get
