import pytest

from knowledge_base import create_app
from knowledge_base.extensions import db


@pytest.fixture()
def app():
    app = create_app("testing")
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def make_page(client):
    def _make(**fields) -> dict:
        response = client.post("/api/v1/pages", json=fields)
        assert response.status_code == 201, response.get_json()
        return response.get_json()

    return _make
