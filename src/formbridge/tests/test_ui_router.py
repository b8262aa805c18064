from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from formbridge.database import get_db
from formbridge.web.app import create_app
from formbridge.web.registry import form_model


@pytest.fixture
def client(session, models):
    form_model("ticket", only_fields=["title", "status", "priority", "country_id"])(
        models.Ticket
    )
    form_model("country")(models.Country)

    def override_get_db():
        try:
            yield session
        finally:
            pass

    app = create_app()
    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


def test_health_lists_form_models(client):
    resp = client.get("/api/v1/health")
    assert resp.status_code == 200
    assert {"ticket", "country"} <= set(resp.json()["form_models"])


def test_record_form_is_filled_from_model(client, ticket):
    resp = client.get("/api/v1/ui/forms/ticket/10")
    assert resp.status_code == 200

    data = resp.json()
    assert data["id"] == 10
    fields = {f["name"]: f for f in data["fields"]}
    assert list(fields) == ["title", "status", "priority", "country_id"]
    assert fields["title"]["value"] == "Printer on fire"
    assert fields["title"]["required"] is True
    assert fields["status"]["widget"] == "DropDown"
    assert fields["status"]["empty_text"] == "- no value -"
    assert fields["country_id"]["options"] == [
        {"value": 1, "label": "Ruritania"},
        {"value": 2, "label": "Freedonia"},
    ]


def test_blank_form(client):
    resp = client.get("/api/v1/ui/forms/country")
    assert resp.status_code == 200
    assert [f["name"] for f in resp.json()["fields"]] == ["name"]


def test_unknown_model_and_missing_record(client):
    assert client.get("/api/v1/ui/forms/nothing/1").status_code == 404

    resp = client.get("/api/v1/ui/forms/ticket/999")
    assert resp.status_code == 404
    assert resp.json()["code"] == "NOT_FOUND"


def test_update_record(client, session, models, ticket):
    resp = client.post(
        "/api/v1/ui/forms/ticket/10",
        json={"title": "Fire out", "status": "closed", "country_id": "2"},
    )
    assert resp.status_code == 200

    stored = session.get(models.Ticket, 10)
    assert stored.title == "Fire out"
    assert stored.status == "closed"
    assert stored.country_id == 2


def test_create_record(client, session, models):
    resp = client.post("/api/v1/ui/forms/country", json={"name": "Elbonia"})
    assert resp.status_code == 200

    new_id = resp.json()["id"]
    assert session.get(models.Country, new_id).name == "Elbonia"


def test_invalid_submit_returns_field_errors(client, session, models, ticket):
    resp = client.post("/api/v1/ui/forms/ticket/10", json={"title": ""})
    assert resp.status_code == 422

    body = resp.json()
    assert body["code"] == "VALIDATION_ERROR"
    assert "title" in body["details"]["errors"]
    assert session.get(models.Ticket, 10).title == "Printer on fire"


def test_menu_marks_current_page(client):
    resp = client.get("/api/v1/ui/menu", params={"page": "Home"})
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/html")
    assert 'class="ui-state-active"' in resp.text


def test_menu_page_from_header(client):
    resp = client.get("/api/v1/ui/menu", headers={"x-page": "Home"})
    assert 'class="ui-state-active"' in resp.text


def test_health_deps_checks_database(client):
    resp = client.get("/api/v1/health/deps")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True, "deps": {"db": {"ok": True}}}


def test_health_deps_reports_database_failure(client):
    broken = MagicMock()
    broken.execute.side_effect = OperationalError("SELECT 1", {}, Exception("down"))

    with patch("formbridge.database.SessionLocal", return_value=broken):
        resp = client.get("/api/v1/health/deps")

    body = resp.json()
    assert body["ok"] is False
    assert body["deps"]["db"]["ok"] is False
    broken.rollback.assert_called_once()
    broken.close.assert_called_once()
