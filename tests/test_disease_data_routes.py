import datetime

import pytest

from conftest import ADMIN_TOKEN, USER_TOKEN, auth
from db.models import DiseaseData


@pytest.fixture
def outbreaks(db_session):
    rows = [
        DiseaseData(pincode="110001", disease_name="Dengue", cases=12, date=datetime.date(2024, 1, 1), advice="Stay hydrated"),
        DiseaseData(pincode="110001", disease_name="Malaria", cases=3, date=datetime.date(2024, 3, 1), advice="Use nets"),
        DiseaseData(pincode="560001", disease_name="Cholera", cases=9, date=datetime.date(2024, 2, 1), advice="Boil water"),
    ]
    db_session.add_all(rows)
    db_session.commit()
    return [r.id for r in rows]


def test_list_is_newest_first(client, outbreaks):
    response = client.get("/disease-data")

    assert response.status_code == 200
    assert [r["disease_name"] for r in response.json()] == ["Malaria", "Cholera", "Dengue"]


def test_filter_by_pincode_with_limit(client, outbreaks):
    response = client.get("/disease-data", params={"pincode": "110001", "limit": 1})

    body = response.json()
    assert len(body) == 1
    assert body[0]["disease_name"] == "Malaria"
    assert body[0]["date"] == "2024-03-01"
    assert set(body[0]) >= {"id", "pincode", "disease_name", "cases", "date", "advice"}


def test_unknown_pincode_returns_empty_list(client, outbreaks):
    assert client.get("/disease-data", params={"pincode": "999999"}).json() == []


def test_admin_deletes_one_record(client, accounts, outbreaks):
    response = client.delete(f"/disease-data/{outbreaks[0]}", headers=auth(ADMIN_TOKEN))

    assert response.status_code == 200
    assert response.json() == {"success": True}
    remaining = [r["id"] for r in client.get("/disease-data").json()]
    assert outbreaks[0] not in remaining
    assert len(remaining) == 2


def test_delete_requires_admin(client, accounts, outbreaks):
    assert client.delete(f"/disease-data/{outbreaks[0]}").status_code == 401
    assert client.delete(f"/disease-data/{outbreaks[0]}", headers=auth(USER_TOKEN)).status_code == 403
    assert len(client.get("/disease-data").json()) == 3


def test_delete_missing_record(client, accounts):
    response = client.delete("/disease-data/4242", headers=auth(ADMIN_TOKEN))
    assert response.status_code == 404
    assert "4242" in response.json()["error"]
