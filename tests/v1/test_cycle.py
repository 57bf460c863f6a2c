"""Tests for cycle prediction endpoints."""

from fastapi import status
from fastapi.testclient import TestClient


def test_prediction_without_account(client: TestClient) -> None:
    r = client.post(
        "/api/v1/cycle/predictions",
        json={"last_period_start": "2024-01-01", "cycle_length": 28},
    )
    assert r.status_code == status.HTTP_200_OK
    data = r.json()
    assert data["prediction"]["next_period_start"] == "2024-01-29"
    assert data["prediction"]["ovulation_date"] == "2024-01-15"
    assert [rem["reminder_type"] for rem in data["reminders"]] == ["period", "ovulation"]
    assert data["reminders"][0]["user_id"] is None


def test_prediction_attaches_user(client: TestClient, auth_token: dict[str, str]) -> None:
    r = client.post(
        "/api/v1/cycle/predictions",
        json={"last_period_start": "2024-01-01"},
        headers=auth_token,
    )
    assert r.status_code == status.HTTP_200_OK
    assert r.json()["reminders"][0]["user_id"] == "user-alice"


def test_prediction_rejects_short_cycle(client: TestClient) -> None:
    r = client.post(
        "/api/v1/cycle/predictions",
        json={"last_period_start": "2024-01-01", "cycle_length": 10},
    )
    assert r.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT


def test_signed_in_prediction_is_saved(client: TestClient, auth_token: dict[str, str]) -> None:
    r = client.post(
        "/api/v1/cycle/predictions",
        json={"last_period_start": "2024-01-01", "cycle_length": 28},
        headers=auth_token,
    )
    prediction_id = r.json()["prediction_id"]
    assert prediction_id is not None

    saved = client.get("/api/v1/cycle/predictions", headers=auth_token).json()
    assert [p["id"] for p in saved] == [prediction_id]
    assert saved[0]["predicted_period_start"] == "2024-01-29"
    assert saved[0]["is_predicted"] is True

    reminders = client.get("/api/v1/reminders/", headers=auth_token).json()
    assert [(rem["reminder_type"], rem["reminder_date"][:10]) for rem in reminders] == [
        ("ovulation", "2024-01-14"),
        ("period", "2024-01-27"),
    ]


def test_anonymous_prediction_is_not_saved(client: TestClient) -> None:
    r = client.post("/api/v1/cycle/predictions", json={"last_period_start": "2024-01-01"})
    assert r.json()["prediction_id"] is None


def test_new_prediction_replaces_cycle_reminders(
    client: TestClient, auth_token: dict[str, str]
) -> None:
    for start in ("2024-01-01", "2024-01-29"):
        client.post(
            "/api/v1/cycle/predictions",
            json={"last_period_start": start},
            headers=auth_token,
        )

    reminders = client.get("/api/v1/reminders/", headers=auth_token).json()
    assert [rem["reminder_date"][:10] for rem in reminders] == ["2024-02-11", "2024-02-24"]
    assert len(client.get("/api/v1/cycle/predictions", headers=auth_token).json()) == 2


def test_report_actual_period(
    client: TestClient, auth_token: dict[str, str], other_auth_token: dict[str, str]
) -> None:
    prediction_id = client.post(
        "/api/v1/cycle/predictions",
        json={"last_period_start": "2024-01-01"},
        headers=auth_token,
    ).json()["prediction_id"]
    url = f"/api/v1/cycle/predictions/{prediction_id}"

    hidden = client.patch(url, json={"actual_period_start": "2024-01-30"}, headers=other_auth_token)
    assert hidden.status_code == status.HTTP_404_NOT_FOUND

    r = client.patch(url, json={"actual_period_start": "2024-01-30"}, headers=auth_token)
    assert r.status_code == status.HTTP_200_OK
    assert r.json()["actual_period_start"] == "2024-01-30"
    assert r.json()["is_predicted"] is False
