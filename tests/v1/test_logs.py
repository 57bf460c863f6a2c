# tests/v1/test_logs.py
"""Tests for daily log and health profile endpoints."""

from fastapi import status
from fastapi.testclient import TestClient

LOGS = "/api/v1/logs"


def test_logs_require_auth(client: TestClient) -> None:
    response = client.get(LOGS)
    assert response.status_code in {status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN}


def test_put_and_get_daily_log(client: TestClient, auth_token: dict[str, str]) -> None:
    response = client.put(
        f"{LOGS}/2024-03-01",
        json={"symptoms": ["Headache", "Fatigue"], "stress_level": 6},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_200_OK
    created = response.json()
    assert created["log_date"] == "2024-03-01"
    assert created["user_id"] == "user-alice"

    client.put(f"{LOGS}/2024-03-01", json={"water_intake_ml": 1500}, headers=auth_token)

    fetched = client.get(f"{LOGS}/2024-03-01", headers=auth_token).json()
    assert fetched["id"] == created["id"]
    assert fetched["symptoms"] == ["Headache", "Fatigue"]
    assert fetched["stress_level"] == 6
    assert fetched["water_intake_ml"] == 1500


def test_logs_are_private(
    client: TestClient, auth_token: dict[str, str], other_auth_token: dict[str, str]
) -> None:
    client.put(f"{LOGS}/2024-03-01", json={"mood": "calm"}, headers=auth_token)

    assert client.get(LOGS, headers=other_auth_token).json() == []
    missing = client.get(f"{LOGS}/2024-03-01", headers=other_auth_token)
    assert missing.status_code == status.HTTP_404_NOT_FOUND


def test_list_logs_with_symptoms(client: TestClient, auth_token: dict[str, str]) -> None:
    client.put(f"{LOGS}/2024-03-01", json={"symptoms": ["Acne"]}, headers=auth_token)
    client.put(f"{LOGS}/2024-03-02", json={"mood": "happy"}, headers=auth_token)

    everything = client.get(LOGS, headers=auth_token).json()
    assert [log["log_date"] for log in everything] == ["2024-03-02", "2024-03-01"]

    symptomatic = client.get(LOGS, params={"with_symptoms": True}, headers=auth_token).json()
    assert [log["log_date"] for log in symptomatic] == ["2024-03-01"]


def test_out_of_range_metrics_are_rejected(client: TestClient, auth_token: dict[str, str]) -> None:
    response = client.put(f"{LOGS}/2024-03-01", json={"stress_level": 11}, headers=auth_token)
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT

    response = client.put(f"{LOGS}/2024-03-01", json={"sleep_hours": 25}, headers=auth_token)
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT


def test_delete_daily_log(client: TestClient, auth_token: dict[str, str]) -> None:
    client.put(f"{LOGS}/2024-03-01", json={"mood": "calm"}, headers=auth_token)

    response = client.delete(f"{LOGS}/2024-03-01", headers=auth_token)
    assert response.status_code == status.HTTP_204_NO_CONTENT

    again = client.delete(f"{LOGS}/2024-03-01", headers=auth_token)
    assert again.status_code == status.HTTP_404_NOT_FOUND


def test_health_profile_starts_empty(client: TestClient, auth_token: dict[str, str]) -> None:
    response = client.get("/api/v1/health-profile", headers=auth_token)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["user_id"] == "user-alice"
    assert data["sleep_hours"] is None
    assert data["allergies"] == []


def test_health_profile_updates(client: TestClient, auth_token: dict[str, str]) -> None:
    client.patch("/api/v1/health-profile", json={"sleep_hours": 6.6}, headers=auth_token)
    client.patch("/api/v1/health-profile", json={"stress_level": 4}, headers=auth_token)
    response = client.patch(
        "/api/v1/health-profile", json={"activity_level": "lightly-active"}, headers=auth_token
    )

    data = response.json()
    assert data["sleep_hours"] == 7
    assert data["stress_level"] == 4
    assert data["activity_level"] == "lightly-active"


def test_health_profile_rejects_unknown_activity(
    client: TestClient, auth_token: dict[str, str]
) -> None:
    response = client.patch(
        "/api/v1/health-profile", json={"activity_level": "couch"}, headers=auth_token
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT
