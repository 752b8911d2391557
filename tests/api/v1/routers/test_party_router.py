"""Router tests for /api/party/* against an in-memory companion."""

import orjson
import pytest
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.testclient import TestClient

from app.api.errors import app_error_handler
from app.api.v1.dependency import get_account_service, get_party_coordinator
from app.api.v1.routers import account, party
from app.services.companion import Companion
from app.shared.api.utils import validation_exception_handler
from app.utils.app_errors import AppError

HOST_ID = "82074fcd-6eef-4caf-bc95-4dac50485fb7"
GUEST_ID = "1B8C2A3E-4F5D-4E6A-9B7C-8D9E0F1A2B3C"


@pytest.fixture
def test_app(companion: Companion) -> FastAPI:
    """Create FastAPI test app with dependency overrides."""
    app = FastAPI()

    app.dependency_overrides[get_account_service] = lambda: companion.accounts
    app.dependency_overrides[get_party_coordinator] = lambda: companion.coordinator

    app.add_exception_handler(AppError, app_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]

    app.include_router(account.router, prefix="/api")
    app.include_router(party.router, prefix="/api")
    return app


@pytest.fixture
def client(test_app: FastAPI) -> TestClient:
    return TestClient(test_app)


def register(client: TestClient, user_id: str) -> str:
    response = client.post(
        "/api/register", json={"uuid": user_id, "mod": "mediamod", "serverID": "hash"}
    )
    assert response.status_code == 200
    return response.json()["results"]["secret"]


class TestPartyFlow:
    def test_full_scenario(self, client: TestClient):
        host_secret = register(client, HOST_ID)
        assert len(host_secret) == 36
        guest_secret = register(client, GUEST_ID)
        track = {"title": "Song", "artist": "Band", "album": "LP"}

        response = client.post(
            "/api/party/start",
            json={"uuid": HOST_ID, "secret": host_secret, "currentTrack": track},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        code = data["results"]["code"]
        party_secret = data["results"]["secret"]
        assert len(code) == 6
        assert len(party_secret) == 36

        response = client.post(
            "/api/party/join",
            json={"uuid": GUEST_ID, "secret": guest_secret, "partyCode": code},
        )
        assert response.status_code == 200
        assert response.json()["results"] == {"host": HOST_ID}

        response = client.post(
            "/api/party/status",
            json={"uuid": GUEST_ID, "secret": guest_secret, "partyCode": code},
        )
        assert response.status_code == 200
        assert response.json()["results"]["track"] == track

        response = client.post(
            "/api/party/leave",
            json={
                "uuid": HOST_ID,
                "secret": host_secret,
                "partyCode": code,
                "partySecret": party_secret,
            },
        )
        assert response.status_code == 200
        assert response.json()["results"] == {"outcome": "disbanded"}

        response = client.post(
            "/api/party/status",
            json={"uuid": GUEST_ID, "secret": guest_secret, "partyCode": code},
        )
        assert response.status_code == 404
        data = response.json()
        assert data["success"] is False
        assert data["errcode"] == "E_PARTY_NOT_FOUND"
        assert data["erresid"]

    def test_update_accepts_json_encoded_track(self, client: TestClient):
        host_secret = register(client, HOST_ID)
        started = client.post("/api/party/start", json={"uuid": HOST_ID, "secret": host_secret})
        code = started.json()["results"]["code"]
        party_secret = started.json()["results"]["secret"]

        response = client.post(
            "/api/party/update",
            json={
                "uuid": HOST_ID,
                "secret": host_secret,
                "partyCode": code,
                "partySecret": party_secret,
                "currentTrack": orjson.dumps({"title": "Next", "artist": "Band"}).decode(),
            },
        )
        assert response.status_code == 200
        assert response.json()["results"] == "OK"

        status = client.post(
            "/api/party/status", json={"uuid": HOST_ID, "secret": host_secret, "partyCode": code}
        )
        assert status.json()["results"]["track"] == {"title": "Next", "artist": "Band"}

    def test_update_with_wrong_host_secret(self, client: TestClient):
        host_secret = register(client, HOST_ID)
        code = client.post(
            "/api/party/start", json={"uuid": HOST_ID, "secret": host_secret}
        ).json()["results"]["code"]

        response = client.post(
            "/api/party/update",
            json={
                "uuid": HOST_ID,
                "secret": host_secret,
                "partyCode": code,
                "partySecret": "0" * 36,
                "currentTrack": {"title": "Hijack"},
            },
        )

        assert response.status_code == 401
        assert response.json()["errcode"] == "E_BAD_HOST_SECRET"

    def test_member_leave(self, client: TestClient):
        host_secret = register(client, HOST_ID)
        guest_secret = register(client, GUEST_ID)
        code = client.post(
            "/api/party/start", json={"uuid": HOST_ID, "secret": host_secret}
        ).json()["results"]["code"]
        client.post("/api/party/join", json={"uuid": GUEST_ID, "secret": guest_secret, "partyCode": code})

        response = client.post(
            "/api/party/leave",
            json={"uuid": GUEST_ID, "secret": guest_secret, "partyCode": code, "partySecret": ""},
        )

        assert response.status_code == 200
        assert response.json()["results"] == {"outcome": "left"}

    def test_logout_kills_secret(self, client: TestClient):
        secret = register(client, HOST_ID)

        response = client.post("/api/offline", json={"uuid": HOST_ID, "secret": secret})
        assert response.status_code == 200

        response = client.post("/api/party/start", json={"uuid": HOST_ID, "secret": secret})
        assert response.status_code == 401
        assert response.json()["errcode"] == "E_BAD_SECRET"


class TestValidation:
    @pytest.mark.parametrize(
        "payload",
        [
            {"uuid": HOST_ID[:-1], "secret": "0" * 36, "partyCode": "Ab3dE9"},
            {"uuid": HOST_ID.replace("-", "") + "abcd", "secret": "0" * 36, "partyCode": "Ab3dE9"},
            {"uuid": HOST_ID, "secret": "short", "partyCode": "Ab3dE9"},
            {"uuid": HOST_ID, "secret": "0" * 36, "partyCode": "Ab3dE"},
            {"uuid": HOST_ID, "secret": "0" * 36, "partyCode": "Ab3-E9"},
        ],
    )
    def test_malformed_input_rejected_before_lookup(self, client: TestClient, payload: dict):
        response = client.post("/api/party/join", json=payload)

        assert response.status_code == 400
        assert response.json()["errcode"] == "E_INVALID_REQUEST"

    def test_missing_field(self, client: TestClient):
        response = client.post("/api/party/join", json={"uuid": HOST_ID, "secret": "0" * 36})

        assert response.status_code == 422
        assert response.json()["errcode"] == "E_INVALID_PARAMS"

    def test_unknown_user(self, client: TestClient):
        response = client.post(
            "/api/party/join", json={"uuid": HOST_ID, "secret": "0" * 36, "partyCode": "Ab3dE9"}
        )

        assert response.status_code == 404
        assert response.json()["errcode"] == "E_USER_NOT_FOUND"

    def test_user_id_is_normalized(self, client: TestClient, companion: Companion):
        secret = register(client, GUEST_ID)

        response = client.post(
            "/api/offline", json={"uuid": GUEST_ID.lower(), "secret": secret}
        )

        assert response.status_code == 200
