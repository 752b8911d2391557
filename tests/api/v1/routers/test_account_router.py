"""Router tests for /api/register, /api/offline and /api/stats."""

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.api.errors import app_error_handler
from app.api.v1.dependency import get_account_service
from app.api.v1.routers.account import router
from app.domain.companion.account import AccountService
from app.domain.companion.user import UserStats
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

USER_ID = "82074fcd-6eef-4caf-bc95-4dac50485fb7"


@pytest.fixture
def mock_account_service() -> AsyncMock:
    return AsyncMock(spec=AccountService)


@pytest.fixture
def client(mock_account_service: AsyncMock) -> TestClient:
    app = FastAPI()
    app.dependency_overrides[get_account_service] = lambda: mock_account_service
    app.add_exception_handler(AppError, app_error_handler)  # type: ignore[arg-type]
    app.include_router(router, prefix="/api")
    return TestClient(app)


class TestRegister:
    def test_register_success(self, client: TestClient, mock_account_service: AsyncMock):
        mock_account_service.register.return_value = "s" * 36

        response = client.post(
            "/api/register",
            json={"uuid": USER_ID.upper(), "mod": "mediamod", "serverID": "hash"},
        )

        assert response.status_code == 200
        assert response.json()["results"] == {"secret": "s" * 36}
        mock_account_service.register.assert_awaited_once_with(
            user_id=USER_ID, capability="mediamod", server_id="hash"
        )

    def test_register_invalid_uuid(self, client: TestClient, mock_account_service: AsyncMock):
        response = client.post(
            "/api/register", json={"uuid": "not-a-uuid", "mod": "mediamod", "serverID": "hash"}
        )

        assert response.status_code == 400
        assert response.json()["errcode"] == AppErrorCode.E_INVALID_REQUEST.value
        mock_account_service.register.assert_not_awaited()

    def test_register_blank_server_id(self, client: TestClient, mock_account_service: AsyncMock):
        response = client.post(
            "/api/register", json={"uuid": USER_ID, "mod": "mediamod", "serverID": "  "}
        )

        assert response.status_code == 400
        mock_account_service.register.assert_not_awaited()

    def test_identity_rejected(self, client: TestClient, mock_account_service: AsyncMock):
        mock_account_service.register.side_effect = AppError(
            errcode=AppErrorCode.E_IDENTITY_REJECTED,
            errmesg="Session proof rejected",
            status_code=HttpStatusCode.UNAUTHORIZED,
        )

        response = client.post(
            "/api/register", json={"uuid": USER_ID, "mod": "mediamod", "serverID": "hash"}
        )

        assert response.status_code == 401
        data = response.json()
        assert data["success"] is False
        assert data["errcode"] == "E_IDENTITY_REJECTED"

    def test_upstream_failure(self, client: TestClient, mock_account_service: AsyncMock):
        mock_account_service.register.side_effect = AppError(
            errcode=AppErrorCode.E_UPSTREAM_FAILURE,
            errmesg="Session server unavailable",
            status_code=HttpStatusCode.BAD_GATEWAY,
        )

        response = client.post(
            "/api/register", json={"uuid": USER_ID, "mod": "mediamod", "serverID": "hash"}
        )

        assert response.status_code == 502
        assert response.json()["errcode"] == "E_UPSTREAM_FAILURE"


class TestOffline:
    def test_offline_success(self, client: TestClient, mock_account_service: AsyncMock):
        response = client.post("/api/offline", json={"uuid": USER_ID, "secret": "s" * 36})

        assert response.status_code == 200
        assert response.json()["results"] == "OK"
        mock_account_service.logout.assert_awaited_once_with(USER_ID, "s" * 36)

    def test_offline_bad_secret(self, client: TestClient, mock_account_service: AsyncMock):
        mock_account_service.logout.side_effect = AppError(
            errcode=AppErrorCode.E_BAD_SECRET,
            errmesg="Invalid session secret",
            status_code=HttpStatusCode.UNAUTHORIZED,
        )

        response = client.post("/api/offline", json={"uuid": USER_ID, "secret": "s" * 36})

        assert response.status_code == 401
        assert response.json()["success"] is False


def test_stats(client: TestClient, mock_account_service: AsyncMock):
    mock_account_service.get_stats.return_value = UserStats(online_users=3, total_users=10)

    response = client.get("/api/stats")

    assert response.status_code == 200
    assert response.json()["results"] == {"online_users": 3, "total_users": 10}
