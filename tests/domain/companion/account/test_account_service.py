"""Tests for register/login, logout and per-user tracks."""

from unittest.mock import AsyncMock

import pytest

from app.domain.companion.account import AccountService
from app.domain.companion.guard import SessionGuard
from app.domain.companion.party import InMemoryPartyRepository, PartyCoordinator
from app.domain.companion.user import InMemoryUserRepository
from app.schemas.track import Track
from app.services.integrations.identity_verifier import IdentityProfile
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode
from tests.fixtures.companion_fixtures import LEVELHEAD_TEST_SECRET

USER_ID = "82074fcd-6eef-4caf-bc95-4dac50485fb7"
GUEST_ID = "1b8c2a3e-4f5d-4e6a-9b7c-8d9e0f1a2b3c"


def upstream_failure() -> AppError:
    return AppError(
        errcode=AppErrorCode.E_UPSTREAM_FAILURE,
        errmesg="Session server unavailable",
        status_code=HttpStatusCode.BAD_GATEWAY,
    )


class TestRegister:
    async def test_new_user_is_verified_and_registered(
        self,
        account_service: AccountService,
        user_repo: InMemoryUserRepository,
        mock_verifier: AsyncMock,
    ):
        secret = await account_service.register(USER_ID, "mediamod", "server-hash")

        assert len(secret) == 36
        user = await user_repo.get(USER_ID)
        assert user is not None
        assert user.session_secret == secret
        assert user.display_name == "player_8207"
        mock_verifier.resolve_profile.assert_awaited_once_with(USER_ID)
        mock_verifier.verify_session.assert_awaited_once_with("player_8207", "server-hash", USER_ID)

    async def test_known_user_logs_in_and_old_secret_dies(
        self,
        account_service: AccountService,
        guard: SessionGuard,
        mock_verifier: AsyncMock,
    ):
        first = await account_service.register(USER_ID, "mediamod", "server-hash")
        mock_verifier.resolve_profile.reset_mock()

        second = await account_service.register(USER_ID, "levelhead", "server-hash-2")

        assert second != first
        mock_verifier.resolve_profile.assert_not_awaited()
        mock_verifier.verify_session.assert_awaited_with("player_8207", "server-hash-2", USER_ID)
        user = await guard.check(USER_ID, second)
        assert sorted(user.registered_capabilities) == ["levelhead", "mediamod"]
        with pytest.raises(AppError) as exc_info:
            await guard.check(USER_ID, first)
        assert exc_info.value.errcode == AppErrorCode.E_BAD_SECRET

    async def test_rejected_proof_creates_nothing(
        self,
        account_service: AccountService,
        user_repo: InMemoryUserRepository,
        mock_verifier: AsyncMock,
    ):
        mock_verifier.verify_session.side_effect = AppError(
            errcode=AppErrorCode.E_IDENTITY_REJECTED,
            errmesg="Session proof rejected",
            status_code=HttpStatusCode.UNAUTHORIZED,
        )

        with pytest.raises(AppError) as exc_info:
            await account_service.register(USER_ID, "mediamod", "bad-hash")

        assert exc_info.value.errcode == AppErrorCode.E_IDENTITY_REJECTED
        assert await user_repo.get(USER_ID) is None

    async def test_upstream_failure_keeps_existing_secret(
        self,
        account_service: AccountService,
        guard: SessionGuard,
        mock_verifier: AsyncMock,
    ):
        secret = await account_service.register(USER_ID, "mediamod", "server-hash")
        mock_verifier.verify_session.side_effect = upstream_failure()

        with pytest.raises(AppError) as exc_info:
            await account_service.register(USER_ID, "mediamod", "server-hash")

        assert exc_info.value.status_code == HttpStatusCode.BAD_GATEWAY
        assert (await guard.check(USER_ID, secret)).user_id == USER_ID

    async def test_concurrent_registration_falls_back_to_login(
        self,
        user_repo: InMemoryUserRepository,
        guard: SessionGuard,
        coordinator: PartyCoordinator,
        mock_verifier: AsyncMock,
    ):
        async def register_first(user_id: str):
            # another request registers the user while the profile lookup runs
            await user_repo.register(user_id, "early", "mediamod")
            return await _profile(user_id)

        mock_verifier.resolve_profile.side_effect = register_first
        service = AccountService(user_repo, guard, coordinator, mock_verifier)

        secret = await service.register(USER_ID, "mediamod", "server-hash")

        user = await guard.check(USER_ID, secret)
        assert user.display_name == "player_8207"


async def _profile(user_id: str) -> IdentityProfile:
    return IdentityProfile(user_id=user_id, display_name=f"player_{user_id[:4]}")


class TestLogout:
    async def test_logout_invalidates_secret(
        self, account_service: AccountService, guard: SessionGuard
    ):
        secret = await account_service.register(USER_ID, "mediamod", "server-hash")

        await account_service.logout(USER_ID, secret)

        with pytest.raises(AppError) as exc_info:
            await guard.check(USER_ID, secret)
        assert exc_info.value.errcode == AppErrorCode.E_BAD_SECRET
        assert exc_info.value.status_code == HttpStatusCode.UNAUTHORIZED

    async def test_logout_requires_session(
        self, account_service: AccountService, user_repo: InMemoryUserRepository
    ):
        await account_service.register(USER_ID, "mediamod", "server-hash")

        with pytest.raises(AppError):
            await account_service.logout(USER_ID, "0" * 36)

        user = await user_repo.get(USER_ID)
        assert user is not None
        assert user.online is True

    async def test_host_logout_disbands_party(
        self,
        account_service: AccountService,
        coordinator: PartyCoordinator,
        party_repo: InMemoryPartyRepository,
    ):
        host_secret = await account_service.register(USER_ID, "mediamod", "server-hash")
        guest_secret = await account_service.register(GUEST_ID, "mediamod", "server-hash")
        started = await coordinator.start_party(USER_ID, host_secret)
        await coordinator.join_party(GUEST_ID, guest_secret, started.code)

        await account_service.logout(USER_ID, host_secret)

        assert await party_repo.get_by_code(started.code) is None

    async def test_guest_logout_leaves_party(
        self,
        account_service: AccountService,
        coordinator: PartyCoordinator,
        party_repo: InMemoryPartyRepository,
    ):
        host_secret = await account_service.register(USER_ID, "mediamod", "server-hash")
        guest_secret = await account_service.register(GUEST_ID, "mediamod", "server-hash")
        started = await coordinator.start_party(USER_ID, host_secret)
        await coordinator.join_party(GUEST_ID, guest_secret, started.code)

        await account_service.logout(GUEST_ID, guest_secret)

        party = await party_repo.get_by_code(started.code)
        assert party is not None
        assert party.participants == [USER_ID]


class TestTracks:
    async def test_publish_and_read_track(self, account_service: AccountService):
        secret = await account_service.register(USER_ID, "mediamod", "server-hash")

        await account_service.update_track(USER_ID, secret, Track(title="Song", artist="Band"))

        track = await account_service.get_track_for_service(USER_ID, LEVELHEAD_TEST_SECRET)
        assert track.title == "Song"
        assert track.artist == "Band"

    async def test_update_requires_session(self, account_service: AccountService):
        await account_service.register(USER_ID, "mediamod", "server-hash")

        with pytest.raises(AppError) as exc_info:
            await account_service.update_track(USER_ID, "0" * 36, Track(title="Song"))

        assert exc_info.value.errcode == AppErrorCode.E_BAD_SECRET

    async def test_bad_service_secret(self, account_service: AccountService):
        with pytest.raises(AppError) as exc_info:
            await account_service.get_track_for_service(USER_ID, "nope")

        assert exc_info.value.errcode == AppErrorCode.E_BAD_SERVICE_SECRET
        assert exc_info.value.status_code == HttpStatusCode.UNAUTHORIZED

    async def test_unset_service_secret_rejects_everyone(
        self, user_repo, guard, coordinator, mock_verifier
    ):
        service = AccountService(user_repo, guard, coordinator, mock_verifier, service_secret=None)

        with pytest.raises(AppError) as exc_info:
            await service.get_track_for_service(USER_ID, "")

        assert exc_info.value.errcode == AppErrorCode.E_BAD_SERVICE_SECRET

    async def test_no_track(self, account_service: AccountService):
        await account_service.register(USER_ID, "mediamod", "server-hash")

        with pytest.raises(AppError) as exc_info:
            await account_service.get_track_for_service(USER_ID, LEVELHEAD_TEST_SECRET)

        assert exc_info.value.errcode == AppErrorCode.E_TRACK_NOT_FOUND
        assert exc_info.value.status_code == HttpStatusCode.NOT_FOUND

    async def test_unknown_user(self, account_service: AccountService):
        with pytest.raises(AppError) as exc_info:
            await account_service.get_track_for_service(USER_ID, LEVELHEAD_TEST_SECRET)

        assert exc_info.value.errcode == AppErrorCode.E_USER_NOT_FOUND


async def test_stats(account_service: AccountService):
    secret = await account_service.register(USER_ID, "mediamod", "server-hash")
    await account_service.register(GUEST_ID, "mediamod", "server-hash")
    await account_service.logout(USER_ID, secret)

    stats = await account_service.get_stats()

    assert stats.online_users == 1
    assert stats.total_users == 2
