"""Tests for the session bootstrap."""

import asyncio
import logging
import sqlite3
from datetime import date
from typing import Optional
from unittest.mock import AsyncMock, patch

import pytest

from wetwo.db.store import EMAIL_KEY, PASSWORD_KEY, LocalStore
from wetwo.models import Credentials, SessionPhase, User
from wetwo.services.base import (
    AuthClient,
    InvalidCredentials,
    NetworkError,
    ProfileService,
    ServerError,
)
from wetwo.session import BootstrapReason, SessionBootstrap, complete_onboarding, logout


CREDENTIALS = Credentials(email="alex@example.com", password="secret")


class FakeAuthClient(AuthClient):
    """Auth client returning a fixed user or raising a fixed error."""

    def __init__(self, user: Optional[User] = None, error: Optional[Exception] = None, delay: float = 0.0):
        self.user = user
        self.error = error
        self.delay = delay
        self.calls: list[tuple[str, str]] = []

    async def sign_in(self, email: str, password: str) -> User:
        self.calls.append((email, password))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.user


class FakeProfileService(ProfileService):

    def __init__(
        self,
        code: Optional[str] = "LOVE42",
        error: Optional[Exception] = None,
        code_delay: float = 0.0,
    ):
        self.code = code
        self.error = error
        self.code_delay = code_delay
        self.ensure_calls = 0
        self.code_calls = 0

    async def ensure_profile_exists(self) -> None:
        self.ensure_calls += 1
        if self.error is not None:
            raise self.error

    async def get_partner_code(self) -> Optional[str]:
        self.code_calls += 1
        if self.code_delay:
            await asyncio.sleep(self.code_delay)
        if self.error is not None:
            raise self.error
        return self.code


@pytest.fixture
def signed_up_store(temp_store: LocalStore, sample_user: User) -> LocalStore:
    """Store holding a cached user and a credential pair."""
    temp_store.save_user(sample_user)
    temp_store.save_credentials(CREDENTIALS)
    return temp_store


def run_bootstrap(bootstrap: SessionBootstrap):
    async def _run():
        result = await bootstrap.run()
        await bootstrap.wait_for_follow_ups(timeout=1.0)
        return result

    return asyncio.run(_run())


class TestNoNetworkPaths:

    def test_no_cached_user(self, temp_store: LocalStore):
        auth = FakeAuthClient()
        temp_store.save_credentials(CREDENTIALS)

        result = run_bootstrap(SessionBootstrap(temp_store, auth))

        assert result.state.phase == SessionPhase.ONBOARDING
        assert result.reason == BootstrapReason.NO_CACHED_USER
        assert auth.calls == []

    def test_cached_user_without_credentials(self, temp_store: LocalStore, sample_user: User):
        auth = AsyncMock(spec=AuthClient)
        temp_store.save_user(sample_user)

        result = run_bootstrap(SessionBootstrap(temp_store, auth))

        assert result.state.phase == SessionPhase.ONBOARDING
        assert result.state.current_user is None
        assert result.reason == BootstrapReason.NO_CREDENTIALS
        assert auth.sign_in.call_count == 0


class TestSignIn:

    def test_success_activates_session(self, signed_up_store: LocalStore, sample_user: User):
        auth = FakeAuthClient(user=sample_user.model_copy(update={"name": "Alex M."}))

        result = run_bootstrap(SessionBootstrap(signed_up_store, auth))

        assert result.state.phase == SessionPhase.ACTIVE
        assert result.state.current_user.name == "Alex M."
        assert result.reason == BootstrapReason.SIGNED_IN
        assert auth.calls == [("alex@example.com", "secret")]
        assert signed_up_store.load_user().name == "Alex M."

    def test_keeps_cached_partner_linkage(self, signed_up_store: LocalStore, sample_user: User):
        signed_up_store.save_user(sample_user.model_copy(update={"partner_code": "ABC", "partner_id": "p-1"}))
        auth = FakeAuthClient(user=sample_user)

        result = run_bootstrap(SessionBootstrap(signed_up_store, auth))

        assert result.state.current_user.partner_code == "ABC"
        assert result.state.current_user.partner_id == "p-1"

    def test_invalid_credentials_are_cleared(self, signed_up_store: LocalStore, sample_user: User):
        auth = FakeAuthClient(error=InvalidCredentials("refresh token invalid"))

        with patch.object(signed_up_store, "clear", wraps=signed_up_store.clear) as clear:
            result = run_bootstrap(SessionBootstrap(signed_up_store, auth))

        assert result.state.phase == SessionPhase.ONBOARDING
        assert result.reason == BootstrapReason.INVALID_CREDENTIALS
        clear.assert_any_call(EMAIL_KEY)
        clear.assert_any_call(PASSWORD_KEY)
        assert signed_up_store.load_credentials() is None
        assert signed_up_store.load_user() == sample_user

    def test_invalid_credentials_can_drop_cached_user(self, signed_up_store: LocalStore):
        auth = FakeAuthClient(error=InvalidCredentials("expired"))

        run_bootstrap(SessionBootstrap(signed_up_store, auth, clear_user_on_invalid=True))

        assert signed_up_store.load_credentials() is None
        assert signed_up_store.load_user() is None

    @pytest.mark.parametrize(
        "error, reason",
        [
            (NetworkError("offline"), BootstrapReason.NETWORK_ERROR),
            (ServerError("500"), BootstrapReason.SERVER_ERROR),
            (RuntimeError("boom"), BootstrapReason.UNEXPECTED_ERROR),
        ],
    )
    def test_transient_errors_keep_credentials(self, signed_up_store: LocalStore, error, reason):
        auth = FakeAuthClient(error=error)

        with patch.object(signed_up_store, "clear", wraps=signed_up_store.clear) as clear:
            result = run_bootstrap(SessionBootstrap(signed_up_store, auth))

        assert result.state.phase == SessionPhase.ONBOARDING
        assert result.reason == reason
        clear.assert_not_called()
        assert signed_up_store.load_credentials() == CREDENTIALS

    def test_timeout_keeps_credentials(self, signed_up_store: LocalStore, sample_user: User):
        auth = FakeAuthClient(user=sample_user, delay=5.0)

        result = run_bootstrap(SessionBootstrap(signed_up_store, auth, sign_in_timeout=0.05))

        assert result.state.phase == SessionPhase.ONBOARDING
        assert result.reason == BootstrapReason.TIMEOUT
        assert signed_up_store.load_credentials() == CREDENTIALS

    def test_store_failure_never_raises(self, signed_up_store: LocalStore):
        auth = FakeAuthClient()

        with patch.object(signed_up_store, "load_user", side_effect=sqlite3.OperationalError("locked")):
            result = run_bootstrap(SessionBootstrap(signed_up_store, auth))

        assert result.state.phase == SessionPhase.ONBOARDING
        assert result.reason == BootstrapReason.UNEXPECTED_ERROR

    def test_rejects_non_positive_timeout(self, temp_store: LocalStore):
        with pytest.raises(ValueError):
            SessionBootstrap(temp_store, FakeAuthClient(), sign_in_timeout=0)


class TestFollowUps:

    def test_partner_code_fetched_and_stored(self, signed_up_store: LocalStore, sample_user: User):
        profile = FakeProfileService(code="LOVE42")

        result = run_bootstrap(
            SessionBootstrap(signed_up_store, FakeAuthClient(user=sample_user), profile_service=profile)
        )

        assert result.state.phase == SessionPhase.ACTIVE
        assert profile.ensure_calls == 1
        assert profile.code_calls == 1
        assert signed_up_store.load_user().partner_code == "LOVE42"

    def test_partner_code_not_fetched_when_known(self, signed_up_store: LocalStore, sample_user: User):
        known = sample_user.model_copy(update={"partner_code": "KNOWN"})
        profile = FakeProfileService()

        run_bootstrap(SessionBootstrap(signed_up_store, FakeAuthClient(user=known), profile_service=profile))

        assert profile.ensure_calls == 1
        assert profile.code_calls == 0

    def test_failures_are_logged_not_raised(self, signed_up_store: LocalStore, sample_user: User, caplog):
        profile = FakeProfileService(error=ServerError("profiles down"))

        with caplog.at_level(logging.WARNING, logger="wetwo.session.bootstrap"):
            result = run_bootstrap(
                SessionBootstrap(signed_up_store, FakeAuthClient(user=sample_user), profile_service=profile)
            )

        assert result.state.phase == SessionPhase.ACTIVE
        assert "profiles down" in caplog.text
        assert signed_up_store.load_user().partner_code is None

    def test_slow_follow_up_does_not_delay_decision(self, signed_up_store: LocalStore, sample_user: User):
        profile = FakeProfileService(code_delay=30.0)
        bootstrap = SessionBootstrap(signed_up_store, FakeAuthClient(user=sample_user), profile_service=profile)

        async def _run():
            result = await asyncio.wait_for(bootstrap.run(), timeout=1.0)
            await bootstrap.wait_for_follow_ups(timeout=0.05)
            return result

        result = asyncio.run(_run())

        assert result.state.phase == SessionPhase.ACTIVE
        assert signed_up_store.load_user().partner_code is None

    def test_logout_during_follow_up_wins(self, signed_up_store: LocalStore, sample_user: User):
        profile = FakeProfileService(code="LATE", code_delay=0.05)
        bootstrap = SessionBootstrap(signed_up_store, FakeAuthClient(user=sample_user), profile_service=profile)

        async def _run():
            await bootstrap.run()
            logout(signed_up_store)
            await bootstrap.wait_for_follow_ups(timeout=1.0)

        asyncio.run(_run())

        assert signed_up_store.load_user() is None


class TestUserActions:

    def test_complete_onboarding_then_bootstrap(self, temp_store: LocalStore):
        user = User(name="Sam", birth_date=date(1992, 12, 24))
        state = complete_onboarding(temp_store, user, CREDENTIALS)

        assert state.is_active
        result = run_bootstrap(SessionBootstrap(temp_store, FakeAuthClient(user=user)))
        assert result.state.current_user == user

    def test_logout(self, signed_up_store: LocalStore):
        state = logout(signed_up_store)

        assert state.phase == SessionPhase.ONBOARDING
        assert signed_up_store.load_user() is None
        assert signed_up_store.load_credentials() is None
