"""Startup decision between onboarding and the signed-in app.

``SessionBootstrap.run`` reads the cached user and credential pair from the
local store, signs in once, and always resolves to a ``SessionState``. Profile
follow-ups after a successful sign-in run as separate tasks and never delay
or change that decision.
"""

import asyncio
import logging
import sqlite3
from enum import Enum
from typing import Coroutine, Optional

from pydantic import BaseModel, Field

from wetwo.db.store import LocalStore
from wetwo.models import SessionState, User
from wetwo.services.base import (
    AuthClient,
    InvalidCredentials,
    NetworkError,
    ProfileService,
    ServerError,
)

logger = logging.getLogger(__name__)

DEFAULT_SIGN_IN_TIMEOUT = 15.0


class BootstrapReason(str, Enum):
    """Why the bootstrap ended in its state."""

    SIGNED_IN = "signed_in"
    NO_CACHED_USER = "no_cached_user"
    NO_CREDENTIALS = "no_credentials"
    INVALID_CREDENTIALS = "invalid_credentials"
    NETWORK_ERROR = "network_error"
    SERVER_ERROR = "server_error"
    TIMEOUT = "timeout"
    UNEXPECTED_ERROR = "unexpected_error"


class BootstrapResult(BaseModel):
    """Outcome of a session bootstrap."""

    state: SessionState = Field(..., description="Resulting session state")
    reason: BootstrapReason = Field(..., description="Why this state was chosen")

    model_config = {"frozen": True}


class SessionBootstrap:
    """Decides the initial session state from local storage and one sign-in.

    Dependencies are passed in so they can be replaced in tests.
    """

    def __init__(
        self,
        store: LocalStore,
        auth_client: AuthClient,
        profile_service: Optional[ProfileService] = None,
        sign_in_timeout: float = DEFAULT_SIGN_IN_TIMEOUT,
        clear_user_on_invalid: bool = False,
    ):
        """Initialize the bootstrap.

        Args:
            store: Local store holding the cached user and credentials.
            auth_client: Client used for the sign-in attempt.
            profile_service: Optional service for post sign-in follow-ups.
            sign_in_timeout: Seconds to wait for sign-in before giving up.
            clear_user_on_invalid: Also drop the cached user when the stored
                credentials are rejected.
        """
        if sign_in_timeout <= 0:
            raise ValueError(f"sign_in_timeout must be positive, got {sign_in_timeout}")

        self.store = store
        self.auth_client = auth_client
        self.profile_service = profile_service
        self.sign_in_timeout = sign_in_timeout
        self.clear_user_on_invalid = clear_user_on_invalid
        self._follow_ups: set[asyncio.Task] = set()

    async def run(self) -> BootstrapResult:
        """Decide the session state.

        Never raises; every failure resolves to an onboarding state.
        """
        try:
            return await self._decide()
        except Exception:
            logger.exception("Session bootstrap failed unexpectedly")
            return self._onboarding(BootstrapReason.UNEXPECTED_ERROR)

    async def wait_for_follow_ups(self, timeout: Optional[float] = None) -> None:
        """Wait for follow-up tasks started by ``run``.

        Args:
            timeout: Seconds to wait. Tasks still running afterwards are
                left alone.
        """
        pending = list(self._follow_ups)
        if pending:
            await asyncio.wait(pending, timeout=timeout)

    @staticmethod
    def _onboarding(reason: BootstrapReason) -> BootstrapResult:
        logger.info("Session bootstrap: onboarding (%s)", reason.value)
        return BootstrapResult(state=SessionState.onboarding(), reason=reason)

    async def _decide(self) -> BootstrapResult:
        cached_user = self.store.load_user()
        if cached_user is None:
            return self._onboarding(BootstrapReason.NO_CACHED_USER)

        credentials = self.store.load_credentials()
        if credentials is None:
            return self._onboarding(BootstrapReason.NO_CREDENTIALS)

        logger.info("Signing in with stored credentials for %s", credentials.email)
        try:
            signed_in = await asyncio.wait_for(
                self.auth_client.sign_in(
                    credentials.email, credentials.password.get_secret_value()
                ),
                timeout=self.sign_in_timeout,
            )
        except InvalidCredentials as e:
            logger.warning("Stored credentials rejected, clearing them: %s", e)
            self.store.clear_credentials()
            if self.clear_user_on_invalid:
                self.store.clear_user()
            return self._onboarding(BootstrapReason.INVALID_CREDENTIALS)
        except asyncio.TimeoutError:
            logger.warning("Sign-in timed out after %.1fs", self.sign_in_timeout)
            return self._onboarding(BootstrapReason.TIMEOUT)
        except NetworkError as e:
            logger.warning("Sign-in failed, backend unreachable: %s", e)
            return self._onboarding(BootstrapReason.NETWORK_ERROR)
        except ServerError as e:
            logger.warning("Sign-in failed on the server: %s", e)
            return self._onboarding(BootstrapReason.SERVER_ERROR)
        except Exception:
            logger.exception("Sign-in failed unexpectedly")
            return self._onboarding(BootstrapReason.UNEXPECTED_ERROR)

        user = self._merge(cached_user, signed_in)
        try:
            self.store.save_user(user)
        except sqlite3.Error as e:
            logger.warning("Could not refresh cached user: %s", e)

        self._schedule_follow_ups(user)
        logger.info("Session bootstrap: active as %s", user.name)
        return BootstrapResult(state=SessionState.active(user), reason=BootstrapReason.SIGNED_IN)

    @staticmethod
    def _merge(cached: User, signed_in: User) -> User:
        """Prefer server data, keeping partner linkage the server left out."""
        return signed_in.model_copy(
            update={
                "partner_code": signed_in.partner_code or cached.partner_code,
                "partner_id": signed_in.partner_id or cached.partner_id,
            }
        )

    def _schedule_follow_ups(self, user: User) -> None:
        if self.profile_service is None:
            return
        self._spawn(self._ensure_profile())
        if not user.partner_code:
            self._spawn(self._fetch_partner_code())

    def _spawn(self, coro: Coroutine) -> None:
        task = asyncio.create_task(coro)
        self._follow_ups.add(task)
        task.add_done_callback(self._follow_ups.discard)

    async def _ensure_profile(self) -> None:
        try:
            await self.profile_service.ensure_profile_exists()
        except Exception as e:
            logger.warning("Could not ensure remote profile: %s", e)

    async def _fetch_partner_code(self) -> None:
        try:
            code = await self.profile_service.get_partner_code()
            if not code:
                return
            # The user may have logged out while the request was running
            cached = self.store.load_user()
            if cached is None:
                return
            self.store.save_user(cached.with_partner_code(code))
            logger.info("Stored partner code")
        except Exception as e:
            logger.warning("Could not fetch partner code: %s", e)
