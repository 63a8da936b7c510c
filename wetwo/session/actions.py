"""Explicit user actions that change the session state."""

import logging

from wetwo.db.store import LocalStore
from wetwo.models import Credentials, SessionState, User

logger = logging.getLogger(__name__)


def complete_onboarding(store: LocalStore, user: User, credentials: Credentials) -> SessionState:
    """Persist a freshly signed-up or signed-in user and activate the session."""
    store.save_user(user)
    store.save_credentials(credentials)
    logger.info("Onboarding completed for %s", user.name)
    return SessionState.active(user)


def logout(store: LocalStore) -> SessionState:
    """Forget the cached user and credentials."""
    store.clear_credentials()
    store.clear_user()
    logger.info("Logged out")
    return SessionState.onboarding()
