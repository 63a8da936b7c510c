"""Session handling for WeTwo."""

from wetwo.session.actions import complete_onboarding, logout
from wetwo.session.bootstrap import BootstrapReason, BootstrapResult, SessionBootstrap

__all__ = [
    "BootstrapReason",
    "BootstrapResult",
    "SessionBootstrap",
    "complete_onboarding",
    "logout",
]
