"""Backend capability interfaces for WeTwo."""

from abc import ABC, abstractmethod
from typing import Optional

from wetwo.models import User


class AuthError(Exception):
    """Base class for authentication and backend failures."""


class InvalidCredentials(AuthError):
    """Stored credentials were rejected, or the session could not be refreshed."""


class NetworkError(AuthError):
    """The backend could not be reached."""


class ServerError(AuthError):
    """The backend answered with an unexpected error."""


class NoCredentialsFound(AuthError):
    """No credential pair is stored locally. Expected on first launch."""


class AuthClient(ABC):
    """Signs a user in with an email/password pair."""

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> User:
        """Sign in and return the account's user.

        Args:
            email: Account email.
            password: Account password.

        Returns:
            The signed-in user.

        Raises:
            InvalidCredentials: If the credentials are rejected.
            NetworkError: If the backend is unreachable.
            ServerError: For any other backend failure.
        """
        pass


class ProfileService(ABC):
    """Profile operations run after a successful sign-in."""

    @abstractmethod
    async def ensure_profile_exists(self) -> None:
        """Create the remote profile of the signed-in user if it is missing."""
        pass

    @abstractmethod
    async def get_partner_code(self) -> Optional[str]:
        """Get the code a partner uses to link with the signed-in user.

        Returns:
            The partner code, or None if the backend has none.
        """
        pass
