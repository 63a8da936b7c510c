"""Backend services for WeTwo."""

from wetwo.services.base import (
    AuthClient,
    AuthError,
    InvalidCredentials,
    NetworkError,
    NoCredentialsFound,
    ProfileService,
    ServerError,
)
from wetwo.services.backend import BackendClient

__all__ = [
    "AuthClient",
    "AuthError",
    "BackendClient",
    "InvalidCredentials",
    "NetworkError",
    "NoCredentialsFound",
    "ProfileService",
    "ServerError",
]
