"""REST backend client implementing AuthClient and ProfileService."""

import logging
from datetime import date
from typing import Any, Optional

import httpx

from wetwo.models import User
from wetwo.services.base import (
    AuthClient,
    InvalidCredentials,
    NetworkError,
    ProfileService,
    ServerError,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://wetwobackend-production.up.railway.app"
DEFAULT_TIMEOUT = 10.0

AUTH_ENDPOINT = "/api/auth"
PROFILES_ENDPOINT = "/api/profiles"
PARTNER_CODE_ENDPOINT = "/api/partnerships/code"

# Status codes that mean the credentials themselves were rejected
REJECTED_STATUSES = {400, 401, 403}


class BackendClient(AuthClient, ProfileService):
    """Client for the WeTwo REST backend.

    Responses are wrapped in a ``{success, data, message, error}`` envelope.
    The bearer token returned by sign-in is sent with every later request.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        api_key: str = "",
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the backend client.

        Args:
            base_url: Backend base URL.
            api_key: Optional API key sent as ``X-API-Key``.
            timeout: Per-request timeout in seconds.
            transport: Optional httpx transport (used by tests).
        """
        if not base_url.startswith("https://") and transport is None:
            raise ValueError(f"Backend URL must use https: {base_url}")

        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport
        self._auth_token: Optional[str] = None
        self._user: Optional[User] = None

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["X-API-Key"] = self.api_key
        if self._auth_token:
            headers["Authorization"] = f"Bearer {self._auth_token}"
        return headers

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send a request, mapping transport failures to NetworkError."""
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                return await client.request(method, path, headers=self._headers(), **kwargs)
        except httpx.TransportError as e:
            raise NetworkError(f"{method} {path} failed: {e}") from e

    @staticmethod
    def _payload(response: httpx.Response) -> Any:
        """Unwrap the response envelope.

        Raises:
            ServerError: If the body is not JSON or reports failure.
        """
        try:
            body = response.json()
        except ValueError as e:
            raise ServerError(f"Invalid JSON from backend ({response.status_code})") from e

        if isinstance(body, dict) and "success" in body:
            if not body.get("success"):
                raise ServerError(body.get("error") or body.get("message") or "Request failed")
            return body.get("data")
        return body

    @staticmethod
    def _parse_user(data: dict) -> User:
        birth_date = data.get("birth_date")
        return User(
            id=str(data["id"]),
            name=data.get("name") or "User",
            email=data.get("email"),
            birth_date=date.fromisoformat(birth_date) if birth_date else date.today(),
            partner_code=data.get("partner_code"),
            partner_id=data.get("partner_id"),
        )

    def is_authenticated(self) -> bool:
        return self._auth_token is not None

    async def sign_in(self, email: str, password: str) -> User:
        """Sign in with email and password.

        Raises:
            InvalidCredentials: On 400/401/403.
            NetworkError: If the backend is unreachable.
            ServerError: On any other failure.
        """
        logger.info("Signing in to backend at %s", self.base_url)
        response = await self._request(
            "POST", AUTH_ENDPOINT, json={"email": email, "password": password}
        )

        if response.status_code in REJECTED_STATUSES:
            raise InvalidCredentials(f"Sign-in rejected ({response.status_code})")
        if response.status_code != 200:
            raise ServerError(f"Sign-in failed ({response.status_code})")

        data = self._payload(response)
        try:
            self._auth_token = data["token"]
            self._user = self._parse_user(data["user"])
        except (KeyError, TypeError, ValueError) as e:
            raise ServerError(f"Malformed sign-in response: {e}") from e

        logger.info("Signed in as user %s", self._user.id)
        return self._user

    def _require_auth(self) -> None:
        if not self._auth_token:
            raise InvalidCredentials("Not signed in")

    async def ensure_profile_exists(self) -> None:
        """Create the profile if the backend does not have one yet."""
        self._require_auth()
        response = await self._request("GET", f"{PROFILES_ENDPOINT}/me")
        if response.status_code == 200:
            return
        if response.status_code in (401, 403):
            raise InvalidCredentials("Session expired, please sign in again")
        if response.status_code != 404:
            raise ServerError(f"Profile lookup failed ({response.status_code})")

        body = {}
        if self._user is not None:
            body = {
                "name": self._user.name,
                "birth_date": self._user.birth_date.isoformat(),
            }
        created = await self._request("POST", PROFILES_ENDPOINT, json=body)
        if created.status_code not in (200, 201):
            raise ServerError(f"Profile creation failed ({created.status_code})")
        logger.info("Created missing backend profile")

    async def get_partner_code(self) -> Optional[str]:
        """Fetch the signed-in user's partner code."""
        self._require_auth()
        response = await self._request("GET", PARTNER_CODE_ENDPOINT)
        if response.status_code == 404:
            return None
        if response.status_code in (401, 403):
            raise InvalidCredentials("Session expired, please sign in again")
        if response.status_code != 200:
            raise ServerError(f"Partner code lookup failed ({response.status_code})")

        data = self._payload(response)
        if isinstance(data, dict):
            return data.get("code")
        return data if isinstance(data, str) else None
