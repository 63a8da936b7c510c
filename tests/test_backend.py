"""Tests for the REST backend client."""

import asyncio
import json

import httpx
import pytest

from wetwo.services.backend import BackendClient
from wetwo.services.base import InvalidCredentials, NetworkError, ServerError


SIGN_IN_BODY = {
    "success": True,
    "data": {
        "token": "tok-123",
        "refreshToken": "ref-456",
        "user": {
            "id": "u-1",
            "name": "Alex",
            "email": "alex@example.com",
            "birth_date": "1994-07-30",
        },
    },
}


class Recorder:
    """MockTransport handler that records requests and replays canned responses."""

    def __init__(self, routes: dict):
        self.routes = routes
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"success": False, "error": "not found"})
        if isinstance(route, Exception):
            raise route
        status, body = route
        return httpx.Response(status, json=body)


def make_client(routes: dict) -> tuple[BackendClient, Recorder]:
    recorder = Recorder(routes)
    client = BackendClient(base_url="https://test", transport=httpx.MockTransport(recorder))
    return client, recorder


def signed_in(routes: dict) -> tuple[BackendClient, Recorder]:
    routes = {("POST", "/api/auth"): (200, SIGN_IN_BODY), **routes}
    client, recorder = make_client(routes)
    asyncio.run(client.sign_in("alex@example.com", "secret"))
    return client, recorder


class TestSignIn:

    def test_success(self):
        client, recorder = make_client({("POST", "/api/auth"): (200, SIGN_IN_BODY)})

        user = asyncio.run(client.sign_in("alex@example.com", "secret"))

        assert user.id == "u-1"
        assert user.name == "Alex"
        assert user.birth_date.isoformat() == "1994-07-30"
        assert client.is_authenticated()
        assert json.loads(recorder.requests[0].content) == {
            "email": "alex@example.com",
            "password": "secret",
        }

    def test_only_bearer_token_is_kept(self):
        body = {"success": True, "data": {"token": "tok-9", "user": SIGN_IN_BODY["data"]["user"]}}
        client, _ = make_client({("POST", "/api/auth"): (200, body)})

        asyncio.run(client.sign_in("alex@example.com", "secret"))

        assert client._headers()["Authorization"] == "Bearer tok-9"
        assert not hasattr(client, "_refresh_token")

    @pytest.mark.parametrize("status", [400, 401, 403])
    def test_rejected(self, status):
        client, _ = make_client({("POST", "/api/auth"): (status, {"success": False, "error": "bad"})})

        with pytest.raises(InvalidCredentials):
            asyncio.run(client.sign_in("alex@example.com", "wrong"))
        assert not client.is_authenticated()

    def test_server_error(self):
        client, _ = make_client({("POST", "/api/auth"): (500, {"success": False})})

        with pytest.raises(ServerError):
            asyncio.run(client.sign_in("alex@example.com", "secret"))

    def test_malformed_body(self):
        client, _ = make_client({("POST", "/api/auth"): (200, {"success": True, "data": {"user": {}}})})

        with pytest.raises(ServerError):
            asyncio.run(client.sign_in("alex@example.com", "secret"))

    def test_network_error(self):
        client, _ = make_client({("POST", "/api/auth"): httpx.ConnectError("refused")})

        with pytest.raises(NetworkError):
            asyncio.run(client.sign_in("alex@example.com", "secret"))


class TestProfile:

    def test_requires_sign_in(self):
        client, recorder = make_client({})

        with pytest.raises(InvalidCredentials):
            asyncio.run(client.ensure_profile_exists())
        with pytest.raises(InvalidCredentials):
            asyncio.run(client.get_partner_code())
        assert recorder.requests == []

    def test_existing_profile(self):
        client, recorder = signed_in({("GET", "/api/profiles/me"): (200, {"success": True, "data": {}})})

        asyncio.run(client.ensure_profile_exists())

        methods = [(r.method, r.url.path) for r in recorder.requests]
        assert ("POST", "/api/profiles") not in methods
        assert recorder.requests[-1].headers["Authorization"] == "Bearer tok-123"

    def test_missing_profile_is_created(self):
        client, recorder = signed_in({
            ("GET", "/api/profiles/me"): (404, {"success": False}),
            ("POST", "/api/profiles"): (201, {"success": True, "data": {}}),
        })

        asyncio.run(client.ensure_profile_exists())

        created = recorder.requests[-1]
        assert (created.method, created.url.path) == ("POST", "/api/profiles")
        assert json.loads(created.content) == {"name": "Alex", "birth_date": "1994-07-30"}

    def test_expired_session(self):
        client, _ = signed_in({("GET", "/api/profiles/me"): (401, {"success": False})})

        with pytest.raises(InvalidCredentials):
            asyncio.run(client.ensure_profile_exists())


class TestPartnerCode:

    def test_code_in_object(self):
        client, _ = signed_in({
            ("GET", "/api/partnerships/code"): (200, {"success": True, "data": {"code": "LOVE42"}}),
        })

        assert asyncio.run(client.get_partner_code()) == "LOVE42"

    def test_code_as_string(self):
        client, _ = signed_in({
            ("GET", "/api/partnerships/code"): (200, {"success": True, "data": "LOVE42"}),
        })

        assert asyncio.run(client.get_partner_code()) == "LOVE42"

    def test_no_code(self):
        client, _ = signed_in({})

        assert asyncio.run(client.get_partner_code()) is None

    def test_failed_envelope(self):
        client, _ = signed_in({
            ("GET", "/api/partnerships/code"): (200, {"success": False, "error": "nope"}),
        })

        with pytest.raises(ServerError, match="nope"):
            asyncio.run(client.get_partner_code())


class TestConfig:

    def test_plain_http_rejected(self):
        with pytest.raises(ValueError):
            BackendClient(base_url="http://insecure.example.com")

    def test_api_key_header(self):
        recorder = Recorder({("POST", "/api/auth"): (200, SIGN_IN_BODY)})
        client = BackendClient(
            base_url="https://test",
            api_key="key-1",
            transport=httpx.MockTransport(recorder),
        )

        asyncio.run(client.sign_in("alex@example.com", "secret"))

        assert recorder.requests[0].headers["X-API-Key"] == "key-1"
