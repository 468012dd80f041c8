"""
HTTP client for the Linkshelf REST API.

The caller's identity lives in an explicit ApiSession object handed to the
client, instead of process-wide state. Every request goes through
``_prepare_headers`` (which attaches the bearer token) and ``_handle_response``
(which clears the session on a 401 and raises).
"""
import os
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import httpx


def get_api_base_url() -> str:
    """Get the API base URL from environment."""
    return os.getenv("LINKSHELF_API_URL", "http://localhost:8000/api/v1")


def get_default_timeout() -> float:
    """Get the default request timeout."""
    return float(os.getenv("LINKSHELF_API_TIMEOUT", "30.0"))


class ApiError(Exception):
    """Raised for any non-2xx API response other than 401."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


class UnauthorizedError(ApiError):
    """Raised when the API rejects the session's token (401)."""

    def __init__(self, message: str = "Not authenticated") -> None:
        super().__init__(401, message)


@dataclass
class ApiSession:
    """Identity state for one signed-in client."""

    token: str | None = None
    user: dict[str, Any] | None = field(default=None)

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    def set_identity(self, token: str, user: dict[str, Any] | None) -> None:
        self.token = token
        self.user = user

    def clear(self) -> None:
        """Forget the token and user (e.g. after the server rejects the token)."""
        self.token = None
        self.user = None


def _error_message(response: httpx.Response) -> str:
    """Extract the envelope's message, falling back to the reason phrase."""
    try:
        body = response.json()
    except ValueError:
        return response.reason_phrase or "Request failed"
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        return body["message"]
    return response.reason_phrase or "Request failed"


class LinksClient:
    """
    Async client for the link and auth endpoints.

    Usage:
        session = ApiSession()
        async with LinksClient(session, on_unauthorized=show_login) as client:
            await client.signin("me@example.com", "secret")
            links = await client.get_links(tag="python")
    """

    def __init__(
        self,
        session: ApiSession,
        base_url: str | None = None,
        on_unauthorized: Callable[[], None] | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.session = session
        self.on_unauthorized = on_unauthorized
        self._http = httpx.AsyncClient(
            base_url=base_url or get_api_base_url(),
            timeout=timeout if timeout is not None else get_default_timeout(),
            transport=transport,
        )

    async def __aenter__(self) -> "LinksClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    def _prepare_headers(self) -> dict[str, str]:
        """Headers for the next request, reflecting the session's current token."""
        headers = {"Content-Type": "application/json"}
        if self.session.token:
            headers["Authorization"] = f"Bearer {self.session.token}"
        return headers

    def _handle_response(self, response: httpx.Response) -> dict[str, Any]:
        if response.status_code == 401:
            self.session.clear()
            if self.on_unauthorized is not None:
                self.on_unauthorized()
            raise UnauthorizedError(_error_message(response))
        if response.is_error:
            raise ApiError(response.status_code, _error_message(response))
        return response.json()

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        response = await self._http.request(
            method,
            path,
            params=params,
            json=json,
            headers=self._prepare_headers(),
        )
        return self._handle_response(response)

    # Auth

    async def signup(
        self, email: str, password: str, name: str | None = None,
    ) -> dict[str, Any]:
        """Register and store the returned identity on the session."""
        payload: dict[str, Any] = {"email": email, "password": password}
        if name is not None:
            payload["name"] = name
        body = await self._request("POST", "/auth/signup", json=payload)
        self.session.set_identity(body["token"], body.get("user"))
        return body

    async def signin(self, email: str, password: str) -> dict[str, Any]:
        """Sign in and store the returned identity on the session."""
        body = await self._request(
            "POST", "/auth/signin", json={"email": email, "password": password},
        )
        self.session.set_identity(body["token"], body.get("user"))
        return body

    # Links

    async def get_links(
        self, tag: str | None = None, search: str | None = None,
    ) -> list[dict[str, Any]]:
        params = {k: v for k, v in {"tag": tag, "search": search}.items() if v}
        body = await self._request("GET", "/links", params=params or None)
        return body["links"]

    async def get_tags(self) -> list[str]:
        body = await self._request("GET", "/links/tags")
        return body["tags"]

    async def create_link(
        self,
        url: str,
        title: str,
        description: str | None = None,
        tags: list[str] | None = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"url": url, "title": title}
        if description is not None:
            payload["description"] = description
        if tags is not None:
            payload["tags"] = tags
        body = await self._request("POST", "/links", json=payload)
        return body["link"]

    async def update_link(self, link_id: str, **fields: Any) -> dict[str, Any]:
        """Send only the given fields (any of url, title, description, tags)."""
        body = await self._request("PATCH", f"/links/{link_id}", json=fields)
        return body["link"]

    async def delete_link(self, link_id: str) -> None:
        await self._request("DELETE", f"/links/{link_id}")
