"""Per-account bearer credential source for ``httpx`` clients."""

from __future__ import annotations

from collections.abc import Generator

import httpx


class BearerAuth(httpx.Auth):
    """Injects ``Authorization: Bearer <token>`` into every request.

    The token lives only on this object and in the outgoing header; it is
    never placed in the URL and ``repr()`` does not show it.
    """

    def __init__(self, token: str) -> None:
        self._token = token

    def __repr__(self) -> str:
        return "BearerAuth(token=***REDACTED***)"

    @property
    def token(self) -> str:
        return self._token

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers["Authorization"] = f"Bearer {self._token}"
        yield request
