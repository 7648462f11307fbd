"""
HTTP session layer: bearer auth plus one ``httpx.AsyncClient`` per
(transport, base URL, timeout) snapshot.

Any ``httpx.AsyncBaseTransport`` can be injected (``httpx.MockTransport`` in
tests); with none configured, httpx's own pooled transport is used.
"""

from __future__ import annotations

from typing import Dict, Generator, Optional, Tuple

import httpx

from .config import ClientConfig

USER_AGENT = "asana-client-python"

SessionKey = Tuple[Optional[httpx.AsyncBaseTransport], str, float]


class BearerAuth(httpx.Auth):
    """Personal access token sent as ``Authorization: Bearer <token>``."""

    def __init__(self, token: str):
        self._token = token

    def auth_flow(
        self, request: httpx.Request
    ) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers["Authorization"] = f"Bearer {self._token}"
        yield request


class TransportAdapter:
    """
    Hands out the AsyncClient matching a config snapshot.

    Clients are cached per snapshot key; a client built for a transport that
    has since been replaced stays open until :meth:`aclose`, so requests
    already running on it are not cut off.
    """

    def __init__(self) -> None:
        self._sessions: Dict[SessionKey, httpx.AsyncClient] = {}

    @staticmethod
    def key_for(config: ClientConfig) -> SessionKey:
        return (config.transport, config.base_url, config.timeout_seconds)

    def session_for(self, config: ClientConfig) -> httpx.AsyncClient:
        key = self.key_for(config)
        session = self._sessions.get(key)
        if session is None or session.is_closed:
            session = httpx.AsyncClient(
                base_url=config.base_url,
                headers={"Accept": "application/json", "User-Agent": USER_AGENT},
                timeout=config.timeout_seconds,
                transport=config.transport,
            )
            self._sessions[key] = session
        return session

    async def aclose(self) -> None:
        sessions = list(self._sessions.values())
        self._sessions.clear()
        for session in sessions:
            await session.aclose()


__all__ = ["USER_AGENT", "BearerAuth", "TransportAdapter"]
