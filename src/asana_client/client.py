import json
import logging
import time
from typing import Any, Dict, Mapping, Optional, Tuple, Type, TypeVar

import httpx
from pydantic import BaseModel

from .config import (
    BASE_URL,
    DEFAULT_TIMEOUT_SECONDS,
    ClientConfig,
    ConfigStore,
    load_env_config,
    resolve_token,
)
from .errors import (
    AsanaClientError,
    AsanaConfigError,
    AsanaHTTPError,
    AsanaTransportError,
)
from .pagination import PageStream, PaginationRequest, Paginator
from .transport import BearerAuth, TransportAdapter

T = TypeVar("T", bound=BaseModel)


class AsanaClient:
    """
    Shared HTTP client for the Asana REST API.
    - Handles bearer auth, base URL, timeouts
    - Returns raw body bytes + headers; decoding lives in envelope/models
    - No retries; every failure is raised to the caller
    """

    def __init__(
        self,
        *personal_access_tokens: Optional[str],
        base_url: str = BASE_URL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger: Optional[logging.Logger] = None,
    ):
        base_url = (base_url or "").rstrip("/")
        if not base_url:
            raise AsanaConfigError("base_url must be provided.")
        token = resolve_token(*personal_access_tokens)

        self.log = logger or logging.getLogger("asana_client.client")
        self._store = ConfigStore(
            ClientConfig(
                token=token,
                base_url=base_url,
                timeout_seconds=timeout_seconds,
                transport=transport,
            )
        )
        self._transport = TransportAdapter()

    @classmethod
    def from_env(cls, **kwargs) -> "AsanaClient":
        token, base_url = load_env_config()
        kwargs.setdefault("base_url", base_url)
        return cls(token, **kwargs)

    # --- configuration ---

    @property
    def config(self) -> ClientConfig:
        return self._store.get()

    def set_transport(self, transport: Optional[httpx.AsyncBaseTransport]) -> None:
        """Swap the transport; None restores the default pooled transport."""
        self._store.set(transport=transport)

    def set_personal_access_token(self, token: str) -> None:
        token = (token or "").strip()
        if not token:
            raise AsanaConfigError("personal access token must be non-empty.")
        self._store.set(token=token)

    async def aclose(self) -> None:
        await self._transport.aclose()

    async def __aenter__(self) -> "AsanaClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    # --- request execution ---

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        data: Optional[Mapping[str, Any]] = None,
        files: Optional[Mapping[str, Any]] = None,
        resource: Optional[str] = None,
    ) -> Tuple[bytes, httpx.Headers]:
        """
        Core request method.
        - Attaches the bearer token from the current config snapshot
        - Raises AsanaHTTPError on non-2xx HTTP responses
        - Raises AsanaTransportError on network/timeout errors
        - Returns (body bytes, response headers) on success
        """
        method = method.upper()
        config = self._store.get()
        http = self._transport.session_for(config)

        start = time.perf_counter()
        try:
            resp = await http.request(
                method,
                path,
                params=params,
                data=data,
                files=files,
                auth=BearerAuth(config.token),
            )
        except httpx.HTTPError as exc:
            raise AsanaTransportError(
                f"Network/transport error calling {method} {path}: {exc}"
            ) from exc
        duration_ms = int((time.perf_counter() - start) * 1000)

        # structured-ish log without secrets
        self.log.debug(
            "asana.request",
            extra={
                "resource": resource,
                "method": method,
                "path": resp.request.url.raw_path.decode("ascii", "replace"),
                "status": resp.status_code,
                "duration_ms": duration_ms,
            },
        )

        if resp.status_code < 200 or resp.status_code >= 300:
            raise self._to_http_error(resp, method=method)

        return resp.content, resp.headers

    @staticmethod
    def _to_http_error(resp: httpx.Response, *, method: str) -> AsanaHTTPError:
        body = resp.content or b""
        message = body.decode("utf-8", "replace").strip()
        if not message:
            message = f"{resp.status_code} {resp.reason_phrase}".strip()

        response_json: Optional[Dict[str, Any]] = None
        try:
            parsed = json.loads(body) if body else None
        except ValueError:
            parsed = None
        if isinstance(parsed, dict):
            response_json = parsed

        return AsanaHTTPError(
            status_code=resp.status_code,
            method=method,
            url=str(resp.request.url),
            message=message,
            response_json=response_json,
        )

    async def get(
        self,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        resource: Optional[str] = None,
    ) -> bytes:
        body, _ = await self.request("GET", path, params=params, resource=resource)
        return body

    async def post(
        self,
        path: str,
        *,
        data: Optional[Mapping[str, Any]] = None,
        files: Optional[Mapping[str, Any]] = None,
        params: Optional[Mapping[str, Any]] = None,
        resource: Optional[str] = None,
    ) -> bytes:
        body, _ = await self.request(
            "POST", path, params=params, data=data, files=files, resource=resource
        )
        return body

    async def put(
        self,
        path: str,
        *,
        data: Optional[Mapping[str, Any]] = None,
        resource: Optional[str] = None,
    ) -> bytes:
        body, _ = await self.request("PUT", path, data=data, resource=resource)
        return body

    async def delete(self, path: str, *, resource: Optional[str] = None) -> bytes:
        body, _ = await self.request("DELETE", path, resource=resource)
        return body

    def paginate(
        self,
        model: Type[T],
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        *,
        resource: Optional[str] = None,
    ) -> PageStream[T]:
        """Start a pagination run over ``path``, decoding records as ``model``."""

        async def fetch(target: str) -> bytes:
            return await self.get(target, resource=resource)

        paginator = Paginator(fetch, model, resource=resource)
        return paginator.paginate(PaginationRequest.build(path, params))


def create_client_from_env(**kwargs) -> AsanaClient:
    """Create an AsanaClient from environment variables (optional .env)."""
    token, base_url = load_env_config()
    if not token:
        raise AsanaConfigError("Missing ASANA_PERSONAL_ACCESS_TOKEN in environment.")
    kwargs.setdefault("base_url", base_url)
    return AsanaClient(token, **kwargs)


__all__ = ["AsanaClient", "AsanaClientError", "create_client_from_env"]
