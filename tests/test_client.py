import dataclasses
import threading

import httpx
import pytest
import respx
from asana_client.client import AsanaClient, create_client_from_env
from asana_client.config import ClientConfig, ConfigStore
from asana_client.errors import (
    AsanaClientError,
    AsanaConfigError,
    AsanaHTTPError,
    AsanaTransportError,
)
from asana_client.transport import BearerAuth, TransportAdapter
from httpx import Response

BASE = "https://app.asana.com/api/1.0"


@pytest.mark.asyncio
async def test_get_request_success():
    async with respx.mock:
        route = respx.get(f"{BASE}/users/me").mock(
            return_value=Response(
                200, json={"data": {"gid": "1", "name": "Sam"}}, headers={"X-Req": "a"}
            )
        )

        client = AsanaClient("mock-token")
        async with client:
            body, headers = await client.request("GET", "/users/me")

        assert route.called
        assert b'"Sam"' in body
        assert headers["X-Req"] == "a"


@pytest.mark.asyncio
async def test_auth_header_is_bearer_token():
    async with respx.mock:
        route = respx.get(f"{BASE}/workspaces").mock(
            return_value=Response(200, json={"data": []})
        )

        client = AsanaClient("mock-token")
        async with client:
            await client.get("/workspaces")

        sent = route.calls[0].request.headers
        assert sent.get("Authorization") == "Bearer mock-token"


@pytest.mark.asyncio
async def test_401_raises_typed_error_with_body_message():
    async with respx.mock:
        respx.get(f"{BASE}/workspaces").mock(
            return_value=Response(
                401, json={"errors": [{"message": "Not Authorized"}]}
            )
        )

        client = AsanaClient("mock-token")
        async with client:
            with pytest.raises(AsanaHTTPError) as exc:
                await client.get("/workspaces")

    assert exc.value.status_code == 401
    assert exc.value.code == 401
    assert "Not Authorized" in exc.value.message
    assert exc.value.response_json == {"errors": [{"message": "Not Authorized"}]}


@pytest.mark.asyncio
async def test_empty_error_body_falls_back_to_status_line():
    async with respx.mock:
        respx.delete(f"{BASE}/tasks/99").mock(return_value=Response(404))

        client = AsanaClient("mock-token")
        async with client:
            with pytest.raises(AsanaHTTPError) as exc:
                await client.delete("/tasks/99")

    assert exc.value.message == "404 Not Found"
    assert exc.value.response_json is None
    assert "DELETE" in str(exc.value)


@pytest.mark.asyncio
async def test_connect_error_is_a_transport_error():
    async with respx.mock:
        respx.get(f"{BASE}/workspaces").mock(side_effect=httpx.ConnectTimeout("boom"))

        client = AsanaClient("mock-token", timeout_seconds=0.1)
        async with client:
            with pytest.raises(AsanaTransportError) as exc:
                await client.get("/workspaces")

    assert isinstance(exc.value, AsanaClientError)
    assert not isinstance(exc.value, AsanaHTTPError)
    assert isinstance(exc.value.__cause__, httpx.ConnectTimeout)


@pytest.mark.asyncio
async def test_no_retry_on_503():
    async with respx.mock:
        route = respx.get(f"{BASE}/workspaces").mock(
            side_effect=[
                Response(503, text="Service Unavailable"),
                Response(200, json={"data": []}),
            ]
        )

        client = AsanaClient("mock-token")
        async with client:
            with pytest.raises(AsanaHTTPError):
                await client.get("/workspaces")

        assert route.call_count == 1


@pytest.mark.asyncio
async def test_form_post_is_url_encoded():
    async with respx.mock:
        route = respx.post(f"{BASE}/tasks").mock(
            return_value=Response(201, json={"data": {"gid": "5"}})
        )

        client = AsanaClient("mock-token")
        async with client:
            await client.post("/tasks", data={"name": "Write docs", "workspace": "1"})

        req = route.calls[0].request
        assert req.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert req.content == b"name=Write+docs&workspace=1"


def test_missing_token_is_a_config_error(monkeypatch):
    monkeypatch.delenv("ASANA_PERSONAL_ACCESS_TOKEN", raising=False)
    with pytest.raises(AsanaConfigError):
        AsanaClient()


def test_token_falls_back_to_environment(monkeypatch):
    monkeypatch.setenv("ASANA_PERSONAL_ACCESS_TOKEN", "  env-token ")
    client = AsanaClient()
    assert client.config.token == "env-token"


def test_first_non_empty_token_wins(monkeypatch):
    monkeypatch.setenv("ASANA_PERSONAL_ACCESS_TOKEN", "env-token")
    client = AsanaClient("", "   ", "explicit", "ignored")
    assert client.config.token == "explicit"


def test_create_client_from_env_reads_base_url(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("ASANA_PERSONAL_ACCESS_TOKEN", "env-token")
    monkeypatch.setenv("ASANA_BASE_URL", "https://asana.internal/api/1.0/")
    client = create_client_from_env()
    assert client.config.base_url == "https://asana.internal/api/1.0"


@pytest.mark.asyncio
async def test_session_joins_paths_onto_configured_base_url():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return Response(200, json={"data": []})

    client = AsanaClient(
        "mock-token",
        base_url="https://asana.internal/api/1.0/",
        transport=httpx.MockTransport(handler),
    )
    async with client:
        await client.get("/tasks?assignee=me&offset=abc")
        await client.get("workspaces", params={"limit": 5})

    assert str(seen[0].url) == (
        "https://asana.internal/api/1.0/tasks?assignee=me&offset=abc"
    )
    assert str(seen[1].url) == "https://asana.internal/api/1.0/workspaces?limit=5"
    assert seen[0].headers["Accept"] == "application/json"


@pytest.mark.asyncio
async def test_sessions_are_cached_per_config_snapshot():
    adapter = TransportAdapter()
    first = httpx.MockTransport(lambda request: Response(200))
    second = httpx.MockTransport(lambda request: Response(200))
    config = ClientConfig(token="a", timeout_seconds=2.5, transport=first)

    session = adapter.session_for(config)
    assert adapter.session_for(config) is session
    # a token change reuses the session; auth is attached per request
    assert adapter.session_for(dataclasses.replace(config, token="b")) is session
    assert session.timeout.read == 2.5
    assert str(session.base_url) == "https://app.asana.com/api/1.0/"

    swapped = adapter.session_for(dataclasses.replace(config, transport=second))
    assert swapped is not session

    await adapter.aclose()
    assert session.is_closed and swapped.is_closed


def test_bearer_auth_sets_authorization_header():
    request = httpx.Request("GET", "https://app.asana.com/api/1.0/users/me")
    flow = BearerAuth("pat-123").auth_flow(request)
    sent = next(flow)
    assert sent.headers["Authorization"] == "Bearer pat-123"


def test_config_repr_hides_token():
    client = AsanaClient("super-secret")
    assert "super-secret" not in repr(client.config)


@pytest.mark.asyncio
async def test_set_transport_swaps_for_later_requests():
    seen = []

    def make(tag):
        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(tag)
            return Response(200, json={"data": []})

        return httpx.MockTransport(handler)

    client = AsanaClient("mock-token", transport=make("first"))
    async with client:
        await client.get("/workspaces")
        client.set_transport(make("second"))
        await client.get("/workspaces")

    assert seen == ["first", "second"]


@pytest.mark.asyncio
async def test_set_personal_access_token_applies_to_next_request():
    tokens = []

    def handler(request: httpx.Request) -> httpx.Response:
        tokens.append(request.headers["Authorization"])
        return Response(200, json={"data": []})

    client = AsanaClient("old", transport=httpx.MockTransport(handler))
    async with client:
        await client.get("/workspaces")
        client.set_personal_access_token("new")
        await client.get("/workspaces")

    assert tokens == ["Bearer old", "Bearer new"]
    with pytest.raises(AsanaConfigError):
        client.set_personal_access_token("  ")


def test_config_store_readers_never_see_torn_config():
    store = ConfigStore(ClientConfig(token="t0"))
    seen = []

    def writer():
        for i in range(200):
            store.set(token=f"t{i}", base_url=f"https://h{i}")

    def reader():
        for _ in range(200):
            cfg = store.get()
            seen.append((cfg.token, cfg.base_url))

    threads = [threading.Thread(target=writer)] + [
        threading.Thread(target=reader) for _ in range(4)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    for token, base_url in seen:
        if token == "t0":
            continue
        assert base_url == f"https://h{token[1:]}"
