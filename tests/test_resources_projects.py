from urllib.parse import parse_qs

import pytest
import respx
from asana_client.client import AsanaClient
from asana_client.errors import AsanaValidationError
from asana_client.models import Layout, ProjectQuery, ProjectRequest
from asana_client.resources.projects import (
    PROJECT_OPT_FIELDS,
    add_users_to_project,
    create_project,
    delete_project_by_id,
    find_project_by_id,
    query_for_projects,
    remove_users_from_project,
    update_project,
)
from httpx import Response

BASE = "https://app.asana.com/api/1.0"

PROJECT = {
    "gid": "300",
    "name": "Roadmap",
    "layout": "board",
    "workspace": {"gid": "42", "name": "Acme"},
    "members": [{"gid": "u1"}],
}


@pytest.fixture
def client():
    return AsanaClient("mock-token")


def form_of(request) -> dict:
    return {k: v[0] for k, v in parse_qs(request.content.decode()).items()}


@pytest.mark.asyncio
@respx.mock
async def test_query_for_projects_sends_filters(client):
    route = respx.get(f"{BASE}/projects").mock(
        return_value=Response(200, json={"data": [PROJECT], "next_page": None})
    )

    pages = await query_for_projects(
        client, ProjectQuery(workspace="42", archived=False)
    ).collect()

    assert pages[0].items[0].layout is Layout.BOARD
    params = route.calls[0].request.url.params
    assert params["workspace"] == "42"
    assert params["archived"] == "false"
    assert params["opt_fields"] == PROJECT_OPT_FIELDS
    assert "team" not in params


def test_query_for_projects_requires_query(client):
    with pytest.raises(AsanaValidationError):
        query_for_projects(client, None)


@pytest.mark.asyncio
@respx.mock
async def test_create_project_posts_form(client):
    route = respx.post(f"{BASE}/projects").mock(
        return_value=Response(201, json={"data": PROJECT})
    )

    project = await create_project(
        client, ProjectRequest(name="Roadmap", workspace="42", layout=Layout.BOARD)
    )

    assert project.gid == "300"
    assert project.workspace.name == "Acme"
    assert form_of(route.calls[0].request) == {
        "name": "Roadmap",
        "layout": "board",
        "workspace": "42",
    }


@pytest.mark.asyncio
async def test_create_project_requires_workspace(client):
    with pytest.raises(AsanaValidationError, match="workspace"):
        await create_project(client, ProjectRequest(name="Roadmap"))


@pytest.mark.asyncio
@respx.mock
async def test_update_project_puts_to_project_path(client):
    route = respx.put(f"{BASE}/projects/300").mock(
        return_value=Response(200, json={"data": {**PROJECT, "notes": "Q3"}})
    )

    project = await update_project(client, ProjectRequest(project_id="300", notes="Q3"))

    assert project.notes == "Q3"
    assert form_of(route.calls[0].request) == {"notes": "Q3"}


@pytest.mark.asyncio
async def test_update_project_rejects_workspace_change(client):
    with pytest.raises(AsanaValidationError, match="cannot be modified"):
        await update_project(client, ProjectRequest(project_id="300", workspace="43"))
    with pytest.raises(AsanaValidationError, match="projectID"):
        await update_project(client, ProjectRequest(name="x"))


@pytest.mark.asyncio
@respx.mock
async def test_find_and_delete_project(client):
    respx.get(f"{BASE}/projects/300").mock(
        return_value=Response(200, json={"data": PROJECT})
    )
    deleted = respx.delete(f"{BASE}/projects/300").mock(
        return_value=Response(200, json={"data": {}})
    )

    project = await find_project_by_id(client, "300")
    await delete_project_by_id(client, "300")

    assert project.name == "Roadmap"
    assert deleted.called


@pytest.mark.asyncio
@respx.mock
async def test_add_and_remove_members(client):
    added = respx.post(f"{BASE}/projects/300/addMembers").mock(
        return_value=Response(200, json={"data": PROJECT})
    )
    removed = respx.post(f"{BASE}/projects/300/removeMembers").mock(
        return_value=Response(200, json={"data": {**PROJECT, "members": []}})
    )

    req = ProjectRequest(project_gid="300", members=["u1", " u2 "])
    after_add = await add_users_to_project(client, req)
    after_remove = await remove_users_from_project(client, req)

    assert form_of(added.calls[0].request) == {"members": "u1,u2"}
    assert form_of(removed.calls[0].request) == {"members": "u1,u2"}
    assert [m.gid for m in after_add.members] == ["u1"]
    assert after_remove.members == []


@pytest.mark.asyncio
async def test_member_changes_need_project_and_members(client):
    with pytest.raises(AsanaValidationError, match="projectID"):
        await add_users_to_project(client, ProjectRequest(members=["u1"]))
    with pytest.raises(AsanaValidationError, match="member"):
        await remove_users_from_project(client, ProjectRequest(project_gid="300"))
