from __future__ import annotations

from typing import Optional

from asana_client.client import AsanaClient
from asana_client.envelope import decode_record, to_form_values
from asana_client.errors import AsanaValidationError
from asana_client.models import Project, ProjectQuery, ProjectRequest, require_non_empty
from asana_client.pagination import PageStream

PROJECT_OPT_FIELDS = "id,gid,name,notes,team,members,archived,color,workspace"

# Identifiers travel in the URL, never in the form body.
ID_FIELDS = ("project_id", "project_gid")


def query_for_projects(
    client: AsanaClient, query: Optional[ProjectQuery]
) -> PageStream[Project]:
    """
    Page through projects matching the filters set on ``query``
    (workspace, team, archived).
    """
    if query is None:
        raise AsanaValidationError("expecting a non-nil projectQuery")
    params = {"opt_fields": PROJECT_OPT_FIELDS, **to_form_values(query)}
    return client.paginate(Project, "/projects", params, resource="projects")


async def create_project(
    client: AsanaClient, request: ProjectRequest
) -> Optional[Project]:
    if request is None:
        raise AsanaValidationError("expecting a non-nil projectRequest")
    request.validate_request()
    form = to_form_values(request, exclude=ID_FIELDS)
    body = await client.post("/projects", data=form, resource="projects")
    return decode_record(body, Project)


async def update_project(
    client: AsanaClient, request: ProjectRequest
) -> Optional[Project]:
    """
    Change the attributes of a project.

    The workspace of a project cannot change once it has been created, so
    a request that sets it is rejected before anything is sent.
    """
    if request is None:
        raise AsanaValidationError("expecting a non-nil projectRequest")
    project_id = require_non_empty(request.project_id, "projectID")
    if request.workspace:
        raise AsanaValidationError("workspace once set cannot be modified")

    form = to_form_values(request, exclude=ID_FIELDS)
    body = await client.put(f"/projects/{project_id}", data=form, resource="projects")
    return decode_record(body, Project)


async def find_project_by_id(
    client: AsanaClient, project_id: str
) -> Optional[Project]:
    project_id = require_non_empty(project_id, "projectID")
    body = await client.get(f"/projects/{project_id}", resource="projects")
    return decode_record(body, Project)


async def delete_project_by_id(client: AsanaClient, project_id: str) -> None:
    project_id = require_non_empty(project_id, "projectID")
    await client.delete(f"/projects/{project_id}", resource="projects")


async def _change_members(
    client: AsanaClient, request: ProjectRequest, action: str
) -> Optional[Project]:
    if request is None:
        raise AsanaValidationError("expecting a non-nil projectRequest")
    gid = request.target_gid
    if not request.members:
        raise AsanaValidationError("expecting at least one member")
    form = {"members": ",".join(m.strip() for m in request.members if m.strip())}
    body = await client.post(
        f"/projects/{gid}/{action}", data=form, resource="projects"
    )
    return decode_record(body, Project)


async def add_users_to_project(
    client: AsanaClient, request: ProjectRequest
) -> Optional[Project]:
    return await _change_members(client, request, "addMembers")


async def remove_users_from_project(
    client: AsanaClient, request: ProjectRequest
) -> Optional[Project]:
    return await _change_members(client, request, "removeMembers")
