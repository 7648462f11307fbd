from __future__ import annotations

from typing import Optional

from asana_client.client import AsanaClient
from asana_client.envelope import decode_record, to_form_values
from asana_client.errors import AsanaValidationError
from asana_client.models import ME, Task, TaskRequest, require_non_empty
from asana_client.pagination import PageStream

DEFAULT_TASK_LIMIT = 20
MAX_TASK_LIMIT = 100

# Never sent on create; the API rejects them.
READ_ONLY_FIELDS = ("num_hearts",)
PAGING_FIELDS = ("limit", "offset")


def _clamp_limit(limit: Optional[int]) -> int:
    if not limit or limit <= 0:
        return DEFAULT_TASK_LIMIT
    return min(limit, MAX_TASK_LIMIT)


def list_my_tasks(
    client: AsanaClient, request: Optional[TaskRequest] = None
) -> PageStream[Task]:
    """
    Page through the tasks assigned to the authenticated user.

    Any filters set on ``request`` are sent as query parameters; the
    assignee is always forced to ``me``.
    """
    base = request or TaskRequest()
    req = base.model_copy(
        update={"assignee": ME, "limit": _clamp_limit(base.limit)}
    )
    return client.paginate(Task, "/tasks", to_form_values(req), resource="tasks")


def list_tasks_for_project(
    client: AsanaClient,
    project_id: str,
    *,
    limit: Optional[int] = None,
) -> PageStream[Task]:
    project_id = require_non_empty(project_id, "projectID")
    return client.paginate(
        Task,
        f"/projects/{project_id}/tasks",
        {"limit": _clamp_limit(limit)},
        resource="tasks",
    )


async def create_task(client: AsanaClient, request: TaskRequest) -> Optional[Task]:
    if request is None:
        raise AsanaValidationError("expecting a non-nil taskRequest")
    request.validate_request()
    form = to_form_values(request, exclude=READ_ONLY_FIELDS + PAGING_FIELDS)
    body = await client.post("/tasks", data=form, resource="tasks")
    return decode_record(body, Task)


async def find_task_by_id(client: AsanaClient, task_id: str) -> Optional[Task]:
    task_id = require_non_empty(task_id, "taskID")
    body = await client.get(f"/tasks/{task_id}", resource="tasks")
    return decode_record(body, Task)


async def delete_task(client: AsanaClient, task_id: str) -> None:
    task_id = require_non_empty(task_id, "taskID")
    await client.delete(f"/tasks/{task_id}", resource="tasks")
