"""Per-resource operations. Each function takes an AsanaClient first."""

from .attachments import (
    find_attachment_by_id,
    list_attachments_for_task,
    upload_attachment,
)
from .projects import (
    add_users_to_project,
    create_project,
    delete_project_by_id,
    find_project_by_id,
    query_for_projects,
    remove_users_from_project,
    update_project,
)
from .tasks import (
    create_task,
    delete_task,
    find_task_by_id,
    list_my_tasks,
    list_tasks_for_project,
)
from .teams import (
    add_user_to_team,
    find_team_by_id,
    list_teams_for_user,
    list_teams_in_organization,
    remove_user_from_team,
)
from .users import get_user, list_users_in_team, list_users_in_workspace
from .workspaces import list_my_workspaces

__all__ = [
    "find_attachment_by_id",
    "list_attachments_for_task",
    "upload_attachment",
    "add_users_to_project",
    "create_project",
    "delete_project_by_id",
    "find_project_by_id",
    "query_for_projects",
    "remove_users_from_project",
    "update_project",
    "create_task",
    "delete_task",
    "find_task_by_id",
    "list_my_tasks",
    "list_tasks_for_project",
    "add_user_to_team",
    "find_team_by_id",
    "list_teams_for_user",
    "list_teams_in_organization",
    "remove_user_from_team",
    "get_user",
    "list_users_in_team",
    "list_users_in_workspace",
    "list_my_workspaces",
]
