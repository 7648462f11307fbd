"""asana_client package exports."""

from .client import AsanaClient, create_client_from_env
from .config import (
    BASE_URL,
    ENV_PAT_KEY,
    ClientConfig,
    ConfigStore,
    load_env_config,
)
from .errors import (
    AsanaClientError,
    AsanaConfigError,
    AsanaHTTPError,
    AsanaModelValidationError,
    AsanaParseError,
    AsanaTransportError,
    AsanaValidationError,
)
from .models import (
    ME,
    AssigneeStatus,
    Attachment,
    AttachmentUpload,
    Layout,
    Membership,
    NamedEntity,
    NextPage,
    Project,
    ProjectQuery,
    ProjectRequest,
    Task,
    TaskRequest,
    Team,
    TeamRequest,
    User,
    Workspace,
)
from .pagination import Page, PageStream, PaginationRequest, Paginator, decode_page
from .resources import (
    add_user_to_team,
    add_users_to_project,
    create_project,
    create_task,
    delete_project_by_id,
    delete_task,
    find_attachment_by_id,
    find_project_by_id,
    find_task_by_id,
    find_team_by_id,
    get_user,
    list_attachments_for_task,
    list_my_tasks,
    list_my_workspaces,
    list_tasks_for_project,
    list_teams_for_user,
    list_teams_in_organization,
    list_users_in_team,
    list_users_in_workspace,
    query_for_projects,
    remove_user_from_team,
    remove_users_from_project,
    update_project,
    upload_attachment,
)

__all__ = [
    # Client
    "AsanaClient",
    "create_client_from_env",
    # Config
    "BASE_URL",
    "ENV_PAT_KEY",
    "ClientConfig",
    "ConfigStore",
    "load_env_config",
    # Exceptions
    "AsanaClientError",
    "AsanaConfigError",
    "AsanaHTTPError",
    "AsanaModelValidationError",
    "AsanaParseError",
    "AsanaTransportError",
    "AsanaValidationError",
    # Records
    "ME",
    "AssigneeStatus",
    "Attachment",
    "AttachmentUpload",
    "Layout",
    "Membership",
    "NamedEntity",
    "NextPage",
    "Project",
    "ProjectQuery",
    "ProjectRequest",
    "Task",
    "TaskRequest",
    "Team",
    "TeamRequest",
    "User",
    "Workspace",
    # Pagination
    "Page",
    "PageStream",
    "PaginationRequest",
    "Paginator",
    "decode_page",
    # Operations
    "add_user_to_team",
    "add_users_to_project",
    "create_project",
    "create_task",
    "delete_project_by_id",
    "delete_task",
    "find_attachment_by_id",
    "find_project_by_id",
    "find_task_by_id",
    "find_team_by_id",
    "get_user",
    "list_attachments_for_task",
    "list_my_tasks",
    "list_my_workspaces",
    "list_tasks_for_project",
    "list_teams_for_user",
    "list_teams_in_organization",
    "list_users_in_team",
    "list_users_in_workspace",
    "query_for_projects",
    "remove_user_from_team",
    "remove_users_from_project",
    "update_project",
    "upload_attachment",
]
