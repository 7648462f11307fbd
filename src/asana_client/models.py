from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, BinaryIO, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .errors import AsanaValidationError

ME = "me"


def require_non_empty(value: Optional[str], name: str) -> str:
    """Strip ``value`` and raise AsanaValidationError when it is blank."""
    value = (value or "").strip()
    if not value:
        raise AsanaValidationError(f"expecting a non-empty {name}")
    return value


class AssigneeStatus(str, Enum):
    INBOX = "inbox"
    LATER = "later"
    TODAY = "today"
    UPCOMING = "upcoming"


DEFAULT_ASSIGNEE_STATUS = AssigneeStatus.INBOX


class Layout(str, Enum):
    LIST = "list"
    BOARD = "board"


class AsanaModel(BaseModel):
    """Base for wire records: unknown keys are ignored, nothing is required."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# --- Cursor ---


class NextPage(AsanaModel):
    offset: Optional[str] = None
    path: Optional[str] = None
    uri: Optional[str] = None

    @property
    def has_path(self) -> bool:
        # An offset (or uri) without a path is the end of the collection.
        return bool((self.path or "").strip())


# --- Lightweight references ---


class NamedEntity(AsanaModel):
    id: Optional[int] = None
    gid: Optional[str] = None
    name: Optional[str] = None
    resource_type: Optional[str] = None

    @property
    def ref(self) -> Optional[str]:
        if self.gid:
            return self.gid
        return str(self.id) if self.id is not None else None


class Workspace(NamedEntity):
    is_organization: Optional[bool] = None


class Membership(AsanaModel):
    project: Optional[NamedEntity] = None
    section: Optional[NamedEntity] = None


# --- Core records ---


class User(AsanaModel):
    id: Optional[int] = None
    gid: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    resource_type: Optional[str] = None
    workspaces: Optional[List[Workspace]] = None


class Team(AsanaModel):
    id: Optional[int] = None
    gid: Optional[str] = None
    name: Optional[str] = None
    html_description: Optional[str] = None
    organization: Optional[NamedEntity] = None


class Project(AsanaModel):
    id: Optional[int] = None
    gid: Optional[str] = None
    name: Optional[str] = None
    notes: Optional[str] = None
    color: Optional[str] = None
    archived: Optional[bool] = None
    public: Optional[bool] = None
    layout: Optional[Layout] = None

    team: Optional[NamedEntity] = None
    owner: Optional[NamedEntity] = None
    workspace: Optional[NamedEntity] = None
    members: Optional[List[NamedEntity]] = None
    followers: Optional[List[NamedEntity]] = None

    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None


class Task(AsanaModel):
    id: Optional[int] = None
    gid: Optional[str] = None
    name: Optional[str] = None
    notes: Optional[str] = None

    assignee: Optional[NamedEntity] = None
    assignee_status: Optional[AssigneeStatus] = None
    completed: Optional[bool] = None
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None
    due_on: Optional[date] = None
    due_at: Optional[datetime] = None

    custom_fields: Optional[List[Dict[str, Any]]] = None
    metadata: Optional[Dict[str, Any]] = Field(default=None, alias="external")

    followers: Optional[List[NamedEntity]] = None
    hearted: Optional[bool] = None
    hearts: Optional[List[NamedEntity]] = None
    num_hearts: Optional[int] = None

    projects: Optional[List[Project]] = None
    parent: Optional[Task] = None
    workspace: Optional[NamedEntity] = None
    memberships: Optional[List[Membership]] = None
    tags: Optional[List[NamedEntity]] = None

    @property
    def effective_assignee_status(self) -> AssigneeStatus:
        return self.assignee_status or DEFAULT_ASSIGNEE_STATUS


class Attachment(AsanaModel):
    id: Optional[int] = None
    gid: Optional[str] = None
    name: Optional[str] = None
    created_at: Optional[datetime] = None
    download_url: Optional[str] = None
    # Read-only; one of asana, dropbox, gdrive, box.
    host: Optional[str] = None
    # The task this attachment hangs off.
    parent: Optional[NamedEntity] = None
    view_url: Optional[str] = None


# --- Input Models (request payloads) ---


class RequestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class TaskRequest(RequestModel):
    # paging (query only)
    limit: Optional[int] = None
    offset: Optional[str] = None

    assignee: Optional[str] = None
    project: Optional[str] = None
    workspace: Optional[str] = None

    name: Optional[str] = None
    notes: Optional[str] = None
    completed: Optional[bool] = None
    completed_since: Optional[str] = None
    modified_since: Optional[datetime] = None
    assignee_status: Optional[AssigneeStatus] = None
    due_on: Optional[date] = None
    due_at: Optional[datetime] = None

    custom_fields: Optional[Dict[str, Any]] = None
    external: Optional[Dict[str, Any]] = None

    followers: Optional[List[str]] = None
    hearted: Optional[bool] = None
    num_hearts: Optional[int] = None

    projects: Optional[List[Union[str, NamedEntity]]] = None
    parent: Optional[str] = None
    memberships: Optional[List[Membership]] = None
    tags: Optional[List[Union[str, NamedEntity]]] = None

    def validate_request(self) -> None:
        """A new task must live somewhere: a workspace, a project or a parent."""
        workspace = (self.workspace or "").strip()
        parent = (self.parent or "").strip()
        if not (workspace or self.projects or parent):
            raise AsanaValidationError(
                "a task needs a workspace, at least one project, or a parent"
            )


class ProjectRequest(RequestModel):
    project_id: Optional[str] = None
    project_gid: Optional[str] = None

    name: Optional[str] = None
    notes: Optional[str] = None
    color: Optional[str] = None
    layout: Optional[Layout] = None

    team: Optional[Union[str, NamedEntity]] = None
    workspace: Optional[str] = None
    public: Optional[bool] = None
    members: Optional[List[str]] = None

    def validate_request(self) -> None:
        require_non_empty(self.workspace, "workspace")

    @property
    def target_gid(self) -> str:
        return require_non_empty(self.project_gid or self.project_id, "projectID")


class ProjectQuery(RequestModel):
    workspace: Optional[str] = None
    team: Optional[str] = None
    archived: Optional[bool] = None


class TeamRequest(RequestModel):
    # Globally unique identifier for the team.
    team_id: Optional[str] = None
    user_id: Optional[str] = None
    organization: Optional[str] = None

    def validate_request(self) -> None:
        require_non_empty(self.team_id, "teamID")
        require_non_empty(self.user_id, "userID")


@dataclass
class AttachmentUpload:
    body: Optional[Union[bytes, BinaryIO]] = None
    task_id: Optional[str] = None
    name: Optional[str] = None

    def validate_request(self) -> None:
        if self.body is None:
            raise AsanaValidationError("expecting a non-nil body")
        require_non_empty(self.task_id, "taskID")


Task.model_rebuild()


__all__ = [
    "ME",
    "require_non_empty",
    "AssigneeStatus",
    "DEFAULT_ASSIGNEE_STATUS",
    "Layout",
    "AsanaModel",
    "NextPage",
    "NamedEntity",
    "Workspace",
    "Membership",
    "User",
    "Team",
    "Project",
    "Task",
    "Attachment",
    "RequestModel",
    "TaskRequest",
    "ProjectRequest",
    "ProjectQuery",
    "TeamRequest",
    "AttachmentUpload",
]
