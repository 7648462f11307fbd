from __future__ import annotations

from typing import Optional

from asana_client.client import AsanaClient
from asana_client.envelope import decode_record
from asana_client.models import ME, User, require_non_empty
from asana_client.pagination import PageStream

USER_OPT_FIELDS = "id,gid,name,email"


async def get_user(client: AsanaClient, user_id: Optional[str] = ME) -> Optional[User]:
    """Fetch one user; a blank id means the authenticated user (``me``)."""
    user_id = (str(user_id) if user_id is not None else "").strip() or ME
    body = await client.get(f"/users/{user_id}", resource="users")
    return decode_record(body, User)


def list_users_in_team(client: AsanaClient, team_id: str) -> PageStream[User]:
    team_id = require_non_empty(team_id, "teamID")
    return client.paginate(User, f"/teams/{team_id}/users", resource="users")


def list_users_in_workspace(
    client: AsanaClient, workspace_id: str
) -> PageStream[User]:
    workspace_id = require_non_empty(workspace_id, "workspaceID")
    return client.paginate(
        User,
        "/users",
        {"opt_fields": USER_OPT_FIELDS, "workspace": workspace_id},
        resource="users",
    )
