from __future__ import annotations

from typing import Optional

from asana_client.client import AsanaClient
from asana_client.envelope import decode_record
from asana_client.errors import AsanaValidationError
from asana_client.models import Team, TeamRequest, require_non_empty
from asana_client.pagination import PageStream

TEAM_OPT_FIELDS = "html_description,name,id,gid"


def list_teams_in_organization(
    client: AsanaClient, organization_id: str
) -> PageStream[Team]:
    organization_id = require_non_empty(organization_id, "organizationID")
    return client.paginate(
        Team,
        f"/organizations/{organization_id}/teams",
        {"opt_fields": TEAM_OPT_FIELDS},
        resource="teams",
    )


def list_teams_for_user(
    client: AsanaClient, request: Optional[TeamRequest]
) -> PageStream[Team]:
    """Page through the teams ``request.user_id`` belongs to."""
    if request is None:
        raise AsanaValidationError("expecting a non-nil team request")
    user_id = require_non_empty(request.user_id, "userID")
    return client.paginate(
        Team,
        f"/users/{user_id}/teams",
        {"organization": request.organization},
        resource="teams",
    )


async def find_team_by_id(client: AsanaClient, team_id: str) -> Optional[Team]:
    team_id = require_non_empty(team_id, "teamID")
    body = await client.get(f"/teams/{team_id}", resource="teams")
    return decode_record(body, Team)


def _checked(request: Optional[TeamRequest]) -> TeamRequest:
    if request is None:
        raise AsanaValidationError("expecting a non-nil team request")
    request.validate_request()
    return request


async def add_user_to_team(
    client: AsanaClient, request: TeamRequest
) -> Optional[Team]:
    request = _checked(request)
    team_id = request.team_id.strip()
    body = await client.post(
        f"/teams/{team_id}/addUser",
        data={"user": request.user_id.strip()},
        resource="teams",
    )
    return decode_record(body, Team)


async def remove_user_from_team(client: AsanaClient, request: TeamRequest) -> None:
    request = _checked(request)
    team_id = request.team_id.strip()
    await client.post(
        f"/teams/{team_id}/removeUser",
        data={"user": request.user_id.strip()},
        resource="teams",
    )
