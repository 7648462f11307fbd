from __future__ import annotations

from asana_client.client import AsanaClient
from asana_client.models import Workspace
from asana_client.pagination import PageStream


def list_my_workspaces(client: AsanaClient) -> PageStream[Workspace]:
    """Page through the workspaces visible to the authenticated user."""
    return client.paginate(Workspace, "/workspaces", resource="workspaces")
