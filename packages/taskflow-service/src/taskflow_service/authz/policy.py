"""Project role policy.

Single source of truth for which project roles may perform which action.
Pure Python: no FastAPI imports, no store access.

| Action                      | Roles                      |
|-----------------------------|----------------------------|
| view project / list members | any membership             |
| update project              | PO, PM                     |
| delete project              | PO                         |
| invite member               | PO, PM                     |
| update member role          | PO                         |
| remove member               | PO, PM                     |

System admins bypass this table entirely (see ``AuthorizationEngine``).
"""

from __future__ import annotations

from enum import Enum

from taskflow_service.errors import BadRequest
from taskflow_service.models import ProjectRole


class Action(str, Enum):
    VIEW_PROJECT = "view_project"
    LIST_MEMBERS = "list_members"
    UPDATE_PROJECT = "update_project"
    DELETE_PROJECT = "delete_project"
    INVITE_MEMBER = "invite_member"
    UPDATE_MEMBER_ROLE = "update_member_role"
    REMOVE_MEMBER = "remove_member"


ANY_MEMBERSHIP: frozenset[ProjectRole] = frozenset(ProjectRole)
_OWNER = frozenset({ProjectRole.OWNER})
_OWNER_OR_MANAGER = frozenset({ProjectRole.OWNER, ProjectRole.MANAGER})

ACTION_ROLES: dict[Action, frozenset[ProjectRole]] = {
    Action.VIEW_PROJECT: ANY_MEMBERSHIP,
    Action.LIST_MEMBERS: ANY_MEMBERSHIP,
    Action.UPDATE_PROJECT: _OWNER_OR_MANAGER,
    Action.DELETE_PROJECT: _OWNER,
    Action.INVITE_MEMBER: _OWNER_OR_MANAGER,
    Action.UPDATE_MEMBER_ROLE: _OWNER,
    Action.REMOVE_MEMBER: _OWNER_OR_MANAGER,
}

# Read-style actions only need some membership row.
READ_ACTIONS = frozenset({Action.VIEW_PROJECT, Action.LIST_MEMBERS})

# Owner is granted only by project creation, never by invitation or role change.
ASSIGNABLE_ROLES: frozenset[ProjectRole] = frozenset(
    {ProjectRole.MANAGER, ProjectRole.MEMBER, ProjectRole.VIEWER}
)

_ACTION_PHRASES = {
    Action.UPDATE_PROJECT: "update project",
    Action.DELETE_PROJECT: "delete project",
    Action.INVITE_MEMBER: "invite members",
    Action.UPDATE_MEMBER_ROLE: "update member roles",
    Action.REMOVE_MEMBER: "remove members",
}

_ROLE_ORDER = [ProjectRole.OWNER, ProjectRole.MANAGER, ProjectRole.MEMBER, ProjectRole.VIEWER]


def _join_roles(roles: frozenset[ProjectRole]) -> str:
    return " or ".join(r.value for r in _ROLE_ORDER if r in roles)


def denial_message(action: Action) -> str:
    """Forbidden message naming the roles the action needs."""
    if action in READ_ACTIONS:
        return "Access denied"
    return f"Only {_join_roles(ACTION_ROLES[action])} can {_ACTION_PHRASES[action]}"


def parse_assignable_role(value: str | ProjectRole) -> ProjectRole:
    """Parse a role for an invitation or a role change; PO is never accepted."""
    try:
        role = ProjectRole(value)
    except ValueError:
        role = None
    if role not in ASSIGNABLE_ROLES:
        raise BadRequest("Invalid role. Must be PM, Member, or Viewer")
    return role
