"""Web Access Control permission model and resolution engine.

Defines:
- AccessMode / AccessType: the mode vocabulary and Write → Append implication
- Agent variants: SingleAgent, Group, Everyone
- Permission: one principal × one resource × a set of modes
- PermissionSet: the indexed permissions of one ACL resource, and check_access()
- GroupListing: cached remote group membership
"""

from .agents import (
    Agent,
    Everyone,
    Group,
    SingleAgent,
    agent_from_id,
    group_from_id,
    is_mailto,
)
from .group_listing import GroupListing
from .modes import ALL_MODES, AccessMode, AccessType, as_modes
from .permission import Permission
from .permission_set import (
    CONTAINER,
    RESOURCE,
    PermissionSet,
    default_acl_url_for,
    default_is_acl,
)

__all__ = [
    "ALL_MODES",
    "CONTAINER",
    "RESOURCE",
    "AccessMode",
    "AccessType",
    "Agent",
    "Everyone",
    "Group",
    "GroupListing",
    "Permission",
    "PermissionSet",
    "SingleAgent",
    "agent_from_id",
    "as_modes",
    "default_acl_url_for",
    "default_is_acl",
    "group_from_id",
    "is_mailto",
]
