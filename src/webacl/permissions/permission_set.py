"""The set of permissions held in one ACL resource, and access resolution.

Working assumptions:
- Each Permission names one agent (or one group) and one resource. An
  ``acl:Authorization`` listing several agents or several resources is split
  into one Permission per (agent, resource) pair.
- A single Permission can grant several access modes.
- Permissions added through the convenience builders of a container's set
  are inherited (``acl:default``).

Lookups go through two indexes, ``agents`` and ``groups``. Each maps
identifier → access type → resource URL → Permission::

    agents: {
        "https://alice.example.com/#i": {
            AccessType.ACCESS_TO: {"https://alice.example.com/file1": perm1},
            AccessType.DEFAULT: {"https://alice.example.com/": perm2},
        }
    }

Every permission is in the ``agents`` index; group and public permissions
are also in the ``groups`` index.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Iterable, Iterator, Union

from ..config import DEFAULT_ACL_SUFFIX, AclConfig
from ..exceptions import (
    ConfigurationError,
    InvalidStateError,
    PersistenceError,
    SerializationError,
    WebAclError,
)
from ..interfaces import FetchGraph, Serializer, Statement, TripleMatcher, WebClient
from ..logging import AclLoggerAdapter
from ..vocab import ACL, EVERYONE, FOAF, RDF
from .agents import Agent, Everyone, SingleAgent, agent_from_id, group_from_id, is_mailto
from .group_listing import GroupListing
from .modes import ALL_MODES, AccessMode, AccessType, ModeInput, as_modes
from .permission import Permission

logger = logging.getLogger(__name__)

# Resource types
RESOURCE = "resource"
CONTAINER = "container"

# Index names (see permission_by_agent())
AGENT_INDEX = "agents"
GROUP_INDEX = "groups"

PermissionIndex = dict[str, dict[AccessType, dict[str, Permission]]]


def default_is_acl(url: str, suffix: str = DEFAULT_ACL_SUFFIX) -> bool:
    """Is ``url`` an ACL resource?"""
    return url.endswith(suffix)


def default_acl_url_for(resource_url: str, suffix: str = DEFAULT_ACL_SUFFIX) -> str:
    """ACL URL of a resource. ACL resources are their own ACLs."""
    if default_is_acl(resource_url, suffix):
        return resource_url
    return resource_url + suffix


class PermissionSet:
    """Permissions for one target resource.

    Args:
        resource_url: URL of the resource this set applies to.
        acl_url: URL of the ACL resource; derived from ``resource_url`` if omitted.
        is_container: Is the resource a container? Permissions built through
            :meth:`add_agent_permission` / :meth:`add_group_permission` are
            then inherited.
        config: Shared settings (defaults to ``AclConfig()``).
        graph: Parsed ACL document to initialise from.
        host: Host of the current request (used by :meth:`check_origin`).
        origin: ``Origin`` header of the current request.
        strict_origin: Enforce ``acl:origin``; defaults to ``config.strict_origin``.
        serializer: Used by :meth:`serialize` and :meth:`save`.
        fetch_graph: Fetches group listings for :meth:`check_access`.
        web_client: Used by :meth:`save` and :meth:`clear`.
        acl_url_for: Override for deriving an ACL URL from a resource URL.
        is_acl: Override for recognising ACL URLs.
    """

    def __init__(
        self,
        resource_url: str | None = None,
        acl_url: str | None = None,
        is_container: bool = False,
        *,
        config: AclConfig | None = None,
        graph: TripleMatcher | None = None,
        host: str | None = None,
        origin: str | None = None,
        strict_origin: bool | None = None,
        serializer: Serializer | None = None,
        fetch_graph: FetchGraph | None = None,
        web_client: WebClient | None = None,
        acl_url_for: Callable[[str], str] | None = None,
        is_acl: Callable[[str], bool] | None = None,
    ) -> None:
        self.config = config or AclConfig()
        suffix = self.config.acl_suffix
        self.is_acl = is_acl or (lambda url: default_is_acl(url, suffix))
        self.acl_url_for = acl_url_for or (lambda url: default_acl_url_for(url, suffix))

        self.resource_url = resource_url
        self.acl_url = acl_url or (self.acl_url_for(resource_url) if resource_url else None)
        self.is_container = is_container

        self.host = host
        self.origin = origin
        self.strict_origin = self.config.strict_origin if strict_origin is None else strict_origin

        self.serializer = serializer
        self.fetch_graph = fetch_graph
        self.web_client = web_client

        # Keyed by Permission.hash_fragment()
        self.permissions: dict[str, Permission] = {}
        self.perms_by: dict[str, PermissionIndex] = {AGENT_INDEX: {}, GROUP_INDEX: {}}
        # GroupListing cache by group URL, populated by load_groups()
        self.groups: dict[str, GroupListing] = {}

        if graph is not None:
            self.init_from_graph(graph)

    @classmethod
    def from_graph(
        cls,
        graph: TripleMatcher,
        resource_url: str | None = None,
        acl_url: str | None = None,
        is_container: bool = False,
        **options,
    ) -> "PermissionSet":
        """Create a set and load every authorization found in ``graph``."""
        return cls(resource_url, acl_url, is_container, **options).init_from_graph(graph)

    # ── Properties ──────────────────────────────────────

    @property
    def resource_type(self) -> str:
        return CONTAINER if self.is_container else RESOURCE

    @property
    def count(self) -> int:
        return len(self.permissions)

    @property
    def is_empty(self) -> bool:
        return self.count == 0

    @property
    def has_groups(self) -> bool:
        """Does this set have any ``acl:agentGroup`` permissions?"""
        return bool(self.group_urls())

    def is_inherited_by_default(self) -> bool:
        return self.is_container

    def all_permissions(self) -> list[Permission]:
        return list(self.permissions.values())

    def __iter__(self) -> Iterator[Permission]:
        return iter(self.all_permissions())

    def __len__(self) -> int:
        return self.count

    # ── Mutation ────────────────────────────────────────

    def add_permission(self, permission: Permission) -> "PermissionSet":
        """Add a permission, merging it into an existing one with the same key.

        A permission declaring Control also grants implied Read/Write/Control
        on the resource's ACL. The implied modes never become declared ones,
        even when the ACL already has a permission for the same agent.

        Raises:
            InvalidStateError: If the permission has no resource or no principal.
        """
        if not permission.resource_url:
            raise InvalidStateError("Cannot add a permission without a resource")
        key = permission.hash_fragment()
        stored = self.permissions.get(key)
        if stored is None:
            stored = self.permissions[key] = permission
        elif stored is not permission:
            stored.merge_with(permission)
        for access_type in permission.access_types:
            self._index(stored, access_type)

        if AccessMode.CONTROL in permission.all_modes():
            self._add_control_permissions_for(permission)
        return self

    def add_agent_permission(
        self,
        web_id: str,
        modes: ModeInput,
        origins: Union[str, Iterable[str], None] = None,
    ) -> "PermissionSet":
        """Grant ``modes`` on this set's resource to an individual agent."""
        if not web_id:
            raise InvalidStateError("add_agent_permission() requires a web id")
        modes = as_modes(modes)
        if not modes:
            raise InvalidStateError("add_agent_permission() requires at least one access mode")
        permission = Permission(self._require_resource_url(), self.is_inherited_by_default())
        permission.set_agent(web_id).add_mode(modes).add_origin(origins)
        return self.add_permission(permission)

    def add_group_permission(self, group_url: str, modes: ModeInput) -> "PermissionSet":
        """Grant ``modes`` on this set's resource to a group."""
        if not group_url:
            raise InvalidStateError("add_group_permission() requires a group url")
        permission = Permission(self._require_resource_url(), self.is_inherited_by_default())
        permission.set_group(group_url).add_mode(modes)
        return self.add_permission(permission)

    def remove_mode(self, web_id: str, modes: ModeInput) -> "PermissionSet":
        """Remove modes from the permission of ``web_id`` on this set's resource.

        A permission left without modes is deleted. No-op if there is no
        such permission. Removing Control revokes the modes it implied on
        the resource's ACL.
        """
        permission = self.permission_for(web_id)
        if permission is None:
            return self
        had_control = AccessMode.CONTROL in permission.all_modes()
        permission.remove_mode(modes)
        if had_control and AccessMode.CONTROL not in permission.all_modes():
            self._remove_control_permissions_for(permission)
        if permission.is_empty():
            self.remove_permission(permission)
        return self

    def remove_permission(self, permission: Permission) -> "PermissionSet":
        """Delete a permission (by identity key) from the set and its indexes."""
        stored = self.permissions.pop(permission.hash_fragment(), None)
        if stored is None:
            return self
        self._unindex(stored)
        if AccessMode.CONTROL in stored.all_modes():
            self._remove_control_permissions_for(stored)
        return self

    def _require_resource_url(self) -> str:
        if not self.resource_url:
            raise ConfigurationError("Cannot add a permission to a PermissionSet with no resource url")
        return self.resource_url

    def _add_permission_for(
        self,
        resource_url: str,
        inherit: bool,
        agent: Agent,
        modes: Iterable[AccessMode],
        origins: Iterable[str],
        mailto: Iterable[str],
    ) -> "PermissionSet":
        permission = Permission(resource_url, inherit, agent=agent, modes=modes, origins=origins)
        if isinstance(agent, SingleAgent):
            for address in mailto:
                permission.add_mailto(address)
        return self.add_permission(permission)

    def _add_control_permissions_for(self, permission: Permission) -> None:
        acl_url = self.acl_url_for(permission.resource_url)
        if acl_url == permission.resource_url:
            return
        self.add_permission(Permission(acl_url, agent=permission.agent, implied_modes=ALL_MODES))

    def _remove_control_permissions_for(self, permission: Permission) -> None:
        implied = self.permission_for(permission.web_id(), self.acl_url_for(permission.resource_url))
        if implied is None or implied is permission:
            return
        implied.clear_implied_modes()
        if implied.is_empty():
            self.remove_permission(implied)

    def _index(self, permission: Permission, access_type: AccessType) -> None:
        web_id = permission.web_id()
        indexes = [self.perms_by[AGENT_INDEX]]
        if permission.is_group() or permission.is_public():
            indexes.append(self.perms_by[GROUP_INDEX])
        for index in indexes:
            index.setdefault(web_id, {}).setdefault(access_type, {})[permission.resource_url] = permission

    def _unindex(self, permission: Permission) -> None:
        web_id = permission.web_id()
        for index in self.perms_by.values():
            by_type = index.get(web_id)
            if not by_type:
                continue
            for access_type in list(by_type):
                by_resource = by_type[access_type]
                if by_resource.get(permission.resource_url) is permission:
                    del by_resource[permission.resource_url]
                if not by_resource:
                    del by_type[access_type]
            if not by_type:
                del index[web_id]

    # ── Lookup ──────────────────────────────────────────

    def permission_for(self, web_id: str | None, resource_url: str | None = None) -> Permission | None:
        """Permission for an agent/group on a resource (this set's by default), by identity key."""
        resource_url = resource_url or self.resource_url
        if not web_id or not resource_url:
            return None
        return self.permissions.get(Permission.hash_fragment_for(web_id, resource_url))

    def permission_by_agent(
        self,
        web_id: str | None,
        resource_url: str | None,
        index_type: str = AGENT_INDEX,
    ) -> Permission | None:
        """Permission governing ``resource_url`` for an agent or group.

        Checks in order:
        1. A direct (``acl:accessTo``) grant on the resource.
        2. An inherited (``acl:default``) grant on the resource itself.
        3. An inherited grant on an enclosing container. The most specific
           container is approximated by the reverse-sorted first prefix match.
        """
        by_type = self.perms_by[index_type].get(web_id)
        if not by_type or not resource_url:
            return None
        direct = by_type.get(AccessType.ACCESS_TO, {}).get(resource_url)
        if direct is not None:
            return direct
        inherited = by_type.get(AccessType.DEFAULT)
        if not inherited:
            return None
        match = inherited.get(resource_url)
        if match is not None:
            return match
        for container_url in sorted(inherited, reverse=True):
            if resource_url.startswith(container_url):
                return inherited[container_url]
        return None

    def find_public_permission(self, resource_url: str | None) -> Permission | None:
        return self.permission_by_agent(EVERYONE, resource_url, GROUP_INDEX)

    def group_urls(self, exclude_public: bool = True) -> list[str]:
        urls = list(self.perms_by[GROUP_INDEX])
        if exclude_public:
            urls = [url for url in urls if url != EVERYONE]
        return urls

    def groups_for_member(self, agent_id: str | None) -> list[str]:
        """Loaded groups that list ``agent_id`` as a member."""
        return [url for url, listing in self.groups.items() if listing.has_member(agent_id)]

    # ── Access checks ───────────────────────────────────

    def allows_public(self, mode: Union[str, AccessMode], resource_url: str | None = None) -> bool:
        """Does this set give public (``acl:agentClass foaf:Agent``) access?"""
        permission = self.find_public_permission(resource_url or self.resource_url)
        return permission is not None and permission.allows_mode(mode)

    def check_origin(self, permission: Permission) -> bool:
        """Does ``permission`` accept the current request's origin?"""
        if not self.strict_origin or not self.origin or self.origin == self.host:
            return True
        return permission.allows_origin(self.origin)

    def check_access_for_agent(
        self,
        resource_url: str,
        agent_id: str | None,
        mode: Union[str, AccessMode],
    ) -> bool:
        permission = self.permission_by_agent(agent_id, resource_url)
        return permission is not None and self.check_origin(permission) and permission.allows_mode(mode)

    def check_group_access(
        self,
        resource_url: str,
        agent_id: str | None,
        mode: Union[str, AccessMode],
    ) -> bool:
        """Grant through any loaded group ``agent_id`` belongs to."""
        for group_url in self.groups_for_member(agent_id):
            if self.check_access_for_agent(resource_url, group_url, mode):
                logger.debug("Group %s grants access to %s", group_url, resource_url)
                return True
        return False

    async def check_access(
        self,
        resource_url: str | None,
        agent_id: str | None,
        mode: Union[str, AccessMode],
        *,
        fetch_graph: FetchGraph | None = None,
    ) -> bool:
        """Can ``agent_id`` access ``resource_url`` in ``mode``?

        Checks, stopping at the first grant:
        1. Public access.
        2. A permission for the agent itself (subject to origin checks).
        3. A permission for a group the agent belongs to. Group listings are
           fetched only if the set has group permissions.

        Raises:
            ConfigurationError: If group listings are needed and no fetch
                capability is configured.
        """
        mode = AccessMode.parse(mode)
        resource_url = resource_url or self.resource_url
        if not resource_url:
            raise ConfigurationError("check_access() requires a resource url")
        log = AclLoggerAdapter(logger, resource_url=resource_url, agent_id=agent_id)

        if self.allows_public(mode, resource_url):
            log.debug("Public %s access allowed", mode.name)
            return True
        if self.check_access_for_agent(resource_url, agent_id, mode):
            log.debug("Individual %s access granted", mode.name)
            return True
        if not self.has_groups:
            log.debug("No group permissions exist, %s access denied", mode.name)
            return False

        await self.load_groups(fetch_graph=fetch_graph)
        granted = self.check_group_access(resource_url, agent_id, mode)
        log.debug("Group %s access %s", mode.name, "granted" if granted else "denied")
        return granted

    async def load_groups(self, fetch_graph: FetchGraph | None = None, refresh: bool = False) -> "PermissionSet":
        """Fetch the listings of every group referenced by this set.

        Listings already cached are reused unless ``refresh`` is set. Fetches
        run concurrently; a failed fetch leaves that group without members.
        """
        fetch_graph = fetch_graph or self.fetch_graph
        if fetch_graph is None:
            raise ConfigurationError("Cannot load groups, fetch_graph() not supplied")
        urls = [url for url in self.group_urls() if refresh or url not in self.groups]
        if not urls:
            return self
        listings = await asyncio.gather(*(GroupListing.load_from(url, fetch_graph) for url in urls))
        for listing in listings:
            if listing is not None:
                self.groups[listing.url] = listing
        return self

    # ── Graph import / export ───────────────────────────

    def init_from_graph(self, graph: TripleMatcher) -> "PermissionSet":
        """Load every authorization in a parsed ACL document."""
        subjects = [statement.subject for statement in graph.match(None, RDF.TYPE, ACL.AUTHORIZATION)]
        if not subjects:
            # ACL without acl:Authorization types
            subjects = [statement.subject for statement in graph.match(None, ACL.MODE, None)]
        for subject in dict.fromkeys(subjects):
            self._add_authorization(graph, subject)
        return self

    def _add_authorization(self, graph: TripleMatcher, subject: str) -> None:
        modes: list[AccessMode] = []
        for statement in graph.match(subject, ACL.MODE, None):
            try:
                modes.append(AccessMode.parse(statement.object))
            except ValueError:
                logger.warning("Skipping unknown access mode %s in %s", statement.object, subject)
        origins = [statement.object for statement in graph.match(subject, ACL.ORIGIN, None)]

        agent_ids = [statement.object for statement in graph.match(subject, ACL.AGENT, None)]
        mailto = [agent_id for agent_id in agent_ids if is_mailto(agent_id)]
        agents: list[Agent] = [agent_from_id(agent_id) for agent_id in agent_ids if not is_mailto(agent_id)]
        if graph.match(subject, ACL.AGENT_CLASS, FOAF.AGENT):
            agents.append(Everyone())
        agents.extend(group_from_id(statement.object) for statement in graph.match(subject, ACL.AGENT_GROUP, None))

        direct = [statement.object for statement in graph.match(subject, ACL.ACCESS_TO, None)]
        inherited = [statement.object for statement in graph.match(subject, ACL.DEFAULT, None)]
        inherited += [statement.object for statement in graph.match(subject, ACL.DEFAULT_FOR_NEW, None)]

        for agent in agents:
            for resource_url in direct:
                self._add_permission_for(resource_url, False, agent, modes, origins, mailto)
            for container_url in inherited:
                self._add_permission_for(container_url, True, agent, modes, origins, mailto)

    def build_statements(self) -> list[Statement]:
        """Statements for every declared, valid permission."""
        statements: list[Statement] = []
        for permission in self.permissions.values():
            if permission.virtual:
                continue
            if not permission.is_valid():
                logger.debug("Skipping invalid permission %r", permission)
                continue
            statements.extend(permission.to_statements(self.acl_url))
        return statements

    async def serialize(self, content_type: str | None = None) -> str:
        """Serialize the declared permissions (Turtle by default).

        Virtual and invalid permissions are skipped.

        Raises:
            ConfigurationError: If no serializer is configured.
            SerializationError: If the serializer fails or returns nothing.
        """
        content_type = content_type or self.config.default_content_type
        if self.serializer is None:
            raise ConfigurationError("Cannot serialize - no serializer configured")
        statements = self.build_statements()
        try:
            result = await self.serializer.serialize(None, statements, self.acl_url, content_type)
        except WebAclError:
            raise
        except Exception as e:
            raise SerializationError(
                f"Error serializing the permission set to {content_type}: {e}",
                content_type=content_type,
                acl_url=self.acl_url,
            ) from e
        if not result:
            raise SerializationError(
                f"Error serializing the permission set to {content_type}",
                content_type=content_type,
                acl_url=self.acl_url,
            )
        return result

    async def save(self, acl_url: str | None = None, content_type: str | None = None):
        """Serialize and PUT the set to its ACL URL (or ``acl_url``)."""
        acl_url = acl_url or self.acl_url
        content_type = content_type or self.config.default_content_type
        if not acl_url:
            raise ConfigurationError("Cannot save - unknown target url")
        if self.web_client is None:
            raise ConfigurationError("Cannot save - no web client")
        body = await self.serialize(content_type)
        try:
            return await self.web_client.put(acl_url, body, content_type)
        except Exception as e:
            raise PersistenceError(f"Cannot save {acl_url}: {e}", url=acl_url) from e

    async def clear(self, web_client: WebClient | None = None):
        """Delete the ACL resource of this set."""
        web_client = web_client or self.web_client
        if web_client is None:
            raise ConfigurationError("Cannot clear - no web client")
        if not self.acl_url:
            raise ConfigurationError("Cannot clear - unknown target url")
        try:
            return await web_client.delete(self.acl_url)
        except Exception as e:
            raise PersistenceError(f"Cannot delete {self.acl_url}: {e}", url=self.acl_url) from e

    # ── Comparison ──────────────────────────────────────

    def equals(self, other: object) -> bool:
        """Same resource, ACL URL, resource type, and equal permissions."""
        if not isinstance(other, PermissionSet):
            return False
        if (self.resource_url, self.acl_url, self.resource_type) != (
            other.resource_url,
            other.acl_url,
            other.resource_type,
        ):
            return False
        if self.permissions.keys() != other.permissions.keys():
            return False
        return all(permission.equals(other.permissions[key]) for key, permission in self.permissions.items())

    __eq__ = equals
    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"PermissionSet({self.resource_url!r}, {self.resource_type}, {self.count} permissions)"


__all__ = [
    "AGENT_INDEX",
    "CONTAINER",
    "GROUP_INDEX",
    "RESOURCE",
    "PermissionSet",
    "default_acl_url_for",
    "default_is_acl",
]
