"""A single authorization: one principal, one resource, a set of modes.

A Permission is mutable and chainable while it is being built::

    perm = Permission("https://alice.example.com/docs/", inherit=True)
    perm.set_agent("https://bob.example.com/#me").add_mode([AccessMode.READ, AccessMode.WRITE])

If the source ACL lists several agents or several resources in one
``acl:Authorization``, each (agent, resource) pair becomes its own
Permission. A Permission reaching its resource both directly and by
inheritance carries both access types.

Modes come in two kinds:
- declared modes, written by :meth:`Permission.to_statements`;
- implied modes, granted on an ACL resource to whoever controls the
  resource it governs. They count in access checks but are never written.
"""

from __future__ import annotations

import hashlib
from typing import Iterable, Union

from ..exceptions import InvalidStateError
from ..interfaces import Statement
from ..vocab import ACL, FOAF, MAILTO_PREFIX, RDF
from .agents import Agent, Everyone, Group, SingleAgent, agent_from_id, group_from_id, is_mailto
from .modes import AccessMode, AccessType, ModeInput, as_modes

_PRINCIPAL_KINDS = {SingleAgent: "an agent", Group: "a group", Everyone: "public access"}


def _as_strings(values: Union[str, Iterable[str], None]) -> list[str]:
    if values is None:
        return []
    if isinstance(values, str):
        return [values]
    return list(values)


class Permission:
    """One authorization record.

    Args:
        resource_url: Resource (or container) the permission applies to.
        inherit: ``True`` for an inherited (``acl:default``) grant.
        agent: Initial principal, or ``None``.
        modes: Initial declared access modes.
        origins: Initial allowed origins (``acl:origin``).
        implied_modes: Initial implied access modes.
    """

    __slots__ = ("resource_url", "_access_types", "_agent", "_modes", "_implied_modes", "_origins")

    def __init__(
        self,
        resource_url: str | None = None,
        inherit: bool = False,
        *,
        agent: Agent | None = None,
        modes: ModeInput = None,
        origins: Union[str, Iterable[str], None] = None,
        implied_modes: ModeInput = None,
    ) -> None:
        self.resource_url = resource_url
        self._access_types: set[AccessType] = {AccessType.DEFAULT if inherit else AccessType.ACCESS_TO}
        self._agent: Agent | None = agent
        self._modes: set[AccessMode] = set(as_modes(modes))
        self._implied_modes: set[AccessMode] = set(as_modes(implied_modes))
        self._origins: set[str] = set(_as_strings(origins))

    # ── Access types ────────────────────────────────────

    @property
    def access_types(self) -> frozenset[AccessType]:
        """How this permission reaches its resource (accessTo, default or both)."""
        return frozenset(self._access_types)

    @property
    def inherit(self) -> bool:
        return AccessType.DEFAULT in self._access_types

    @inherit.setter
    def inherit(self, value: bool) -> None:
        self._access_types = {AccessType.DEFAULT if value else AccessType.ACCESS_TO}

    def is_inherited(self) -> bool:
        return self.inherit

    # ── Principal ───────────────────────────────────────

    @property
    def agent(self) -> Agent | None:
        return self._agent

    def _claim_principal(self, principal: Agent) -> "Permission":
        current = self._agent
        if current is not None and type(current) is not type(principal):
            raise InvalidStateError(
                f"Cannot set {_PRINCIPAL_KINDS[type(principal)]} on a permission "
                f"that already has {_PRINCIPAL_KINDS[type(current)]}",
                current=current.identifier,
            )
        self._agent = principal
        return self

    def set_agent(self, agent: Union[str, SingleAgent, Everyone]) -> "Permission":
        """Set an individual agent (or the public, via the everyone id).

        Raises:
            InvalidStateError: If a group or public access is already set, or
                the value is empty or a ``mailto:`` alias.
        """
        if isinstance(agent, str):
            if not agent:
                raise InvalidStateError("Cannot set an empty agent")
            if is_mailto(agent):
                raise InvalidStateError("mailto: addresses are aliases, use add_mailto()", agent=agent)
            agent = agent_from_id(agent)
        return self._claim_principal(agent)

    def set_group(self, group: Union[str, Group, Everyone]) -> "Permission":
        """Set a group principal (the everyone id means public access).

        Raises:
            InvalidStateError: If an individual agent or public access is
                already set.
        """
        if isinstance(group, str):
            if not group:
                raise InvalidStateError("Cannot set an empty group")
            group = group_from_id(group)
        return self._claim_principal(group)

    def set_public(self) -> "Permission":
        return self._claim_principal(Everyone())

    def add_mailto(self, address: str) -> "Permission":
        """Attach an e-mail alias to the individual agent."""
        if not isinstance(self._agent, SingleAgent):
            raise InvalidStateError("mailto aliases only apply to individual agents", address=address)
        self._agent = self._agent.with_mailto(address)
        return self

    def web_id(self) -> str | None:
        """Identifier of the agent or group, or None."""
        return self._agent.identifier if self._agent is not None else None

    def is_agent(self) -> bool:
        return isinstance(self._agent, SingleAgent)

    def is_group(self) -> bool:
        return isinstance(self._agent, Group)

    def is_public(self) -> bool:
        return isinstance(self._agent, Everyone)

    # ── Modes ───────────────────────────────────────────

    def add_mode(self, modes: ModeInput) -> "Permission":
        self._modes.update(as_modes(modes))
        return self

    def remove_mode(self, modes: ModeInput) -> "Permission":
        """Remove declared modes.

        Only the named modes are dropped: removing Append while Write is
        held leaves Append implied. Implied modes are untouched.
        """
        self._modes.difference_update(as_modes(modes))
        return self

    def add_implied_mode(self, modes: ModeInput) -> "Permission":
        self._implied_modes.update(as_modes(modes))
        return self

    def clear_implied_modes(self) -> "Permission":
        self._implied_modes.clear()
        return self

    def allows_mode(self, mode: Union[str, AccessMode]) -> bool:
        requested = AccessMode.parse(mode)
        return any(granted.implies(requested) for granted in self._modes | self._implied_modes)

    def allows_read(self) -> bool:
        return self.allows_mode(AccessMode.READ)

    def allows_write(self) -> bool:
        return self.allows_mode(AccessMode.WRITE)

    def allows_append(self) -> bool:
        return self.allows_mode(AccessMode.APPEND)

    def allows_control(self) -> bool:
        return self.allows_mode(AccessMode.CONTROL)

    def all_modes(self) -> list[AccessMode]:
        """Declared modes, in a stable order."""
        return sorted(self._modes, key=lambda mode: mode.value)

    def implied_modes(self) -> list[AccessMode]:
        return sorted(self._implied_modes, key=lambda mode: mode.value)

    def is_empty(self) -> bool:
        """Grants nothing, declared or implied."""
        return not self._modes and not self._implied_modes

    @property
    def virtual(self) -> bool:
        """Grants only implied modes; never serialized."""
        return not self._modes and bool(self._implied_modes)

    # ── Origins ─────────────────────────────────────────

    def add_origin(self, origins: Union[str, Iterable[str], None]) -> "Permission":
        self._origins.update(_as_strings(origins))
        return self

    def remove_origin(self, origins: Union[str, Iterable[str], None]) -> "Permission":
        self._origins.difference_update(_as_strings(origins))
        return self

    def allows_origin(self, origin: str) -> bool:
        return origin in self._origins

    def all_origins(self) -> list[str]:
        return sorted(self._origins)

    # ── Identity & comparison ───────────────────────────

    def is_valid(self) -> bool:
        """Has a resource, a principal and at least one declared mode."""
        return bool(self.resource_url) and self._agent is not None and bool(self._modes)

    @staticmethod
    def hash_fragment_for(web_id: str, resource_url: str) -> str:
        """Identity key for an (agent or group, resource) pair."""
        return hashlib.sha1(f"{web_id}-{resource_url}".encode("utf-8")).hexdigest()

    def hash_fragment(self) -> str:
        """Identity key of this permission.

        Raises:
            InvalidStateError: If the principal or the resource is missing.
        """
        web_id = self.web_id()
        if not web_id or not self.resource_url:
            raise InvalidStateError(
                "Cannot compute the identity of a permission without both an agent/group and a resource",
                web_id=web_id,
                resource_url=self.resource_url,
            )
        return self.hash_fragment_for(web_id, self.resource_url)

    def merge_with(self, other: "Permission") -> "Permission":
        """Union an equal-key permission into this one.

        Declared and implied modes stay apart. Access types come from the
        declared side: an implied-only permission adds no target predicate
        to a declared one.
        """
        if not other.virtual and self.virtual:
            self._access_types = set(other._access_types)
        elif other.virtual == self.virtual:
            self._access_types.update(other._access_types)
        self._modes.update(other._modes)
        self._implied_modes.update(other._implied_modes)
        self._origins.update(other._origins)
        if isinstance(self._agent, SingleAgent) and isinstance(other._agent, SingleAgent):
            for address in other._agent.mailto:
                self._agent = self._agent.with_mailto(address)
        return self

    def equals(self, other: object) -> bool:
        if not isinstance(other, Permission):
            return False
        return (
            self.resource_url == other.resource_url
            and self._access_types == other._access_types
            and self._agent == other._agent
            and self._modes == other._modes
            and self._implied_modes == other._implied_modes
            and self._origins == other._origins
        )

    __eq__ = equals
    __hash__ = None  # type: ignore[assignment]

    def clone(self) -> "Permission":
        copy = Permission(
            self.resource_url,
            agent=self._agent,
            modes=self._modes,
            origins=self._origins,
            implied_modes=self._implied_modes,
        )
        copy._access_types = set(self._access_types)
        return copy

    # ── Serialization ───────────────────────────────────

    def to_statements(self, base_url: str | None = None) -> list[Statement]:
        """Triples describing the declared part of this permission.

        The authorization subject is ``{base_url}#{hash_fragment}``; one
        target predicate is emitted per access type.

        Raises:
            InvalidStateError: If the permission is not valid.
        """
        if not self.is_valid():
            raise InvalidStateError("Cannot serialize an invalid permission", resource_url=self.resource_url)
        subject = f"{base_url or ''}#{self.hash_fragment()}"
        statements = [Statement(subject, RDF.TYPE, ACL.AUTHORIZATION)]

        agent = self._agent
        if isinstance(agent, SingleAgent):
            statements.append(Statement(subject, ACL.AGENT, agent.web_id))
            statements.extend(
                Statement(subject, ACL.AGENT, MAILTO_PREFIX + address) for address in sorted(agent.mailto)
            )
        elif isinstance(agent, Group):
            statements.append(Statement(subject, ACL.AGENT_GROUP, agent.group_url))
        else:
            statements.append(Statement(subject, ACL.AGENT_CLASS, FOAF.AGENT))

        statements.extend(
            Statement(subject, access_type.value, self.resource_url)
            for access_type in sorted(self._access_types, key=lambda access_type: access_type.value)
        )
        statements.extend(Statement(subject, ACL.MODE, mode.value) for mode in self.all_modes())
        statements.extend(Statement(subject, ACL.ORIGIN, origin) for origin in self.all_origins())
        return statements

    def __repr__(self) -> str:
        def names(modes: list[AccessMode]) -> str:
            return ",".join(mode.value[len(ACL.term("")):] for mode in modes)

        access = "+".join(sorted(access_type.name for access_type in self._access_types))
        implied = f" implied=[{names(self.implied_modes())}]" if self._implied_modes else ""
        return (
            f"Permission({access} {self.resource_url!r} "
            f"agent={self.web_id()!r} modes=[{names(self.all_modes())}]{implied})"
        )


__all__ = ["Permission"]
