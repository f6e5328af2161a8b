"""Principals a permission can name.

``Agent`` is a closed sum type: a permission holds exactly one of
:class:`SingleAgent`, :class:`Group` or :class:`Everyone`, or ``None``
while it is being built.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Union

from ..vocab import EVERYONE, MAILTO_PREFIX


@dataclass(frozen=True)
class SingleAgent:
    """An individual identity (WebID).

    ``mailto`` holds e-mail aliases (without the ``mailto:`` scheme). They
    take part in equality and serialization but never in access decisions.
    """

    web_id: str
    mailto: frozenset[str] = field(default_factory=frozenset)

    @property
    def identifier(self) -> str:
        return self.web_id

    def with_mailto(self, address: str) -> "SingleAgent":
        return replace(self, mailto=self.mailto | {strip_mailto(address)})


@dataclass(frozen=True)
class Group:
    """Reference to a remote group listing (``acl:agentGroup``)."""

    group_url: str

    @property
    def identifier(self) -> str:
        return self.group_url


@dataclass(frozen=True)
class Everyone:
    """The public: any requester, authenticated or not."""

    @property
    def identifier(self) -> str:
        return EVERYONE


Agent = Union[SingleAgent, Group, Everyone]


def is_mailto(value: str) -> bool:
    """Is this agent value a ``mailto:`` link rather than a WebID?"""
    return value.startswith(MAILTO_PREFIX)


def strip_mailto(value: str) -> str:
    return value[len(MAILTO_PREFIX):] if is_mailto(value) else value


def agent_from_id(web_id: str) -> SingleAgent | Everyone:
    """Build the agent for an ``acl:agent`` value.

    The well-known everyone identifier maps to :class:`Everyone`.
    """
    if web_id == EVERYONE:
        return Everyone()
    return SingleAgent(web_id)


def group_from_id(group_url: str) -> Group | Everyone:
    """Build the agent for an ``acl:agentGroup`` value."""
    if group_url == EVERYONE:
        return Everyone()
    return Group(group_url)


__all__ = [
    "Agent",
    "Everyone",
    "Group",
    "SingleAgent",
    "agent_from_id",
    "group_from_id",
    "is_mailto",
    "strip_mailto",
]
