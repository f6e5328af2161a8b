"""Remote group membership listings (``acl:agentGroup`` targets)."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..interfaces import FetchGraph, TripleMatcher
from ..vocab import VCARD

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GroupListing:
    """Members of one ``vcard:Group``, as loaded from its listing document.

    A listing is replaced, never mutated, when it is reloaded.
    """

    url: str
    members: frozenset[str] = field(default_factory=frozenset)

    def has_member(self, agent_id: str | None) -> bool:
        return agent_id in self.members

    @classmethod
    def from_graph(cls, url: str, graph: TripleMatcher) -> "GroupListing":
        """Extract the ``vcard:hasMember`` objects of ``url``."""
        members = frozenset(statement.object for statement in graph.match(url, VCARD.HAS_MEMBER, None))
        if not members:
            logger.debug("Group listing %s has no members", url)
        return cls(url=url, members=members)

    @classmethod
    async def load_from(cls, url: str, fetch_graph: FetchGraph) -> "GroupListing | None":
        """Fetch and parse the listing for ``url``.

        Never raises: a failed fetch is logged and yields ``None``, which
        callers treat as "no membership".
        """
        try:
            graph = await fetch_graph(url)
        except Exception as e:
            logger.warning("Could not load group listing %s: %s", url, e)
            return None
        if graph is None:
            logger.warning("Group listing %s could not be fetched", url)
            return None
        try:
            return cls.from_graph(url, graph)
        except Exception as e:
            logger.warning("Could not read group listing %s: %s", url, e)
            return None


__all__ = ["GroupListing"]
