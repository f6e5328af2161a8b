"""Collaborator contracts consumed by the permission engine.

The engine never parses, serializes or fetches documents itself. A hosting
application injects implementations of these contracts (see
:mod:`webacl.rdf` for rdflib-backed ones).

Terms are plain strings: IRIs as-is, blank nodes as ``"_:id"``.
"""

from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Iterable, List, NamedTuple, Optional


class Statement(NamedTuple):
    """One triple."""

    subject: str
    predicate: str
    object: str


class TripleMatcher(ABC):
    """A parsed document that can be queried by triple pattern."""

    @abstractmethod
    def match(
        self,
        subject: Optional[str] = None,
        predicate: Optional[str] = None,
        obj: Optional[str] = None,
    ) -> List[Statement]:
        """Return every statement matching the pattern; ``None`` is a wildcard."""
        raise NotImplementedError


class Serializer(ABC):
    """Encodes a set of statements into a document."""

    @abstractmethod
    async def serialize(
        self,
        target: Optional[str],
        statements: Iterable[Statement],
        base_url: Optional[str],
        content_type: str,
    ) -> str:
        raise NotImplementedError


class WebClient(ABC):
    """Persistence client used by PermissionSet.save() and clear()."""

    @abstractmethod
    async def put(self, url: str, body: str, content_type: str):
        raise NotImplementedError

    @abstractmethod
    async def delete(self, url: str):
        raise NotImplementedError


# Fetches and parses a remote document (a group listing).
FetchGraph = Callable[[str], Awaitable[TripleMatcher]]


__all__ = ["FetchGraph", "Serializer", "Statement", "TripleMatcher", "WebClient"]
