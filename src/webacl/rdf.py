"""rdflib-backed collaborators.

Provides:
- ``RdflibGraph``: a :class:`~webacl.interfaces.TripleMatcher` over an
  ``rdflib.Graph``.
- ``parse_graph()``: parse an ACL or group listing document.
- ``RdflibSerializer``: a :class:`~webacl.interfaces.Serializer`.

Example::

    graph = parse_graph(turtle_text, "https://alice.example.com/docs/.acl")
    ps = PermissionSet.from_graph(
        graph,
        "https://alice.example.com/docs/",
        is_container=True,
        serializer=RdflibSerializer(),
    )
"""

from __future__ import annotations

from typing import Iterable, Optional

from rdflib import BNode, Graph, URIRef
from rdflib.term import Node

from .exceptions import SerializationError
from .interfaces import Serializer, Statement, TripleMatcher
from .vocab import ACL_NS, FOAF_NS, VCARD_NS

# Media type → rdflib plugin name
CONTENT_TYPE_FORMATS: dict[str, str] = {
    "text/turtle": "turtle",
    "application/x-turtle": "turtle",
    "text/n3": "n3",
    "application/n-triples": "nt",
    "application/rdf+xml": "xml",
    "application/ld+json": "json-ld",
}


def rdf_format_for(content_type: str) -> str:
    """rdflib format name for a content type (parameters are ignored).

    Raises:
        SerializationError: If the content type is not supported.
    """
    media_type = content_type.split(";", 1)[0].strip().lower()
    try:
        return CONTENT_TYPE_FORMATS[media_type]
    except KeyError:
        raise SerializationError(
            f"Unsupported content type: {content_type}",
            content_type=content_type,
        ) from None


def _to_term(value: Optional[str]) -> Optional[Node]:
    if value is None:
        return None
    if value.startswith("_:"):
        return BNode(value[2:])
    return URIRef(value)


def _from_term(term: Node) -> str:
    if isinstance(term, BNode):
        return "_:" + str(term)
    return str(term)


class RdflibGraph(TripleMatcher):
    """Triple matcher over an ``rdflib.Graph``."""

    def __init__(self, graph: Graph | None = None) -> None:
        self.graph = graph if graph is not None else Graph()

    def match(
        self,
        subject: Optional[str] = None,
        predicate: Optional[str] = None,
        obj: Optional[str] = None,
    ) -> list[Statement]:
        pattern = (_to_term(subject), _to_term(predicate), _to_term(obj))
        return [
            Statement(_from_term(s), _from_term(p), _from_term(o))
            for s, p, o in self.graph.triples(pattern)
        ]

    def __len__(self) -> int:
        return len(self.graph)


def parse_graph(data: str, base_url: str, content_type: str = "text/turtle") -> RdflibGraph:
    """Parse a document; relative IRIs resolve against ``base_url``."""
    graph = Graph()
    graph.parse(data=data, format=rdf_format_for(content_type), publicID=base_url)
    return RdflibGraph(graph)


class RdflibSerializer(Serializer):
    """Serialize statements with rdflib.

    ``target`` is accepted for contract compatibility; the whole statement
    set is always written.
    """

    PREFIXES = {"acl": ACL_NS, "foaf": FOAF_NS, "vcard": VCARD_NS}

    async def serialize(
        self,
        target: Optional[str],
        statements: Iterable[Statement],
        base_url: Optional[str],
        content_type: str,
    ) -> str:
        rdf_format = rdf_format_for(content_type)
        graph = Graph()
        for prefix, namespace in self.PREFIXES.items():
            graph.bind(prefix, namespace)
        for statement in statements:
            graph.add((_to_term(statement.subject), _to_term(statement.predicate), _to_term(statement.object)))
        result = graph.serialize(format=rdf_format, base=base_url)
        return result.decode("utf-8") if isinstance(result, bytes) else result


__all__ = [
    "CONTENT_TYPE_FORMATS",
    "RdflibGraph",
    "RdflibSerializer",
    "parse_graph",
    "rdf_format_for",
]
