"""Vocabulary IRIs used by Web Access Control documents.

Provides:
- ``ACL``: terms from the ``http://www.w3.org/ns/auth/acl#`` vocabulary.
- ``FOAF``, ``VCARD``, ``RDF``: the handful of foreign terms an ACL needs.
- ``EVERYONE``: the public agent class (``foaf:Agent``).
"""

from __future__ import annotations

ACL_NS = "http://www.w3.org/ns/auth/acl#"
FOAF_NS = "http://xmlns.com/foaf/0.1/"
VCARD_NS = "http://www.w3.org/2006/vcard/ns#"
RDF_NS = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"


class ACL:
    """Terms of the ACL vocabulary.

    Format: full IRIs, so values can be compared directly against
    the strings a triple matcher returns::

        ACL.AGENT         → "http://www.w3.org/ns/auth/acl#agent"
        ACL.term("Read")  → "http://www.w3.org/ns/auth/acl#Read"
    """

    # ── Classes ─────────────────────────────────────────
    AUTHORIZATION = ACL_NS + "Authorization"
    GROUP_LISTING = ACL_NS + "GroupListing"

    # ── Principals ──────────────────────────────────────
    AGENT = ACL_NS + "agent"
    AGENT_CLASS = ACL_NS + "agentClass"
    AGENT_GROUP = ACL_NS + "agentGroup"

    # ── Targets ─────────────────────────────────────────
    ACCESS_TO = ACL_NS + "accessTo"
    DEFAULT = ACL_NS + "default"
    DEFAULT_FOR_NEW = ACL_NS + "defaultForNew"

    # ── Grants ──────────────────────────────────────────
    MODE = ACL_NS + "mode"
    ORIGIN = ACL_NS + "origin"

    @staticmethod
    def term(name: str) -> str:
        """Build an IRI in the ACL namespace."""
        return ACL_NS + name


class FOAF:
    AGENT = FOAF_NS + "Agent"


class VCARD:
    GROUP = VCARD_NS + "Group"
    HAS_MEMBER = VCARD_NS + "hasMember"


class RDF:
    TYPE = RDF_NS + "type"


# Public access: acl:agentClass foaf:Agent
EVERYONE = FOAF.AGENT

MAILTO_PREFIX = "mailto:"


__all__ = [
    "ACL",
    "ACL_NS",
    "EVERYONE",
    "FOAF",
    "FOAF_NS",
    "MAILTO_PREFIX",
    "RDF",
    "RDF_NS",
    "VCARD",
    "VCARD_NS",
]
