"""Shared ACL and group listing documents."""

from __future__ import annotations

import pytest

from webacl.rdf import RdflibGraph, parse_graph

ALICE = "https://alice.example.com/#me"
BOB = "https://bob.example.com/#me"

ACL_RESOURCE_URL = "https://alice.example.com/docs/file1"
ACL_URL = "https://alice.example.com/docs/file1.acl"

ACL_CONTAINER_TTL = """
@prefix acl: <http://www.w3.org/ns/auth/acl#>.
@prefix foaf: <http://xmlns.com/foaf/0.1/>.

<#authorization1>
    a acl:Authorization;

    acl:agent
        <https://alice.example.com/#me>,
        <mailto:alice@example.com>;
    acl:agent <https://bob.example.com/#me>;

    acl:default <https://alice.example.com/docs/>;

    acl:mode
        acl:Read, acl:Write, acl:Control.

<#authorization2>
    a acl:Authorization;
    acl:agentClass foaf:Agent;
    acl:accessTo <https://alice.example.com/profile/card>;
    acl:mode acl:Read.
"""

PUBLIC_CONTAINER_URL = "https://localhost:8443/public/"
PUBLIC_ACL_URL = "https://localhost:8443/public/.acl"
PUBLIC_OWNER = "https://localhost:8443/web#id"

ACL_PUBLIC_FOLDER_TTL = """
# ACL resource for the public folder
@prefix acl: <http://www.w3.org/ns/auth/acl#>.
@prefix foaf: <http://xmlns.com/foaf/0.1/>.

# The owner has all permissions
<#owner>
    a acl:Authorization;
    acl:agent <https://localhost:8443/web#id>;
    acl:accessTo <./>;
    acl:default <./>;
    acl:mode acl:Read, acl:Write, acl:Control.

# The public has read permissions
<#public>
    a acl:Authorization;
    acl:agentClass foaf:Agent;
    acl:accessTo <./>;
    acl:default <./>;
    acl:mode acl:Read.
"""

LISTING_URL = "https://alice.example.com/work-groups"
ACCOUNTING_GROUP = LISTING_URL + "#Accounting"
MANAGEMENT_GROUP = LISTING_URL + "#Management"

GROUP_LISTING_TTL = """
@prefix acl: <http://www.w3.org/ns/auth/acl#>.
@prefix vcard: <http://www.w3.org/2006/vcard/ns#> .
@prefix dct: <http://purl.org/dc/terms/>.
@prefix xsd: <http://www.w3.org/2001/XMLSchema#>.

<#this> a acl:GroupListing.

<#Accounting>
  a vcard:Group;
  vcard:hasUID <urn:uuid:8831CBAD-1111-2222-8563-F0F4787E5398:ABGroup>;
  dct:created "2013-09-11T07:18:19+0000"^^xsd:dateTime;
  dct:modified "2015-08-08T14:45:15+0000"^^xsd:dateTime;

  # Accounting group members:
  vcard:hasMember <https://bob.example.com/profile/card#me>;
  vcard:hasMember <https://candice.example.com/profile/card#me>.

<#Management>
  a vcard:Group;
  vcard:hasUID <urn:uuid:8831CBAD-3333-4444-8563-F0F4787E5398:ABGroup>;

  # Management group members:
  vcard:hasMember <https://deb.example.com/profile/card#me>.
"""


@pytest.fixture
def acl_graph() -> RdflibGraph:
    return parse_graph(ACL_CONTAINER_TTL, ACL_URL)


@pytest.fixture
def public_folder_graph() -> RdflibGraph:
    return parse_graph(ACL_PUBLIC_FOLDER_TTL, PUBLIC_ACL_URL)


@pytest.fixture
def group_listing_graph() -> RdflibGraph:
    return parse_graph(GROUP_LISTING_TTL, LISTING_URL)
