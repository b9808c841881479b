"""ACL helpers for s3acl S3-compatible access control.

Provides the AccessControlPolicy data model, its XML encoding and decoding,
and the classification of a grant list into a canned ACL label or a set of
``x-amz-grant-*`` headers.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from xml.etree import ElementTree

from s3acl.errors import MalformedACLError
from s3acl.xml_utils import (
    S3_XMLNS,
    XML_DECLARATION,
    XSI_XMLNS,
    escape_xml,
    find_all,
    find_elem,
    find_text,
    local_name,
)

logger = logging.getLogger(__name__)

# S3 predefined group URIs
ALL_USERS_URI = "http://acs.amazonaws.com/groups/global/AllUsers"
AUTHENTICATED_USERS_URI = "http://acs.amazonaws.com/groups/global/AuthenticatedUsers"

CANNED_ACL_HEADER = "X-Amz-Acl"


class Permission(str, Enum):
    """Permissions a grant can confer."""

    READ = "READ"
    WRITE = "WRITE"
    READ_ACP = "READ_ACP"
    WRITE_ACP = "WRITE_ACP"
    FULL_CONTROL = "FULL_CONTROL"


class GranteeType(str, Enum):
    """Values of the ``xsi:type`` attribute on a Grantee element."""

    CANONICAL_USER = "CanonicalUser"
    GROUP = "Group"
    EMAIL = "AmazonCustomerByEmail"


class CannedACL(str, Enum):
    """S3 canned ACL names."""

    PRIVATE = "private"
    PUBLIC_READ = "public-read"
    PUBLIC_READ_WRITE = "public-read-write"
    AUTHENTICATED_READ = "authenticated-read"
    BUCKET_OWNER_READ = "bucket-owner-read"


# Grant header names keyed by the permission they carry
GRANT_HEADERS: dict[Permission, str] = {
    Permission.READ: "X-Amz-Grant-Read",
    Permission.WRITE: "X-Amz-Grant-Write",
    Permission.READ_ACP: "X-Amz-Grant-Read-Acp",
    Permission.WRITE_ACP: "X-Amz-Grant-Write-Acp",
    Permission.FULL_CONTROL: "X-Amz-Grant-Full-Control",
}


@dataclass
class Owner:
    """Owner of a bucket or object."""

    id: str = ""
    display_name: str = ""


@dataclass
class Grantee:
    """A principal receiving a permission.

    The same type is used for reading and writing; only the attribute
    spelling differs on the wire (``xsi:type`` is written with an explicit
    ``xmlns:xsi`` declaration and read back namespace-qualified).

    Attributes:
        type: The grantee kind.
        id: Canonical user ID, for ``CanonicalUser`` grantees.
        display_name: Display name, for ``CanonicalUser`` grantees.
        uri: Well-known group URI, for ``Group`` grantees.
        email: Email address, for ``AmazonCustomerByEmail`` grantees.
    """

    type: GranteeType = GranteeType.CANONICAL_USER
    id: str = ""
    display_name: str = ""
    uri: str = ""
    email: str = ""


@dataclass
class Grant:
    """One (grantee, permission) pair."""

    grantee: Grantee
    permission: Permission


@dataclass
class AccessControlPolicy:
    """A full ACL document: owner plus ordered grants."""

    owner: Owner = field(default_factory=Owner)
    grants: list[Grant] = field(default_factory=list)


# -- Canned ACLs ---------------------------------------------------------------


def build_canned_policy(canned: str, owner: Owner) -> AccessControlPolicy:
    """Build the AccessControlPolicy a canned ACL name stands for.

    Supported canned ACLs:
        - private: owner gets FULL_CONTROL
        - public-read: owner gets FULL_CONTROL, AllUsers get READ
        - public-read-write: owner gets FULL_CONTROL, AllUsers get READ + WRITE
        - authenticated-read: owner gets FULL_CONTROL, AuthenticatedUsers get READ

    Args:
        canned: The canned ACL name string.
        owner: The owner of the resource.

    Returns:
        The equivalent policy.

    Raises:
        ValueError: If the canned ACL name is not recognized or needs
            information beyond the owner (``bucket-owner-read``).
    """
    owner_grant = Grant(
        grantee=Grantee(
            type=GranteeType.CANONICAL_USER,
            id=owner.id,
            display_name=owner.display_name,
        ),
        permission=Permission.FULL_CONTROL,
    )
    grants = [owner_grant]

    if canned == CannedACL.PRIVATE:
        pass  # owner FULL_CONTROL only
    elif canned == CannedACL.PUBLIC_READ:
        grants.append(_group_grant(ALL_USERS_URI, Permission.READ))
    elif canned == CannedACL.PUBLIC_READ_WRITE:
        grants.append(_group_grant(ALL_USERS_URI, Permission.READ))
        grants.append(_group_grant(ALL_USERS_URI, Permission.WRITE))
    elif canned == CannedACL.AUTHENTICATED_READ:
        grants.append(_group_grant(AUTHENTICATED_USERS_URI, Permission.READ))
    else:
        raise ValueError(f"Unsupported canned ACL: {canned}")

    return AccessControlPolicy(owner=Owner(owner.id, owner.display_name), grants=grants)


def _group_grant(uri: str, permission: Permission) -> Grant:
    return Grant(grantee=Grantee(type=GranteeType.GROUP, uri=uri), permission=permission)


def get_canned_acl(policy: AccessControlPolicy) -> str:
    """Classify a policy's grants as a canned ACL name.

    Only the fixed patterns below are recognized; any other grant list
    yields an empty string.

    Args:
        policy: The decoded policy.

    Returns:
        The canned ACL name, or "" when no pattern matches.
    """
    grants = policy.grants

    if len(grants) == 1:
        if grants[0].grantee.uri == "" and grants[0].permission == Permission.FULL_CONTROL:
            return CannedACL.PRIVATE.value
    elif len(grants) == 2:
        for g in grants:
            if g.grantee.uri == AUTHENTICATED_USERS_URI and g.permission == Permission.READ:
                return CannedACL.AUTHENTICATED_READ.value
            if g.grantee.uri == ALL_USERS_URI and g.permission == Permission.READ:
                return CannedACL.PUBLIC_READ.value
            if g.permission == Permission.READ and g.grantee.id == policy.owner.id:
                return CannedACL.BUCKET_OWNER_READ.value
    elif len(grants) == 3:
        for g in grants:
            if g.grantee.uri == ALL_USERS_URI and g.permission == Permission.WRITE:
                return CannedACL.PUBLIC_READ_WRITE.value
    return ""


def get_amz_grant_acl(policy: AccessControlPolicy) -> dict[str, list[str]]:
    """Render a policy's grants as ``x-amz-grant-*`` header values.

    Every grant contributes ``id=<grantee id>`` to the header for its
    permission, in grant order.

    Args:
        policy: The decoded policy.

    Returns:
        Header name to list of grantee specifications.
    """
    headers: dict[str, list[str]] = {}
    for g in policy.grants:
        header = GRANT_HEADERS[Permission(g.permission)]
        headers.setdefault(header, []).append(f"id={g.grantee.id}")
    return headers


# -- XML encoding -------------------------------------------------------------


def policy_to_xml(policy: AccessControlPolicy) -> str:
    """Render a policy as S3-compatible AccessControlPolicy XML.

    Args:
        policy: The policy to encode.

    Returns:
        An XML string conforming to the S3 AccessControlPolicy format.
    """
    parts = [
        XML_DECLARATION,
        f'<AccessControlPolicy xmlns="{S3_XMLNS}">',
        "<Owner>",
        f"<ID>{escape_xml(policy.owner.id)}</ID>",
        f"<DisplayName>{escape_xml(policy.owner.display_name)}</DisplayName>",
        "</Owner>",
        "<AccessControlList>",
    ]

    for grant in policy.grants:
        grantee = grant.grantee
        grantee_type = GranteeType(grantee.type).value
        permission = Permission(grant.permission).value

        parts.append("<Grant>")
        parts.append(f'<Grantee xmlns:xsi="{XSI_XMLNS}" xsi:type="{grantee_type}">')
        # Empty fields are omitted
        for tag, value in (
            ("ID", grantee.id),
            ("DisplayName", grantee.display_name),
            ("URI", grantee.uri),
            ("EmailAddress", grantee.email),
        ):
            if value:
                parts.append(f"<{tag}>{escape_xml(value)}</{tag}>")
        parts.append("</Grantee>")
        parts.append(f"<Permission>{permission}</Permission>")
        parts.append("</Grant>")

    parts.append("</AccessControlList>")
    parts.append("</AccessControlPolicy>")

    return "\n".join(parts)


# -- XML decoding -------------------------------------------------------------


def _grantee_type(elem: ElementTree.Element, uri: str, email: str) -> GranteeType:
    """Determine the grantee type from the xsi:type attribute or the fields set."""
    raw = (
        elem.get(f"{{{XSI_XMLNS}}}type")
        or elem.get("type")
        or find_text(elem, "Type")
    )
    if raw:
        try:
            return GranteeType(raw)
        except ValueError:
            logger.debug("Unrecognized grantee type %r, inferring from fields", raw)
    if uri:
        return GranteeType.GROUP
    if email:
        return GranteeType.EMAIL
    return GranteeType.CANONICAL_USER


def _parse_grant(grant_elem: ElementTree.Element) -> Grant:
    grantee_elem = find_elem(grant_elem, "Grantee")
    if grantee_elem is None:
        raise MalformedACLError("Grant is missing a Grantee element")

    raw_permission = find_text(grant_elem, "Permission")
    try:
        permission = Permission(raw_permission)
    except ValueError:
        raise MalformedACLError(f"Unknown permission: {raw_permission!r}") from None

    uri = find_text(grantee_elem, "URI")
    email = find_text(grantee_elem, "EmailAddress")
    grantee = Grantee(
        type=_grantee_type(grantee_elem, uri, email),
        id=find_text(grantee_elem, "ID"),
        display_name=find_text(grantee_elem, "DisplayName"),
        uri=uri,
        email=email,
    )
    return Grant(grantee=grantee, permission=permission)


def policy_from_xml(body: str | bytes) -> AccessControlPolicy:
    """Parse an AccessControlPolicy XML document.

    Elements are accepted with or without the S3 namespace.

    Args:
        body: The XML document.

    Returns:
        The decoded policy, grants in document order.

    Raises:
        xml.etree.ElementTree.ParseError: If the body is not well-formed XML.
        MalformedACLError: If the document is not an AccessControlPolicy.
    """
    if isinstance(body, str):
        body = body.encode("utf-8")
    root = ElementTree.fromstring(body)
    if local_name(root) != "AccessControlPolicy":
        raise MalformedACLError(f"Unexpected root element: {local_name(root)}")

    owner = Owner()
    owner_elem = find_elem(root, "Owner")
    if owner_elem is not None:
        owner = Owner(
            id=find_text(owner_elem, "ID"),
            display_name=find_text(owner_elem, "DisplayName"),
        )

    grants = []
    acl_elem = find_elem(root, "AccessControlList")
    if acl_elem is not None:
        grants = [_parse_grant(g) for g in find_all(acl_elem, "Grant")]

    return AccessControlPolicy(owner=owner, grants=grants)
