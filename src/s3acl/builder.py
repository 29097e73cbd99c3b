"""Explicit ACL construction.

Builds ACLs from grant lists and converts them to and from the
``x-amz-grant-*`` request headers used to set ACLs at bucket creation.
"""

from __future__ import annotations

from typing import Iterable, Mapping

from s3acl.errors import InvalidGrant
from s3acl.models import (
    AccessControlList,
    CanonicalUser,
    Grant,
    Grantee,
    Group,
    GroupName,
    Owner,
    Permission,
    grant_set,
)

# Grant header names and their corresponding S3 permissions
_GRANT_HEADER_MAP = {
    "x-amz-grant-full-control": Permission.FULL_CONTROL,
    "x-amz-grant-read": Permission.READ,
    "x-amz-grant-read-acp": Permission.READ_ACP,
    "x-amz-grant-write": Permission.WRITE,
    "x-amz-grant-write-acp": Permission.WRITE_ACP,
}

# boto3 keyword arguments that carry the same headers
_GRANT_PARAM_MAP = {
    Permission.FULL_CONTROL: "GrantFullControl",
    Permission.READ: "GrantRead",
    Permission.READ_ACP: "GrantReadACP",
    Permission.WRITE: "GrantWrite",
    Permission.WRITE_ACP: "GrantWriteACP",
}


def build_acl(
    owner: Owner,
    grants: Iterable[Grant | tuple[Grantee, Permission]],
) -> AccessControlList:
    """Build an ACL from an owner and a list of grants.

    Args:
        owner: The resource owner.
        grants: Grants or ``(grantee, permission)`` pairs. Duplicates
            collapse.

    Returns:
        The AccessControlList.

    Raises:
        InvalidGrant: If ``grants`` is empty.
    """
    grants = grant_set(grants)
    if not grants:
        raise InvalidGrant("An explicit ACL needs at least one grant")
    return AccessControlList(owner, grants)


def parse_grantee(value: str) -> Grantee:
    """Parse a single grantee specification from a grant header value.

    Supports formats:
        - ``id="canonical-user-id"``
        - ``uri="http://acs.amazonaws.com/groups/..."``
        - bare canonical user ID

    ``emailAddress="..."`` grantees are rejected: the service resolves them
    to a canonical ID, which the email alone cannot predict.

    Raises:
        InvalidGrant: If the specification is empty, is an email grantee or
            names an unknown group.
    """
    value = value.strip()
    if not value:
        raise InvalidGrant("Empty grantee specification")
    if value.startswith('id="') and value.endswith('"'):
        return CanonicalUser(value[4:-1])
    if value.startswith('uri="') and value.endswith('"'):
        return Group(GroupName.from_uri(value[5:-1]))
    if value.startswith("emailAddress="):
        raise InvalidGrant(f"Email grantees are not supported: {value}")
    # Fallback: treat as canonical user ID
    return CanonicalUser(value)


def format_grantee(grantee: Grantee) -> str:
    """Render a grantee the way grant headers expect it."""
    if isinstance(grantee, Group):
        return f'uri="{grantee.uri}"'
    return f'id="{grantee.id}"'


def parse_grant_headers(
    headers: Mapping[str, str],
    owner: Owner,
) -> AccessControlList | None:
    """Parse x-amz-grant-* headers into an ACL.

    Each header value is a comma-separated list of grantee specifications.
    Header names are matched case-insensitively.

    Args:
        headers: The request headers.
        owner: The resource owner.

    Returns:
        An ACL if any grant header is present, or None if none is found.

    Raises:
        InvalidGrant: If a grant header is present but yields no grants.
    """
    lowered = {name.lower(): value for name, value in headers.items()}
    grants: list[Grant] = []
    found_any = False

    for header_name, permission in _GRANT_HEADER_MAP.items():
        header_value = lowered.get(header_name)
        if header_value is None:
            continue
        found_any = True
        for grantee_spec in header_value.split(","):
            if not grantee_spec.strip():
                continue
            grants.append(Grant(parse_grantee(grantee_spec), permission))

    if not found_any:
        return None
    return build_acl(owner, grants)


def to_grant_headers(acl: AccessControlList) -> dict[str, str]:
    """Render an ACL as boto3 ``Grant*`` keyword arguments.

    Grantees are listed in a stable order within each header.
    """
    by_permission: dict[Permission, list[str]] = {}
    for grant in sorted(acl.grants, key=Grant.sort_key):
        by_permission.setdefault(grant.permission, []).append(
            format_grantee(grant.grantee)
        )
    return {
        _GRANT_PARAM_MAP[permission]: ", ".join(grantees)
        for permission, grantees in by_permission.items()
    }
