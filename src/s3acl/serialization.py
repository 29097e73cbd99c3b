"""Conversion between ACL models and boto3 / JSON representations.

boto3 reports bucket ACLs as ``{"Owner": {...}, "Grants": [...]}`` and
accepts the same shape as ``AccessControlPolicy`` on ``put_bucket_acl``.
"""

from __future__ import annotations

import json
from typing import Any

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
)


def grantee_from_dict(data: dict[str, Any]) -> Grantee:
    """Convert a boto3 ``Grantee`` dict to a grantee."""
    grantee_type = data.get("Type", "CanonicalUser")
    if grantee_type == "Group":
        return Group(GroupName.from_uri(data.get("URI", "")))
    if grantee_type == "CanonicalUser":
        return CanonicalUser(data.get("ID", ""), data.get("DisplayName", "") or "")
    raise InvalidGrant(f"Unknown grantee type: {grantee_type}")


def grantee_to_dict(grantee: Grantee) -> dict[str, str]:
    """Convert a grantee to a boto3 ``Grantee`` dict."""
    if isinstance(grantee, Group):
        return {"Type": "Group", "URI": grantee.uri}
    data = {"Type": "CanonicalUser", "ID": grantee.id}
    if grantee.display_name:
        data["DisplayName"] = grantee.display_name
    return data


def acl_from_response(response: dict[str, Any]) -> AccessControlList:
    """Convert a boto3 ``get_bucket_acl`` response to an ACL.

    Args:
        response: The response dict with ``Owner`` and ``Grants`` keys.

    Returns:
        The AccessControlList. Duplicate grants collapse.

    Raises:
        InvalidGrant: If a grant names an unknown group, grantee type or
            permission.
    """
    owner = response.get("Owner", {})
    grants = [
        Grant(
            grantee_from_dict(grant.get("Grantee", {})),
            Permission.parse(grant.get("Permission", "")),
        )
        for grant in response.get("Grants", [])
    ]
    return AccessControlList(
        Owner(owner.get("ID", ""), owner.get("DisplayName", "") or ""),
        grants,
    )


def acl_to_policy(acl: AccessControlList) -> dict[str, Any]:
    """Convert an ACL to the ``AccessControlPolicy`` argument of ``put_bucket_acl``."""
    owner: dict[str, str] = {"ID": acl.owner.id}
    if acl.owner.display_name:
        owner["DisplayName"] = acl.owner.display_name
    return {
        "Owner": owner,
        "Grants": [
            {
                "Grantee": grantee_to_dict(grant.grantee),
                "Permission": grant.permission.value,
            }
            for grant in sorted(acl.grants, key=Grant.sort_key)
        ],
    }


def acl_to_dict(acl: AccessControlList) -> dict[str, Any]:
    """Convert an ACL to a plain dict for reporting."""
    grants = []
    for grant in sorted(acl.grants, key=Grant.sort_key):
        if isinstance(grant.grantee, Group):
            grantee = {"type": "Group", "uri": grant.grantee.uri}
        else:
            grantee = {"type": "CanonicalUser", "id": grant.grantee.id}
        grants.append({"grantee": grantee, "permission": grant.permission.value})
    return {
        "owner": {"id": acl.owner.id, "display_name": acl.owner.display_name},
        "grants": grants,
    }


def acl_to_json(acl: AccessControlList) -> str:
    """Serialize an ACL to a JSON string."""
    return json.dumps(acl_to_dict(acl))
