"""Canned ACL resolution.

Maps each S3 canned ACL to the grant set it must produce for a given owner.
The owner always receives FULL_CONTROL; the table below lists the grants
added on top of that.

``bucket-owner-read`` and ``bucket-owner-full-control`` only differentiate
object ownership. Applied to a bucket they add nothing, which S3 documents
as "ignored when specified at bucket creation". They are listed explicitly
with no extra grants rather than falling through to a default.
"""

from __future__ import annotations

from s3acl.models import (
    AccessControlList,
    CannedPolicy,
    Grant,
    Group,
    GroupName,
    Owner,
    Permission,
    Target,
    grant_set,
)

_ALL_USERS = Group(GroupName.ALL_USERS)
_AUTHENTICATED_USERS = Group(GroupName.AUTHENTICATED_USERS)
_LOG_DELIVERY = Group(GroupName.LOG_DELIVERY)

# Grants in addition to owner FULL_CONTROL when applied to a bucket.
BUCKET_GRANTS: dict[CannedPolicy, tuple[Grant, ...]] = {
    CannedPolicy.PRIVATE: (),
    CannedPolicy.PUBLIC_READ: (
        Grant(_ALL_USERS, Permission.READ),
    ),
    CannedPolicy.PUBLIC_READ_WRITE: (
        Grant(_ALL_USERS, Permission.READ),
        Grant(_ALL_USERS, Permission.WRITE),
    ),
    CannedPolicy.AUTHENTICATED_READ: (
        Grant(_AUTHENTICATED_USERS, Permission.READ),
    ),
    CannedPolicy.LOG_DELIVERY_WRITE: (
        Grant(_LOG_DELIVERY, Permission.WRITE),
        Grant(_LOG_DELIVERY, Permission.READ_ACP),
    ),
    CannedPolicy.BUCKET_OWNER_READ: (),
    CannedPolicy.BUCKET_OWNER_FULL_CONTROL: (),
}

# Group grants in addition to owner FULL_CONTROL when applied to an object.
# Bucket-owner grants are added separately since they depend on the bucket.
OBJECT_GRANTS: dict[CannedPolicy, tuple[Grant, ...]] = {
    CannedPolicy.PRIVATE: (),
    CannedPolicy.PUBLIC_READ: BUCKET_GRANTS[CannedPolicy.PUBLIC_READ],
    CannedPolicy.PUBLIC_READ_WRITE: BUCKET_GRANTS[CannedPolicy.PUBLIC_READ_WRITE],
    CannedPolicy.AUTHENTICATED_READ: BUCKET_GRANTS[CannedPolicy.AUTHENTICATED_READ],
    CannedPolicy.LOG_DELIVERY_WRITE: (),
    CannedPolicy.BUCKET_OWNER_READ: (),
    CannedPolicy.BUCKET_OWNER_FULL_CONTROL: (),
}

_BUCKET_OWNER_PERMISSION = {
    CannedPolicy.BUCKET_OWNER_READ: Permission.READ,
    CannedPolicy.BUCKET_OWNER_FULL_CONTROL: Permission.FULL_CONTROL,
}


def resolve_canned_policy(
    policy: CannedPolicy | str,
    owner: Owner,
    target: Target = Target.BUCKET,
    bucket_owner: Owner | None = None,
) -> frozenset[Grant]:
    """Resolve a canned ACL to the grant set it produces.

    Args:
        policy: The canned ACL, or its name.
        owner: The owner of the resource the policy is applied to.
        target: Whether the policy is applied to a bucket or an object.
        bucket_owner: Owner of the enclosing bucket, used only by the
            bucket-owner policies on objects.

    Returns:
        The expected grant set.

    Raises:
        UnknownPolicy: If ``policy`` is a string naming no canned ACL.
    """
    policy = CannedPolicy.parse(policy)
    target = Target(target)
    grants = [Grant(owner.grantee(), Permission.FULL_CONTROL)]

    if target is Target.BUCKET:
        grants.extend(BUCKET_GRANTS[policy])
        return grant_set(grants)

    grants.extend(OBJECT_GRANTS[policy])
    permission = _BUCKET_OWNER_PERMISSION.get(policy)
    if permission is not None and bucket_owner is not None:
        if bucket_owner.id != owner.id:
            grants.append(Grant(bucket_owner.grantee(), permission))
    return grant_set(grants)


def resolve_canned_acl(
    policy: CannedPolicy | str,
    owner: Owner,
    target: Target = Target.BUCKET,
    bucket_owner: Owner | None = None,
) -> AccessControlList:
    """Resolve a canned ACL to a full AccessControlList owned by ``owner``."""
    return AccessControlList(
        owner, resolve_canned_policy(policy, owner, target, bucket_owner)
    )
