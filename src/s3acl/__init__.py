"""S3 canned ACL model, bucket ACL verifier and test harness."""

from s3acl.builder import build_acl, parse_grant_headers, to_grant_headers
from s3acl.canned import resolve_canned_acl, resolve_canned_policy
from s3acl.errors import (
    AclError,
    AclVerificationError,
    InvalidGrant,
    StorageServiceError,
    UnknownPolicy,
)
from s3acl.models import (
    AccessControlList,
    CannedPolicy,
    CanonicalUser,
    Grant,
    Group,
    GroupName,
    Owner,
    Permission,
    Target,
)
from s3acl.verifier import (
    Mismatch,
    OwnerMismatch,
    Verified,
    assert_verified,
    verify_acl,
    verify_canned_acl,
)

__version__ = "0.1.0"

__all__ = [
    "AccessControlList",
    "AclError",
    "AclVerificationError",
    "assert_verified",
    "build_acl",
    "CannedPolicy",
    "CanonicalUser",
    "Grant",
    "Group",
    "GroupName",
    "InvalidGrant",
    "Mismatch",
    "Owner",
    "OwnerMismatch",
    "parse_grant_headers",
    "Permission",
    "resolve_canned_acl",
    "resolve_canned_policy",
    "StorageServiceError",
    "Target",
    "to_grant_headers",
    "UnknownPolicy",
    "Verified",
    "verify_acl",
    "verify_canned_acl",
]
