"""Data model types for S3 access control lists.

Grantees, permissions, grants and ACLs are immutable value types so that
grant sets can be compared with plain set arithmetic. Canned policies,
group grantees and permissions are closed enumerations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Union

from s3acl.errors import InvalidGrant, UnknownPolicy


class Permission(str, Enum):
    """A capability granted on a bucket or object."""

    READ = "READ"
    WRITE = "WRITE"
    READ_ACP = "READ_ACP"
    WRITE_ACP = "WRITE_ACP"
    FULL_CONTROL = "FULL_CONTROL"

    @classmethod
    def parse(cls, value: str) -> Permission:
        """Parse an S3 permission string such as ``READ_ACP``."""
        try:
            return cls(value.strip().upper())
        except ValueError:
            raise InvalidGrant(f"Unknown permission: {value}") from None


class GroupName(str, Enum):
    """Predefined S3 groups, valued by their grantee URI."""

    ALL_USERS = "http://acs.amazonaws.com/groups/global/AllUsers"
    AUTHENTICATED_USERS = "http://acs.amazonaws.com/groups/global/AuthenticatedUsers"
    LOG_DELIVERY = "http://acs.amazonaws.com/groups/s3/LogDelivery"

    @property
    def uri(self) -> str:
        return self.value

    @property
    def label(self) -> str:
        """Short group name as it appears at the end of the URI."""
        return self.value.rsplit("/", 1)[-1]

    @classmethod
    def from_uri(cls, uri: str) -> GroupName:
        try:
            return cls(uri.strip())
        except ValueError:
            raise InvalidGrant(f"Unknown group URI: {uri}") from None


@dataclass(frozen=True)
class CanonicalUser:
    """An individual account identified by its canonical user ID.

    Display names are informational only and do not take part in equality,
    since services do not report them consistently inside grants.
    """

    id: str
    display_name: str = field(default="", compare=False)

    def __str__(self) -> str:
        return f"CanonicalUser({self.id})"


@dataclass(frozen=True)
class Group:
    """A predefined group of accounts."""

    name: GroupName

    @property
    def uri(self) -> str:
        return self.name.uri

    def __str__(self) -> str:
        return f"Group({self.name.label})"


Grantee = Union[CanonicalUser, Group]


@dataclass(frozen=True)
class Grant:
    """A permission granted to a grantee."""

    grantee: Grantee
    permission: Permission

    def __str__(self) -> str:
        return f"{self.grantee} -> {self.permission.value}"

    def sort_key(self) -> tuple[str, str, str]:
        if isinstance(self.grantee, Group):
            return ("Group", self.grantee.uri, self.permission.value)
        return ("CanonicalUser", self.grantee.id, self.permission.value)


def grant_set(grants: Iterable[Grant | tuple[Grantee, Permission]]) -> frozenset[Grant]:
    """Build a grant set from grants or ``(grantee, permission)`` pairs.

    Duplicate grants collapse; order is discarded.
    """
    result = set()
    for item in grants:
        if isinstance(item, Grant):
            result.add(item)
        else:
            grantee, permission = item
            result.add(Grant(grantee, permission))
    return frozenset(result)


def format_grants(grants: Iterable[Grant]) -> str:
    """Render grants in a stable order for messages and logs."""
    ordered = sorted(grants, key=Grant.sort_key)
    return "{" + ", ".join(str(g) for g in ordered) + "}"


@dataclass(frozen=True)
class Owner:
    """The account that owns a bucket or object."""

    id: str
    display_name: str = ""

    def grantee(self) -> CanonicalUser:
        return CanonicalUser(self.id, self.display_name)

    def __str__(self) -> str:
        if self.display_name:
            return f"Owner({self.id}, {self.display_name})"
        return f"Owner({self.id})"


@dataclass(frozen=True)
class AccessControlList:
    """An owner plus the set of grants on a resource.

    ``grants`` is normalised to a frozenset on construction, so lists with
    duplicates or in any order are accepted.
    """

    owner: Owner
    grants: frozenset[Grant] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(self, "grants", grant_set(self.grants))

    def with_grants(self, grants: Iterable[Grant]) -> AccessControlList:
        """Return a new ACL with the same owner and ``grants`` replacing the old set."""
        return AccessControlList(self.owner, grant_set(grants))

    def __str__(self) -> str:
        return f"ACL({self.owner}, {format_grants(self.grants)})"


class Target(str, Enum):
    """The kind of resource a canned policy is applied to."""

    BUCKET = "bucket"
    OBJECT = "object"


class CannedPolicy(str, Enum):
    """S3 canned ACLs, valued by their ``x-amz-acl`` header value."""

    PRIVATE = "private"
    PUBLIC_READ = "public-read"
    PUBLIC_READ_WRITE = "public-read-write"
    AUTHENTICATED_READ = "authenticated-read"
    BUCKET_OWNER_READ = "bucket-owner-read"
    BUCKET_OWNER_FULL_CONTROL = "bucket-owner-full-control"
    LOG_DELIVERY_WRITE = "log-delivery-write"

    @classmethod
    def parse(cls, name: str | CannedPolicy) -> CannedPolicy:
        """Parse a canned ACL name.

        Accepts the header value (``public-read``), the member name
        (``PUBLIC_READ``) or the SDK-style name (``PublicRead``), ignoring
        case.

        Raises:
            UnknownPolicy: If the name matches no canned ACL.
        """
        if isinstance(name, CannedPolicy):
            return name
        wanted = _squash(str(name))
        for policy in cls:
            if wanted == _squash(policy.name):
                return policy
        raise UnknownPolicy(str(name))


def _squash(name: str) -> str:
    return name.strip().lower().replace("-", "").replace("_", "")
