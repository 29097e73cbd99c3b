"""ACL verification.

Compares the ACL a service reports against an expected ACL. Grant sets are
compared as sets, so order and duplicates in either input never matter.
Verification failures are returned as result values; only
``assert_verified`` turns them into exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from s3acl.canned import resolve_canned_acl
from s3acl.errors import AclVerificationError
from s3acl.models import (
    AccessControlList,
    CannedPolicy,
    Grant,
    Owner,
    Target,
    format_grants,
)


@dataclass(frozen=True)
class Verified:
    """The actual ACL matches the expected ACL."""

    acl: AccessControlList

    ok = True

    def describe(self) -> str:
        return f"ACL verified: {self.acl}"


@dataclass(frozen=True)
class OwnerMismatch:
    """The actual ACL names a different owner than expected.

    The grant sets of both ACLs are kept for the failure report.
    """

    expected: Owner
    actual: Owner
    expected_grants: frozenset[Grant] = frozenset()
    actual_grants: frozenset[Grant] = frozenset()

    ok = False

    def describe(self) -> str:
        return "\n".join(
            [
                f"Owner mismatch: expected {self.expected}, got {self.actual}",
                f"  expected:   {format_grants(self.expected_grants)}",
                f"  actual:     {format_grants(self.actual_grants)}",
                f"  difference: {format_grants(self.expected_grants ^ self.actual_grants)}",
            ]
        )


@dataclass(frozen=True)
class Mismatch:
    """The grant sets differ.

    Attributes:
        missing: Grants expected but absent from the actual ACL.
        unexpected: Grants present in the actual ACL but not expected.
        expected: The full expected grant set.
        actual: The full actual grant set.
    """

    missing: frozenset[Grant]
    unexpected: frozenset[Grant]
    expected: frozenset[Grant] = frozenset()
    actual: frozenset[Grant] = frozenset()

    ok = False

    @property
    def difference(self) -> frozenset[Grant]:
        """Symmetric difference of the expected and actual grant sets."""
        return self.missing | self.unexpected

    def describe(self) -> str:
        return "\n".join(
            [
                "Grant mismatch",
                f"  expected:   {format_grants(self.expected)}",
                f"  actual:     {format_grants(self.actual)}",
                f"  difference: {format_grants(self.difference)}",
                f"  missing:    {format_grants(self.missing)}",
                f"  unexpected: {format_grants(self.unexpected)}",
            ]
        )


VerificationResult = Union[Verified, OwnerMismatch, Mismatch]


def verify_acl(
    actual: AccessControlList,
    expected: AccessControlList,
    explicit: bool = False,
) -> VerificationResult:
    """Verify an actual ACL against an expected one.

    Args:
        actual: The ACL reported by the storage service.
        expected: The ACL that should be in effect.
        explicit: True when ``expected`` was supplied explicitly rather
            than resolved from a canned ACL; owner display names must
            then match as well.

    Returns:
        ``Verified``, ``OwnerMismatch`` or ``Mismatch``.
    """
    owner_differs = actual.owner.id != expected.owner.id or (
        explicit and actual.owner.display_name != expected.owner.display_name
    )
    if owner_differs:
        return OwnerMismatch(
            expected=expected.owner,
            actual=actual.owner,
            expected_grants=expected.grants,
            actual_grants=actual.grants,
        )

    missing = expected.grants - actual.grants
    unexpected = actual.grants - expected.grants
    if missing or unexpected:
        return Mismatch(
            missing=missing,
            unexpected=unexpected,
            expected=expected.grants,
            actual=actual.grants,
        )
    return Verified(actual)


def verify_canned_acl(
    actual: AccessControlList,
    policy: CannedPolicy | str,
    owner: Owner | None = None,
    target: Target = Target.BUCKET,
) -> VerificationResult:
    """Verify an actual ACL against the grants a canned ACL should produce.

    Args:
        actual: The ACL reported by the storage service.
        policy: The canned ACL that was applied.
        owner: The true owner of the resource. Defaults to the owner the
            ACL itself reports, which skips the owner check.
        target: Whether the ACL belongs to a bucket or an object.

    Raises:
        UnknownPolicy: If ``policy`` is a string naming no canned ACL.
    """
    expected = resolve_canned_acl(policy, owner or actual.owner, target)
    return verify_acl(actual, expected)


def assert_verified(result: VerificationResult) -> Verified:
    """Return ``result`` if verified, otherwise raise AclVerificationError."""
    if not result.ok:
        raise AclVerificationError(result)
    return result
