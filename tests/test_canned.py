"""Tests for canned ACL resolution."""

import pytest

from s3acl.canned import resolve_canned_acl, resolve_canned_policy
from s3acl.errors import UnknownPolicy
from s3acl.models import (
    CannedPolicy,
    CanonicalUser,
    Grant,
    Group,
    GroupName,
    Owner,
    Permission,
    Target,
)

ALL_USERS = Group(GroupName.ALL_USERS)
AUTHENTICATED_USERS = Group(GroupName.AUTHENTICATED_USERS)
LOG_DELIVERY = Group(GroupName.LOG_DELIVERY)


def _owner_full_control(owner_id="A"):
    return Grant(CanonicalUser(owner_id), Permission.FULL_CONTROL)


class TestBucketPolicies:
    """Canned ACLs applied to buckets."""

    def test_private(self):
        grants = resolve_canned_policy(CannedPolicy.PRIVATE, Owner("A"), Target.BUCKET)
        assert grants == {_owner_full_control()}

    def test_public_read(self):
        grants = resolve_canned_policy(CannedPolicy.PUBLIC_READ, Owner("A"))
        assert grants == {_owner_full_control(), Grant(ALL_USERS, Permission.READ)}

    def test_public_read_write(self):
        grants = resolve_canned_policy(CannedPolicy.PUBLIC_READ_WRITE, Owner("A"), Target.BUCKET)
        assert grants == {
            _owner_full_control(),
            Grant(ALL_USERS, Permission.READ),
            Grant(ALL_USERS, Permission.WRITE),
        }

    def test_authenticated_read(self):
        grants = resolve_canned_policy(CannedPolicy.AUTHENTICATED_READ, Owner("A"))
        assert grants == {_owner_full_control(), Grant(AUTHENTICATED_USERS, Permission.READ)}

    def test_log_delivery_write(self):
        grants = resolve_canned_policy(CannedPolicy.LOG_DELIVERY_WRITE, Owner("A"))
        assert grants == {
            _owner_full_control(),
            Grant(LOG_DELIVERY, Permission.WRITE),
            Grant(LOG_DELIVERY, Permission.READ_ACP),
        }

    @pytest.mark.parametrize(
        "policy",
        [CannedPolicy.BUCKET_OWNER_READ, CannedPolicy.BUCKET_OWNER_FULL_CONTROL],
    )
    def test_bucket_owner_policies_are_bucket_level_noops(self, policy):
        grants = resolve_canned_policy(policy, Owner("A"), Target.BUCKET)
        assert grants == {_owner_full_control()}
        assert grants == resolve_canned_policy(CannedPolicy.PRIVATE, Owner("A"))

    @pytest.mark.parametrize("policy", list(CannedPolicy))
    def test_only_owner_and_fixed_groups(self, policy):
        owner = Owner("A")
        grants = resolve_canned_policy(policy, owner)
        assert _owner_full_control() in grants
        for grant in grants:
            if isinstance(grant.grantee, CanonicalUser):
                assert grant.grantee.id == owner.id
            else:
                assert grant.grantee in (ALL_USERS, AUTHENTICATED_USERS, LOG_DELIVERY)

    @pytest.mark.parametrize("policy", list(CannedPolicy))
    def test_deterministic(self, policy):
        assert resolve_canned_policy(policy, Owner("A")) == resolve_canned_policy(policy, Owner("A"))

    def test_accepts_policy_names(self):
        assert resolve_canned_policy("public-read", Owner("A")) == resolve_canned_policy(
            CannedPolicy.PUBLIC_READ, Owner("A")
        )

    def test_unknown_policy_name(self):
        with pytest.raises(UnknownPolicy):
            resolve_canned_policy("everyone-everything", Owner("A"))


class TestObjectPolicies:
    """Canned ACLs applied to objects."""

    def test_bucket_owner_read(self):
        grants = resolve_canned_policy(
            CannedPolicy.BUCKET_OWNER_READ, Owner("A"), Target.OBJECT, bucket_owner=Owner("B")
        )
        assert grants == {_owner_full_control(), Grant(CanonicalUser("B"), Permission.READ)}

    def test_bucket_owner_full_control(self):
        grants = resolve_canned_policy(
            CannedPolicy.BUCKET_OWNER_FULL_CONTROL,
            Owner("A"),
            Target.OBJECT,
            bucket_owner=Owner("B"),
        )
        assert grants == {_owner_full_control(), _owner_full_control("B")}

    def test_bucket_owner_same_as_object_owner(self):
        grants = resolve_canned_policy(
            CannedPolicy.BUCKET_OWNER_FULL_CONTROL,
            Owner("A"),
            Target.OBJECT,
            bucket_owner=Owner("A"),
        )
        assert grants == {_owner_full_control()}

    def test_bucket_owner_read_without_bucket_owner(self):
        grants = resolve_canned_policy(CannedPolicy.BUCKET_OWNER_READ, Owner("A"), Target.OBJECT)
        assert grants == {_owner_full_control()}

    def test_log_delivery_write_has_no_object_grants(self):
        grants = resolve_canned_policy(CannedPolicy.LOG_DELIVERY_WRITE, Owner("A"), Target.OBJECT)
        assert grants == {_owner_full_control()}

    def test_public_read_object(self):
        grants = resolve_canned_policy(CannedPolicy.PUBLIC_READ, Owner("A"), Target.OBJECT)
        assert grants == {_owner_full_control(), Grant(ALL_USERS, Permission.READ)}


class TestResolveCannedAcl:
    def test_wraps_grants_with_owner(self, owner):
        acl = resolve_canned_acl(CannedPolicy.PUBLIC_READ, owner)
        assert acl.owner == owner
        assert acl.grants == resolve_canned_policy(CannedPolicy.PUBLIC_READ, owner)
