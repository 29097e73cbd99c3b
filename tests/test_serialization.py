"""Tests for boto3 and JSON ACL conversion."""

import json

import pytest

from s3acl.errors import InvalidGrant
from s3acl.models import (
    AccessControlList,
    CanonicalUser,
    Grant,
    Group,
    GroupName,
    Owner,
    Permission,
)
from s3acl.serialization import (
    acl_from_response,
    acl_to_dict,
    acl_to_json,
    acl_to_policy,
    grantee_from_dict,
)

ALL_USERS_URI = "http://acs.amazonaws.com/groups/global/AllUsers"


def _response(owner_id="A", grants=()):
    return {
        "ResponseMetadata": {"HTTPStatusCode": 200},
        "Owner": {"ID": owner_id, "DisplayName": "alice"},
        "Grants": list(grants),
    }


class TestAclFromResponse:
    def test_canonical_and_group_grants(self):
        resp = _response(
            grants=[
                {
                    "Grantee": {"Type": "CanonicalUser", "ID": "A", "DisplayName": "alice"},
                    "Permission": "FULL_CONTROL",
                },
                {"Grantee": {"Type": "Group", "URI": ALL_USERS_URI}, "Permission": "READ"},
            ]
        )
        acl = acl_from_response(resp)
        assert acl.owner == Owner("A", "alice")
        assert acl.grants == {
            Grant(CanonicalUser("A"), Permission.FULL_CONTROL),
            Grant(Group(GroupName.ALL_USERS), Permission.READ),
        }

    def test_duplicate_grants_collapse(self):
        grant = {"Grantee": {"Type": "Group", "URI": ALL_USERS_URI}, "Permission": "READ"}
        acl = acl_from_response(_response(grants=[grant, grant]))
        assert len(acl.grants) == 1

    def test_no_grants(self):
        acl = acl_from_response(_response())
        assert acl.grants == frozenset()

    def test_email_grantee_rejected(self):
        with pytest.raises(InvalidGrant):
            grantee_from_dict(
                {"Type": "AmazonCustomerByEmail", "EmailAddress": "user@example.com"}
            )

    def test_unknown_grantee_type(self):
        with pytest.raises(InvalidGrant):
            grantee_from_dict({"Type": "Robot"})

    def test_unknown_permission(self):
        resp = _response(grants=[{"Grantee": {"Type": "CanonicalUser", "ID": "A"}, "Permission": "EXECUTE"}])
        with pytest.raises(InvalidGrant):
            acl_from_response(resp)


class TestAclToPolicy:
    def test_policy_shape(self):
        acl = AccessControlList(
            Owner("A", "alice"),
            [
                Grant(Group(GroupName.ALL_USERS), Permission.WRITE_ACP),
                Grant(CanonicalUser("A"), Permission.FULL_CONTROL),
            ],
        )
        assert acl_to_policy(acl) == {
            "Owner": {"ID": "A", "DisplayName": "alice"},
            "Grants": [
                {"Grantee": {"Type": "CanonicalUser", "ID": "A"}, "Permission": "FULL_CONTROL"},
                {"Grantee": {"Type": "Group", "URI": ALL_USERS_URI}, "Permission": "WRITE_ACP"},
            ],
        }

    def test_policy_reads_back(self):
        acl = AccessControlList(
            Owner("A", "alice"),
            [
                Grant(Group(GroupName.LOG_DELIVERY), Permission.FULL_CONTROL),
                Grant(CanonicalUser("A"), Permission.FULL_CONTROL),
            ],
        )
        assert acl_from_response(acl_to_policy(acl)) == acl


class TestAclToJson:
    def test_json(self):
        acl = AccessControlList(Owner("A"), [Grant(CanonicalUser("A"), Permission.FULL_CONTROL)])
        assert json.loads(acl_to_json(acl)) == acl_to_dict(acl) == {
            "owner": {"id": "A", "display_name": ""},
            "grants": [
                {"grantee": {"type": "CanonicalUser", "id": "A"}, "permission": "FULL_CONTROL"}
            ],
        }
