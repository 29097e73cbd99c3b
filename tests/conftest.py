"""Shared pytest fixtures for s3acl tests."""

from unittest.mock import MagicMock

import pytest

from s3acl.config import EndpointConfig, HarnessConfig, S3AclConfig
from s3acl.harness import StorageHarness
from s3acl.models import Owner

OWNER_ID = "a" * 64
OTHER_ID = "b" * 64


@pytest.fixture
def owner() -> Owner:
    return Owner(OWNER_ID, "acl-owner")


@pytest.fixture
def other_owner() -> Owner:
    return Owner(OTHER_ID, "someone-else")


@pytest.fixture
def config() -> S3AclConfig:
    """A test config pointing at a local endpoint."""
    return S3AclConfig(
        endpoint=EndpointConfig(
            url="http://127.0.0.1:9010",
            region="us-east-1",
            access_key="test",
            secret_key="test-secret",
        ),
        harness=HarnessConfig(bucket_prefix="unit-"),
    )


@pytest.fixture
def s3_client(owner):
    """A mock boto3 S3 client whose account is ``owner``."""
    client = MagicMock()
    client.list_buckets.return_value = {
        "Buckets": [],
        "Owner": {"ID": owner.id, "DisplayName": owner.display_name},
    }
    return client


@pytest.fixture
def harness(config, s3_client) -> StorageHarness:
    return StorageHarness(config, client=s3_client)
