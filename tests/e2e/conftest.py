"""
s3acl E2E Test Configuration

Tests run against any S3-compatible endpoint. They are skipped unless an
endpoint is configured via environment variables:

    S3ACL_ENDPOINT=http://localhost:9000
    S3ACL_ACCESS_KEY=...
    S3ACL_SECRET_KEY=...
    S3ACL_REGION=us-east-1
    S3ACL_KNOWN_DEVIATIONS=bucket-owner-read,bucket-owner-full-control
"""

import os

import pytest

from s3acl.config import HarnessConfig, S3AclConfig, apply_env_overrides
from s3acl.harness import StorageHarness


def pytest_collection_modifyitems(config, items):
    if os.environ.get("S3ACL_ENDPOINT"):
        return
    skip = pytest.mark.skip(reason="S3ACL_ENDPOINT not set")
    for item in items:
        if "e2e" in item.nodeid.split("/"):
            item.add_marker(skip)


@pytest.fixture(scope="session")
def acl_config() -> S3AclConfig:
    config = apply_env_overrides(S3AclConfig(), os.environ)
    deviations = os.environ.get("S3ACL_KNOWN_DEVIATIONS", "")
    config.harness = HarnessConfig(
        bucket_prefix=config.harness.bucket_prefix,
        known_deviations=[d.strip() for d in deviations.split(",") if d.strip()],
    )
    return config


@pytest.fixture(scope="session")
def s3_account_owner(acl_config):
    with StorageHarness(acl_config) as harness:
        return harness.account_owner()


@pytest.fixture()
def acl_harness(acl_config):
    """A harness whose buckets are deleted after the test."""
    with StorageHarness(acl_config) as harness:
        yield harness


@pytest.fixture()
def bucket_name(acl_harness):
    """Generate a unique bucket name for a test."""
    return acl_harness.bucket_name()
