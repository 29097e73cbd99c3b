"""Storage test harness for bucket ACL checks.

Wraps a boto3 S3 client with the calls the ACL checks need: fetch and set
bucket ACLs, create buckets with canned or explicit ACLs, and delete them
again afterwards. Service failures are raised as ``StorageServiceError``;
ACL mismatches are returned as verification results.

Retries are left to botocore (``EndpointConfig.max_attempts``).
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Callable, Iterable

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from s3acl.builder import to_grant_headers
from s3acl.canned import resolve_canned_acl
from s3acl.config import S3AclConfig
from s3acl.errors import StorageServiceError
from s3acl.models import AccessControlList, CannedPolicy, Owner, Target
from s3acl.serialization import acl_from_response, acl_to_policy
from s3acl.verifier import VerificationResult, verify_acl

logger = logging.getLogger(__name__)

# Order used when cycling every canned ACL over one bucket.
CYCLE_ORDER = (
    CannedPolicy.AUTHENTICATED_READ,
    CannedPolicy.BUCKET_OWNER_FULL_CONTROL,
    CannedPolicy.BUCKET_OWNER_READ,
    CannedPolicy.LOG_DELIVERY_WRITE,
    CannedPolicy.PRIVATE,
    CannedPolicy.PUBLIC_READ,
    CannedPolicy.PUBLIC_READ_WRITE,
)


def create_client(config: S3AclConfig) -> Any:
    """Create a boto3 S3 client for the configured endpoint."""
    endpoint = config.endpoint
    return boto3.client(
        "s3",
        endpoint_url=endpoint.url or None,
        aws_access_key_id=endpoint.access_key or None,
        aws_secret_access_key=endpoint.secret_key or None,
        region_name=endpoint.region,
        config=Config(
            signature_version="s3v4",
            s3={"addressing_style": endpoint.addressing_style},
            retries={"max_attempts": endpoint.max_attempts, "mode": "standard"},
        ),
    )


class StorageHarness:
    """Drives bucket ACL operations against an S3-compatible endpoint.

    Buckets created through the harness are deleted by ``cleanup()``, in
    reverse creation order. The harness is a context manager that cleans
    up on exit.
    """

    def __init__(self, config: S3AclConfig, client: Any = None) -> None:
        self.config = config
        self.client = client if client is not None else create_client(config)
        self._cleanup_tasks: list[tuple[str, Callable[[], None]]] = []
        self._owner: Owner | None = None

    def __enter__(self) -> StorageHarness:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.cleanup()

    def _call(self, operation: str, **kwargs: Any) -> dict[str, Any]:
        """Invoke a client operation, wrapping botocore failures."""
        logger.debug("Calling %s", operation, extra={"operation": operation})
        try:
            return getattr(self.client, operation)(**kwargs)
        except (ClientError, BotoCoreError) as exc:
            raise StorageServiceError.from_client_error(exc, operation) from exc

    # -- Account -------------------------------------------------------------

    def account_owner(self) -> Owner:
        """Return the owner of the account the client is signed in as."""
        if self._owner is None:
            resp = self._call("list_buckets")
            owner = resp.get("Owner", {})
            self._owner = Owner(owner.get("ID", ""), owner.get("DisplayName", "") or "")
            logger.debug("Account owner is %s", self._owner)
        return self._owner

    def bucket_name(self) -> str:
        """Generate a unique bucket name."""
        return f"{self.config.harness.bucket_prefix}{uuid.uuid4().hex}"

    # -- Buckets -------------------------------------------------------------

    def create_bucket(
        self,
        bucket: str,
        acl: CannedPolicy | AccessControlList | None = None,
    ) -> None:
        """Create a bucket and schedule its deletion.

        Args:
            bucket: The bucket name.
            acl: A canned ACL sent as ``x-amz-acl``, or an explicit ACL sent
                as ``x-amz-grant-*`` headers. None uses the service default.

        Raises:
            StorageServiceError: If the service rejects the request.
        """
        kwargs: dict[str, Any] = {"Bucket": bucket}
        if isinstance(acl, CannedPolicy):
            kwargs["ACL"] = acl.value
        elif isinstance(acl, AccessControlList):
            kwargs.update(to_grant_headers(acl))
        region = self.config.endpoint.region
        if region and region != "us-east-1":
            kwargs["CreateBucketConfiguration"] = {"LocationConstraint": region}

        logger.info("Creating bucket %s", bucket, extra={"bucket": bucket})
        self._call("create_bucket", **kwargs)
        self.add_cleanup(f"delete bucket {bucket}", lambda: self.delete_bucket(bucket))

    def delete_bucket(self, bucket: str) -> None:
        logger.info("Deleting bucket %s", bucket, extra={"bucket": bucket})
        self._call("delete_bucket", Bucket=bucket)

    # -- ACLs ----------------------------------------------------------------

    def get_bucket_acl(self, bucket: str) -> AccessControlList:
        """Fetch the current ACL of a bucket.

        Raises:
            StorageServiceError: If the service call fails.
            InvalidGrant: If the service reports a grant the model cannot
                represent.
        """
        resp = self._call("get_bucket_acl", Bucket=bucket)
        return acl_from_response(resp)

    def set_bucket_acl(
        self, bucket: str, acl: CannedPolicy | AccessControlList
    ) -> None:
        """Apply a canned or explicit ACL to a bucket, replacing all grants.

        Raises:
            StorageServiceError: If the service call fails.
        """
        if isinstance(acl, CannedPolicy):
            logger.info(
                "Setting canned ACL %s on bucket %s",
                acl.value,
                bucket,
                extra={"bucket": bucket, "policy": acl.value},
            )
            self._call("put_bucket_acl", Bucket=bucket, ACL=acl.value)
        else:
            logger.info("Setting ACL %s on bucket %s", acl, bucket, extra={"bucket": bucket})
            self._call(
                "put_bucket_acl", Bucket=bucket, AccessControlPolicy=acl_to_policy(acl)
            )

    def check_bucket_acl(
        self, bucket: str, expected: AccessControlList, explicit: bool = False
    ) -> VerificationResult:
        """Fetch a bucket's ACL and verify it against ``expected``."""
        result = verify_acl(self.get_bucket_acl(bucket), expected, explicit=explicit)
        if not result.ok:
            logger.info(
                "Bucket %s ACL check failed: %s",
                bucket,
                result.describe(),
                extra={"bucket": bucket},
            )
        return result

    def check_canned_bucket_acl(
        self, bucket: str, policy: CannedPolicy
    ) -> VerificationResult:
        """Verify a bucket's ACL against the grants of a canned ACL."""
        expected = resolve_canned_acl(policy, self.account_owner(), Target.BUCKET)
        return self.check_bucket_acl(bucket, expected)

    def cycle_canned_policies(
        self, bucket: str, policies: Iterable[CannedPolicy] = CYCLE_ORDER
    ) -> list[tuple[CannedPolicy, VerificationResult]]:
        """Set each canned ACL on one bucket in turn and verify it.

        Returns:
            ``(policy, result)`` pairs in the order applied.
        """
        results = []
        for policy in policies:
            self.set_bucket_acl(bucket, policy)
            results.append((policy, self.check_canned_bucket_acl(bucket, policy)))
        return results

    # -- Cleanup -------------------------------------------------------------

    def add_cleanup(self, description: str, task: Callable[[], None]) -> None:
        self._cleanup_tasks.append((description, task))

    def cleanup(self) -> None:
        """Run scheduled cleanup tasks, most recent first.

        A failing task is logged and the remaining tasks still run.
        """
        tasks, self._cleanup_tasks = self._cleanup_tasks, []
        for description, task in reversed(tasks):
            try:
                task()
            except Exception as exc:
                logger.warning("Unable to %s: %s", description, exc)
