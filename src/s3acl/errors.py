"""Error definitions for s3acl."""

from __future__ import annotations

from typing import TYPE_CHECKING

from botocore.exceptions import BotoCoreError, ClientError

if TYPE_CHECKING:
    from s3acl.verifier import VerificationResult


class AclError(Exception):
    """An s3acl error with a stable code and a message.

    Attributes:
        code: The error code string (e.g. "UnknownPolicy", "Mismatch").
        message: Human-readable error description.
    """

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


# -- Model errors --------------------------------------------------------------


class UnknownPolicy(AclError):
    """An unrecognized canned ACL name was requested."""

    def __init__(self, name: str) -> None:
        super().__init__(code="UnknownPolicy", message=f"Unknown canned ACL: {name}")
        self.name = name


class InvalidGrant(AclError):
    """A grant, grantee or permission could not be built."""

    def __init__(self, message: str = "Invalid grant") -> None:
        super().__init__(code="InvalidGrant", message=message)


# -- Verification errors -------------------------------------------------------


class AclVerificationError(AclError):
    """An ACL did not match its expectation.

    Raised only by ``assert_verified``; the verifier itself returns results.
    """

    def __init__(self, result: VerificationResult) -> None:
        super().__init__(code=type(result).__name__, message=result.describe())
        self.result = result


# -- Harness errors ------------------------------------------------------------


class StorageServiceError(AclError):
    """A storage service call failed at the transport or service level.

    Attributes:
        http_status: HTTP status returned by the service, 0 if none.
        operation: The client operation that failed (e.g. "GetBucketAcl").
    """

    def __init__(
        self,
        code: str,
        message: str,
        http_status: int = 0,
        operation: str = "",
    ) -> None:
        super().__init__(code=code, message=message)
        self.http_status = http_status
        self.operation = operation

    def __str__(self) -> str:
        prefix = f"{self.operation}: " if self.operation else ""
        return f"{prefix}{self.code}: {self.message}"

    @classmethod
    def from_client_error(
        cls, exc: ClientError | BotoCoreError, operation: str = ""
    ) -> StorageServiceError:
        """Wrap a botocore exception.

        Args:
            exc: The botocore exception raised by the client call.
            operation: The client method name (e.g. "get_bucket_acl"). Falls
                back to the service operation name a ClientError carries.

        Returns:
            A StorageServiceError with the service's error code and status.
        """
        if isinstance(exc, ClientError):
            error = exc.response.get("Error", {})
            meta = exc.response.get("ResponseMetadata", {})
            return cls(
                code=error.get("Code", "Unknown"),
                message=error.get("Message", str(exc)),
                http_status=int(meta.get("HTTPStatusCode", 0) or 0),
                operation=operation or exc.operation_name,
            )
        return cls(
            code=type(exc).__name__,
            message=str(exc),
            operation=operation,
        )
