"""
Error types and provider error translation.

Every remote EC2 call goes through provider_call(), which maps botocore
failures onto ProviderError with a small, closed ErrorKind.
"""

import enum
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    NoCredentialsError,
    NoRegionError,
    PartialCredentialsError,
    ProfileNotFound,
)


class ErrorKind(enum.Enum):
    NOT_FOUND = "not_found"
    VPC_NOT_FOUND = "vpc_not_found"
    DUPLICATE = "duplicate"
    THROTTLED = "throttled"
    UNAUTHORIZED = "unauthorized"
    LIMIT_EXCEEDED = "limit_exceeded"
    INVALID_PARAMETER = "invalid_parameter"
    UNAVAILABLE = "unavailable"
    UNKNOWN = "unknown"


_EXACT_CODES = {
    "InvalidVpcID.NotFound": ErrorKind.VPC_NOT_FOUND,
    "InvalidGroup.Duplicate": ErrorKind.DUPLICATE,
    "InvalidPermission.Duplicate": ErrorKind.DUPLICATE,
    "RequestLimitExceeded": ErrorKind.THROTTLED,
    "Throttling": ErrorKind.THROTTLED,
    "ThrottlingException": ErrorKind.THROTTLED,
    "UnauthorizedOperation": ErrorKind.UNAUTHORIZED,
    "AuthFailure": ErrorKind.UNAUTHORIZED,
    "InvalidClientTokenId": ErrorKind.UNAUTHORIZED,
    "ExpiredToken": ErrorKind.UNAUTHORIZED,
    "ServiceUnavailable": ErrorKind.UNAVAILABLE,
    "Unavailable": ErrorKind.UNAVAILABLE,
    "InternalError": ErrorKind.UNAVAILABLE,
}


def classify_error_code(code: Optional[str]) -> ErrorKind:
    """
    Map an EC2 error code onto an ErrorKind.

    Args:
        code: Error code from a ClientError response (e.g. "InvalidGroup.NotFound")

    Returns:
        ErrorKind: The matching kind, UNKNOWN when nothing matches
    """
    if not code:
        return ErrorKind.UNKNOWN
    if code in _EXACT_CODES:
        return _EXACT_CODES[code]
    if code.endswith(".NotFound"):
        return ErrorKind.NOT_FOUND
    if code.endswith(".Duplicate"):
        return ErrorKind.DUPLICATE
    if code.endswith("LimitExceeded"):
        return ErrorKind.LIMIT_EXCEEDED
    if code.endswith(".Malformed") or code.startswith("InvalidParameter") or code == "MissingParameter":
        return ErrorKind.INVALID_PARAMETER
    return ErrorKind.UNKNOWN


class CloudNetError(Exception):
    """Base class for all cloudnet errors."""


class ConfigurationError(CloudNetError):
    """Static configuration is malformed (e.g. an unparsable port spec)."""


class NotFoundError(CloudNetError):
    """A named resource does not exist and nothing implies creating it."""


class NetworkMismatchError(CloudNetError):
    """A resource exists but is bound to a different network than the target."""

    def __init__(self, resource: str, expected_network_id: str, actual_network_id: str):
        self.resource = resource
        self.expected_network_id = expected_network_id
        self.actual_network_id = actual_network_id
        super().__init__(
            f"vpc mismatch: expected '{resource}' to have vpc '{expected_network_id}', "
            f"got '{actual_network_id}'"
        )


class ProviderError(CloudNetError):
    """A remote EC2 call failed."""

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.UNKNOWN,
        code: Optional[str] = None,
        operation: Optional[str] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.code = code
        self.operation = operation


class PartialProvisioningError(ProviderError):
    """
    A later provisioning step failed after an earlier one already created a resource.

    The created network is kept on ``network`` so callers can still use or
    report it.
    """

    def __init__(self, message: str, network, cause: ProviderError):
        super().__init__(message, kind=cause.kind, code=cause.code, operation=cause.operation)
        self.network = network
        self.cause = cause


@contextmanager
def provider_call(
    operation: str,
    messages: Optional[Dict[ErrorKind, str]] = None,
) -> Iterator[None]:
    """
    Translate botocore failures raised inside the block into ProviderError.

    Args:
        operation: Human readable description of the call (e.g. "describe VPCs")
        messages: Optional descriptive messages to use for specific error kinds

    Raises:
        ProviderError: When the wrapped call raises ClientError or BotoCoreError
    """
    try:
        yield
    except ClientError as e:
        code = e.response.get("Error", {}).get("Code")
        kind = classify_error_code(code)
        if messages and kind in messages:
            message = messages[kind]
        else:
            message = f"unable to {operation}, {e}"
        raise ProviderError(message, kind=kind, code=code, operation=operation) from e
    except (NoCredentialsError, PartialCredentialsError, ProfileNotFound) as e:
        raise ProviderError(
            f"unable to {operation}, {e}",
            kind=ErrorKind.UNAUTHORIZED,
            operation=operation,
        ) from e
    except NoRegionError as e:
        raise ProviderError(
            f"unable to {operation}, {e}",
            kind=ErrorKind.INVALID_PARAMETER,
            operation=operation,
        ) from e
    except BotoCoreError as e:
        # Transport level failures: endpoint unreachable, read timeouts
        raise ProviderError(
            f"unable to {operation}, {e}",
            kind=ErrorKind.UNAVAILABLE,
            operation=operation,
        ) from e
