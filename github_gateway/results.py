# =============================================================================
# GitHub Gateway - Fetch Results
# =============================================================================
"""
Result carrier used between the gateway's fetch helpers and its public
operations.

A ``FetchResult`` holds either a value or a tagged ``Failure``. Public
operations unwrap it to the fail-soft value (``None`` or ``[]``), while
the failure is logged and counted.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class FailureKind(str, Enum):
    """
    Categories of gateway failures.

    Attributes:
        TRANSPORT: Network error or non-success HTTP status.
        DECODE: Payload did not match the expected record shape.
        PROTOCOL: GraphQL response broke the fixed query's shape.
        INVALID_REQUEST: Arguments could not be turned into a request.
        UNEXPECTED: Any other exception raised while fetching.
    """

    TRANSPORT = "transport"
    DECODE = "decode"
    PROTOCOL = "protocol"
    INVALID_REQUEST = "invalid_request"
    UNEXPECTED = "unexpected"


@dataclass(frozen=True)
class Failure:
    """
    A recorded failure of one gateway operation.

    Attributes:
        kind: Failure category.
        operation: Gateway operation name.
        context: Identifying arguments (owner/repo/number), never the token.
        message: Human readable description.
        status_code: HTTP status when the failure came from a response.
    """

    kind: FailureKind
    operation: str
    context: str
    message: str
    status_code: int = 0

    def __str__(self) -> str:
        status = f" [HTTP {self.status_code}]" if self.status_code else ""
        return f"{self.operation}({self.context}) {self.kind.value} failure{status}: {self.message}"


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """
    Either a fetched value or the failure that prevented it.

    Attributes:
        value: The decoded value on success.
        failure: The failure, if any.
        from_cache: True when the value was served from the cache.
    """

    value: Optional[T] = None
    failure: Optional[Failure] = None
    from_cache: bool = False

    @property
    def ok(self) -> bool:
        """Whether the fetch succeeded."""
        return self.failure is None

    @classmethod
    def success(cls, value: T, from_cache: bool = False) -> "FetchResult[T]":
        """Build a successful result."""
        return cls(value=value, from_cache=from_cache)

    @classmethod
    def failed(cls, failure: Failure) -> "FetchResult[T]":
        """Build a failed result."""
        return cls(failure=failure)
