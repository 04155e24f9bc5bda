"""Result types for railway-oriented programming.

Store and limiter operations can fail without that failure being
exceptional: a Redis outage is an expected condition that callers translate
into a fallback (cache miss, allowed request). Returning a Result keeps that
decision explicit at every call site.

Usage:
    result = await cache.increment("rate_limit:lax:ip:1.2.3.4:1700000000000")
    match result:
        case Success(value=count):
            allowed = count <= limit
        case Failure(error=error):
            allowed = True  # fail-open
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Represents a successful operation result.

    Attributes:
        value: The successful result value.
    """

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Represents a failed operation result.

    Attributes:
        error: The error that occurred.
    """

    error: E


# Type alias for Result union
type Result[T, E] = Success[T] | Failure[E]
