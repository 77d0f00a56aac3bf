"""Outcome types for remote fetches.

Expected failures are values, not exceptions: a Remote Source returns a
``RemoteResult`` and the cache service hands a ``FetchResult`` back to its
caller, who matches on the concrete type.
"""
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome. For a Remote Source, ``Ok(None)`` means an empty body."""
    value: T


@dataclass(frozen=True)
class HttpError:
    """Non-success HTTP status returned by the remote service."""
    status_code: int
    message: str
    subject: str = "data"

    def describe(self) -> str:
        return f"Failed to fetch {self.subject}: {self.status_code} - {self.message}"


@dataclass(frozen=True)
class EmptyPayload:
    """Success status but the body was missing or could not be decoded."""
    message: str

    def describe(self) -> str:
        return self.message


@dataclass(frozen=True)
class TransportFailure:
    """DNS, timeout or connection level failure."""
    message: str

    def describe(self) -> str:
        return f"Network error: {self.message}"


RemoteResult = Union[Ok[Optional[T]], HttpError, TransportFailure]
FetchError = Union[HttpError, EmptyPayload, TransportFailure]
FetchResult = Union[Ok[T], HttpError, EmptyPayload, TransportFailure]
