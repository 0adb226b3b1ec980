"""Typed errors for the shelf-and-review layer."""

from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any


@dataclass
class LibraryError(Exception):
    """Base class for all library-domain errors."""

    message: str
    detail: dict[str, Any] = field(default_factory=dict)
    code: str = "library.error"
    status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR

    def __post_init__(self) -> None:
        Exception.__init__(self, self.message)

    def __str__(self) -> str:
        return self.message


@dataclass
class NotAuthenticated(LibraryError):
    message: str = "User not authenticated."
    code: str = "library.not_authenticated"
    status: HTTPStatus = HTTPStatus.UNAUTHORIZED


@dataclass
class NotFound(LibraryError):
    code: str = "library.not_found"
    status: HTTPStatus = HTTPStatus.NOT_FOUND


@dataclass
class UniquenessConflict(LibraryError):
    """A concurrent insert won and the winning row could not be re-read."""

    code: str = "library.conflict"
    status: HTTPStatus = HTTPStatus.CONFLICT


@dataclass
class UpstreamFailure(LibraryError):
    """The store or the catalog API failed."""

    code: str = "library.upstream"
    status: HTTPStatus = HTTPStatus.BAD_GATEWAY


@dataclass
class ValidationFailure(LibraryError):
    code: str = "library.invalid"
    status: HTTPStatus = HTTPStatus.BAD_REQUEST
