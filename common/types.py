from __future__ import annotations

from dataclasses import dataclass
from http import HTTPStatus
from typing import Generic, Optional, Protocol, Tuple, TypeVar, runtime_checkable

from common.geo import midpoint


T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """
    Lat/long rectangle used to scope a camera search.

    Attributes:
        top: northern latitudinal boundary (deg)
        bottom: southern latitudinal boundary (deg)
        left: western longitudinal boundary (deg)
        right: eastern longitudinal boundary (deg)
    """
    top: float
    bottom: float
    left: float
    right: float

    @property
    def center(self) -> Tuple[float, float]:
        """(lat, lon) midpoint of the box."""
        return midpoint(self.top, self.bottom, self.left, self.right)


@runtime_checkable
class Mappable(Protocol):
    """Anything that can be rendered as a labelled pin on the map."""
    latitude: float
    longitude: float

    @property
    def id(self) -> str: ...

    @property
    def label(self) -> str: ...


@dataclass(slots=True)
class ApiResponseStatus:
    """
    Uniform outcome of an API call; inspected by callers instead of catching exceptions.

    Attributes:
        is_success_status_code: True for 2xx responses that deserialized cleanly.
        status_code: HTTP status code (int).
        message: human-readable detail (reason phrase or a friendlier override).
    """
    is_success_status_code: bool = True
    status_code: int = int(HTTPStatus.OK)
    message: str = HTTPStatus.OK.phrase

    @classmethod
    def default(cls) -> "ApiResponseStatus":
        """Stock success status."""
        return cls()

    def to_dict(self) -> dict:
        return {
            "success": self.is_success_status_code,
            "status_code": self.status_code,
            "message": self.message,
        }


@dataclass(slots=True)
class ApiResponse(ApiResponseStatus, Generic[T]):
    """Status plus the deserialized payload (None on failure)."""
    deserialized_response: Optional[T] = None

    def status(self) -> ApiResponseStatus:
        """Payload-free copy of the status portion."""
        return ApiResponseStatus(self.is_success_status_code, self.status_code, self.message)
