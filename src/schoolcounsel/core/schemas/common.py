"""
Response envelope shared by every endpoint.

``{"success": true, "message": ..., "data": ...}`` on success; errors use the
same keys with ``success: false`` and an ``error`` object.
"""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel

DataT = TypeVar("DataT")


class Envelope(BaseModel, Generic[DataT]):
    """Successful response wrapper."""

    success: bool = True
    message: str | None = None
    data: DataT | None = None


class PaginatedEnvelope(Envelope[DataT], Generic[DataT]):
    pagination: dict[str, Any]


def error_body(message: str, error: dict[str, Any]) -> dict[str, Any]:
    return {"success": False, "message": message, "error": error}
