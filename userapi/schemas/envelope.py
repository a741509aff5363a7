"""Uniform response envelope — ``{message, status, data}``."""

from __future__ import annotations

from http import HTTPStatus
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class ApiResponse(BaseModel):
    """Immutable response envelope.

    ``status`` serialises to the status name (``"CREATED"``, ``"NOT_FOUND"``)
    and routes use its numeric value as the HTTP status code, so the two
    cannot disagree.
    """

    model_config = ConfigDict(frozen=True)

    message: str
    status: HTTPStatus
    data: dict[str, Any] = Field(default_factory=dict)

    @field_serializer("status")
    def serialize_status(self, status: HTTPStatus) -> str:
        return status.name

    @classmethod
    def builder(cls) -> ApiResponseBuilder:
        return ApiResponseBuilder()

    @classmethod
    def error(cls, status: HTTPStatus, message: str) -> ApiResponse:
        """Failure envelope: no payload."""
        return cls(message=message, status=status, data={})

    def to_content(self) -> dict[str, Any]:
        """JSON-ready body."""
        return self.model_dump(mode="json")


class ApiResponseBuilder:
    """Accumulates envelope fields; ``build()`` freezes them."""

    __slots__ = ("_message", "_status", "_data")

    def __init__(self) -> None:
        self._message = ""
        self._status = HTTPStatus.OK
        self._data: dict[str, Any] = {}

    def message(self, message: str) -> ApiResponseBuilder:
        self._message = message
        return self

    def status(self, status: HTTPStatus) -> ApiResponseBuilder:
        self._status = HTTPStatus(status)
        return self

    def data(self, data: dict[str, Any]) -> ApiResponseBuilder:
        self._data = dict(data)
        return self

    def build(self) -> ApiResponse:
        return ApiResponse(message=self._message, status=self._status, data=self._data)
