"""User request/response schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class UserRequest(BaseModel):
    """Body of ``POST /users`` and ``POST /users/login``.

    Both fields are optional here so that missing values reach the
    credential check and come back as a 400 envelope.
    """

    username: str | None = None
    password: str | None = None


class UserOut(BaseModel):
    """Copy of a stored user as carried in ``data.user``."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str
    username: str
    password: str
