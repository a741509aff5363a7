"""Credential presence check applied before any store access."""

from __future__ import annotations

from userapi.services import InvalidCredentialsError


def _present(value: str | None) -> bool:
    return value is not None and value.strip() != ""


def is_valid_credentials(username: str | None, password: str | None) -> bool:
    """True iff both values are non-null and non-blank."""
    return _present(username) and _present(password)


def validate_credentials(
    username: str | None,
    password: str | None,
    message: str = "Invalid credentials",
) -> None:
    """Raise :class:`InvalidCredentialsError` with *message* if either value is missing.

    Callers pass their own message; create and login report different text
    for the same failure.
    """
    if not is_valid_credentials(username, password):
        raise InvalidCredentialsError(message)
