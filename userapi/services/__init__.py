"""Service layer — business logic orchestration."""


class ServiceError(Exception):
    """Base service exception."""


class InvalidCredentialsError(ServiceError):
    """Missing or blank username/password (-> HTTP 400)."""


class NotFoundError(ServiceError):
    """Resource not found (-> HTTP 404)."""


class ConflictError(ServiceError):
    """Business rule conflict (-> HTTP 409)."""


class AuthenticationError(ServiceError):
    """Authentication failure (-> HTTP 401)."""
