"""UserService — registration, lookup, and login."""

from __future__ import annotations

import base64
import hashlib
from http import HTTPStatus

import bcrypt
import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from userapi.dao.user_dao import UserDAO
from userapi.models.user import User
from userapi.schemas import ApiResponse, UserOut, UserRequest
from userapi.services import AuthenticationError, ConflictError, NotFoundError
from userapi.services.validation import validate_credentials

log = structlog.get_logger("userapi.service")

MSG_INVALID_CREDENTIALS = "Invalid credentials"
MSG_INVALID_LOGIN = "Invalid username or password"
MSG_USER_NOT_FOUND = "User not found"
MSG_USERNAME_TAKEN = "Username already exists"
MSG_USER_CREATED = "User created successfully"
MSG_USER_FETCHED = "User fetched successfully"
MSG_LOGIN_OK = "Login successful"

# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------


def _prehash(password: str) -> bytes:
    """SHA-256 digest, base64-encoded: 44 bytes, under bcrypt's 72-byte input limit.

    Both hashing and verification go through this, so passwords of any
    length are accepted and compared in full.
    """
    return base64.b64encode(hashlib.sha256(password.encode()).digest())


def _hash_password(password: str) -> str:
    """Hash a plaintext password with bcrypt."""
    return bcrypt.hashpw(_prehash(password), bcrypt.gensalt()).decode()


def _verify_password(password: str, password_hash: str) -> bool:
    """Verify a plaintext password against a bcrypt hash."""
    try:
        return bcrypt.checkpw(_prehash(password), password_hash.encode())
    except ValueError:
        # stored value is not a bcrypt hash
        return False


def _user_envelope(message: str, status: HTTPStatus, user: User) -> ApiResponse:
    return (
        ApiResponse.builder()
        .message(message)
        .status(status)
        .data({"user": UserOut.model_validate(user)})
        .build()
    )


# ---------------------------------------------------------------------------
# UserService
# ---------------------------------------------------------------------------


class UserService:
    """Stateless user service.

    Each method validates its input, delegates to :class:`UserDAO`, and
    returns an :class:`ApiResponse` or raises a :class:`ServiceError`
    subclass for the API layer to translate.
    """

    def __init__(self, user_dao: UserDAO) -> None:
        self._user_dao = user_dao

    async def create_user(self, session: AsyncSession, request: UserRequest) -> ApiResponse:
        """Register a new user.

        Raises :class:`InvalidCredentialsError` on a missing/blank field and
        :class:`ConflictError` if the username is already registered.
        """
        validate_credentials(request.username, request.password, MSG_INVALID_CREDENTIALS)

        if await self._user_dao.username_taken(session, request.username):
            log.info("user.create_rejected", username=request.username, reason="conflict")
            raise ConflictError(MSG_USERNAME_TAKEN)

        try:
            user = await self._user_dao.save(
                session,
                User(username=request.username, password=_hash_password(request.password)),
            )
        except IntegrityError:
            # a concurrent create won the unique constraint after our check
            log.info("user.create_rejected", username=request.username, reason="race")
            raise ConflictError(MSG_USERNAME_TAKEN) from None
        log.info("user.created", user_id=user.id, username=user.username)
        return _user_envelope(MSG_USER_CREATED, HTTPStatus.CREATED, user)

    async def get_user_by_id(self, session: AsyncSession, user_id: str) -> ApiResponse:
        """Raises :class:`NotFoundError` if no user has *user_id*."""
        user = await self._user_dao.find_by_id(session, user_id)
        if user is None:
            raise NotFoundError(MSG_USER_NOT_FOUND)
        log.debug("user.fetched", user_id=user.id)
        return _user_envelope(MSG_USER_FETCHED, HTTPStatus.OK, user)

    async def login_user(self, session: AsyncSession, request: UserRequest) -> ApiResponse:
        """Check credentials against the stored user.

        Unknown username and wrong password are reported separately:
        :class:`NotFoundError` for the former, :class:`AuthenticationError`
        for the latter.
        """
        validate_credentials(request.username, request.password, MSG_INVALID_LOGIN)

        user = await self._user_dao.find_by_username(session, request.username)
        if user is None:
            log.info("user.login_failed", username=request.username, reason="unknown_user")
            raise NotFoundError(MSG_USER_NOT_FOUND)
        if not _verify_password(request.password, user.password):
            log.info("user.login_failed", username=request.username, reason="bad_password")
            raise AuthenticationError(MSG_INVALID_LOGIN)

        log.info("user.login_succeeded", user_id=user.id)
        return _user_envelope(MSG_LOGIN_OK, HTTPStatus.OK, user)
