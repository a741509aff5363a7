"""Users router — create, fetch by id, login."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from userapi.api.deps import get_session, get_user_service
from userapi.api.errors import envelope_response
from userapi.schemas import ApiResponse, UserRequest
from userapi.services.user_service import UserService

router = APIRouter()

_ENVELOPE = {"model": ApiResponse}


@router.post(
    "",
    status_code=201,
    response_class=JSONResponse,
    responses={400: _ENVELOPE, 409: _ENVELOPE},
)
async def create_user(
    body: UserRequest,
    session: AsyncSession = Depends(get_session),
    users: UserService = Depends(get_user_service),
) -> JSONResponse:
    return envelope_response(await users.create_user(session, body))


@router.post(
    "/login",
    response_class=JSONResponse,
    responses={400: _ENVELOPE, 401: _ENVELOPE, 404: _ENVELOPE},
)
async def login_user(
    body: UserRequest,
    session: AsyncSession = Depends(get_session),
    users: UserService = Depends(get_user_service),
) -> JSONResponse:
    return envelope_response(await users.login_user(session, body))


@router.get(
    "/{user_id}",
    response_class=JSONResponse,
    responses={404: _ENVELOPE},
)
async def get_user(
    user_id: str,
    session: AsyncSession = Depends(get_session),
    users: UserService = Depends(get_user_service),
) -> JSONResponse:
    return envelope_response(await users.get_user_by_id(session, user_id))
