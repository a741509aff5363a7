"""Request/response schemas shared by the service and API layers."""

from userapi.schemas.envelope import ApiResponse, ApiResponseBuilder
from userapi.schemas.user import UserOut, UserRequest

__all__ = ["ApiResponse", "ApiResponseBuilder", "UserOut", "UserRequest"]
