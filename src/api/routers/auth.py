"""Registration and login endpoints."""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_app_settings, get_async_session
from core.config import Settings
from schemas.auth import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
    UserResponse,
)
from services import auth_service
from services.exceptions import (
    DuplicateUsernameError,
    InvalidCredentialsError,
    InvalidRegistrationCodeError,
)

router = APIRouter(tags=["auth"])


@router.post("/register", response_model=MessageResponse, status_code=201)
async def register(
    data: RegisterRequest,
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_app_settings),
) -> MessageResponse:
    """Create an account. Requires the deployment's registration code; does not log in."""
    try:
        await auth_service.register_user(db, data, settings)
    except (InvalidRegistrationCodeError, DuplicateUsernameError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return MessageResponse(message="User created successfully")


@router.post("/login", response_model=LoginResponse)
async def login(
    data: LoginRequest,
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_app_settings),
) -> LoginResponse:
    """Exchange username and password for a 24-hour bearer token."""
    try:
        user, token = await auth_service.login(db, data, settings)
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    return LoginResponse(token=token, user=UserResponse.model_validate(user))
