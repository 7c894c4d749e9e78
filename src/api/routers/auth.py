"""Sign-up and sign-in endpoints issuing bearer tokens."""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import check_client_rate_limit, get_async_session, get_settings
from core.config import Settings
from core.security import create_access_token
from schemas.auth import AuthRequest, TokenResponse
from services import user_service
from services.user_service import EmailAlreadyExistsError, InvalidCredentialsError

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
    dependencies=[Depends(check_client_rate_limit)],
)


@router.post("/signup", response_model=TokenResponse, status_code=201)
async def signup(
    data: AuthRequest,
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_settings),
) -> TokenResponse:
    """Register a new account and return an access token for it."""
    try:
        user = await user_service.create_user(db, data.email, data.password)
    except EmailAlreadyExistsError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    return TokenResponse(access_token=create_access_token(user.id, settings))


@router.post("/signin", response_model=TokenResponse)
async def signin(
    data: AuthRequest,
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_settings),
) -> TokenResponse:
    """Exchange an email/password pair for an access token."""
    try:
        user = await user_service.authenticate_user(db, data.email, data.password)
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    return TokenResponse(access_token=create_access_token(user.id, settings))
