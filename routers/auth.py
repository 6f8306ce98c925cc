from fastapi import APIRouter, HTTPException, Depends, Request
from fastapi.security import OAuth2PasswordRequestForm
from utils.deps import db_dependency, user_dependency
from starlette import status
from schemas.auth_schemas import (Token, AuthResponse, CreateUserRequest,
                                  RefreshTokenRequest, UserResponse)
from services.auth_service import AuthService
from services.token_service import TokenService
from middleware.rate_limiter import limiter
from utils.logger import get_logger

# Setup logger
logger = get_logger(__name__)


router = APIRouter(
    prefix="/api",
    tags=["auth"]
)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("3/minute")
async def register(request: Request, body: CreateUserRequest, db: db_dependency):
    """
    Create an account and log it in straight away.
    """
    user = AuthService.create_user(body, db)
    tokens = TokenService.create_tokens(user, db)

    logger.info(
        "User registered successfully",
        extra={"user_id": user.id, "username": user.username}
    )

    return AuthResponse(**tokens, user=UserResponse.model_validate(user))


@router.post("/login", response_model=AuthResponse)
@limiter.limit("5/minute")
async def login(request: Request, db: db_dependency, form_data: OAuth2PasswordRequestForm = Depends()):
    """
    OAuth2 password flow. The ``username`` form field takes a username or an email.
    """
    user = AuthService.authenticate_user(form_data.username, form_data.password, db)

    tokens = TokenService.create_tokens(user, db)

    logger.info(
        "User logged in successfully",
        extra={"user_id": user.id, "username": user.username}
    )

    return AuthResponse(**tokens, user=UserResponse.model_validate(user))


@router.post("/refresh", response_model=Token)
@limiter.limit("10/minute")
async def refresh_token(request: Request, body: RefreshTokenRequest, db: db_dependency):
    """
    Get a new token pair using a refresh token. The old one stops working.
    """
    token = TokenService.refresh_access_token(body.refresh_token, db)

    logger.info("Access token refreshed")

    return token


@router.post("/logout", status_code=status.HTTP_200_OK)
@limiter.limit("10/minute")
async def logout(request: Request, body: RefreshTokenRequest, db: db_dependency):
    """
    Revoke refresh token (logout). Unknown tokens are not an error.
    """
    revoked = TokenService.revoke_token(body.refresh_token, db)

    logger.info("User logged out", extra={"session_revoked": revoked})

    return {"message": "Logged out successfully"}


@router.get("/user", response_model=UserResponse)
@limiter.limit("30/minute")
async def get_user_info(request: Request, user: user_dependency, db: db_dependency):
    """
    Current user's profile (protected endpoint).
    """
    model = AuthService.get_user_by_id(db, user.id)

    if not model:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    return model
