import secrets
import hashlib
from datetime import datetime, timezone, timedelta
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from jose import jwt, JWTError
from models.refresh_tokens import RefreshToken
from models.users import User
from core.config import settings
from utils.logger import get_logger

logger = get_logger(__name__)


def hash_jti(jti: str) -> str:
    return hashlib.sha256(jti.encode()).hexdigest()


class TokenService:
    """
    Handles all token operations: creation, validation, rotation, and revocation.

    Access tokens are stateless. Refresh tokens are backed by a row in
    ``refresh_tokens``, which makes them the server-side sessions.
    """

    @staticmethod
    def _claims(user: User) -> dict:
        return {
            "sub": user.email,
            "id": user.id,
            "username": user.username,
            "is_admin": bool(user.is_admin),
        }

    @staticmethod
    def create_access_token(user: User, expires_delta: timedelta = None) -> str:
        """
        Creates a JWT access token carrying the user's identity and admin flag.

        Args:
            user: The authenticated user
            expires_delta: Token lifetime (default: ACCESS_TOKEN_EXPIRE_MINUTES)
        """
        if expires_delta is None:
            expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

        payload = {
            **TokenService._claims(user),
            "type": "access",
            "exp": datetime.now(timezone.utc) + expires_delta
        }

        return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    @staticmethod
    def create_refresh_token(user: User):
        """
        Creates a JWT refresh token.

        Returns:
            Tuple of (refresh_token_string, jti, expires_at)
        """
        jti = secrets.token_urlsafe(32)
        expire = datetime.now(timezone.utc) + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)

        payload = {
            **TokenService._claims(user),
            "jti": jti,
            "type": "refresh",
            "exp": expire
        }

        refresh_token = jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

        return refresh_token, jti, expire

    @staticmethod
    def create_tokens(user: User, db: Session) -> dict:
        """
        Creates an access + refresh token pair and stores the refresh
        token's hashed jti as a new session row.
        """
        access_token = TokenService.create_access_token(user)
        refresh_token, jti, expires_at = TokenService.create_refresh_token(user)

        db.add(RefreshToken(
            user_id=user.id,
            token_hash=hash_jti(jti),
            expires_at=expires_at
        ))
        db.commit()

        return {
            "access_token": access_token,
            "refresh_token": refresh_token,
            "token_type": "bearer"
        }

    @staticmethod
    def refresh_access_token(refresh_token: str, db: Session) -> dict:
        """
        Validates a refresh token and issues a new token pair.
        The old refresh token is revoked (rotation), and claims are rebuilt
        from the current user row so admin changes take effect.

        Raises:
            HTTPException: 401 if the token is invalid, expired, revoked,
            or its user no longer exists
        """
        try:
            payload = jwt.decode(
                refresh_token,
                settings.SECRET_KEY,
                algorithms=[settings.ALGORITHM]
            )
        except JWTError:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid token"
            )

        if payload.get("type") != "refresh":
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid token type"
            )

        user_id = payload.get("id")
        jti = payload.get("jti")

        if not user_id or not jti:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid token payload"
            )

        db_token = db.query(RefreshToken).filter(
            RefreshToken.token_hash == hash_jti(jti),
            RefreshToken.revoked == False
        ).first()

        if not db_token:
            logger.warning("Refresh with unknown or revoked token", extra={"user_id": user_id})
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Token not found or revoked"
            )

        # SQLite hands back naive datetimes
        expires_at = db_token.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)

        if expires_at < datetime.now(timezone.utc):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Token expired"
            )

        user = db.query(User).filter(User.id == user_id).one_or_none()
        if not user:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="User no longer exists"
            )

        db_token.revoked = True
        db.commit()

        return TokenService.create_tokens(user, db)

    @staticmethod
    def revoke_token(refresh_token: str, db: Session) -> bool:
        """
        Revokes a refresh token (logout).

        Returns:
            True if a live session was revoked, False if the token was
            malformed, unknown or already revoked
        """
        try:
            payload = jwt.decode(
                refresh_token,
                settings.SECRET_KEY,
                algorithms=[settings.ALGORITHM]
            )
        except JWTError:
            return False

        jti = payload.get("jti")
        if not jti:
            return False

        db_token = db.query(RefreshToken).filter(
            RefreshToken.token_hash == hash_jti(jti),
            RefreshToken.revoked == False
        ).first()

        if not db_token:
            return False

        db_token.revoked = True
        db.commit()
        return True

    @staticmethod
    def revoke_all_user_tokens(user_id: int, db: Session):
        """
        Revokes all refresh tokens for a user (logout from all devices).
        """
        db.query(RefreshToken).filter(
            RefreshToken.user_id == user_id,
            RefreshToken.revoked == False
        ).update({"revoked": True})
        db.commit()
