from utils.hashing import verify_password, get_password_hash
from models.users import User
from schemas.auth_schemas import CreateUserRequest
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from fastapi import HTTPException
from starlette import status
from utils.logger import get_logger

logger = get_logger(__name__)

class AuthService:

    @staticmethod
    def get_user_by_id(db: Session, user_id: int) -> User | None:
        return db.query(User).filter(User.id == user_id).one_or_none()

    @staticmethod
    def get_user_by_username(db: Session, username: str) -> User | None:
        return db.query(User).filter(User.username == username).one_or_none()

    @staticmethod
    def get_user_by_email(db: Session, email: str) -> User | None:
        return db.query(User).filter(User.email == email.lower().strip()).one_or_none()

    @staticmethod
    def create_user(request: CreateUserRequest, db: Session, is_admin: bool = False) -> User:
        """
        Creates a new user.

        Username and email are both unique; either collision is a 400.
        Emails are stored lowercased.
        """
        email = request.email.lower().strip()

        if AuthService.get_user_by_username(db, request.username):
            logger.warning(
                "Registration attempt with existing username",
                extra={"username": request.username}
            )
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Username already taken"
            )

        if AuthService.get_user_by_email(db, email):
            logger.warning(
                "Registration attempt with existing email",
                extra={"email": email}
            )
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email already registered"
            )

        model = User(
            username=request.username,
            email=email,
            hashed_password=get_password_hash(request.password),
            is_admin=is_admin
        )

        db.add(model)
        try:
            db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration
            db.rollback()
            logger.warning(
                "Registration hit a unique constraint",
                extra={"username": request.username, "email": email}
            )
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Username or email already registered"
            )

        db.refresh(model)
        return model


    @staticmethod
    def authenticate_user(login: str, password: str, db: Session) -> User:
        """
        Checks credentials. ``login`` may be either the username or the email.

        Raises:
            HTTPException: 401 for an unknown user or a wrong password
        """
        user = db.query(User).filter(
            or_(User.username == login, User.email == login.lower().strip())
        ).first()

        if not user:
            logger.warning(
                "Login failed - user not found",
                extra={"login": login}
            )
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate user.")

        if not verify_password(password, user.hashed_password):
            logger.warning(
                "Login failed - invalid password",
                extra={"user_id": user.id}
            )
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate user.")

        logger.debug(
            "User authenticated successfully",
            extra={"user_id": user.id}
        )

        return user
