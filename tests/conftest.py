import os

# Settings are read at import time; pin the test environment first
os.environ["ENV"] = "testing"
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("LOG_DIR", "logs/test")

import pytest
from decimal import Decimal
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from typing import Generator

from main import app
from core.database import Base
from models.users import User
from models.products import Product
from services.token_service import TokenService
from utils.deps import get_db
from utils.hashing import get_password_hash

# SYNC SQLite for testing (matches sync service layer)
SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

TEST_PASSWORD = "TestPassword123!"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False}
)

TestingSessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)


@pytest.fixture
def session() -> Generator[Session, None, None]:
    """
    Creates a fresh, empty database for each test.
    """
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory(session):
    """
    Makes extra sessions on the test database, one per thread.
    """
    return TestingSessionLocal


@pytest.fixture
async def client(session: Session):
    """
    Yields an HTTP client that talks to the app using the test session.
    """
    def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


def _make_user(session: Session, username: str, is_admin: bool = False) -> User:
    user = User(
        username=username,
        email=f"{username}@example.com",
        hashed_password=get_password_hash(TEST_PASSWORD),
        is_admin=is_admin
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def _make_product(session: Session, name: str, price: str = "10.00", stock: int = 5,
                  category: str = "electronics") -> Product:
    product = Product(
        name=name,
        description=f"A {name.lower()}",
        price=Decimal(price),
        stock=stock,
        image_url=f"https://img.example.com/{name.lower().replace(' ', '-')}.png",
        category=category
    )
    session.add(product)
    session.commit()
    session.refresh(product)
    return product


def _auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {TokenService.create_access_token(user)}"}


@pytest.fixture
def customer(session) -> User:
    return _make_user(session, "shopper")


@pytest.fixture
def other_customer(session) -> User:
    return _make_user(session, "browser")


@pytest.fixture
def admin_user(session) -> User:
    return _make_user(session, "boss", is_admin=True)


@pytest.fixture
def customer_headers(customer) -> dict:
    return _auth_headers(customer)


@pytest.fixture
def admin_headers(admin_user) -> dict:
    return _auth_headers(admin_user)


@pytest.fixture
def walkman(session) -> Product:
    return _make_product(session, "Walkman", price="10.00")


@pytest.fixture
def cassette(session) -> Product:
    return _make_product(session, "Mixtape Cassette", price="5.00", category="music")


@pytest.fixture
def user_factory(session):
    def factory(username: str, is_admin: bool = False) -> User:
        return _make_user(session, username, is_admin=is_admin)
    return factory


@pytest.fixture
def product_factory(session):
    def factory(name: str, price: str = "10.00", stock: int = 5, category: str = "electronics") -> Product:
        return _make_product(session, name, price=price, stock=stock, category=category)
    return factory


@pytest.fixture
def headers_for():
    return _auth_headers
