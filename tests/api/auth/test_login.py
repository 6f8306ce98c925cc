from jose import jwt
from core.config import settings

PASSWORD = "TestPassword123!"


async def test_login_with_username(client, customer):
    response = await client.post("/api/login", data={
        "username": customer.username,
        "password": PASSWORD
    })

    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["user"]["id"] == customer.id

    payload = jwt.decode(data["access_token"], settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    assert payload["id"] == customer.id
    assert payload["username"] == customer.username
    assert payload["is_admin"] is False
    assert payload["type"] == "access"


async def test_login_with_email(client, customer):
    response = await client.post("/api/login", data={
        "username": customer.email,
        "password": PASSWORD
    })

    assert response.status_code == 200


async def test_login_admin_token_has_flag(client, admin_user):
    response = await client.post("/api/login", data={
        "username": admin_user.username,
        "password": PASSWORD
    })

    payload = jwt.decode(response.json()["access_token"], settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    assert payload["is_admin"] is True
    assert response.json()["user"]["isAdmin"] is True


async def test_login_wrong_password(client, customer):
    response = await client.post("/api/login", data={
        "username": customer.username,
        "password": "WrongPassword123!"
    })

    assert response.status_code == 401
    assert "could not validate user" in response.json()["detail"].lower()


async def test_login_nonexistent_user(client):
    response = await client.post("/api/login", data={
        "username": "ghost",
        "password": PASSWORD
    })

    assert response.status_code == 401
