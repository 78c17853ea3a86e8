from jose import jwt

from core.config import settings
from models.users import User
from tests.conftest import PASSWORD


async def test_register_customer(client, session):
    response = await client.post("/auth/", json={
        "email": "New.User@Example.com",
        "first_name": "New",
        "last_name": "User",
        "password": "Password123",
        "phone_number": "+201012345678",
    })

    assert response.status_code == 201
    user = session.query(User).filter(User.email == "new.user@example.com").one()
    assert user.role == "customer"
    assert user.hashed_password != "Password123"


async def test_register_duplicate_email(client, customer):
    response = await client.post("/auth/", json={
        "email": customer.email,
        "first_name": "Again",
        "last_name": "User",
        "password": "Password123",
        "phone_number": "+201012345678",
    })

    assert response.status_code == 400


async def test_register_weak_password(client):
    response = await client.post("/auth/", json={
        "email": "weak@example.com",
        "first_name": "Weak",
        "last_name": "User",
        "password": "short",
        "phone_number": "+201012345678",
    })

    assert response.status_code == 422


async def test_login_success(client, customer):
    response = await client.post("/auth/token", data={"username": customer.email, "password": PASSWORD})

    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"

    payload = jwt.decode(data["access_token"], settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    assert payload["id"] == customer.id
    assert payload["role"] == "customer"
    assert payload["type"] == "access"


async def test_login_wrong_password(client, customer):
    response = await client.post("/auth/token", data={"username": customer.email, "password": "Wrong123!"})

    assert response.status_code == 401
    assert "could not validate user" in response.json()["detail"].lower()


async def test_inactive_user_cannot_login(client, session, customer):
    customer.is_active = False
    session.commit()

    response = await client.post("/auth/token", data={"username": customer.email, "password": PASSWORD})

    assert response.status_code == 401


async def test_missing_token_is_unauthorized(client):
    response = await client.get("/api/customer/cart")

    assert response.status_code == 401


async def test_garbage_token_is_unauthorized(client):
    response = await client.get("/api/customer/cart", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401


async def test_staff_cannot_use_customer_endpoints(client, staff_headers):
    response = await client.get("/api/customer/cart", headers=staff_headers)

    assert response.status_code == 403


async def test_customer_cannot_use_staff_endpoints(client, customer_headers):
    response = await client.get("/api/order", headers=customer_headers)

    assert response.status_code == 403
