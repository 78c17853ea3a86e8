from services.token_service import TokenService
from jose import jwt, JWTError
from core.config import settings
from datetime import timedelta
from time import sleep
import pytest

def test_access_token_creation():
    test_token = TokenService.create_access_token(email="user@example.com", user_id=1, role="customer")
    assert test_token

    payload = jwt.decode(test_token, key=settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    assert payload["sub"] == "user@example.com"
    assert payload["id"] == 1
    assert payload["role"] == "customer"
    assert payload["type"] == "access"
    assert payload["exp"]


def test_token_response_shape():
    response = TokenService.create_token_response("staff@example.com", 7, "staff")

    assert response["token_type"] == "bearer"
    payload = jwt.decode(response["access_token"], key=settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    assert payload["role"] == "staff"
    assert payload["id"] == 7


def test_token_expiration():
    access_token = TokenService.create_access_token(
        email="user@example.com",
        user_id=1,
        role="customer",
        expires_delta=timedelta(seconds=1)
    )

    sleep(2)  # ensure expiration

    with pytest.raises(JWTError):
        jwt.decode(
            access_token,
            key=settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM]
        )
