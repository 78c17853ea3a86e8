import pytest
from fastapi import HTTPException

from schemas.auth_schemas import CreateUserRequest
from services.auth_service import AuthService
from tests.conftest import PASSWORD
from utils.hashing import verify_password, get_password_hash


def test_password_hash_is_salted():
    hashed = get_password_hash(PASSWORD)

    assert hashed != PASSWORD
    assert get_password_hash(PASSWORD) != hashed
    assert verify_password(PASSWORD, hashed) is True
    assert verify_password("Wrong123!", hashed) is False


def test_registration_stores_a_verifiable_hash(session):
    user = AuthService.create_user(CreateUserRequest(
        email="Hash.Check@Example.com",
        first_name="Hash",
        last_name="Check",
        password=PASSWORD,
        phone_number="+201012345678",
    ), session)

    assert user.hashed_password != PASSWORD
    assert verify_password(PASSWORD, user.hashed_password) is True
    assert AuthService.authenticate_user("hash.check@example.com", PASSWORD, session).id == user.id


def test_login_rejects_wrong_password(session, customer):
    with pytest.raises(HTTPException) as exc:
        AuthService.authenticate_user(customer.email, "Wrong123!", session)

    assert exc.value.status_code == 401
