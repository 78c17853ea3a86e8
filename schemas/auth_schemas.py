from pydantic import BaseModel, EmailStr, field_validator
import re

from schemas.common import validate_phone_number


class Token(BaseModel):
    access_token: str
    token_type: str


class CreateUserRequest(BaseModel):
    email: EmailStr
    first_name: str
    last_name: str
    password: str
    phone_number: str
    address: str | None = None

    @field_validator('password')
    @classmethod
    def validate_password(cls, value):
        """
        Password must be at least 8 characters and contain:
        - At least one letter
        - At least one digit
        """
        if len(value) < 8:
            raise ValueError('Password must be at least 8 characters')

        if not re.search(r'[A-Za-z]', value):
            raise ValueError('Password must contain at least one letter')

        if not re.search(r'\d', value):
            raise ValueError('Password must contain at least one digit')

        return value

    @field_validator('phone_number')
    @classmethod
    def validate_phone(cls, value):
        phone = validate_phone_number(value)
        if phone is None:
            raise ValueError('Phone number is required')
        return phone
