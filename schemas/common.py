from decimal import Decimal
from typing import Annotated
from pydantic import Field, AfterValidator
import phonenumbers

from utils.money import to_money


# Non-negative amount, normalized to two fraction digits
Money = Annotated[Decimal, Field(ge=0, max_digits=12), AfterValidator(to_money)]


def validate_phone_number(value: str | None) -> str | None:
    """
    Validates phone number format using Google's phonenumbers library.
    Accepts international format (+84xxxxxxxxx) and returns it as E.164.
    """
    if value is None or not value.strip():
        return None
    try:
        parsed = phonenumbers.parse(value, None)
        if not phonenumbers.is_valid_number(parsed):
            raise ValueError('Invalid phone number')

        return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.E164)

    except phonenumbers.NumberParseException:
        raise ValueError('Phone number must include country code (e.g.: +84xxxxxxxxx)')
