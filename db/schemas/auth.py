import re
from typing import Optional

from pydantic import BaseModel, field_validator

from utils import resp_msgs
from utils.config import OTP_LENGTH
from utils.exceptions import InvalidPhoneNumber
from utils.phone import normalize_phone_number, to_ascii_digits


def _normalized_phone(value: str) -> str:
    try:
        return normalize_phone_number(value.strip())
    except InvalidPhoneNumber:
        raise ValueError(resp_msgs.INVALID_PHONE_NUMBER)


class OtpRequest(BaseModel):
    phone_number: str

    @field_validator("phone_number")
    @classmethod
    def validate_phone_number(cls, value: str) -> str:
        return _normalized_phone(value)


class OtpLogin(BaseModel):
    phone_number: str
    otp: str

    @field_validator("phone_number")
    @classmethod
    def validate_phone_number(cls, value: str) -> str:
        return _normalized_phone(value)

    @field_validator("otp", mode="before")
    @classmethod
    def validate_otp(cls, value):
        if isinstance(value, int) and not isinstance(value, bool):
            value = str(value)
        if not isinstance(value, str):
            raise ValueError("The otp field must be a string of digits.")
        value = to_ascii_digits(value.strip())
        if not re.fullmatch(r"[0-9]{%d}" % OTP_LENGTH, value):
            raise ValueError(f"The otp field must be {OTP_LENGTH} digits.")
        return value


class OtpRequestResponse(BaseModel):
    message: str
    otp_for_testing: Optional[str] = None
