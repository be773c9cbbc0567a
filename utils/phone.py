import re

from utils.exceptions import InvalidPhoneNumber

CANONICAL_PATTERN = re.compile(r"^989[0-9]{9}$")

# Persian (U+06F0..) and Arabic-Indic (U+0660..) digits typed on local keyboards
LOCAL_DIGITS = str.maketrans("۰۱۲۳۴۵۶۷۸۹٠١٢٣٤٥٦٧٨٩", "01234567890123456789")


def to_ascii_digits(value: str) -> str:
    return value.translate(LOCAL_DIGITS)


def normalize_phone_number(phone_number: str) -> str:
    """
        Bring a user supplied Iranian mobile number into +989XXXXXXXXX form.
        Accepts 09..., 9..., 989..., +989... and 00989..., with or without
        separators, in ASCII, Persian or Arabic-Indic digits.
        :param phone_number: raw input
        :return: canonical phone number
        :raises InvalidPhoneNumber: when the digits do not form a mobile number
    """
    if not isinstance(phone_number, str):
        raise InvalidPhoneNumber(phone_number)

    cleaned = re.sub(r"[^0-9+]", "", to_ascii_digits(phone_number))

    if cleaned.startswith("00"):
        cleaned = cleaned[2:]

    cleaned = cleaned.lstrip("+")

    if cleaned.startswith("09"):
        cleaned = "98" + cleaned[1:]
    elif cleaned.startswith("9") and len(cleaned) == 10:
        cleaned = "98" + cleaned

    if not CANONICAL_PATTERN.match(cleaned):
        raise InvalidPhoneNumber(phone_number)

    return f"+{cleaned}"
