"""
Validation rules for the scalar fields of a student record.

Each validate_* function returns the normalised value or raises ValueError
with a user-facing constraint message, so the same rules back both the
pydantic models and the command parser.
"""

import re

NAME_MAX_LENGTH = 70
NAME_CONSTRAINTS = (
    "Names may contain letters (including accents), digits, spaces, quotes (\" and '), "
    f"and commas, must not be blank, must not contain '/', and must be at most "
    f"{NAME_MAX_LENGTH} characters long."
)
NUSNETID_CONSTRAINTS = "NUSNET ID should start with 'E' followed by exactly 7 digits, e.g. E1234567."
PHONE_CONSTRAINTS = "Phone numbers should only contain digits, and be 3 to 15 digits long."
EMAIL_CONSTRAINTS = "Emails should be of the format local-part@domain, e.g. johndoe@u.nus.edu."
TELEGRAM_CONSTRAINTS = (
    "Telegram handles may start with '@' and must contain 5 to 32 letters, digits or underscores."
)
GROUP_ID_CONSTRAINTS = "Group id should be one letter followed by two digits, e.g. T01."

_NAME_EXTRA_CHARS = " \"',"
_NUSNETID_RE = re.compile(r"^E\d{7}$")
_PHONE_RE = re.compile(r"^\d{3,15}$")
_EMAIL_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9+_.\-]*@[A-Za-z0-9\-]+(\.[A-Za-z0-9\-]+)+$")
_TELEGRAM_RE = re.compile(r"^@?[A-Za-z0-9_]{5,32}$")
_GROUP_ID_RE = re.compile(r"^[A-Z]\d{2}$")


def is_valid_name(value: str) -> bool:
    if not value or len(value) > NAME_MAX_LENGTH or value[0] == " ":
        return False
    return all(ch.isalnum() or ch in _NAME_EXTRA_CHARS for ch in value)


def validate_name(value: str) -> str:
    if not is_valid_name(value):
        raise ValueError(NAME_CONSTRAINTS)
    return value


def is_valid_nusnetid(value: str) -> bool:
    return bool(_NUSNETID_RE.match(value.upper()))


def validate_nusnetid(value: str) -> str:
    if not is_valid_nusnetid(value):
        raise ValueError(NUSNETID_CONSTRAINTS)
    return value.upper()


def validate_phone(value: str) -> str:
    if not _PHONE_RE.match(value):
        raise ValueError(PHONE_CONSTRAINTS)
    return value


def validate_email(value: str) -> str:
    if not _EMAIL_RE.match(value):
        raise ValueError(EMAIL_CONSTRAINTS)
    return value


def validate_telegram(value: str) -> str:
    if not _TELEGRAM_RE.match(value):
        raise ValueError(TELEGRAM_CONSTRAINTS)
    return value


def is_valid_group_id(value: str) -> bool:
    return bool(_GROUP_ID_RE.match(value.upper()))


def validate_group_id(value: str) -> str:
    if not is_valid_group_id(value):
        raise ValueError(GROUP_ID_CONSTRAINTS)
    return value.upper()
