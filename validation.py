"""
Field checks shared by the registration and profile-update payloads.

Each check takes the raw value plus the label used in its error message,
returns the cleaned value, and raises ValueError when the value is rejected.
"""

import re
from datetime import date, datetime
from typing import Optional

from email_validator import EmailNotValidError, validate_email

USERNAME_MIN_LENGTH = 3
PASSWORD_MIN_LENGTH = 8


def check_username(value: str, label: str = "Username") -> str:
    value = value.strip()
    if len(value) < USERNAME_MIN_LENGTH:
        raise ValueError(f"{label} must be at least {USERNAME_MIN_LENGTH} characters")
    return value


def check_email(value: str, label: str = "Email") -> str:
    try:
        result = validate_email(value.strip(), check_deliverability=False)
    except EmailNotValidError:
        raise ValueError(f"{label} must be a valid email")
    return result.normalized.lower()


def check_password(value: str, label: str = "Password") -> str:
    problems = []
    if len(value) < PASSWORD_MIN_LENGTH:
        problems.append(f"{label} must be at least {PASSWORD_MIN_LENGTH} characters")
    if not re.search(r"[A-Z]", value):
        problems.append(f"{label} must include an uppercase letter")
    if not re.search(r"[a-z]", value):
        problems.append(f"{label} must include a lowercase letter")
    if not re.search(r"[0-9]", value):
        problems.append(f"{label} must include a number")
    if problems:
        raise ValueError("; ".join(problems))
    return value


def check_birthday(value, label: str = "Birthday") -> Optional[datetime]:
    # falsy values mean the field was left out
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        raise ValueError(f"{label} must be an ISO date (YYYY-MM-DD)")
    try:
        parsed = date.fromisoformat(value)
        return datetime(parsed.year, parsed.month, parsed.day)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise ValueError(f"{label} must be an ISO date (YYYY-MM-DD)")
