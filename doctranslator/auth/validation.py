"""Client-side validation of the sign-in and sign-up forms."""

import re

from doctranslator.auth.exceptions import InvalidInputError

_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_MIN_PASSWORD_LENGTH = 8
_MIN_USERNAME_LENGTH = 3


def is_valid_email(email: str) -> bool:
    return bool(_EMAIL_PATTERN.match(email.strip()))


def password_problem(password: str) -> str | None:
    """Return a human-readable reason the password is too weak, or None."""
    if len(password) < _MIN_PASSWORD_LENGTH:
        return f"Password must be at least {_MIN_PASSWORD_LENGTH} characters long"
    if not any(ch.isdigit() for ch in password):
        return "Password must include at least one number"
    return None


def validate_sign_in(email: str, password: str) -> None:
    """Check the sign-in form.

    Raises:
        InvalidInputError: on a malformed email or weak password.
    """
    _require_email(email)
    _require_password(password)


def validate_sign_up(
    email: str,
    password: str,
    confirm_password: str,
    username: str,
) -> None:
    """Check the sign-up form in the order the user fills it in.

    Raises:
        InvalidInputError: on the first failing field.
    """
    _require_email(email)
    _require_password(password)
    if password != confirm_password:
        raise InvalidInputError("Passwords do not match")
    if not username.strip():
        raise InvalidInputError("Username is required")
    if len(username.strip()) < _MIN_USERNAME_LENGTH:
        raise InvalidInputError(
            f"Username must be at least {_MIN_USERNAME_LENGTH} characters long"
        )


def _require_email(email: str) -> None:
    if not is_valid_email(email):
        raise InvalidInputError("Please enter a valid email address")


def _require_password(password: str) -> None:
    problem = password_problem(password)
    if problem is not None:
        raise InvalidInputError(problem)
