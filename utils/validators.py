"""
Input validation helper functions.
Provides validation for request payload values.
"""

from datetime import date, datetime

from email_validator import EmailNotValidError
from email_validator import validate_email as check_email


def validate_email(email: str) -> bool:
    """
    Validate email format.

    Applies the same rules as the sign-in form's ``Email`` validator
    (email-validator, no deliverability lookup), so an address accepted here
    can always sign in.

    Args:
        email: Email address to validate

    Returns:
        True if valid email format
    """
    if not email:
        return False

    try:
        check_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def parse_date_param(date_str: str) -> date | None:
    """
    Parse a YYYY-MM-DD request parameter.

    Returns:
        date, or None when missing or malformed
    """
    if not isinstance(date_str, str):
        return None
    try:
        return datetime.strptime(date_str.strip(), '%Y-%m-%d').date()
    except ValueError:
        return None


def parse_int_param(value, default: int = 0) -> int | None:
    """Parse an integer parameter; None when present but not an integer."""
    if value is None or value == '':
        return default
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def sanitize_input(text, max_length: int = None) -> str:
    """
    Sanitize text input by trimming and limiting length.

    Args:
        text: Text to sanitize (non-strings become '')
        max_length: Maximum length (optional)

    Returns:
        Sanitized text
    """
    if not text or not isinstance(text, str):
        return ''

    sanitized = text.strip()

    if max_length and len(sanitized) > max_length:
        sanitized = sanitized[:max_length]

    return sanitized
