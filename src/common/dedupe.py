"""
Recruiter Deduplication Keys

Single source of truth for the unique key of a recruiter entry.
Recruiters are unique by email address; the key is the trimmed,
lowercased address so that "Jane@Co.com " and "jane@co.com" collide.

Usage:
    from src.common.dedupe import normalize_email, is_valid_email

    key = normalize_email("  Jane.Doe@Acme.COM ")
    # Result: "jane.doe@acme.com"
"""

import re
from typing import Optional

# Basic local@domain.tld shape; not a full RFC 5322 check
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def normalize_email(email: Optional[str]) -> str:
    """
    Normalize an email address for storage and duplicate detection.

    Examples:
        >>> normalize_email("  Jane@Co.COM ")
        'jane@co.com'
        >>> normalize_email(None)
        ''
    """
    if not email:
        return ""
    return email.strip().lower()


def is_valid_email(email: str) -> bool:
    """
    Check an address against the basic local@domain.tld shape.

    Examples:
        >>> is_valid_email("jane@co.com")
        True
        >>> is_valid_email("bad-email")
        False
        >>> is_valid_email("jane@localhost")
        False
    """
    return bool(EMAIL_PATTERN.match(email))


def email_local_part(email: str) -> str:
    """
    Return the part of an address before the `@`.

    Examples:
        >>> email_local_part("jane@co.com")
        'jane'
    """
    return email.split("@", 1)[0]
