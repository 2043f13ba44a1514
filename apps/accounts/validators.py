"""
Field validators and text normalisation shared by the registration
serializer, the role-profile models, and the registration form helper.

The rules mirror the ones the web client applies on every keystroke, so a
payload that passes the client form also passes the API (and vice versa).
"""

import re

from django.core.exceptions import ValidationError
from django.core.validators import EmailValidator

# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------
ALPHA_RE = re.compile(r"^[A-Za-z]+$")
WHITESPACE_RE = re.compile(r"\s+")
NON_ALPHA_OR_SPACE_RE = re.compile(r"[^A-Za-z\s]")
SYMBOL_RE = re.compile(r"[^A-Za-z0-9]")

PASSWORD_MIN_LENGTH = 8

_email_validator = EmailValidator()


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------

def is_alpha_name(value):
    """
    Return True when ``value`` is letters only once whitespace is removed.

    Used for usernames, owner names, specialisations, university
    affiliations and expertise.  ``"Jane Doe"`` passes, ``"Jane123"`` and
    the empty string do not.
    """
    if not isinstance(value, str):
        return False
    return bool(ALPHA_RE.match(WHITESPACE_RE.sub("", value)))


def is_valid_email(value):
    if not isinstance(value, str):
        return False
    try:
        _email_validator(value.strip())
    except ValidationError:
        return False
    return True


def is_strong_password(value):
    """At least 8 characters with an uppercase, lowercase, digit and symbol."""
    if not isinstance(value, str) or len(value) < PASSWORD_MIN_LENGTH:
        return False
    return (
        any(c.isupper() for c in value)
        and any(c.islower() for c in value)
        and any(c.isdigit() for c in value)
        and bool(SYMBOL_RE.search(value))
    )


# ---------------------------------------------------------------------------
# Django validator callables
# ---------------------------------------------------------------------------

def validate_alpha_name(value):
    """Model/serializer validator wrapping :func:`is_alpha_name`."""
    if not is_alpha_name(value):
        raise ValidationError(
            "Only letters and spaces are allowed.", code="invalid_alpha_name"
        )


class StrongPasswordValidator:
    """
    Password validator for ``AUTH_PASSWORD_VALIDATORS``.

    Requires one uppercase letter, one lowercase letter, one number and
    one special character on top of the minimum length.
    """

    def validate(self, password, user=None):
        if not is_strong_password(password):
            raise ValidationError(
                "Password must have at least 8 characters, including one "
                "uppercase letter, one lowercase letter, one number, and "
                "one special character.",
                code="password_not_strong",
            )

    def get_help_text(self):
        return (
            "Your password must contain at least 8 characters, including an "
            "uppercase letter, a lowercase letter, a number and a symbol."
        )


# ---------------------------------------------------------------------------
# Normalisation
# ---------------------------------------------------------------------------

def normalize_expertise_tag(value):
    """
    Canonicalise a single expertise string.

    Non-letter characters are dropped, whitespace is removed entirely and
    the result is re-cased to ``Leading`` form: ``"fine-art "`` becomes
    ``"Fineart"``.  Returns ``""`` when nothing is left.
    """
    cleaned = NON_ALPHA_OR_SPACE_RE.sub("", str(value)).strip()
    cleaned = WHITESPACE_RE.sub("", cleaned)
    return cleaned.capitalize()


def normalize_expertise(values):
    """
    Normalise a string or sequence of strings into a list of expertise tags.

    Tags that normalise to the empty string are dropped; order is kept.
    """
    if values is None:
        return []
    if isinstance(values, str):
        values = [values]
    tags = (normalize_expertise_tag(v) for v in values)
    return [tag for tag in tags if tag]
