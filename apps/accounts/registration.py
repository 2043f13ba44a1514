"""
Role-aware registration form logic.

This is the state machine the web client runs before it calls
``POST /api/v1/auth/register/``: per-field validation on change, the
required-field set for the selected role, the "can submit" rule, and the
reshaping of flat form state into the nested registration payload.  The
registration serializer checks submitted role data against the same
required-field sets through :func:`missing_fields`.

Form state uses the wire field names.  Location fields are addressed with
a ``location.`` prefix, e.g. ``location.postalCode``.
"""

import logging

from .models import User
from .postal import POSTAL_CODE_LENGTH, PostalLookupError, lookup_postal_code
from .validators import is_alpha_name, is_strong_password, is_valid_email

logger = logging.getLogger(__name__)

ROLES = tuple(User.Role.values)

BASE_FIELDS = ("userName", "email", "password", "role")

LOCATION_FIELDS = ("address", "postalCode", "district", "state", "country")

ROLE_REQUIRED_FIELDS = {
    User.Role.ARTIST: ("artForm", "specialisation"),
    User.Role.VIEWER_STUDENT: ("artForm",),
    User.Role.INSTITUTION: (
        "universityAffiliation",
        "registrationID",
        "location.postalCode",
        "location.district",
        "location.state",
        "location.country",
    ),
    User.Role.SERVICE_PROVIDER: (
        "ownerName",
        "expertise",
        "location.address",
        "location.postalCode",
        "location.district",
        "location.state",
        "location.country",
    ),
}

# The payload carries exactly the required fields of each role.
ROLE_PAYLOAD_FIELDS = ROLE_REQUIRED_FIELDS

ROLE_SPECIFIC_FIELDS = (
    "artForm",
    "specialisation",
    "expertise",
    "ownerName",
    "universityAffiliation",
    "registrationID",
) + tuple(f"location.{name}" for name in LOCATION_FIELDS)

ALPHA_FIELD_MESSAGES = {
    "userName": "Username should only contain letters and spaces.",
    "specialisation": "Specialisation should only contain letters and spaces.",
    "ownerName": "Owner name should only contain letters and spaces.",
    "universityAffiliation": "University Affiliation should only contain letters and spaces.",
    "expertise": "Expertise should only contain letters and spaces.",
}

EMAIL_MESSAGE = "Invalid email address."
PASSWORD_MESSAGE = (
    "Password must have at least 8 characters, including one uppercase "
    "letter, one lowercase letter, one number, and one special character."
)
CONFIRM_MESSAGE = "Passwords do not match."
REQUIRED_MESSAGE = "This field is required."


class InvalidRoleError(ValueError):
    """Raised when a role outside the fixed enumeration is submitted."""


# ---------------------------------------------------------------------------
# Pure rules
# ---------------------------------------------------------------------------

def validate_field(name, value, form=None):
    """Return the validation message for ``name``, or ``""`` when valid."""
    form = form or {}
    if name in ALPHA_FIELD_MESSAGES:
        return "" if is_alpha_name(value) else ALPHA_FIELD_MESSAGES[name]
    if name == "email":
        return "" if is_valid_email(value) else EMAIL_MESSAGE
    if name == "password":
        return "" if is_strong_password(value) else PASSWORD_MESSAGE
    if name == "confirmPassword":
        return "" if value == form.get("password") else CONFIRM_MESSAGE
    return ""


def required_fields(role):
    """Role-specific required fields; an unknown role requires nothing extra."""
    return ROLE_REQUIRED_FIELDS.get(role, ())


def _filled(value):
    if value is None:
        return False
    if isinstance(value, (list, tuple)):
        return any(str(v).strip() for v in value)
    return str(value).strip() != ""


def can_submit(form, errors=None):
    """
    True when the role is known, every base and role-required field is
    non-empty, and no field currently holds a validation error.
    """
    errors = errors or {}
    if form.get("role") not in ROLES:
        return False
    fields = BASE_FIELDS + tuple(required_fields(form.get("role")))
    if not all(_filled(form.get(field)) for field in fields):
        return False
    return all(not message for message in errors.values())


def flatten_additional_data(additional):
    """
    Flatten an ``additionalData`` object into form keys.

    Entries of the nested ``location`` object gain a ``location.`` prefix.
    """
    additional = additional or {}
    flat = {key: value for key, value in additional.items() if key != "location"}
    location = additional.get("location")
    if isinstance(location, dict):
        flat.update({f"location.{key}": value for key, value in location.items()})
    return flat


def missing_fields(role, additional):
    """Required fields of ``role`` that are blank in ``additional``."""
    values = flatten_additional_data(additional)
    return [field for field in required_fields(role) if not _filled(values.get(field))]


def build_payload(form):
    """
    Reshape flat form state into the nested registration payload.

    Raises
    ------
    InvalidRoleError
        If the form's role is not one of :data:`ROLES`.
    """
    role = form.get("role")
    if role not in ROLES:
        raise InvalidRoleError(f"Invalid role: {role!r}")

    additional = {}
    for field in ROLE_PAYLOAD_FIELDS[role]:
        if field.startswith("location."):
            key = field.split(".", 1)[1]
            additional.setdefault("location", {})[key] = form.get(field, "")
        else:
            additional[field] = form.get(field, "")

    return {
        "userName": form.get("userName", ""),
        "email": form.get("email", ""),
        "password": form.get("password", ""),
        "role": role,
        "additionalData": additional,
    }


# ---------------------------------------------------------------------------
# Stateful form
# ---------------------------------------------------------------------------
class RegistrationForm:
    """
    Mutable registration form with on-change validation.

    ``postal_lookup`` is called with the postal code once it reaches six
    characters; it must return ``{"district", "state", "country"}`` or
    ``None``.  Defaults to the live lookup client.
    """

    def __init__(self, postal_lookup=lookup_postal_code):
        self.values = {name: "" for name in BASE_FIELDS + ("confirmPassword",)}
        self.values.update({name: "" for name in ROLE_SPECIFIC_FIELDS})
        self.errors = {}
        self._postal_lookup = postal_lookup

    def set_field(self, name, value):
        self.values[name] = value
        self.errors[name] = validate_field(name, value, self.values)
        if name == "location.postalCode" and len(str(value or "")) == POSTAL_CODE_LENGTH:
            self._autofill_location(value)
        return self.errors[name]

    def change_role(self, role):
        """Select a role, clearing every role-specific value and error."""
        self.values["role"] = role
        for name in ROLE_SPECIFIC_FIELDS:
            self.values[name] = ""
            self.errors.pop(name, None)

    def _autofill_location(self, postal_code):
        try:
            place = self._postal_lookup(postal_code)
        except PostalLookupError as exc:
            logger.warning("Postal auto-fill skipped for %s: %s", postal_code, exc)
            return
        if not place:
            return
        for key in ("district", "state", "country"):
            self.values[f"location.{key}"] = place[key]

    @property
    def required_fields(self):
        return required_fields(self.values.get("role"))

    def can_submit(self):
        return can_submit(self.values, self.errors)

    def payload(self):
        return build_payload(self.values)
