"""
Postal-code lookup client.

Resolves a 6-digit postal code into district / state / country so the
registration flow can auto-fill an institution's or service provider's
location.  The lookup service is an external collaborator: failures are
logged and reported as ``PostalLookupError`` or ``None``, never retried.
"""

import logging

import requests
from django.conf import settings

logger = logging.getLogger(__name__)

POSTAL_CODE_LENGTH = 6


class PostalLookupError(Exception):
    """Raised when the lookup service cannot be reached or answers garbage."""


def lookup_postal_code(postal_code):
    """
    Look up ``postal_code`` against the configured service.

    Returns
    -------
    dict | None
        ``{"district", "state", "country"}`` on success, ``None`` when the
        service reports no match for the code.

    Raises
    ------
    PostalLookupError
        On transport errors, HTTP errors, or an unexpected payload.
    """
    postal_code = str(postal_code or "").strip()
    if len(postal_code) != POSTAL_CODE_LENGTH:
        return None

    base_url = settings.POSTAL_LOOKUP_URL.rstrip("/")
    try:
        response = requests.get(
            f"{base_url}/{postal_code}",
            timeout=settings.POSTAL_LOOKUP_TIMEOUT,
        )
        response.raise_for_status()
        payload = response.json()
    except (requests.RequestException, ValueError) as exc:
        logger.error("Postal lookup failed for %s: %s", postal_code, exc)
        raise PostalLookupError("Postal code lookup failed.") from exc

    result = payload[0] if isinstance(payload, list) and payload else None
    if not isinstance(result, dict):
        logger.error("Unexpected postal lookup payload for %s: %r", postal_code, payload)
        raise PostalLookupError("Postal code lookup returned an unexpected payload.")

    if result.get("Status") != "Success" or not result.get("PostOffice"):
        logger.info("No postal match for %s: %s", postal_code, result.get("Message"))
        return None

    place = result["PostOffice"][0]
    return {
        "district": place.get("District", ""),
        "state": place.get("State", ""),
        "country": settings.POSTAL_LOOKUP_COUNTRY,
    }


def autofill_location(location):
    """
    Fill blank district/state/country in ``location`` from its postal code.

    ``location`` uses the wire keys (``postalCode``, ``district`` ...).
    Returns a new dict; the input is left untouched.  Lookup failures are
    logged and the location is returned as given.
    """
    filled = dict(location or {})
    missing = [k for k in ("district", "state", "country") if not str(filled.get(k) or "").strip()]
    if not missing:
        return filled

    try:
        place = lookup_postal_code(filled.get("postalCode"))
    except PostalLookupError:
        return filled
    if place is None:
        return filled

    for key in missing:
        filled[key] = place[key]
    return filled
