"""Map ChurchSuite contact records onto Brevo contact attributes.

ChurchSuite returns snake_case fields from one API version and camelCase from
the other, so every Brevo attribute is read from an ordered list of source
spellings: the first non-empty value wins.
"""
import logging
import re
from typing import Any, Dict, Iterable, List, Optional, Tuple

from schemas.contact import MappedContact

logger = logging.getLogger(__name__)

# Brevo rejects an SMS attribute that is not E.164.
E164_PATTERN = re.compile(r"^\+[1-9]\d{6,14}$")
PHONE_PUNCTUATION = re.compile(r"[\s().\-]")

EMAIL_FIELDS = ("email", "emailAddress")
EMAIL_COLLECTION_FIELD = "emails"
EMAIL_ENTRY_FIELDS = ("address", "email", "value")
DEFAULT_FLAG_FIELDS = ("is_default", "isDefault", "default", "primary")

ADDRESS_LINE_FIELDS: Tuple[Tuple[str, ...], ...] = (
    ("address", "address1", "address_line_1", "addressLine1", "line1"),
    ("address2", "address_line_2", "addressLine2", "line2"),
    ("address3", "address_line_3", "addressLine3", "line3"),
    ("address4", "address_line_4", "addressLine4", "line4"),
)

ATTRIBUTE_SOURCES: Dict[str, Tuple[str, ...]] = {
    "FIRSTNAME": ("first_name", "firstName", "forename"),
    "LASTNAME": ("last_name", "lastName", "surname"),
    "SMS": ("mobile", "mobile_number", "mobileNumber"),
    "TELEPHONE": ("telephone", "phone", "telephone_number", "telephoneNumber"),
    "CITY": ("city", "town"),
    "COUNTY": ("county", "state"),
    "POSTCODE": ("postcode", "postal_code", "postalCode", "zip"),
    "COUNTRY": ("country",),
    "DATE_OF_BIRTH": ("date_of_birth", "dateOfBirth"),
    "SEX": ("sex", "gender"),
    "CHURCHSUITE_ID": ("id", "contact_id", "contactId"),
}


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _clean(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def first_present(record: Dict[str, Any], fields: Iterable[str]) -> Any:
    """Return the first non-blank scalar among ``fields`` of ``record``."""
    for field in fields:
        value = record.get(field)
        if isinstance(value, (dict, list)):
            continue
        if not _is_blank(value):
            return _clean(value)
    return None


def _entry_address(entry: Any) -> Optional[str]:
    if isinstance(entry, str):
        value = entry
    elif isinstance(entry, dict):
        value = first_present(entry, EMAIL_ENTRY_FIELDS)
    else:
        return None
    if _is_blank(value):
        return None
    return str(value).strip()


def to_e164(value: Any) -> Optional[str]:
    """Return ``value`` as an E.164 number (00 prefix becomes +), or None."""
    if _is_blank(value):
        return None
    number = PHONE_PUNCTUATION.sub("", str(value))
    if number.startswith("00"):
        number = "+" + number[2:]
    return number if E164_PATTERN.match(number) else None


def resolve_email(source: Dict[str, Any]) -> Optional[str]:
    """Resolve the join-key email for a source contact.

    Order: direct field, then the default entry of the nested email
    collection, then its first entry. Returns a lower-cased address or None.
    """
    email = first_present(source, EMAIL_FIELDS)
    if email is None:
        entries = source.get(EMAIL_COLLECTION_FIELD)
        if isinstance(entries, list) and entries:
            defaults = [
                e for e in entries
                if isinstance(e, dict) and any(e.get(f) for f in DEFAULT_FLAG_FIELDS)
            ]
            for candidate in defaults + entries[:1]:
                email = _entry_address(candidate)
                if email:
                    break
    if _is_blank(email):
        return None
    return str(email).strip().lower()


def join_address(source: Dict[str, Any]) -> Optional[str]:
    """Join the present address lines 1-4 with ", " in line order."""
    nested = source.get("address")
    holders: List[Dict[str, Any]] = [source]
    if isinstance(nested, dict):
        holders.insert(0, nested)

    lines = []
    for fields in ADDRESS_LINE_FIELDS:
        for holder in holders:
            line = first_present(holder, fields)
            if line is not None:
                lines.append(str(line))
                break
    return ", ".join(lines) if lines else None


def map_contact(source: Dict[str, Any]) -> Optional[MappedContact]:
    """Map one ChurchSuite record to a Brevo contact, or None without an email."""
    email = resolve_email(source)
    if not email:
        return None

    nested = source.get("address") if isinstance(source.get("address"), dict) else {}
    attributes: Dict[str, Any] = {}
    for attribute, fields in ATTRIBUTE_SOURCES.items():
        value = first_present(source, fields)
        if value is None and nested:
            value = first_present(nested, fields)
        attributes[attribute] = value
    attributes["ADDRESS"] = join_address(source)

    mobile = attributes["SMS"]
    attributes["SMS"] = to_e164(mobile)
    if attributes["SMS"] is None and attributes["TELEPHONE"] is None:
        attributes["TELEPHONE"] = mobile

    return MappedContact(
        email=email,
        attributes={k: v for k, v in attributes.items() if not _is_blank(v)},
    )
