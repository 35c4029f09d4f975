"""Brevo contact tools.

Calls the Brevo v3 REST API directly. Contacts are upserted one at a time
with updateEnabled, so Brevo creates or updates by email.
"""
import logging
from typing import Any, Dict, Optional

from schemas.contact import MappedContact
from tools.http_tools import DEFAULT_DELAY, DEFAULT_RETRIES, DEFAULT_TIMEOUT, fetch_with_retry

logger = logging.getLogger(__name__)

BREVO_BASE = "https://api.brevo.com/v3"


def _headers(api_key: str) -> Dict[str, str]:
    return {
        "api-key": api_key,
        "Content-Type": "application/json",
        "accept": "application/json",
    }


def parse_list_id(value: Any) -> Optional[int]:
    """Return ``value`` as a positive integer list id, or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    text = str(value).strip()
    if not text.isdecimal():
        return None
    list_id = int(text)
    return list_id if list_id > 0 else None


def build_upsert_payload(contact: MappedContact, list_id: Any = None) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "email": contact.email,
        "attributes": dict(contact.attributes),
        "updateEnabled": True,
    }
    parsed = parse_list_id(list_id)
    if parsed is not None:
        payload["listIds"] = [parsed]
    return payload


def brevo_upsert_contact(
    contact: MappedContact,
    api_key: str,
    *,
    list_id: Any = None,
    retries: int = DEFAULT_RETRIES,
    delay: float = DEFAULT_DELAY,
    timeout: float = DEFAULT_TIMEOUT,
) -> Dict[str, Any]:
    """Create or update a Brevo contact keyed by email.

    Args:
        contact: Mapped contact to send.
        api_key: Brevo API key.
        list_id: Optional Brevo list; only sent when it is a positive integer.
        retries: Retry budget for the request.
        delay: Pause between retries, in seconds.
        timeout: Per-request timeout, in seconds.

    Returns:
        Dict with 'email' and 'upserted'; 'id' when Brevo created the
        contact, 'error' when the call failed.
    """
    try:
        data = fetch_with_retry(
            "POST",
            f"{BREVO_BASE}/contacts",
            headers=_headers(api_key),
            json=build_upsert_payload(contact, list_id),
            retries=retries,
            delay=delay,
            timeout=timeout,
        )
        result: Dict[str, Any] = {"email": contact.email, "upserted": True}
        if isinstance(data, dict) and data.get("id") is not None:
            result["id"] = data["id"]
        return result
    except Exception as exc:
        logger.warning("Brevo upsert failed for %s: %s", contact.email, exc)
        return {"email": contact.email, "upserted": False, "error": str(exc)}
