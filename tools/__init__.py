from .http_tools import HttpStatusError, fetch_with_retry
from .churchsuite_tools import churchsuite_contacts_url, churchsuite_fetch_contacts
from .contact_mapping import map_contact, resolve_email, join_address, to_e164
from .brevo_tools import brevo_upsert_contact, build_upsert_payload, parse_list_id

__all__ = [
    "HttpStatusError", "fetch_with_retry",
    "churchsuite_contacts_url", "churchsuite_fetch_contacts",
    "map_contact", "resolve_email", "join_address", "to_e164",
    "brevo_upsert_contact", "build_upsert_payload", "parse_list_id",
]
