"""ChurchSuite address book tools.

Calls the ChurchSuite REST API directly (no official Python SDK). Listing is
paginated; both pagination signals are honoured because v1 and v2 of the API
do not report them consistently.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional

from tools.http_tools import DEFAULT_DELAY, DEFAULT_RETRIES, DEFAULT_TIMEOUT, fetch_with_retry

logger = logging.getLogger(__name__)

API_VERSIONS = ("v1", "v2")
NEXT_PAGE_FIELDS = ("next_page", "nextPage")
DEFAULT_MAX_PAGES = 500


def churchsuite_contacts_url(domain: str, api_version: str = "v1") -> str:
    """Return the contacts list endpoint for a ChurchSuite account domain."""
    if api_version not in API_VERSIONS:
        raise ValueError(f"Unsupported ChurchSuite API version: {api_version!r}")
    return f"https://{domain}/api/{api_version}/addressbook/contacts"


def _joined(values: Optional[Iterable[Any]]) -> Optional[str]:
    items = [str(v).strip() for v in (values or []) if str(v).strip()]
    return ",".join(items) if items else None


def _has_more(pagination: Dict[str, Any], page: int) -> bool:
    total_pages = pagination.get("total_pages")
    if total_pages is not None:
        try:
            if page < int(total_pages):
                return True
        except (TypeError, ValueError):
            logger.warning("Ignoring non-numeric total_pages: %r", total_pages)
    return any(pagination.get(field) for field in NEXT_PAGE_FIELDS)


def churchsuite_fetch_contacts(
    domain: str,
    api_key: str,
    *,
    tags: Optional[List[str]] = None,
    site_ids: Optional[List[str]] = None,
    api_version: str = "v1",
    retries: int = DEFAULT_RETRIES,
    delay: float = DEFAULT_DELAY,
    timeout: float = DEFAULT_TIMEOUT,
    max_pages: int = DEFAULT_MAX_PAGES,
) -> List[Dict[str, Any]]:
    """Drain every page of the ChurchSuite contacts list.

    Args:
        domain: Account domain (e.g. mychurch.churchsuite.com).
        api_key: ChurchSuite API key, sent as the X-Auth header.
        tags: Optional tag filter, sent comma-joined.
        site_ids: Optional site filter, sent comma-joined.
        api_version: "v1" or "v2".
        retries: Retry budget per page request.
        delay: Pause between retries, in seconds.
        timeout: Per-request timeout, in seconds.
        max_pages: Stop after this many pages even if more are advertised.

    Returns:
        All contact records, in page order.

    Raises:
        The last request failure once a page has exhausted its retries.
    """
    url = churchsuite_contacts_url(domain, api_version)
    headers = {"X-Auth": api_key}
    filters: Dict[str, Any] = {}
    tags_param = _joined(tags)
    if tags_param:
        filters["tags"] = tags_param
    sites_param = _joined(site_ids)
    if sites_param:
        filters["site_ids"] = sites_param

    contacts: List[Dict[str, Any]] = []
    page = 1
    while True:
        data = fetch_with_retry(
            "GET",
            url,
            headers=headers,
            params={**filters, "page": page},
            retries=retries,
            delay=delay,
            timeout=timeout,
        )
        results = data.get("results") or []
        contacts.extend(results)
        logger.info("ChurchSuite page %d: %d contacts", page, len(results))

        if not _has_more(data.get("pagination") or {}, page):
            break
        if page >= max_pages:
            logger.warning("Stopped ChurchSuite pagination at max_pages=%d", max_pages)
            break
        page += 1

    return contacts
