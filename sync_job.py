"""ChurchSuite → Brevo contact sync.

Entry point for one sync invocation:
  1. Validate configuration (fails before any network call)
  2. Fetch every ChurchSuite contact page
  3. Map each contact to Brevo attributes (contacts without email are skipped)
  4. Upsert mapped contacts into Brevo one at a time

Usage:
  # Full sync
  python sync_job.py run --list-id 7 --tags members,visitors

  # Fetch and map only, nothing is written to Brevo
  python sync_job.py preview --site-ids 1,2
"""
import argparse
import json
import logging
import sys
import traceback
from typing import Any, Dict, Optional, Tuple

from schemas.contact import SyncResult
from sync_config import ConfigError, SyncConfig, load_config
from tools.brevo_tools import brevo_upsert_contact
from tools.churchsuite_tools import churchsuite_fetch_contacts
from tools.contact_mapping import map_contact, resolve_email

logger = logging.getLogger(__name__)


def run_sync(config: SyncConfig, *, dry_run: bool = False) -> SyncResult:
    """Run one fetch → map → upsert pass and return its summary."""
    config.validate_required(require_target=not dry_run)

    contacts = churchsuite_fetch_contacts(
        config.churchsuite_domain,
        config.churchsuite_api_key,
        tags=config.tags,
        site_ids=config.site_ids,
        api_version=config.api_version,
        retries=config.retries,
        delay=config.retry_delay,
        timeout=config.timeout,
    )
    result = SyncResult(fetched=len(contacts))
    logger.info("Fetched %d contacts from %s", result.fetched, config.churchsuite_domain)

    for source in contacts:
        if not isinstance(source, dict):
            result.record_failure(None, f"unexpected contact record: {type(source).__name__}")
            continue
        try:
            mapped = map_contact(source)
        except Exception as exc:
            logger.warning("Could not map contact %r: %s", source.get("id"), exc, exc_info=True)
            result.record_failure(resolve_email(source), f"mapping failed: {exc}")
            continue

        if mapped is None:
            result.skipped += 1
            continue
        if dry_run:
            logger.info("Would upsert %s with %d attributes", mapped.email, len(mapped.attributes))
            continue

        outcome = brevo_upsert_contact(
            mapped,
            config.brevo_api_key,
            list_id=config.brevo_list_id,
            retries=config.retries,
            delay=config.retry_delay,
            timeout=config.timeout,
        )
        if outcome.get("upserted"):
            result.upserted += 1
        else:
            result.record_failure(mapped.email, outcome.get("error", "unknown error"))

    logger.info(
        "Sync done: fetched=%d upserted=%d failed=%d skipped=%d",
        result.fetched, result.upserted, result.failed, result.skipped,
    )
    return result


def handle_invocation(
    overrides: Optional[Dict[str, Any]] = None,
    *,
    dry_run: bool = False,
    env_file: Optional[str] = None,
) -> Tuple[int, Dict[str, Any]]:
    """Run a sync and return (status_code, response body)."""
    config: Optional[SyncConfig] = None
    try:
        config = load_config(overrides, env_file=env_file)
        result = run_sync(config, dry_run=dry_run)
        return 200, {"ok": True, **result.model_dump()}
    except ConfigError as exc:
        logger.error("Configuration error: %s", exc)
        return 500, {"ok": False, "error": str(exc)}
    except Exception as exc:
        logger.exception("Sync failed")
        body: Dict[str, Any] = {"ok": False, "error": str(exc)}
        if config is not None and not config.is_production:
            body["stack"] = traceback.format_exc()
        return 500, body


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Sync ChurchSuite contacts into Brevo"
    )
    sub = parser.add_subparsers(dest="command")

    for name, help_text in (
        ("run", "Fetch, map and upsert every contact"),
        ("preview", "Fetch and map contacts without writing to Brevo"),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("--domain", help="ChurchSuite account domain (overrides CHURCHSUITE_DOMAIN)")
        cmd.add_argument("--tags", help="Comma-separated ChurchSuite tag ids")
        cmd.add_argument("--site-ids", help="Comma-separated ChurchSuite site ids")
        cmd.add_argument("--api-version", choices=["v1", "v2"], help="ChurchSuite API version")
        cmd.add_argument("--env-file", help="Path to a .env file (default: search upwards for .env)")
        if name == "run":
            cmd.add_argument("--list-id", help="Brevo list id to add contacts to")

    return parser


def main(argv=None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    parser = _build_arg_parser()
    args = parser.parse_args(argv)

    if args.command not in ("run", "preview"):
        parser.print_help()
        return 1

    overrides = {
        "churchsuite_domain": args.domain,
        "tags": args.tags,
        "site_ids": args.site_ids,
        "api_version": args.api_version,
        "brevo_list_id": getattr(args, "list_id", None),
    }
    _, body = handle_invocation(
        overrides,
        dry_run=args.command == "preview",
        env_file=args.env_file,
    )
    print(json.dumps(body, indent=2))
    return 0 if body["ok"] else 1


if __name__ == "__main__":
    sys.exit(main())
