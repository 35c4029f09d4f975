"""Sync configuration.

Priority (first source that sets a value wins):
  1. Explicit overrides (CLI flags)
  2. Environment variables (a local .env is loaded first)
  3. config.json in the project root or the current directory

API keys are only read from the environment. config.json holds the
non-secret settings: churchsuiteDomain, brevoListId, tags, siteIds,
apiVersion.

Usage:
    from sync_config import load_config
    config = load_config()
    config.validate_required()
"""
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional, Sequence

from dotenv import load_dotenv
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

_ROOT = Path(__file__).resolve().parent
CONFIG_FILENAME = "config.json"
PLACEHOLDER_DOMAIN = "CHANGE_ME"

# config.json key -> SyncConfig field
FILE_KEYS = {
    "churchsuiteDomain": "churchsuite_domain",
    "brevoListId": "brevo_list_id",
    "tags": "tags",
    "siteIds": "site_ids",
    "apiVersion": "api_version",
}

# environment variable -> SyncConfig field
ENV_KEYS = {
    "CHURCHSUITE_DOMAIN": "churchsuite_domain",
    "CHURCHSUITE_API_KEY": "churchsuite_api_key",
    "BREVO_API_KEY": "brevo_api_key",
    "BREVO_LIST_ID": "brevo_list_id",
    "CHURCHSUITE_TAGS": "tags",
    "CHURCHSUITE_SITE_IDS": "site_ids",
    "CHURCHSUITE_API_VERSION": "api_version",
    "SYNC_RETRIES": "retries",
    "SYNC_RETRY_DELAY": "retry_delay",
    "SYNC_HTTP_TIMEOUT": "timeout",
    "SYNC_ENV": "environment",
}

NUMERIC_FIELDS = {"retries": int, "retry_delay": float, "timeout": float}


class ConfigError(RuntimeError):
    """Missing or malformed sync configuration."""


class SyncConfig(BaseModel):
    churchsuite_domain: Optional[str] = None
    churchsuite_api_key: Optional[str] = None
    brevo_api_key: Optional[str] = None
    brevo_list_id: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    site_ids: List[str] = Field(default_factory=list)
    api_version: Literal["v1", "v2"] = "v1"
    retries: int = Field(default=3, ge=0)
    retry_delay: float = Field(default=1.0, ge=0)
    timeout: float = Field(default=30, gt=0)
    environment: str = "production"

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    def validate_required(self, require_target: bool = True) -> None:
        """Raise ConfigError if a credential or the domain is missing."""
        domain = (self.churchsuite_domain or "").strip()
        if not domain or domain == PLACEHOLDER_DOMAIN:
            raise ConfigError(
                "CHURCHSUITE_DOMAIN not configured. Set the CHURCHSUITE_DOMAIN "
                "environment variable or churchsuiteDomain in config.json."
            )
        if not self.churchsuite_api_key:
            raise ConfigError("CHURCHSUITE_API_KEY environment variable is not set")
        if require_target and not self.brevo_api_key:
            raise ConfigError("BREVO_API_KEY environment variable is not set")


def split_list(value: Any) -> List[str]:
    """Accept "a, b" or ["a", "b"] and return the non-empty items."""
    if value is None:
        return []
    items = value if isinstance(value, (list, tuple)) else str(value).split(",")
    return [str(i).strip() for i in items if str(i).strip()]


def _candidate_paths() -> List[Path]:
    return list(dict.fromkeys([_ROOT / CONFIG_FILENAME, Path.cwd().resolve() / CONFIG_FILENAME]))


def read_config_file(paths: Optional[Sequence[Path]] = None) -> Dict[str, Any]:
    """Return settings from the first readable config.json, or {}."""
    for path in paths if paths is not None else _candidate_paths():
        if not path.is_file():
            continue
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Skipping unreadable %s: %s", path, exc)
            continue
        if not isinstance(raw, dict):
            logger.warning("Skipping %s: expected a JSON object", path)
            continue
        logger.info("Loaded settings from %s", path)
        return {field: raw[key] for key, field in FILE_KEYS.items() if raw.get(key) not in (None, "")}
    return {}


def read_environment(environ: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    env = os.environ if environ is None else environ
    values: Dict[str, Any] = {}
    for name, field in ENV_KEYS.items():
        raw = env.get(name, "").strip()
        if not raw:
            continue
        cast = NUMERIC_FIELDS.get(field)
        if cast is not None:
            try:
                values[field] = cast(raw)
            except ValueError as exc:
                raise ConfigError(f"{name} must be a number, got {raw!r}") from exc
        else:
            values[field] = raw
    return values


def load_config(
    overrides: Optional[Dict[str, Any]] = None,
    *,
    env_file: Optional[str] = None,
    config_paths: Optional[Sequence[Path]] = None,
) -> SyncConfig:
    """Resolve every source once and return the merged SyncConfig."""
    load_dotenv(env_file)

    merged: Dict[str, Any] = {}
    for source in (
        read_config_file(config_paths),
        read_environment(),
        {k: v for k, v in (overrides or {}).items() if v not in (None, "", [])},
    ):
        merged.update(source)

    for field in ("tags", "site_ids"):
        merged[field] = split_list(merged.get(field))
    if merged.get("brevo_list_id") is not None:
        merged["brevo_list_id"] = str(merged["brevo_list_id"])

    try:
        return SyncConfig(**merged)
    except ValueError as exc:
        raise ConfigError(f"Invalid sync configuration: {exc}") from exc
