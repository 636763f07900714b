"""
Load configuration from .env and the process environment. All secrets and IDs stay in .env (never committed).
"""
import base64
import binascii
import json
import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from errors import ConfigurationError

# Load .env from project root; real environment variables win
load_dotenv(Path(__file__).resolve().parent / ".env")

DEFAULT_ENDPOINT = "articles"
DEFAULT_START_DATE = "2024-08-01"


@dataclass(frozen=True)
class Settings:
    ga_property_id: str
    credentials_info: dict[str, Any]
    microcms_service: str
    microcms_api_key: str
    microcms_endpoint: str
    sheets_id: str
    path_prefix: str
    start_date: str


def _env(environ: dict[str, str], name: str, default: str = "") -> str:
    return (environ.get(name) or default).strip()


def _normalize_prefix(prefix: str) -> str:
    """Make sure the page path prefix starts and ends with '/'."""
    if not prefix.startswith("/"):
        prefix = "/" + prefix
    if not prefix.endswith("/"):
        prefix = prefix + "/"
    return prefix


def _decode_base64(raw: str) -> str:
    # Strip whitespace/newlines (pasting into CI secrets can add them)
    raw = "".join(raw.split())
    pad = 4 - (len(raw) % 4)
    if pad != 4:
        raw += "=" * pad
    return base64.b64decode(raw).decode("utf-8")


def _raw_credentials(environ: dict[str, str]) -> tuple[str, str]:
    """Return (credential JSON text, error message). One of them is empty."""
    raw_json = _env(environ, "GOOGLE_CREDENTIALS")
    raw_b64 = _env(environ, "GOOGLE_CREDENTIALS_BASE64")
    if raw_json:
        return raw_json, ""
    if raw_b64:
        try:
            return _decode_base64(raw_b64), ""
        except (binascii.Error, UnicodeDecodeError):
            return "", "GOOGLE_CREDENTIALS_BASE64 is not valid base64"
    return "", "GOOGLE_CREDENTIALS (or GOOGLE_CREDENTIALS_BASE64)"


def _parse_credentials(raw: str) -> tuple[dict[str, Any] | None, str]:
    """Return (service account info, '') or (None, error_message)."""
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        return None, f"GOOGLE_CREDENTIALS is invalid JSON: {e}"
    if not isinstance(data, dict) or data.get("type") != "service_account":
        return None, "GOOGLE_CREDENTIALS is not valid service account JSON (missing type)"
    return data, ""


def validate_config(environ: dict[str, str] | None = None) -> list[str]:
    """Return list of missing/invalid config keys. Empty list = OK."""
    environ = os.environ if environ is None else environ
    errors = []
    if not _env(environ, "GA_PROPERTY_ID"):
        errors.append("GA_PROPERTY_ID")
    raw, cred_err = _raw_credentials(environ)
    if cred_err:
        errors.append(cred_err)
    else:
        _, cred_err = _parse_credentials(raw)
        if cred_err:
            errors.append(cred_err)
    if not _env(environ, "MICROCMS_SERVICE"):
        errors.append("MICROCMS_SERVICE")
    if not _env(environ, "SHEETS_ID"):
        errors.append("SHEETS_ID")
    start = _env(environ, "REPORT_START_DATE", DEFAULT_START_DATE)
    try:
        datetime.strptime(start, "%Y-%m-%d")
    except ValueError:
        errors.append("REPORT_START_DATE (must be YYYY-MM-DD)")
    return errors


def load_settings(environ: dict[str, str] | None = None) -> Settings:
    """Read settings once. Raises ConfigurationError listing every problem found."""
    environ = os.environ if environ is None else environ
    errors = validate_config(environ)
    if errors:
        raise ConfigurationError(errors)

    raw, _ = _raw_credentials(environ)
    info, _ = _parse_credentials(raw)
    endpoint = _env(environ, "MICROCMS_ENDPOINT", DEFAULT_ENDPOINT)
    prefix = _env(environ, "ARTICLE_PATH_PREFIX") or f"/{endpoint}/"
    return Settings(
        ga_property_id=_env(environ, "GA_PROPERTY_ID"),
        credentials_info=info,
        microcms_service=_env(environ, "MICROCMS_SERVICE"),
        microcms_api_key=_env(environ, "MICROCMS_API_KEY"),
        microcms_endpoint=endpoint,
        sheets_id=_env(environ, "SHEETS_ID"),
        path_prefix=_normalize_prefix(prefix),
        start_date=_env(environ, "REPORT_START_DATE", DEFAULT_START_DATE),
    )
