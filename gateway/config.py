"""Configuration settings for the file gateway."""

import os
from common.constants import DEFAULT_TICKET_TTL_SECONDS, DIGEST_TYPE_MD5, MAX_UPLOAD_BYTES


def _env_list(name: str, default: str) -> list:
    return [item.strip() for item in os.environ.get(name, default).split(",") if item.strip()]


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


GATEWAY_HOST = os.environ.get("FILE_GATEWAY_HOST", "0.0.0.0")

GATEWAY_PORT = int(os.environ.get("FILE_GATEWAY_PORT", "3000"))

STORAGE_ROOT = os.environ.get("FILE_GATEWAY_STORAGE_ROOT", "./public")

# Absolute base for issued URLs; empty means "derive from the inbound request".
PUBLIC_BASE_URL = os.environ.get("FILE_GATEWAY_PUBLIC_BASE_URL", "").rstrip("/")

DIGEST_TYPES = _env_list("FILE_GATEWAY_DIGEST_TYPES", DIGEST_TYPE_MD5)

MAX_UPLOAD_SIZE = int(os.environ.get("FILE_GATEWAY_MAX_UPLOAD_BYTES", str(MAX_UPLOAD_BYTES)))

TICKET_TTL = int(os.environ.get("FILE_GATEWAY_TICKET_TTL", str(DEFAULT_TICKET_TTL_SECONDS)))

TICKET_MODE = os.environ.get("FILE_GATEWAY_TICKET_MODE", "optional").strip().lower()

TICKET_SWEEP_INTERVAL = int(os.environ.get("FILE_GATEWAY_TICKET_SWEEP_INTERVAL", "60"))

LEGACY_ID_DECODING = _env_bool("FILE_GATEWAY_LEGACY_ID_DECODING", "true")

PRINCIPAL_ID = os.environ.get("FILE_GATEWAY_PRINCIPAL_ID", "system")

PRINCIPAL_NAME = os.environ.get("FILE_GATEWAY_PRINCIPAL_NAME", "System")

DENIED_CAPABILITIES = _env_list("FILE_GATEWAY_DENIED_CAPABILITIES", "")
