"""Project-wide protocol constants shared by the gateway and the CLI."""

API_PREFIX: str = "/v3/3rd"
PUBLIC_PREFIX: str = "/public"

FILE_VERSION: int = 1

CODE_OK: int = 0
CODE_INVALID_TICKET: int = 40003
CODE_NOT_FOUND: int = 40004
CODE_PAYLOAD_TOO_LARGE: int = 41300
CODE_STORE_FAILURE: int = 50000

DIGEST_TYPE_MD5: str = "md5"
SUPPORTED_DIGEST_TYPES: tuple = ("md5", "sha1", "sha256")

MAX_UPLOAD_BYTES: int = 200 * 1024 * 1024  # 200 MiB upload ceiling
DIGEST_READ_SIZE: int = 64 * 1024

UPLOAD_METHOD: str = "PUT"
DEFAULT_TICKET_TTL_SECONDS: int = 15 * 60
SEND_BACK_MARKER: str = "file-gateway"

CAPABILITIES: tuple = (
    "read",
    "update",
    "download",
    "rename",
    "history",
    "copy",
    "print",
    "saveas",
    "comment",
)

# Directory under the storage root holding in-flight upload writes.
STAGING_DIR_NAME: str = ".incoming"
