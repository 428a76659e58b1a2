"""In-memory registry of issued upload tickets."""

import logging
import secrets
import threading
import time
from enum import Enum
from typing import Callable, Dict, Optional

from common.constants import DEFAULT_TICKET_TTL_SECONDS
from gateway.exceptions import InvalidTicketError
from gateway.types import TicketGrant

logger = logging.getLogger(__name__)


class TicketMode(str, Enum):
    """How the storage step treats upload tickets."""
    OFF = "off"
    OPTIONAL = "optional"
    REQUIRED = "required"

    @classmethod
    def parse(cls, value: str) -> "TicketMode":
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(f"Unknown ticket mode: {value!r} (expected off, optional or required)")


class TicketRegistry:
    """
    Maps ticket tokens to the file they were issued for.

    Grants expire after a fixed TTL and are not consumed by a successful
    write, so a client may retry the storage step until expiry.
    """

    def __init__(
        self,
        ttl_seconds: int = DEFAULT_TICKET_TTL_SECONDS,
        clock: Callable[[], float] = time.time
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._grants: Dict[str, TicketGrant] = {}
        self._lock = threading.Lock()

    def issue(self, file_id: str, filename: str) -> TicketGrant:
        """
        Issue a ticket for a file.

        Args:
            file_id: Raw file id the client addressed
            filename: Resolved filename the ticket allows writing

        Returns:
            New TicketGrant
        """
        now = self._clock()
        grant = TicketGrant(
            token=secrets.token_urlsafe(24),
            file_id=file_id,
            filename=filename,
            issued_at=now,
            expires_at=now + self.ttl_seconds,
        )
        with self._lock:
            self._grants[grant.token] = grant
        logger.debug(f"Issued upload ticket for {filename} expiring at {grant.expires_at:.0f}")
        return grant

    def validate(self, token: Optional[str], filename: str) -> TicketGrant:
        """
        Check that a ticket allows writing filename.

        Raises:
            InvalidTicketError: If the token is missing, unknown, expired or issued for another file
        """
        if not token:
            raise InvalidTicketError("Upload ticket required")

        with self._lock:
            grant = self._grants.get(token)
            if grant is not None and grant.is_expired(self._clock()):
                del self._grants[token]
                raise InvalidTicketError("Upload ticket expired")

        if grant is None:
            raise InvalidTicketError("Unknown upload ticket")
        if grant.filename != filename:
            raise InvalidTicketError(f"Upload ticket was not issued for {filename}")
        return grant

    def purge_expired(self) -> int:
        """
        Drop expired grants.

        Returns:
            Number of grants removed
        """
        now = self._clock()
        with self._lock:
            expired = [token for token, grant in self._grants.items() if grant.is_expired(now)]
            for token in expired:
                del self._grants[token]
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._grants)
