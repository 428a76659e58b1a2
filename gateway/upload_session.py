"""Upload handshake: prepare, address, storage and complete."""

import logging
from typing import List, Optional, Sequence
from urllib.parse import quote, urlencode

from common.constants import API_PREFIX, MAX_UPLOAD_BYTES, SEND_BACK_MARKER, SUPPORTED_DIGEST_TYPES
from gateway.exceptions import PayloadTooLargeError
from gateway.identity import IdentityResolver
from gateway.metadata import MetadataProvider
from gateway.storage import StorageWriter
from gateway.tickets import TicketMode, TicketRegistry
from gateway.types import FileRecord, UploadTicket

logger = logging.getLogger(__name__)


class UploadSession:
    """
    Runs the four upload steps for a caller-supplied file id.

    No step holds per-upload state apart from the ticket grants issued by
    address(); every step resolves the file id afresh.
    """

    def __init__(
        self,
        resolver: IdentityResolver,
        metadata: MetadataProvider,
        writer: StorageWriter,
        tickets: TicketRegistry,
        digest_types: Sequence[str],
        ticket_mode: TicketMode = TicketMode.OPTIONAL,
        max_upload_size: int = MAX_UPLOAD_BYTES,
    ):
        self.resolver = resolver
        self.metadata = metadata
        self.writer = writer
        self.tickets = tickets
        unsupported = [name for name in digest_types if name not in SUPPORTED_DIGEST_TYPES]
        if unsupported or not digest_types:
            raise ValueError(f"Unsupported digest types: {unsupported or 'none configured'}")
        self.digest_types = list(digest_types)
        self.ticket_mode = ticket_mode
        self.max_upload_size = max_upload_size

    def prepare(self, file_id: str) -> List[str]:
        """
        Advertise the digest types the gateway computes. Touches no storage.
        """
        return list(self.digest_types)

    def address(self, file_id: str, base_url: str, extension: Optional[str] = None) -> UploadTicket:
        """
        Issue the descriptor a client uses to PUT the file bytes.

        Args:
            file_id: Raw file id as sent by the client
            base_url: Scheme and host the storage URL points at
            extension: Optional explicit extension carried into the storage URL

        Returns:
            UploadTicket with an absolute storage URL
        """
        url = f"{base_url.rstrip('/')}{API_PREFIX}/files/{quote(file_id, safe='')}/upload/storage"

        query = {}
        send_back_params = {"source": SEND_BACK_MARKER}
        if extension:
            query["extension"] = extension
        if self.ticket_mode != TicketMode.OFF:
            path = self.resolver.resolve(self.resolver.identify(file_id, extension))
            grant = self.tickets.issue(file_id, path.name)
            query["ticket"] = grant.token
            send_back_params["ticket"] = grant.token
        if query:
            url = f"{url}?{urlencode(query)}"

        return UploadTicket(file_id=file_id, url=url, send_back_params=send_back_params)

    def check_size(self, size: int) -> None:
        """
        Raises:
            PayloadTooLargeError: If size exceeds the upload ceiling
        """
        if size > self.max_upload_size:
            raise PayloadTooLargeError(
                f"Payload of {size} bytes exceeds the {self.max_upload_size} byte limit"
            )

    def store(
        self,
        file_id: str,
        payload: bytes,
        ticket: Optional[str] = None,
        extension: Optional[str] = None
    ) -> int:
        """
        Write payload verbatim over whatever file_id resolves to.

        Returns:
            Number of bytes written

        Raises:
            PayloadTooLargeError: If payload exceeds the upload ceiling
            InvalidTicketError: If the ticket mode rejects the presented ticket
            StoreFailureError: If the write fails
        """
        self.check_size(len(payload))
        path = self.resolver.resolve(self.resolver.identify(file_id, extension))

        if self.ticket_mode == TicketMode.REQUIRED or (self.ticket_mode == TicketMode.OPTIONAL and ticket):
            self.tickets.validate(ticket, path.name)

        return self.writer.write(path, payload)

    def complete(
        self,
        file_id: str,
        name: Optional[str] = None,
        extension: Optional[str] = None
    ) -> FileRecord:
        """
        Finalize an upload by describing the stored file.

        The record echoes the caller's raw file id; its name is the supplied
        display name or the resolved filename.

        Raises:
            NotFoundError: If nothing was stored for file_id
        """
        path = self.resolver.resolve(self.resolver.identify(file_id, extension))
        record = self.metadata.describe(path, file_id, name=name)
        logger.info(f"Completed upload of {path.name} ({record.size} bytes)")
        return record
