"""Service locator for gateway components."""

from typing import Optional

from gateway import config
from gateway.digest import DigestComputer
from gateway.identity import IdentityResolver
from gateway.metadata import MetadataProvider
from gateway.permissions import PermissionDescriptor
from gateway.storage import StorageWriter
from gateway.tickets import TicketMode, TicketRegistry
from gateway.types import AccessPolicy
from gateway.upload_session import UploadSession
from gateway.users import UserDirectory

_policy: Optional[AccessPolicy] = None
_resolver: Optional[IdentityResolver] = None
_metadata: Optional[MetadataProvider] = None
_digest: Optional[DigestComputer] = None
_tickets: Optional[TicketRegistry] = None
_writer: Optional[StorageWriter] = None
_upload_session: Optional[UploadSession] = None
_permissions: Optional[PermissionDescriptor] = None
_users: Optional[UserDirectory] = None


def reset_components() -> None:
    """Drop all built components so the next lookup rebuilds them from config."""
    global _policy, _resolver, _metadata, _digest, _tickets, _writer, _upload_session, _permissions, _users
    _policy = None
    _resolver = None
    _metadata = None
    _digest = None
    _tickets = None
    _writer = None
    _upload_session = None
    _permissions = None
    _users = None


def set_access_policy(policy: AccessPolicy):
    """Replace the access policy; dependent components are rebuilt on next use."""
    reset_components()
    global _policy
    _policy = policy


def get_access_policy() -> AccessPolicy:
    global _policy
    if _policy is None:
        _policy = AccessPolicy(
            principal_id=config.PRINCIPAL_ID,
            principal_name=config.PRINCIPAL_NAME,
            denied_capabilities=tuple(config.DENIED_CAPABILITIES),
        )
    return _policy


def get_resolver() -> IdentityResolver:
    global _resolver
    if _resolver is None:
        _resolver = IdentityResolver(config.STORAGE_ROOT, legacy_decoding=config.LEGACY_ID_DECODING)
    return _resolver


def get_metadata_provider() -> MetadataProvider:
    global _metadata
    if _metadata is None:
        _metadata = MetadataProvider(get_access_policy())
    return _metadata


def get_digest_computer() -> DigestComputer:
    global _digest
    if _digest is None:
        _digest = DigestComputer(config.DIGEST_TYPES[0])
    return _digest


def get_ticket_registry() -> TicketRegistry:
    global _tickets
    if _tickets is None:
        _tickets = TicketRegistry(ttl_seconds=config.TICKET_TTL)
    return _tickets


def get_storage_writer() -> StorageWriter:
    global _writer
    if _writer is None:
        _writer = StorageWriter(get_resolver().root)
    return _writer


def get_upload_session() -> UploadSession:
    global _upload_session
    if _upload_session is None:
        _upload_session = UploadSession(
            resolver=get_resolver(),
            metadata=get_metadata_provider(),
            writer=get_storage_writer(),
            tickets=get_ticket_registry(),
            digest_types=config.DIGEST_TYPES,
            ticket_mode=TicketMode.parse(config.TICKET_MODE),
            max_upload_size=config.MAX_UPLOAD_SIZE,
        )
    return _upload_session


def get_permission_descriptor() -> PermissionDescriptor:
    global _permissions
    if _permissions is None:
        _permissions = PermissionDescriptor(get_resolver(), get_metadata_provider(), get_access_policy())
    return _permissions


def get_user_directory() -> UserDirectory:
    global _users
    if _users is None:
        _users = UserDirectory(get_access_policy())
    return _users
