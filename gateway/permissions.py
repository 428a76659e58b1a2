"""Capability sets for stored files."""

from typing import Optional

from gateway.exceptions import NotFoundError
from gateway.identity import FileIdentifier, IdentityResolver
from gateway.metadata import MetadataProvider
from gateway.types import AccessPolicy, PermissionSet


class PermissionDescriptor:
    """Applies the access policy to files that exist."""

    def __init__(self, resolver: IdentityResolver, metadata: MetadataProvider, policy: AccessPolicy):
        self.resolver = resolver
        self.metadata = metadata
        self.policy = policy

    def permissions_for(self, identifier: FileIdentifier, user_id: Optional[str] = None) -> PermissionSet:
        """
        Raises:
            NotFoundError: If the identifier does not name an existing regular file
        """
        path = self.resolver.resolve(identifier)
        if not self.metadata.exists(path):
            raise NotFoundError(f"File not found: {identifier.raw}")
        return self.policy.permission_set(user_id)
