"""User lookups for the identity endpoint."""

from typing import Iterable, List

from gateway.types import AccessPolicy, User


class UserDirectory:
    """
    Resolves user ids against the access policy.

    Only the policy principal is known by name; any other id gets a
    placeholder user so the lookup never fails.
    """

    def __init__(self, policy: AccessPolicy):
        self.policy = policy

    def lookup(self, user_ids: Iterable[str]) -> List[User]:
        users = []
        for user_id in user_ids:
            user_id = user_id.strip()
            if not user_id:
                continue
            if user_id == self.policy.principal_id:
                users.append(User(id=user_id, name=self.policy.principal_name))
            else:
                users.append(User(id=user_id, name=user_id))
        return users
