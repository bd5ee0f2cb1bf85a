"""
In-memory identity registry with credential checks.

In production this would be an identity provider (Supabase auth, Auth0,
or a users table). Here it is a constructed object owned by the process
entry point and shared by reference with the session store.
"""

import hashlib
import hmac
import logging
import secrets
from dataclasses import dataclass
from typing import Any, Optional

from gigdesk.errors import NotFoundError, UserExistsError
from gigdesk.schemas.identity_schema import Identity, UserRole

logger = logging.getLogger(__name__)

# Fields owned by the identity system itself; profile updates cannot touch them.
_IMMUTABLE_FIELDS = frozenset({"id", "email", "role"})


@dataclass
class _Credential:
    salt: str
    digest: str


def _hash_password(password: str, salt: str) -> str:
    return hashlib.sha256(f"{salt}:{password}".encode("utf-8")).hexdigest()


class IdentityRegistry:
    """Stores identities and their password digests."""

    def __init__(self) -> None:
        self._identities: dict[str, Identity] = {}
        self._credentials: dict[str, _Credential] = {}

    def add(self, identity: Identity, password: str) -> Identity:
        """Register a new identity. Emails must be unique (exact match)."""
        if self.find_by_email(identity.email) is not None:
            raise UserExistsError(identity.email)
        salt = secrets.token_hex(8)
        self._identities[identity.id] = identity
        self._credentials[identity.id] = _Credential(salt, _hash_password(password, salt))
        logger.debug("Identity registered: %s (%s)", identity.id, identity.role.value)
        return identity

    def get(self, identity_id: str) -> Optional[Identity]:
        return self._identities.get(identity_id)

    def require(self, identity_id: str) -> Identity:
        identity = self._identities.get(identity_id)
        if identity is None:
            raise NotFoundError("identity", identity_id)
        return identity

    def find_by_email(self, email: str) -> Optional[Identity]:
        for identity in self._identities.values():
            if identity.email == email:
                return identity
        return None

    def verify(self, email: str, password: str) -> Optional[Identity]:
        """Return the identity whose email and password both match, else None."""
        identity = self.find_by_email(email)
        if identity is None:
            return None
        credential = self._credentials[identity.id]
        candidate = _hash_password(password, credential.salt)
        if hmac.compare_digest(candidate, credential.digest):
            return identity
        return None

    def update_profile(self, identity_id: str, **changes: Any) -> Identity:
        """Replace profile fields (display name, rate, avatar, bio, ...)."""
        blocked = _IMMUTABLE_FIELDS.intersection(changes)
        if blocked:
            raise ValueError(f"Cannot change {', '.join(sorted(blocked))} via profile update")
        updated = self.require(identity_id).model_copy(update=changes)
        self._identities[identity_id] = updated
        logger.info("Profile updated for %s: %s", identity_id, sorted(changes))
        return updated

    def list_freelancers(self, public_only: bool = True) -> list[Identity]:
        return [
            identity
            for identity in self._identities.values()
            if identity.role == UserRole.FREELANCER and (identity.is_public or not public_only)
        ]

    def __len__(self) -> int:
        return len(self._identities)
