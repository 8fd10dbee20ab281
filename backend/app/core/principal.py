"""
Principals, roles and owner references.

A request is acted on by exactly one principal: either a user row from the
store or the environment admin configured in the process environment. Both
kinds share the same surface (``id``, ``role``, ``active``, ``owner_ref``)
so authorization never needs to know which one it is looking at.
"""

from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass
from typing import Any, Optional, Union


class Role(str, enum.Enum):
    ADMIN = "admin"
    SUPERVISOR = "supervisor"

    @classmethod
    def parse(cls, value: Any) -> Optional["Role"]:
        """Return the matching role, or None for anything unknown."""
        try:
            return cls(value)
        except ValueError:
            return None


# Higher rank satisfies every gate at or below it
ROLE_RANK = {
    Role.SUPERVISOR: 1,
    Role.ADMIN: 2,
}


def role_satisfies(actual: Role, required: Role) -> bool:
    return ROLE_RANK[actual] >= ROLE_RANK[required]


# ── Owner references ─────────────────────────────────────

@dataclass(frozen=True)
class StoreRef:
    """Reference to a user row by its store id."""

    id: uuid.UUID

    def __str__(self) -> str:
        return str(self.id)


@dataclass(frozen=True)
class EnvironmentAdminRef:
    """Reference to the environment admin, which has no row."""

    sentinel: str

    def __str__(self) -> str:
        return self.sentinel


OwnerRef = Union[StoreRef, EnvironmentAdminRef]


def owner_ref_from_value(value: Any, sentinel: str) -> OwnerRef:
    """
    Parse a stored or submitted owner value into an ``OwnerRef``.

    Accepts a ``uuid.UUID``, a UUID string in any accepted spelling, an
    existing ``OwnerRef`` or the sentinel. Raises ``ValueError`` otherwise.
    """
    if isinstance(value, (StoreRef, EnvironmentAdminRef)):
        return value
    if isinstance(value, uuid.UUID):
        return StoreRef(value)
    raw = str(value).strip()
    if raw == sentinel:
        return EnvironmentAdminRef(sentinel)
    return StoreRef(uuid.UUID(raw))


def same_owner(left: Any, right: Any, sentinel: str) -> bool:
    """Compare two owner values by their normalized form."""
    try:
        return str(owner_ref_from_value(left, sentinel)) == str(owner_ref_from_value(right, sentinel))
    except ValueError:
        return False


# ── Principals ───────────────────────────────────────────

@dataclass(frozen=True)
class DatabasePrincipal:
    id: uuid.UUID
    role: Role
    display_name: str
    email: Optional[str]
    active: bool
    user_name: str

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    @property
    def owner_ref(self) -> OwnerRef:
        return StoreRef(self.id)

    @classmethod
    def from_user(cls, user) -> "DatabasePrincipal":
        return cls(
            id=user.id,
            role=Role(user.role),
            display_name=user.full_name,
            email=user.email,
            active=bool(user.active),
            user_name=user.user_name,
        )


@dataclass(frozen=True)
class EnvironmentPrincipal:
    id: str
    display_name: str
    email: Optional[str]
    role: Role = Role.ADMIN
    # No record to deactivate; always active
    active: bool = True

    @property
    def is_admin(self) -> bool:
        return True

    @property
    def owner_ref(self) -> OwnerRef:
        return EnvironmentAdminRef(self.id)


Principal = Union[DatabasePrincipal, EnvironmentPrincipal]
