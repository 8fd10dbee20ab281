"""
Authorization checks applied to a resolved Principal.

Each check either returns quietly or raises; callers chain them in order
(authenticated, role, ownership) and stop at the first failure.
"""

import logging
from typing import Optional

from app.core.exceptions import InsufficientRole, NotOwner, Unauthenticated
from app.core.principal import Principal, Role, role_satisfies, same_owner

log = logging.getLogger(__name__)

ROLE_DENIED_MESSAGES = {
    Role.ADMIN: "Admin access required",
    Role.SUPERVISOR: "Supervisor or admin access required",
}


def ensure_authenticated(principal: Optional[Principal]) -> Principal:
    if principal is None:
        raise Unauthenticated("Authentication required")
    return principal


def ensure_role(principal: Principal, required: Role) -> None:
    if not role_satisfies(principal.role, required):
        raise InsufficientRole(ROLE_DENIED_MESSAGES[required])


def ensure_owner_or_admin(
    principal: Principal, created_by: str, sentinel: str, action: str = "modify"
) -> None:
    """
    Admins may act on any resource; anyone else only on what they created.

    ``created_by`` is the stored owner reference; both sides are compared in
    their normalized form, ``sentinel`` being the environment admin id.
    """
    if principal.is_admin:
        return
    if same_owner(principal.owner_ref, created_by, sentinel):
        return
    log.info("Denied %s for %s on resource owned by %s", action, principal.owner_ref, created_by)
    raise NotOwner(f"You don't have permission to {action} this site")
