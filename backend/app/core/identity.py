"""
Identity resolution: verified token claims to a Principal.

The environment admin is synthesized from configuration and never looked up;
every other subject must be a live, active user row.
"""

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import AuthConfig
from app.core.exceptions import AccountDeactivated, InvalidToken, PrincipalNotFound
from app.core.principal import DatabasePrincipal, Principal
from app.services import user_service

log = logging.getLogger(__name__)


async def resolve_principal(db: AsyncSession, claims: dict, config: AuthConfig) -> Principal:
    subject = str(claims["sub"])

    if subject == config.env_admin_id:
        if not config.env_admin_enabled:
            log.warning("Rejected token for disabled environment admin")
            raise AccountDeactivated()
        return config.env_admin_principal()

    try:
        user_id = uuid.UUID(subject)
    except ValueError as exc:
        raise InvalidToken() from exc

    user = await user_service.find_by_id(db, user_id)
    if user is None:
        raise PrincipalNotFound("User not found", status_code=401)

    if not user.active:
        log.warning("Rejected token for deactivated user %s", user.id)
        raise AccountDeactivated()

    return DatabasePrincipal.from_user(user)
