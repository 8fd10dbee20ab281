"""
FastAPI dependencies: DB session, token service and the authorization chain.

A protected route runs: bearer header → token verified → principal
resolved → role checked. Ownership is checked by the site service once the
site has been loaded.
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import AuthConfig, TokenService, get_auth_config
from app.core.exceptions import Unauthenticated
from app.core.identity import resolve_principal
from app.core.permissions import ensure_authenticated, ensure_role
from app.core.principal import Principal, Role
from app.database import get_db

__all__ = [
    "get_db",
    "get_auth_config",
    "get_token_service",
    "get_current_principal",
    "require_role",
    "require_admin",
    "require_supervisor",
]

_bearer = HTTPBearer(auto_error=False)


def get_token_service(config: AuthConfig = Depends(get_auth_config)) -> TokenService:
    return TokenService(config)


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
    config: AuthConfig = Depends(get_auth_config),
) -> Principal:
    """Resolve the bearer token on the request to a Principal."""
    if credentials is None or not credentials.credentials:
        raise Unauthenticated()
    claims = tokens.verify(credentials.credentials)
    principal = await resolve_principal(db, claims, config)
    return ensure_authenticated(principal)


def require_role(role: Role):
    """Dependency factory: the current principal, provided it holds at least ``role``."""

    async def _checker(principal: Principal = Depends(get_current_principal)) -> Principal:
        ensure_role(principal, role)
        return principal

    return _checker


require_admin = require_role(Role.ADMIN)
require_supervisor = require_role(Role.SUPERVISOR)
