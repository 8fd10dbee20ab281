"""
JWT token service.

Tokens are stateless: ``sub`` names the principal, ``exp`` is absolute and
there is no refresh. Once a token expires the user logs in again.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, Optional

from jose import ExpiredSignatureError, JWTError, jwt

from app.config import settings
from app.core.exceptions import ExpiredToken, InvalidToken
from app.core.principal import EnvironmentPrincipal


@dataclass(frozen=True)
class AuthConfig:
    """Process-wide auth settings, built once at startup and never mutated."""

    secret_key: str
    algorithm: str = "HS256"
    token_ttl: timedelta = timedelta(days=7)
    bcrypt_rounds: int = 10
    admin_email: Optional[str] = None
    admin_password: Optional[str] = None
    env_admin_id: str = "admin-env"
    env_admin_name: str = "System Admin"

    @property
    def env_admin_enabled(self) -> bool:
        return bool(self.admin_email) and bool(self.admin_password)

    def env_admin_principal(self) -> EnvironmentPrincipal:
        return EnvironmentPrincipal(
            id=self.env_admin_id,
            display_name=self.env_admin_name,
            email=self.admin_email,
        )


def auth_config_from_settings(source=settings) -> AuthConfig:
    return AuthConfig(
        secret_key=source.JWT_SECRET_KEY,
        algorithm=source.JWT_ALGORITHM,
        token_ttl=timedelta(days=source.JWT_EXPIRE_DAYS),
        bcrypt_rounds=source.BCRYPT_ROUNDS,
        admin_email=source.ADMIN_EMAIL,
        admin_password=source.ADMIN_PASSWORD,
        env_admin_id=source.ENV_ADMIN_ID,
        env_admin_name=source.ENV_ADMIN_NAME,
    )


@lru_cache
def get_auth_config() -> AuthConfig:
    """FastAPI dependency: the single AuthConfig for this process."""
    return auth_config_from_settings()


class TokenService:
    """Issues and verifies signed, time-limited identity tokens."""

    def __init__(self, config: AuthConfig):
        self.config = config

    def issue(self, principal_id: Any, extra_claims: Optional[dict] = None) -> str:
        now = datetime.now(timezone.utc)
        claims = dict(extra_claims or {})
        claims.update(
            sub=str(principal_id),
            iat=int(now.timestamp()),
            exp=int((now + self.config.token_ttl).timestamp()),
        )
        return jwt.encode(claims, self.config.secret_key, algorithm=self.config.algorithm)

    def verify(self, token: str) -> dict:
        """Return the claims of a valid token; raise ExpiredToken / InvalidToken otherwise."""
        try:
            claims = jwt.decode(
                token,
                self.config.secret_key,
                algorithms=[self.config.algorithm],
            )
        except ExpiredSignatureError as exc:
            raise ExpiredToken() from exc
        except JWTError as exc:
            raise InvalidToken() from exc

        if not claims.get("sub"):
            raise InvalidToken()
        return claims
