"""
Auth service: admin and user login, registration and user administration.
"""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import AuthConfig, TokenService
from app.core.exceptions import (
    AccountDeactivated,
    BadRequestException,
    DuplicateKey,
    InvalidCredentials,
    InvalidRole,
    MissingCredentials,
    MissingFields,
    PrincipalNotFound,
)
from app.core.principal import DatabasePrincipal, EnvironmentPrincipal, Principal, Role
from app.core.security import hash_password, verify_password
from app.models.user import User
from app.schemas.user import LoginResponse, UserCreate, UserOut, UserUpdate
from app.services import user_service

log = logging.getLogger(__name__)


def user_view(user: User) -> UserOut:
    return UserOut.model_validate(user)


def env_admin_view(principal: EnvironmentPrincipal) -> UserOut:
    return UserOut(
        id=principal.id,
        full_name=principal.display_name,
        email=principal.email,
        role=principal.role.value,
    )


async def _login_database_user(db: AsyncSession, user: User, tokens: TokenService) -> LoginResponse:
    if not user.active:
        log.warning("Login refused for deactivated user %s", user.id)
        raise AccountDeactivated()
    token = tokens.issue(user.id)
    await user_service.touch_last_login(db, user)
    log.info("User %s (%s) logged in", user.user_name, user.role)
    return LoginResponse(access_token=token, user=user_view(user))


async def admin_login(
    db: AsyncSession,
    email: Optional[str],
    password: Optional[str],
    tokens: TokenService,
    config: AuthConfig,
) -> LoginResponse:
    """
    Log an admin in by e-mail.

    A database admin is tried first; failing that, the credentials are
    compared with the environment admin's. Both misses yield the same
    InvalidCredentials so the response does not reveal which accounts exist.
    """
    if not email or not password:
        raise MissingCredentials("Missing details")

    admin = await user_service.find_admin_by_email(db, email)
    if admin is not None and verify_password(password, admin.hashed_password):
        return await _login_database_user(db, admin, tokens)

    if config.env_admin_enabled and email == config.admin_email and password == config.admin_password:
        principal = config.env_admin_principal()
        token = tokens.issue(principal.id, {"role": Role.ADMIN.value})
        log.info("Environment admin logged in")
        return LoginResponse(access_token=token, user=env_admin_view(principal))

    log.info("Admin login failed")
    raise InvalidCredentials()


async def user_login(
    db: AsyncSession,
    user_name: Optional[str],
    password: Optional[str],
    tokens: TokenService,
) -> LoginResponse:
    """Log a supervisor (or admin) in by user name."""
    if not user_name or not password:
        raise MissingCredentials("Missing username or password")

    user = await user_service.find_by_user_name(db, user_name)
    if user is None:
        raise PrincipalNotFound(
            "User does not exist. Please check your username or contact an administrator."
        )

    if not verify_password(password, user.hashed_password):
        log.info("Login failed for %s: wrong password", user_name)
        raise InvalidCredentials()

    return await _login_database_user(db, user, tokens)


def _parse_role(value: Optional[str]) -> Role:
    role = Role.parse(value)
    if role is None:
        raise InvalidRole()
    return role


async def register_user(
    db: AsyncSession,
    payload: UserCreate,
    registrar: Principal,
    config: AuthConfig,
) -> User:
    """Create a local admin or supervisor on behalf of ``registrar``."""
    required = (
        payload.full_name, payload.user_name, payload.password,
        payload.phone, payload.location, payload.role,
    )
    if not all(required):
        raise MissingFields()

    role = _parse_role(payload.role)

    if await user_service.find_by_user_name(db, payload.user_name):
        raise DuplicateKey("Username already exists")

    email = user_service.normalize_email(payload.email)
    if email and await user_service.find_by_email(db, email):
        raise DuplicateKey("Email already in use")

    user = User(
        full_name=payload.full_name,
        user_name=payload.user_name,
        email=email,
        hashed_password=hash_password(payload.password, config.bcrypt_rounds),
        phone=payload.phone,
        location=payload.location,
        role=role.value,
        is_local=True,
        created_by=str(registrar.owner_ref),
    )
    user = await user_service.save_user(db, user)
    log.info("%s registered %s %s", registrar.owner_ref, role.value, user.user_name)
    return user


def registration_message(user: User) -> str:
    if user.role == Role.ADMIN.value:
        return "Admin registered successfully"
    return "Local supervisor registered successfully"


async def update_user(
    db: AsyncSession,
    user_id: UUID,
    payload: UserUpdate,
    config: AuthConfig,
) -> User:
    """Apply a partial update to a user; a new password is re-hashed."""
    user = await user_service.get_user(db, user_id)
    changes = payload.model_dump(exclude_unset=True)

    if "role" in changes:
        changes["role"] = _parse_role(changes["role"]).value

    new_name = changes.get("user_name")
    if new_name and new_name != user.user_name:
        if await user_service.find_by_user_name(db, new_name):
            raise DuplicateKey("Username already exists")

    if "email" in changes:
        changes["email"] = user_service.normalize_email(changes["email"])
        if changes["email"] and changes["email"] != user.email:
            if await user_service.find_by_email(db, changes["email"]):
                raise DuplicateKey("Email already in use")

    password = changes.pop("password", None)
    if password:
        user.hashed_password = hash_password(password, config.bcrypt_rounds)

    for key, value in changes.items():
        if key != "email" and value is None:
            continue
        setattr(user, key, value)

    return await user_service.save_user(db, user)


async def delete_user(db: AsyncSession, user_id: UUID, acting: Principal) -> None:
    """Delete a user; a database admin cannot delete their own account."""
    user = await user_service.get_user(db, user_id)
    if isinstance(acting, DatabasePrincipal) and acting.id == user.id:
        raise BadRequestException("You cannot delete your own account")
    await user_service.delete_user(db, user)
    log.info("%s deleted user %s", acting.owner_ref, user.user_name)


async def current_profile(db: AsyncSession, principal: Principal) -> UserOut:
    """Profile of the authenticated principal, synthesized for the environment admin."""
    if isinstance(principal, EnvironmentPrincipal):
        return env_admin_view(principal)
    user = await user_service.get_user(db, principal.id)
    return user_view(user)
