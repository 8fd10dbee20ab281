"""
User store: keyed access to user rows.

Uniqueness of user names and e-mails is enforced by the database; a
constraint violation at flush/commit time (e.g. two concurrent
registrations) is reported as DuplicateKey.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import DuplicateKey, NotFoundException
from app.models.user import User

log = logging.getLogger(__name__)


def normalize_email(email: Optional[str]) -> Optional[str]:
    if email is None:
        return None
    email = email.strip().lower()
    return email or None


def _duplicate_message(exc: IntegrityError) -> str:
    text = str(exc.orig).lower()
    if "email" in text:
        return "Email already in use"
    return "Username already exists"


async def find_by_user_name(db: AsyncSession, user_name: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.user_name == user_name))
    return result.scalar_one_or_none()


async def find_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == normalize_email(email)))
    return result.scalar_one_or_none()


async def find_admin_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(
        select(User).where(User.email == normalize_email(email), User.role == "admin")
    )
    return result.scalar_one_or_none()


async def find_by_id(db: AsyncSession, user_id: UUID) -> Optional[User]:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user(db: AsyncSession, user_id: UUID) -> User:
    """Fetch a user by ID or raise NotFound."""
    user = await find_by_id(db, user_id)
    if user is None:
        raise NotFoundException("User")
    return user


async def list_users(db: AsyncSession, role: Optional[str] = None) -> list[User]:
    query = select(User).order_by(User.created_at.desc())
    if role is not None:
        query = query.where(User.role == role)
    result = await db.execute(query)
    return list(result.scalars().all())


async def save_user(db: AsyncSession, user: User) -> User:
    """Insert or update ``user`` and commit."""
    db.add(user)
    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        log.info("Rejected duplicate user write for %r", user.user_name)
        raise DuplicateKey(_duplicate_message(exc)) from exc
    await db.refresh(user)
    return user


async def touch_last_login(db: AsyncSession, user: User) -> None:
    user.last_login = datetime.now(timezone.utc)
    await db.commit()
    await db.refresh(user)


async def delete_user(db: AsyncSession, user: User) -> None:
    await db.delete(user)
    await db.commit()
