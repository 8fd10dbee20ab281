"""
Site CRUD service.

Mutations check ownership after the site is loaded: a missing site is a 404
regardless of who asks, and only then does the owner-or-admin rule apply.
"""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import AuthConfig
from app.core.exceptions import BadRequestException, DuplicateKey, MissingFields, NotFoundException
from app.core.permissions import ensure_owner_or_admin
from app.core.principal import Principal, owner_ref_from_value
from app.models.site import Site
from app.schemas.site import SiteCreate, SiteUpdate

log = logging.getLogger(__name__)

DUPLICATE_SITE = "Site with this name already exists"


def _normalize_supervisor(value: Optional[str], config: AuthConfig) -> Optional[str]:
    if value is None or not str(value).strip():
        return None
    try:
        return str(owner_ref_from_value(value, config.env_admin_id))
    except ValueError as exc:
        raise BadRequestException("Invalid supervisor reference") from exc


async def _find_by_name(db: AsyncSession, site_name: str) -> Optional[Site]:
    result = await db.execute(select(Site).where(Site.site_name == site_name))
    return result.scalar_one_or_none()


async def _commit(db: AsyncSession, site: Site) -> Site:
    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        raise DuplicateKey(DUPLICATE_SITE) from exc
    await db.refresh(site)
    return site


async def create_site(
    db: AsyncSession,
    payload: SiteCreate,
    principal: Principal,
    config: AuthConfig,
) -> Site:
    """Register a new site owned by ``principal``."""
    if not payload.site_name or not payload.location:
        raise MissingFields("Site name and location are required")

    if await _find_by_name(db, payload.site_name):
        raise DuplicateKey(DUPLICATE_SITE)

    fields = payload.model_dump(exclude={"supervisor_id", "established"})
    site = Site(
        **fields,
        created_by=str(principal.owner_ref),
        supervisor_id=_normalize_supervisor(payload.supervisor_id, config),
    )
    if payload.established is not None:
        site.established = payload.established
    db.add(site)
    site = await _commit(db, site)
    log.info("Site %r registered by %s", site.site_name, site.created_by)
    return site


async def get_site(db: AsyncSession, site_id: UUID) -> Site:
    """Get a site by ID."""
    result = await db.execute(select(Site).where(Site.id == site_id))
    site = result.scalar_one_or_none()
    if not site:
        raise NotFoundException("Site")
    return site


async def get_all_sites(db: AsyncSession) -> list[Site]:
    """List all sites, newest first."""
    result = await db.execute(select(Site).order_by(Site.created_at.desc()))
    return list(result.scalars().all())


async def update_site(
    db: AsyncSession,
    site_id: UUID,
    payload: SiteUpdate,
    principal: Principal,
    config: AuthConfig,
) -> Site:
    """Apply a partial update; ``created_by`` is never touched."""
    site = await get_site(db, site_id)
    ensure_owner_or_admin(principal, site.created_by, config.env_admin_id, action="update")

    changes = payload.model_dump(exclude_unset=True)

    new_name = changes.get("site_name")
    if new_name and new_name != site.site_name and await _find_by_name(db, new_name):
        raise DuplicateKey(DUPLICATE_SITE)

    if "supervisor_id" in changes:
        site.supervisor_id = _normalize_supervisor(changes.pop("supervisor_id"), config)

    for key, value in changes.items():
        if value is not None:
            setattr(site, key, value)

    return await _commit(db, site)


async def delete_site(
    db: AsyncSession,
    site_id: UUID,
    principal: Principal,
    config: AuthConfig,
) -> None:
    """Delete a site."""
    site = await get_site(db, site_id)
    ensure_owner_or_admin(principal, site.created_by, config.env_admin_id, action="delete")
    await db.delete(site)
    await db.commit()
    log.info("Site %r deleted by %s", site.site_name, principal.owner_ref)
