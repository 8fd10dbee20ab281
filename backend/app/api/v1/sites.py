"""
Site management API endpoints.

- POST   /register  : register a site (supervisor or admin)
- GET    /info      : list all sites (public)
- GET    /allUser   : list all users (authenticated)
- GET    /{id}      : get one site (public)
- PUT    /{id}      : update a site (owner or admin)
- DELETE /{id}      : delete a site (owner or admin)
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import AuthConfig
from app.core.dependencies import get_auth_config, get_current_principal, get_db, require_supervisor
from app.core.principal import Principal
from app.schemas.site import SiteCreate, SiteListResponse, SiteOut, SiteResponse, SiteUpdate
from app.schemas.user import MessageResponse, UserListResponse
from app.services import auth_service, site_service, user_service

router = APIRouter()


@router.post("/register", response_model=SiteResponse, status_code=status.HTTP_201_CREATED)
async def register_site(
    body: SiteCreate,
    db: AsyncSession = Depends(get_db),
    config: AuthConfig = Depends(get_auth_config),
    principal: Principal = Depends(require_supervisor),
):
    site = await site_service.create_site(db, body, principal, config)
    return SiteResponse(message="Site registered successfully", site=SiteOut.model_validate(site))


@router.get("/info", response_model=SiteListResponse)
async def list_sites(db: AsyncSession = Depends(get_db)):
    sites = await site_service.get_all_sites(db)
    return SiteListResponse(location_data=[SiteOut.model_validate(s) for s in sites])


@router.get("/allUser", response_model=UserListResponse)
async def list_all_users(
    db: AsyncSession = Depends(get_db),
    _principal: Principal = Depends(get_current_principal),
):
    users = await user_service.list_users(db)
    return UserListResponse(users=[auth_service.user_view(u) for u in users])


@router.get("/{site_id}", response_model=SiteOut)
async def get_site(site_id: UUID, db: AsyncSession = Depends(get_db)):
    return await site_service.get_site(db, site_id)


@router.put("/{site_id}", response_model=SiteResponse)
async def update_site(
    site_id: UUID,
    body: SiteUpdate,
    db: AsyncSession = Depends(get_db),
    config: AuthConfig = Depends(get_auth_config),
    principal: Principal = Depends(get_current_principal),
):
    site = await site_service.update_site(db, site_id, body, principal, config)
    return SiteResponse(message="Site updated successfully", site=SiteOut.model_validate(site))


@router.delete("/{site_id}", response_model=MessageResponse)
async def delete_site(
    site_id: UUID,
    db: AsyncSession = Depends(get_db),
    config: AuthConfig = Depends(get_auth_config),
    principal: Principal = Depends(get_current_principal),
):
    await site_service.delete_site(db, site_id, principal, config)
    return MessageResponse(message="Site deleted successfully")
