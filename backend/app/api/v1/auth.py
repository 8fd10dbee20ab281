"""
Auth API endpoints: admin/user login, registration, user administration, me.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import AuthConfig, TokenService
from app.core.dependencies import (
    get_auth_config,
    get_current_principal,
    get_db,
    get_token_service,
    require_admin,
)
from app.core.principal import Principal
from app.schemas.user import (
    AdminLogin,
    LoginResponse,
    MessageResponse,
    UserCreate,
    UserListResponse,
    UserLogin,
    UserOut,
    UserResponse,
    UserUpdate,
)
from app.services import auth_service, user_service

router = APIRouter()


@router.post("/admin/login", response_model=LoginResponse)
async def admin_login(
    payload: AdminLogin,
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
    config: AuthConfig = Depends(get_auth_config),
):
    """Admin login by e-mail (database admins, then the environment admin)."""
    return await auth_service.admin_login(db, payload.email, payload.password, tokens, config)


@router.post("/user/login", response_model=LoginResponse)
async def user_login(
    payload: UserLogin,
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    """Supervisor login by user name."""
    return await auth_service.user_login(db, payload.user_name, payload.password, tokens)


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    payload: UserCreate,
    db: AsyncSession = Depends(get_db),
    config: AuthConfig = Depends(get_auth_config),
    admin: Principal = Depends(require_admin),
):
    """Register a new admin or supervisor (admin only)."""
    user = await auth_service.register_user(db, payload, admin, config)
    return UserResponse(
        message=auth_service.registration_message(user),
        user=auth_service.user_view(user),
    )


@router.get("/me", response_model=UserOut)
async def me(
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Get the current principal's profile."""
    return await auth_service.current_profile(db, principal)


@router.get("/supervisors", response_model=UserListResponse)
async def list_supervisors(
    db: AsyncSession = Depends(get_db),
    _admin: Principal = Depends(require_admin),
):
    """List all supervisors (admin only)."""
    users = await user_service.list_users(db, role="supervisor")
    return UserListResponse(users=[auth_service.user_view(u) for u in users])


@router.put("/user/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: UUID,
    payload: UserUpdate,
    db: AsyncSession = Depends(get_db),
    config: AuthConfig = Depends(get_auth_config),
    _admin: Principal = Depends(require_admin),
):
    """Update a user (admin only)."""
    user = await auth_service.update_user(db, user_id, payload, config)
    return UserResponse(message="User updated successfully", user=auth_service.user_view(user))


@router.delete("/user/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: UUID,
    db: AsyncSession = Depends(get_db),
    admin: Principal = Depends(require_admin),
):
    """Delete a user (admin only)."""
    await auth_service.delete_user(db, user_id, admin)
    return MessageResponse(message="User deleted successfully")
