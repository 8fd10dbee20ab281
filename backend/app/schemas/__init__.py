from app.schemas.user import (
    AdminLogin, UserLogin, UserCreate, UserUpdate, UserOut,
    LoginResponse, UserResponse, UserListResponse, MessageResponse,
)
from app.schemas.site import SiteCreate, SiteUpdate, SiteOut, SiteResponse, SiteListResponse
