"""
Pydantic schemas for Site endpoints.
"""

from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field

SiteStatus = Literal["active", "inactive", "maintenance", "completed"]


class SiteCreate(BaseModel):
    site_name: Optional[str] = Field(default=None, max_length=150)
    location: Optional[str] = Field(default=None, max_length=150)
    country: Optional[str] = Field(default=None, max_length=80)
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    altitude: Optional[float] = None
    site_description: str = ""
    beneficiaries: int = Field(default=0, ge=0)
    water_capacity: int = Field(default=0, ge=0)
    established: Optional[datetime] = None
    contact_person: str = ""
    contact_phone: str = ""
    site_image: str = ""
    site_status: SiteStatus = "inactive"
    supervisor_id: Optional[str] = None


class SiteUpdate(BaseModel):
    """Partial update. ``created_by`` is deliberately absent: ownership never moves."""

    site_name: Optional[str] = Field(default=None, min_length=1, max_length=150)
    location: Optional[str] = Field(default=None, min_length=1, max_length=150)
    country: Optional[str] = Field(default=None, max_length=80)
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    altitude: Optional[float] = None
    site_description: Optional[str] = None
    beneficiaries: Optional[int] = Field(default=None, ge=0)
    water_capacity: Optional[int] = Field(default=None, ge=0)
    established: Optional[datetime] = None
    contact_person: Optional[str] = None
    contact_phone: Optional[str] = None
    site_image: Optional[str] = None
    site_status: Optional[SiteStatus] = None
    supervisor_id: Optional[str] = None
    active: Optional[bool] = None


class SiteOut(BaseModel):
    id: UUID
    site_name: str
    location: str
    country: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    altitude: Optional[float] = None
    site_description: str
    beneficiaries: int
    water_capacity: int
    established: Optional[datetime] = None
    contact_person: str
    contact_phone: str
    site_image: str
    site_status: str
    created_by: str
    supervisor_id: Optional[str] = None
    active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class SiteResponse(BaseModel):
    success: bool = True
    message: str
    site: SiteOut


class SiteListResponse(BaseModel):
    success: bool = True
    message: str = "Successfully retrieved all locations"
    location_data: list[SiteOut]
