"""
Site model: a field monitoring installation.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Integer, Float, Boolean, Text, DateTime, Enum as SAEnum, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base

SITE_STATUSES = ("active", "inactive", "maintenance", "completed")


class Site(Base):
    __tablename__ = "sites"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(), primary_key=True, default=uuid.uuid4
    )
    site_name: Mapped[str] = mapped_column(
        String(150), unique=True, nullable=False, index=True
    )
    location: Mapped[str] = mapped_column(String(150), nullable=False)
    country: Mapped[str | None] = mapped_column(String(80), nullable=True)

    # Coordinates
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    altitude: Mapped[float | None] = mapped_column(Float, nullable=True)

    site_description: Mapped[str] = mapped_column(Text, default="")
    beneficiaries: Mapped[int] = mapped_column(Integer, default=0)
    water_capacity: Mapped[int] = mapped_column(Integer, default=0)
    established: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
    contact_person: Mapped[str] = mapped_column(String(120), default="")
    contact_phone: Mapped[str] = mapped_column(String(30), default="")
    site_image: Mapped[str] = mapped_column(String(500), default="")
    site_status: Mapped[str] = mapped_column(
        SAEnum(*SITE_STATUSES, name="site_status_enum", create_constraint=True),
        nullable=False,
        default="inactive",
    )

    # Owner references, stored in normalized form (user UUID or env-admin sentinel).
    # created_by is written once at creation and never updated.
    created_by: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    supervisor_id: Mapped[str | None] = mapped_column(String(64), nullable=True)

    active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
