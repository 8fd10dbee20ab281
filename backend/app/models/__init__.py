"""
Import all models so SQLAlchemy can discover them.
"""

from app.models.user import User
from app.models.site import Site

__all__ = [
    "User",
    "Site",
]
