"""User model - people tasks can be assigned to."""

from typing import Optional
from pydantic import Field

from planner.models.base import StoreRecord


class User(StoreRecord):
    """User directory entry."""
    id: str = Field(..., description="User ID")
    display_name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    department: Optional[str] = None
