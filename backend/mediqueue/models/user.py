"""
Signed-in user model.
"""

from pydantic import Field
from typing import Optional
from enum import Enum

from .base import CamelModel


class UserRole(str, Enum):
    """User roles in the hospital system."""
    PATIENT = "patient"
    DOCTOR = "doctor"
    RECEPTIONIST = "receptionist"


class CurrentUser(CamelModel):
    """The identity returned by the backend for the stored token."""
    id: Optional[str] = Field(None, alias="_id")
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    doctor: Optional[str] = Field(None, description="Doctor profile id for doctor accounts")
