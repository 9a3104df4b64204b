"""Routers package for MediQueue pages."""

from .patient import router as patient_router
from .reception import router as reception_router
from .doctor import router as doctor_router
from .session import router as session_router

__all__ = [
    "patient_router",
    "reception_router",
    "doctor_router",
    "session_router"
]
