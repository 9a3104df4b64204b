"""Pydantic models for MediQueue."""

from .base import CamelModel
from .user import CurrentUser, UserRole
from .appointment import (
    DoctorRef,
    QueueInfo,
    AppointmentView,
    TodayQueue,
    PatientDashboard,
    MedicalRecord
)
from .queue import (
    QueueStatus,
    CurrentPatient,
    DoctorQueue,
    QueueStats,
    DepartmentStats,
    TodayQueues,
    PatientInfo,
    QueuePatient,
    QueueDetailStats,
    QueueDetail
)
from .view import FetchError, FetchErrorKind, ViewPhase, Badge, BadgeTone, PageState

__all__ = [
    "CamelModel",
    # User
    "CurrentUser", "UserRole",
    # Appointment
    "DoctorRef", "QueueInfo", "AppointmentView", "TodayQueue",
    "PatientDashboard", "MedicalRecord",
    # Queue
    "QueueStatus", "CurrentPatient", "DoctorQueue", "QueueStats",
    "DepartmentStats", "TodayQueues", "PatientInfo", "QueuePatient",
    "QueueDetailStats", "QueueDetail",
    # View
    "FetchError", "FetchErrorKind", "ViewPhase", "Badge", "BadgeTone", "PageState"
]
