"""
View state and page response models.
"""

from pydantic import BaseModel
from typing import Optional, List, Dict
from datetime import datetime
from enum import Enum


class FetchErrorKind(str, Enum):
    """Failure classes reduced at the fetch boundary."""
    NETWORK = "network"
    AUTH = "auth"
    NOT_FOUND = "not_found"
    SERVER = "server"
    INVALID_RESPONSE = "invalid_response"


class FetchError(BaseModel):
    """A displayable fetch failure."""
    kind: FetchErrorKind
    message: str
    status_code: Optional[int] = None


class ViewPhase(str, Enum):
    """What a page should show."""
    LOADING = "loading"
    ERROR = "error"
    READY = "ready"
    STALE = "stale"


class BadgeTone(str, Enum):
    """Colour family of a status badge."""
    WARNING = "warning"
    SUCCESS = "success"
    INFO = "info"
    DANGER = "danger"
    NEUTRAL = "neutral"


class Badge(BaseModel):
    """Status badge presentation."""
    label: str
    tone: BadgeTone
    pulse: bool = False


class PageState(BaseModel):
    """Lifecycle flags shared by every page."""
    view: str
    phase: ViewPhase
    loading: bool = False
    refreshing: bool = False
    refresh_disabled: bool = False
    polling: bool = False
    error: Optional[FetchError] = None
    last_updated: Optional[datetime] = None


class Page(BaseModel):
    """Base page response."""
    state: PageState


class AppointmentCard(BaseModel):
    """Appointment row with its derived badge."""
    id: str
    doctor_name: str
    department: Optional[str] = None
    reason: Optional[str] = None
    date: Optional[datetime] = None
    appointment_time: Optional[str] = None
    status: Optional[str] = None
    badge: Badge


class AppointmentStats(BaseModel):
    total_appointments: int = 0
    today_appointments: int = 0
    waiting_appointments: int = 0
    in_progress_appointments: int = 0


class QueueStatusPage(Page):
    """Patient's list of appointments in queues."""
    stats: Optional[AppointmentStats] = None
    appointments: List[AppointmentCard] = []


class QueueDetailPage(Page):
    """Live status of one appointment."""
    appointment: Optional[AppointmentCard] = None
    token_number: Optional[int] = None
    current_token: Optional[int] = None
    patients_ahead: Optional[int] = None
    total_patients_in_queue: Optional[int] = None
    completed_patients: Optional[int] = None
    estimated_wait_time: Optional[str] = None
    estimated_start_time: Optional[str] = None
    average_consultation_time: Optional[str] = None
    progress: float = 0


class DashboardStats(BaseModel):
    upcoming: int = 0
    today: int = 0
    completed: int = 0
    token: str = "-"


class TodayQueueCard(BaseModel):
    token_number: Optional[int] = None
    current_token: Optional[int] = None
    message: str
    badge: Badge
    waiting_time: Optional[str] = None
    estimated_start_time: Optional[str] = None


class PatientDashboardPage(Page):
    stats: Optional[DashboardStats] = None
    today_queue: Optional[TodayQueueCard] = None
    appointments: List[AppointmentCard] = []


class RecordStats(BaseModel):
    total: int = 0
    completed: int = 0
    scheduled: int = 0
    in_progress: int = 0


class RecordCard(BaseModel):
    id: Optional[str] = None
    date: Optional[datetime] = None
    doctor: str
    department: str
    reason: Optional[str] = None
    title: Optional[str] = None
    status: Optional[str] = None
    badge: Badge


class RecordGroup(BaseModel):
    label: str
    records: List[RecordCard]


class MedicalHistoryPage(Page):
    stats: Optional[RecordStats] = None
    groups: List[RecordGroup] = []


class QueueRow(BaseModel):
    """Doctor queue row on the receptionist dashboard."""
    id: str
    doctor_name: str
    specialization: Optional[str] = None
    current_token: Optional[str] = None
    total_patients: int = 0
    waiting_count: int = 0
    in_progress_count: int = 0
    current_patient_name: Optional[str] = None
    current_patient_token: Optional[str] = None
    last_updated: Optional[datetime] = None


class QueueDashboardPage(Page):
    stats: Optional[Dict[str, int]] = None
    department_stats: Dict[str, Dict[str, int]] = {}
    queues: List[QueueRow] = []


class QueuePatientRow(BaseModel):
    id: str
    token_number: str
    name: str
    status: Optional[str] = None
    is_current_patient: bool = False
    department: Optional[str] = None
    scheduled_time: Optional[str] = None
    badge: Badge


class QueueManagePage(Page):
    """Receptionist view of one doctor's queue."""
    doctor_name: Optional[str] = None
    specialization: Optional[str] = None
    current_token: Optional[str] = None
    average_consultation_time: Optional[str] = None
    stats: Optional[Dict[str, float]] = None
    current_patient: Optional[QueuePatientRow] = None
    patients: List[QueuePatientRow] = []


class DoctorDashboardPage(Page):
    appointments: List[AppointmentCard] = []
    stats: Optional[AppointmentStats] = None
