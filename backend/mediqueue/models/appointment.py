"""
Appointment and patient-side queue models.
"""

from pydantic import Field, AliasChoices, field_validator
from typing import Optional, List, Union, Dict, Any
from datetime import datetime

from .base import CamelModel


DisplayValue = Union[int, float, str]


class DoctorRef(CamelModel):
    """Doctor identity embedded in appointments and queues."""
    id: Optional[str] = Field(None, alias="_id")
    name: str = ""
    specialization: Optional[str] = None
    consultation_duration: Optional[DisplayValue] = None

    @field_validator("name", mode="before")
    @classmethod
    def _null_name(cls, value):
        return "" if value is None else value


class QueueInfo(CamelModel):
    """Queue snapshot for a patient's own appointment, as computed server-side."""
    token_number: Optional[int] = None
    current_token: Optional[int] = None
    patients_ahead: Optional[int] = None
    total_patients_in_queue: Optional[int] = None
    completed_patients: Optional[int] = None
    estimated_wait_time: Optional[DisplayValue] = Field(
        None,
        validation_alias=AliasChoices("estimatedWaitTime", "waitingTime", "estimated_wait_time")
    )
    estimated_start_time: Optional[DisplayValue] = None
    average_consultation_time: Optional[DisplayValue] = None


class AppointmentView(CamelModel):
    """Appointment with doctor identity and its queue snapshot."""
    id: str = Field(..., alias="_id")
    doctor: DoctorRef = Field(default_factory=DoctorRef)
    department: Optional[str] = None
    reason: Optional[str] = None
    date: Optional[datetime] = None
    appointment_time: Optional[str] = None
    status: Optional[str] = None
    is_today: bool = False
    queue_info: Optional[QueueInfo] = None

    @field_validator("is_today", mode="before")
    @classmethod
    def _null_flag(cls, value):
        return False if value is None else value

    @field_validator("doctor", mode="before")
    @classmethod
    def _null_doctor(cls, value):
        return {} if value is None else value


class TodayQueue(CamelModel):
    """The patient's position in today's queue (dashboard card)."""
    token_number: Optional[int] = None
    current_token: Optional[int] = None
    status: Optional[str] = None
    is_my_turn: bool = False
    patients_ahead: Optional[int] = None
    waiting_time: Optional[DisplayValue] = None
    estimated_start_time: Optional[DisplayValue] = None

    @field_validator("is_my_turn", mode="before")
    @classmethod
    def _null_flag(cls, value):
        return False if value is None else value


class PatientDashboard(CamelModel):
    """Patient dashboard payload."""
    today_queue: Optional[TodayQueue] = None
    appointments: List[AppointmentView] = []
    recent_consultations: List[Dict[str, Any]] = []

    @field_validator("appointments", "recent_consultations", mode="before")
    @classmethod
    def _null_list(cls, value):
        return [] if value is None else value


class MedicalRecord(CamelModel):
    """One encounter in the patient's medical history."""
    id: Optional[str] = Field(None, alias="_id")
    date: Optional[datetime] = None
    doctor: str = ""
    department: str = ""
    reason: Optional[str] = None
    title: Optional[str] = None
    status: Optional[str] = None

    @field_validator("doctor", "department", mode="before")
    @classmethod
    def _null_text(cls, value):
        return "" if value is None else value
