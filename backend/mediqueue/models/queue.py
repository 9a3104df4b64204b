"""
Receptionist queue models: today's doctor queues and a single queue's detail.
"""

from pydantic import Field, field_validator
from typing import Optional, List, Dict, Union
from datetime import datetime
from enum import Enum

from .base import CamelModel, CounterModel
from .appointment import DoctorRef, DisplayValue


class QueueStatus(str, Enum):
    """Status values the backend reports for appointments and queue entries."""
    SCHEDULED = "scheduled"
    WAITING = "waiting"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class CurrentPatient(CamelModel):
    """Patient currently with the doctor."""
    patient_name: str = ""
    reason: Optional[str] = None
    token_number: Optional[str] = None

    @field_validator("patient_name", mode="before")
    @classmethod
    def _null_name(cls, value):
        return "" if value is None else value

    @field_validator("token_number", mode="before")
    @classmethod
    def _token_as_text(cls, value):
        return str(value) if value is not None else None


class DoctorQueue(CamelModel):
    """One doctor's queue on the receptionist dashboard."""
    id: str = Field(..., alias="_id")
    doctor: DoctorRef = Field(default_factory=DoctorRef)
    current_token: Optional[Union[int, str]] = None
    total_patients: int = 0
    waiting_count: int = 0
    in_progress_count: int = 0
    current_patient: Optional[CurrentPatient] = None
    last_updated: Optional[datetime] = None

    @field_validator("doctor", mode="before")
    @classmethod
    def _null_doctor(cls, value):
        return {} if value is None else value

    @field_validator("total_patients", "waiting_count", "in_progress_count", mode="before")
    @classmethod
    def _null_count(cls, value):
        return 0 if value is None else value


class QueueStats(CounterModel):
    """Hospital-wide counters for today."""
    total_queues: int = 0
    total_patients: int = 0
    waiting_patients: int = 0
    in_progress_patients: int = 0
    completed_patients: int = 0


class DepartmentStats(CounterModel):
    """Per-department counters for today."""
    doctor_count: int = 0
    waiting_count: int = 0
    in_progress_count: int = 0
    completed_count: int = 0


class TodayQueues(CamelModel):
    """Receptionist dashboard payload."""
    queues: List[DoctorQueue] = []
    stats: QueueStats = Field(default_factory=QueueStats)
    department_stats: Dict[str, DepartmentStats] = {}

    @field_validator("queues", "stats", "department_stats", mode="before")
    @classmethod
    def _null_section(cls, value, info):
        if value is not None:
            return value
        return [] if info.field_name == "queues" else {}


class PatientInfo(CamelModel):
    """Contact and visit details of a patient in a queue."""
    name: Optional[str] = None
    email: Optional[str] = None
    contact_number: Optional[str] = None
    reason: Optional[str] = None
    department: Optional[str] = None
    scheduled_time: Optional[str] = None


class QueuePatient(CamelModel):
    """An entry in a doctor's queue."""
    id: str = Field(..., alias="_id")
    token_number: str = ""
    status: Optional[str] = None
    is_current_patient: bool = False
    patient_info: Optional[PatientInfo] = None
    estimated_start_time: Optional[DisplayValue] = None
    estimated_end_time: Optional[DisplayValue] = None
    actual_start_time: Optional[DisplayValue] = None
    actual_end_time: Optional[DisplayValue] = None
    actual_duration: Optional[DisplayValue] = None

    @field_validator("token_number", mode="before")
    @classmethod
    def _token_as_text(cls, value):
        return "" if value is None else str(value)

    @field_validator("is_current_patient", mode="before")
    @classmethod
    def _null_flag(cls, value):
        return False if value is None else value


class QueueDetailStats(CounterModel):
    """Counters for a single queue."""
    total_patients: int = 0
    waiting_patients: int = 0
    in_progress_patients: int = 0
    completed_patients: int = 0
    average_consultation_time: float = 0


class QueueDetail(CamelModel):
    """A single doctor's queue with its patients."""
    id: str = Field(..., alias="_id")
    doctor: DoctorRef = Field(default_factory=DoctorRef)
    current_token: Optional[Union[int, str]] = None
    stats: QueueDetailStats = Field(default_factory=QueueDetailStats)
    patients: List[QueuePatient] = []

    @field_validator("doctor", "stats", mode="before")
    @classmethod
    def _null_section(cls, value):
        return {} if value is None else value

    @field_validator("patients", mode="before")
    @classmethod
    def _null_patients(cls, value):
        return [] if value is None else value
