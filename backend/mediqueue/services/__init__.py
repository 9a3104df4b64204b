"""Services package for MediQueue."""

from .api_client import ApiError, QueueApiClient
from .poller import Poller, PollState
from .view import QueueView
from .registry import ViewRegistry
from .queue_service import QueueService
from .patient_service import PatientService
from .doctor_service import DoctorService
from .session_service import SessionService, SessionMonitor, SessionCheck

__all__ = [
    "ApiError",
    "QueueApiClient",
    "Poller",
    "PollState",
    "QueueView",
    "ViewRegistry",
    "QueueService",
    "PatientService",
    "DoctorService",
    "SessionService",
    "SessionMonitor",
    "SessionCheck"
]
