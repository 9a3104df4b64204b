"""
Doctor's appointment dashboard view.
"""

from ..config import get_settings
from ..models.view import AppointmentStats, DoctorDashboardPage
from . import presentation
from .api_client import QueueApiClient
from .queue_service import appointment_card
from .view import QueueView

settings = get_settings()


class DoctorService:
    """Builds and renders the doctor's dashboard."""

    @staticmethod
    def dashboard_key(doctor_id: str) -> str:
        return f"doctor:dashboard:{doctor_id}"

    @classmethod
    def dashboard_view(cls, client: QueueApiClient, doctor_id: str) -> QueueView:
        async def load():
            return await client.get_doctor_appointments(doctor_id)

        return QueueView(cls.dashboard_key(doctor_id), load, settings.DOCTOR_DASHBOARD_POLL_SECONDS)

    @staticmethod
    def render_dashboard(view: QueueView) -> DoctorDashboardPage:
        page = DoctorDashboardPage(state=view.state())
        appointments = view.snapshot
        if appointments is None:
            return page
        page.stats = AppointmentStats(**presentation.appointment_stats(appointments))
        page.appointments = [appointment_card(a) for a in appointments]
        return page
