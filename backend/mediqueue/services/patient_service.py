"""
Patient dashboard and medical history views.
"""

from typing import Optional

from ..config import get_settings
from ..models.appointment import PatientDashboard
from ..models.view import (
    DashboardStats,
    MedicalHistoryPage,
    PatientDashboardPage,
    RecordCard,
    RecordGroup,
    RecordStats,
    TodayQueueCard
)
from . import presentation
from .api_client import QueueApiClient
from .queue_service import appointment_card
from .view import QueueView

settings = get_settings()


def has_queue_today(dashboard: Optional[PatientDashboard]) -> bool:
    """The dashboard only polls while the patient is in a queue today."""
    return dashboard is not None and dashboard.today_queue is not None


class PatientService:
    """Builds and renders the patient's own pages."""

    DASHBOARD_KEY = "patient:dashboard"
    MEDICAL_HISTORY_KEY = "patient:medical-history"

    @classmethod
    def dashboard_view(cls, client: QueueApiClient) -> QueueView:
        return QueueView(
            cls.DASHBOARD_KEY,
            client.get_patient_dashboard,
            settings.PATIENT_DASHBOARD_POLL_SECONDS,
            should_poll=has_queue_today
        )

    @staticmethod
    def render_dashboard(view: QueueView, query: Optional[str] = None) -> PatientDashboardPage:
        page = PatientDashboardPage(state=view.state())
        data: Optional[PatientDashboard] = view.snapshot
        if data is None:
            return page

        page.stats = DashboardStats(**presentation.patient_dashboard_stats(
            data.appointments, data.recent_consultations, data.today_queue
        ))
        if data.today_queue is not None:
            queue = data.today_queue
            page.today_queue = TodayQueueCard(
                token_number=queue.token_number,
                current_token=queue.current_token,
                message=presentation.turn_message(queue),
                badge=presentation.status_badge(queue.status, is_my_turn=queue.is_my_turn),
                waiting_time=presentation.display_text(queue.waiting_time),
                estimated_start_time=presentation.display_text(queue.estimated_start_time)
            )
        page.appointments = [
            appointment_card(a)
            for a in presentation.filter_appointments(data.appointments, query)
        ]
        return page

    @classmethod
    def medical_history_view(cls, client: QueueApiClient) -> QueueView:
        # history is loaded on mount and on manual refresh only
        return QueueView(cls.MEDICAL_HISTORY_KEY, client.get_medical_history, None)

    @staticmethod
    def render_medical_history(view: QueueView, query: Optional[str] = None, tab: str = "all") -> MedicalHistoryPage:
        page = MedicalHistoryPage(state=view.state())
        records = view.snapshot
        if records is None:
            return page
        page.stats = RecordStats(**presentation.record_stats(records))
        filtered = presentation.filter_records(records, query, tab)
        page.groups = [
            RecordGroup(
                label=label,
                records=[
                    RecordCard(
                        id=r.id,
                        date=r.date,
                        doctor=r.doctor,
                        department=r.department,
                        reason=r.reason,
                        title=r.title,
                        status=r.status,
                        badge=presentation.status_badge(r.status)
                    )
                    for r in group
                ]
            )
            for label, group in presentation.group_by_month(filtered).items()
        ]
        return page
