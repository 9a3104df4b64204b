"""
Queue views: the patient's queue pages and the receptionist's queue pages.
"""

from typing import Optional

from ..config import get_settings
from ..models.appointment import AppointmentView
from ..models.queue import TodayQueues, QueueDetail, QueuePatient
from ..models.view import (
    AppointmentCard,
    AppointmentStats,
    QueueStatusPage,
    QueueDetailPage,
    QueueDashboardPage,
    QueueManagePage,
    QueuePatientRow,
    QueueRow
)
from . import presentation
from .api_client import QueueApiClient
from .view import QueueView

settings = get_settings()


def appointment_card(appointment: AppointmentView) -> AppointmentCard:
    """Appointment row with its badge."""
    return AppointmentCard(
        id=appointment.id,
        doctor_name=appointment.doctor.name,
        department=appointment.department,
        reason=appointment.reason,
        date=appointment.date,
        appointment_time=appointment.appointment_time,
        status=appointment.status,
        badge=presentation.status_badge(appointment.status)
    )


def _patient_row(patient: QueuePatient) -> QueuePatientRow:
    info = patient.patient_info
    return QueuePatientRow(
        id=patient.id,
        token_number=patient.token_number,
        name=info.name if info and info.name else "Unknown Patient",
        status=patient.status,
        is_current_patient=patient.is_current_patient,
        department=info.department if info else None,
        scheduled_time=info.scheduled_time if info else None,
        badge=presentation.status_badge(patient.status, is_current_patient=patient.is_current_patient)
    )


class QueueService:
    """Builds and renders queue views."""

    # Patient: all my appointments in queues

    @staticmethod
    def queue_status_key() -> str:
        return "patient:queue-status"

    @classmethod
    def queue_status_view(cls, client: QueueApiClient) -> QueueView:
        return QueueView(
            cls.queue_status_key(),
            client.get_patient_appointments,
            settings.PATIENT_QUEUE_LIST_POLL_SECONDS
        )

    @staticmethod
    def render_queue_status(view: QueueView, query: Optional[str] = None, when: str = "all") -> QueueStatusPage:
        page = QueueStatusPage(state=view.state())
        appointments = view.snapshot
        if appointments is None:
            return page
        page.stats = AppointmentStats(**presentation.appointment_stats(appointments))
        page.appointments = [
            appointment_card(a)
            for a in presentation.filter_appointments(appointments, query, when)
        ]
        return page

    # Patient: one appointment's live queue position

    @staticmethod
    def appointment_queue_key(appointment_id: str) -> str:
        return f"patient:queue-status:{appointment_id}"

    @classmethod
    def appointment_queue_view(cls, client: QueueApiClient, appointment_id: str) -> QueueView:
        async def load() -> AppointmentView:
            return await client.get_patient_appointment(appointment_id)

        return QueueView(
            cls.appointment_queue_key(appointment_id),
            load,
            settings.PATIENT_QUEUE_DETAIL_POLL_SECONDS
        )

    @staticmethod
    def render_appointment_queue(view: QueueView) -> QueueDetailPage:
        page = QueueDetailPage(state=view.state())
        appointment: Optional[AppointmentView] = view.snapshot
        if appointment is None:
            return page
        page.appointment = appointment_card(appointment)
        info = appointment.queue_info
        if info is None:
            return page
        page.token_number = info.token_number
        page.current_token = info.current_token
        page.patients_ahead = info.patients_ahead
        page.total_patients_in_queue = info.total_patients_in_queue
        page.completed_patients = info.completed_patients
        page.estimated_wait_time = presentation.display_text(info.estimated_wait_time)
        page.estimated_start_time = presentation.display_text(info.estimated_start_time)
        page.average_consultation_time = presentation.display_text(info.average_consultation_time)
        page.progress = presentation.progress_percentage(info.current_token, info.token_number)
        return page

    # Reception: today's queues

    @staticmethod
    def today_queues_key(department: Optional[str] = None) -> str:
        return f"reception:manage-queue:{department or 'all'}"

    @classmethod
    def today_queues_view(cls, client: QueueApiClient, department: Optional[str] = None) -> QueueView:
        async def load() -> TodayQueues:
            return await client.get_today_queues(department)

        return QueueView(
            cls.today_queues_key(department),
            load,
            settings.RECEPTION_QUEUE_DASHBOARD_POLL_SECONDS
        )

    @staticmethod
    def render_today_queues(view: QueueView, query: Optional[str] = None) -> QueueDashboardPage:
        page = QueueDashboardPage(state=view.state())
        data: Optional[TodayQueues] = view.snapshot
        if data is None:
            return page
        page.stats = data.stats.model_dump()
        page.department_stats = {name: stats.model_dump() for name, stats in data.department_stats.items()}
        page.queues = [
            QueueRow(
                id=queue.id,
                doctor_name=queue.doctor.name,
                specialization=queue.doctor.specialization,
                current_token=presentation.display_text(queue.current_token),
                total_patients=queue.total_patients,
                waiting_count=queue.waiting_count,
                in_progress_count=queue.in_progress_count,
                current_patient_name=queue.current_patient.patient_name if queue.current_patient else None,
                current_patient_token=queue.current_patient.token_number if queue.current_patient else None,
                last_updated=queue.last_updated
            )
            for queue in presentation.filter_queues(data.queues, query)
        ]
        return page

    # Reception: one doctor's queue

    @staticmethod
    def queue_detail_key(queue_id: str) -> str:
        return f"reception:queue:{queue_id}"

    @classmethod
    def queue_detail_view(cls, client: QueueApiClient, queue_id: str) -> QueueView:
        async def load() -> QueueDetail:
            return await client.get_queue(queue_id)

        return QueueView(
            cls.queue_detail_key(queue_id),
            load,
            settings.RECEPTION_QUEUE_DETAIL_POLL_SECONDS
        )

    @staticmethod
    def render_queue_detail(view: QueueView, query: Optional[str] = None, status: str = "all") -> QueueManagePage:
        page = QueueManagePage(state=view.state())
        queue: Optional[QueueDetail] = view.snapshot
        if queue is None:
            return page
        page.doctor_name = queue.doctor.name
        page.specialization = queue.doctor.specialization
        page.current_token = presentation.display_text(queue.current_token)
        page.average_consultation_time = presentation.display_text(
            queue.doctor.consultation_duration or queue.stats.average_consultation_time or 0
        )
        page.stats = queue.stats.model_dump()
        current = next((p for p in queue.patients if p.is_current_patient), None)
        page.current_patient = _patient_row(current) if current else None
        page.patients = [
            _patient_row(p)
            for p in presentation.filter_queue_patients(queue.patients, query, status)
        ]
        return page
