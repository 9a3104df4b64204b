"""
Derived presentation: pure functions recomputed from a snapshot on every render.
"""

from datetime import date, datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, TypeVar

from ..models.appointment import AppointmentView, MedicalRecord, TodayQueue
from ..models.queue import DoctorQueue, QueuePatient, QueueStatus
from ..models.view import Badge, BadgeTone

T = TypeVar("T")

STATUS_TONES = {
    QueueStatus.SCHEDULED.value: BadgeTone.WARNING,
    QueueStatus.WAITING.value: BadgeTone.WARNING,
    QueueStatus.IN_PROGRESS.value: BadgeTone.SUCCESS,
    QueueStatus.COMPLETED.value: BadgeTone.INFO,
    QueueStatus.CANCELLED.value: BadgeTone.DANGER,
}


def progress_percentage(current_token: Optional[float], token_number: Optional[float]) -> float:
    """
    How far the queue has moved towards the patient's own token, in [0, 100].

    The patient's token is the denominator, not the queue size. A missing or
    zero token number gives 0.
    """
    if not token_number or current_token is None:
        return 0.0
    return min(100.0, max(0.0, current_token / token_number * 100))


def matches_query(values: Iterable[Optional[str]], query: str) -> bool:
    """Case-insensitive substring match against any of the values."""
    needle = query.lower()
    return any(value and needle in value.lower() for value in values)


def filter_by_query(items: Sequence[T], query: Optional[str], fields: Callable[[T], Iterable[Optional[str]]]) -> List[T]:
    """Keep items whose fields contain the query; an empty query keeps everything."""
    if not query:
        return list(items)
    return [item for item in items if matches_query(fields(item), query)]


def _appointment_fields(appointment: AppointmentView):
    return (appointment.doctor.name, appointment.department, appointment.reason)


def _is_same_day(value: Optional[datetime], today: date) -> bool:
    return value is not None and value.date() == today


def filter_appointments(
    appointments: Sequence[AppointmentView],
    query: Optional[str] = None,
    when: str = "all",
    today: Optional[date] = None
) -> List[AppointmentView]:
    """Search by doctor, department and reason, then by date: all, today or upcoming."""
    today = today or date.today()
    result = filter_by_query(appointments, query, _appointment_fields)
    if when == "today":
        result = [a for a in result if _is_same_day(a.date, today)]
    elif when == "upcoming":
        result = [a for a in result if a.date is not None and a.date.date() >= today]
    return result


def filter_queues(queues: Sequence[DoctorQueue], query: Optional[str] = None) -> List[DoctorQueue]:
    """Search doctor name, specialization and the current patient's name."""
    def fields(queue: DoctorQueue):
        patient_name = queue.current_patient.patient_name if queue.current_patient else None
        return (queue.doctor.name, queue.doctor.specialization, patient_name)
    return filter_by_query(queues, query, fields)


def filter_queue_patients(
    patients: Sequence[QueuePatient],
    query: Optional[str] = None,
    status: str = "all"
) -> List[QueuePatient]:
    """Status filter first, then search over the patient's details and token."""
    if status != "all":
        patients = [p for p in patients if p.status == status]
    if not query:
        return list(patients)
    # entries without patient details never match a search
    return [
        p for p in patients
        if p.patient_info is not None and matches_query(
            (p.patient_info.name, p.token_number, p.patient_info.reason,
             p.patient_info.department, p.patient_info.email),
            query
        )
    ]


def filter_records(records: Sequence[MedicalRecord], query: Optional[str] = None, tab: str = "all") -> List[MedicalRecord]:
    result = filter_by_query(records, query, lambda r: (r.doctor, r.department, r.reason, r.title))
    if tab != "all":
        result = [r for r in result if r.status == tab]
    return result


def month_label(value: datetime) -> str:
    """'January 2024' style label."""
    return value.strftime("%B %Y")


def group_by_month(records: Sequence[T], key: Callable[[T], Optional[datetime]] = lambda r: r.date) -> Dict[str, List[T]]:
    """
    Bucket records by calendar month, in first-seen order.

    Order within a bucket is the order received; nothing is re-sorted.
    Records without a date go to an "Undated" bucket.
    """
    groups: Dict[str, List[T]] = {}
    for record in records:
        value = key(record)
        label = month_label(value) if value is not None else "Undated"
        groups.setdefault(label, []).append(record)
    return groups


def status_badge(status: Optional[str], is_my_turn: bool = False, is_current_patient: bool = False) -> Badge:
    """Badge for any status value; unknown statuses get the neutral tone."""
    label = status or "unknown"
    if is_my_turn or is_current_patient:
        return Badge(label=label, tone=BadgeTone.SUCCESS, pulse=True)
    tone = STATUS_TONES.get(status or "", BadgeTone.NEUTRAL)
    return Badge(label=label, tone=tone, pulse=status == QueueStatus.IN_PROGRESS.value)


def turn_message(today_queue: TodayQueue) -> str:
    if today_queue.is_my_turn:
        return "It's Your Turn!"
    if today_queue.status == QueueStatus.WAITING.value:
        return f"Waiting: {today_queue.patients_ahead or 0} ahead of you"
    if today_queue.status == QueueStatus.IN_PROGRESS.value:
        return "Your consultation is in progress"
    return "Status unknown"


def display_text(value: Any) -> Optional[str]:
    """Server-computed display values are shown as-is."""
    return None if value is None else str(value)


def appointment_stats(appointments: Sequence[AppointmentView], today: Optional[date] = None) -> Dict[str, int]:
    today = today or date.today()
    return {
        "total_appointments": len(appointments),
        "today_appointments": sum(1 for a in appointments if _is_same_day(a.date, today)),
        "waiting_appointments": sum(1 for a in appointments if a.status == QueueStatus.SCHEDULED.value),
        "in_progress_appointments": sum(1 for a in appointments if a.status == QueueStatus.IN_PROGRESS.value),
    }


def record_stats(records: Sequence[MedicalRecord]) -> Dict[str, int]:
    return {
        "total": len(records),
        "completed": sum(1 for r in records if r.status == QueueStatus.COMPLETED.value),
        "scheduled": sum(1 for r in records if r.status == QueueStatus.SCHEDULED.value),
        "in_progress": sum(1 for r in records if r.status == QueueStatus.IN_PROGRESS.value),
    }


def patient_dashboard_stats(appointments: Sequence[AppointmentView], recent_consultations: Sequence[Any], today_queue: Optional[TodayQueue]) -> Dict[str, Any]:
    token = today_queue.token_number if today_queue else None
    return {
        "upcoming": len(appointments),
        "today": sum(1 for a in appointments if a.is_today),
        "completed": len(recent_consultations),
        "token": str(token) if token else "-",
    }
