"""
Patient pages: queue status list, live queue position, dashboard, medical history.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status

from ..models.view import QueueStatusPage, QueueDetailPage, PatientDashboardPage, MedicalHistoryPage
from ..services.api_client import QueueApiClient
from ..services.queue_service import QueueService
from ..services.patient_service import PatientService
from ..services.registry import ViewRegistry
from .dependencies import get_api_client, get_registry, refresh_view, retry_view, unmount_view

router = APIRouter(prefix="/patient", tags=["Patient"])


@router.get("/queue-status", response_model=QueueStatusPage)
async def queue_status(
    q: Optional[str] = Query(None, description="Search doctor, department or reason"),
    filter: str = Query("all", pattern="^(all|today|upcoming)$"),
    client: QueueApiClient = Depends(get_api_client),
    registry: ViewRegistry = Depends(get_registry)
):
    """All of my appointments and their queue status."""
    view = await registry.mount(QueueService.queue_status_key(), lambda: QueueService.queue_status_view(client))
    return QueueService.render_queue_status(view, q, filter)


@router.post("/queue-status/refresh", response_model=QueueStatusPage)
async def refresh_queue_status(
    q: Optional[str] = Query(None),
    filter: str = Query("all", pattern="^(all|today|upcoming)$"),
    registry: ViewRegistry = Depends(get_registry)
):
    view = await refresh_view(registry, QueueService.queue_status_key())
    return QueueService.render_queue_status(view, q, filter)


@router.post("/queue-status/retry", response_model=QueueStatusPage)
async def retry_queue_status(
    q: Optional[str] = Query(None),
    filter: str = Query("all", pattern="^(all|today|upcoming)$"),
    registry: ViewRegistry = Depends(get_registry)
):
    view = await retry_view(registry, QueueService.queue_status_key())
    return QueueService.render_queue_status(view, q, filter)


@router.delete("/queue-status", status_code=status.HTTP_204_NO_CONTENT)
async def close_queue_status(registry: ViewRegistry = Depends(get_registry)):
    await unmount_view(registry, QueueService.queue_status_key())


@router.get("/queue-status/{appointment_id}", response_model=QueueDetailPage)
async def appointment_queue(
    appointment_id: str,
    client: QueueApiClient = Depends(get_api_client),
    registry: ViewRegistry = Depends(get_registry)
):
    """Live queue position for one appointment."""
    view = await registry.mount(
        QueueService.appointment_queue_key(appointment_id),
        lambda: QueueService.appointment_queue_view(client, appointment_id)
    )
    return QueueService.render_appointment_queue(view)


@router.post("/queue-status/{appointment_id}/refresh", response_model=QueueDetailPage)
async def refresh_appointment_queue(appointment_id: str, registry: ViewRegistry = Depends(get_registry)):
    view = await refresh_view(registry, QueueService.appointment_queue_key(appointment_id))
    return QueueService.render_appointment_queue(view)


@router.post("/queue-status/{appointment_id}/retry", response_model=QueueDetailPage)
async def retry_appointment_queue(appointment_id: str, registry: ViewRegistry = Depends(get_registry)):
    view = await retry_view(registry, QueueService.appointment_queue_key(appointment_id))
    return QueueService.render_appointment_queue(view)


@router.delete("/queue-status/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def close_appointment_queue(appointment_id: str, registry: ViewRegistry = Depends(get_registry)):
    await unmount_view(registry, QueueService.appointment_queue_key(appointment_id))


@router.get("/dashboard", response_model=PatientDashboardPage)
async def dashboard(
    q: Optional[str] = Query(None, description="Search appointments"),
    client: QueueApiClient = Depends(get_api_client),
    registry: ViewRegistry = Depends(get_registry)
):
    """Dashboard; refreshes itself only while I am in a queue today."""
    view = await registry.mount(PatientService.DASHBOARD_KEY, lambda: PatientService.dashboard_view(client))
    return PatientService.render_dashboard(view, q)


@router.post("/dashboard/refresh", response_model=PatientDashboardPage)
async def refresh_dashboard(q: Optional[str] = Query(None), registry: ViewRegistry = Depends(get_registry)):
    view = await refresh_view(registry, PatientService.DASHBOARD_KEY)
    return PatientService.render_dashboard(view, q)


@router.post("/dashboard/retry", response_model=PatientDashboardPage)
async def retry_dashboard(q: Optional[str] = Query(None), registry: ViewRegistry = Depends(get_registry)):
    view = await retry_view(registry, PatientService.DASHBOARD_KEY)
    return PatientService.render_dashboard(view, q)


@router.delete("/dashboard", status_code=status.HTTP_204_NO_CONTENT)
async def close_dashboard(registry: ViewRegistry = Depends(get_registry)):
    await unmount_view(registry, PatientService.DASHBOARD_KEY)


@router.get("/medical-history", response_model=MedicalHistoryPage)
async def medical_history(
    q: Optional[str] = Query(None, description="Search doctor, department, reason or title"),
    tab: str = Query("all", description="Status tab"),
    client: QueueApiClient = Depends(get_api_client),
    registry: ViewRegistry = Depends(get_registry)
):
    """Medical history grouped by month."""
    view = await registry.mount(PatientService.MEDICAL_HISTORY_KEY, lambda: PatientService.medical_history_view(client))
    return PatientService.render_medical_history(view, q, tab)


@router.post("/medical-history/refresh", response_model=MedicalHistoryPage)
async def refresh_medical_history(
    q: Optional[str] = Query(None),
    tab: str = Query("all"),
    registry: ViewRegistry = Depends(get_registry)
):
    view = await refresh_view(registry, PatientService.MEDICAL_HISTORY_KEY)
    return PatientService.render_medical_history(view, q, tab)


@router.post("/medical-history/retry", response_model=MedicalHistoryPage)
async def retry_medical_history(
    q: Optional[str] = Query(None),
    tab: str = Query("all"),
    registry: ViewRegistry = Depends(get_registry)
):
    view = await retry_view(registry, PatientService.MEDICAL_HISTORY_KEY)
    return PatientService.render_medical_history(view, q, tab)


@router.delete("/medical-history", status_code=status.HTTP_204_NO_CONTENT)
async def close_medical_history(registry: ViewRegistry = Depends(get_registry)):
    await unmount_view(registry, PatientService.MEDICAL_HISTORY_KEY)
