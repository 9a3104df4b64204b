"""
Receptionist pages: today's queue dashboard and a doctor's queue.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status

from ..models.view import QueueDashboardPage, QueueManagePage
from ..services.api_client import QueueApiClient
from ..services.queue_service import QueueService
from ..services.registry import ViewRegistry
from .dependencies import get_api_client, get_registry, refresh_view, retry_view, unmount_view

router = APIRouter(prefix="/reception", tags=["Reception"])


@router.get("/manage-queue", response_model=QueueDashboardPage)
async def manage_queue(
    q: Optional[str] = Query(None, description="Search doctor, specialization or current patient"),
    department: Optional[str] = Query(None, description="Department filter sent to the backend"),
    client: QueueApiClient = Depends(get_api_client),
    registry: ViewRegistry = Depends(get_registry)
):
    """Overview of all department queues."""
    view = await registry.mount(
        QueueService.today_queues_key(department),
        lambda: QueueService.today_queues_view(client, department)
    )
    return QueueService.render_today_queues(view, q)


@router.post("/manage-queue/refresh", response_model=QueueDashboardPage)
async def refresh_manage_queue(
    q: Optional[str] = Query(None),
    department: Optional[str] = Query(None),
    registry: ViewRegistry = Depends(get_registry)
):
    view = await refresh_view(registry, QueueService.today_queues_key(department))
    return QueueService.render_today_queues(view, q)


@router.post("/manage-queue/retry", response_model=QueueDashboardPage)
async def retry_manage_queue(
    q: Optional[str] = Query(None),
    department: Optional[str] = Query(None),
    registry: ViewRegistry = Depends(get_registry)
):
    view = await retry_view(registry, QueueService.today_queues_key(department))
    return QueueService.render_today_queues(view, q)


@router.delete("/manage-queue", status_code=status.HTTP_204_NO_CONTENT)
async def close_manage_queue(
    department: Optional[str] = Query(None),
    registry: ViewRegistry = Depends(get_registry)
):
    await unmount_view(registry, QueueService.today_queues_key(department))


@router.get("/queue/{queue_id}", response_model=QueueManagePage)
async def queue_detail(
    queue_id: str,
    q: Optional[str] = Query(None, description="Search name, token, reason, department or email"),
    status_filter: str = Query("all", alias="status"),
    client: QueueApiClient = Depends(get_api_client),
    registry: ViewRegistry = Depends(get_registry)
):
    """One doctor's queue with its patients."""
    view = await registry.mount(
        QueueService.queue_detail_key(queue_id),
        lambda: QueueService.queue_detail_view(client, queue_id)
    )
    return QueueService.render_queue_detail(view, q, status_filter)


@router.post("/queue/{queue_id}/refresh", response_model=QueueManagePage)
async def refresh_queue_detail(
    queue_id: str,
    q: Optional[str] = Query(None),
    status_filter: str = Query("all", alias="status"),
    registry: ViewRegistry = Depends(get_registry)
):
    view = await refresh_view(registry, QueueService.queue_detail_key(queue_id))
    return QueueService.render_queue_detail(view, q, status_filter)


@router.post("/queue/{queue_id}/retry", response_model=QueueManagePage)
async def retry_queue_detail(
    queue_id: str,
    q: Optional[str] = Query(None),
    status_filter: str = Query("all", alias="status"),
    registry: ViewRegistry = Depends(get_registry)
):
    view = await retry_view(registry, QueueService.queue_detail_key(queue_id))
    return QueueService.render_queue_detail(view, q, status_filter)


@router.delete("/queue/{queue_id}", status_code=status.HTTP_204_NO_CONTENT)
async def close_queue_detail(queue_id: str, registry: ViewRegistry = Depends(get_registry)):
    await unmount_view(registry, QueueService.queue_detail_key(queue_id))
