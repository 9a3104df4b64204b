"""
HTTP client for the hospital backend.

Every request re-reads the bearer token from the token provider, so a token
rotated in storage is used on the very next call.
"""

import logging
from typing import Optional, Dict, Any, List, Callable, Awaitable

import httpx
from pydantic import ValidationError

from ..config import get_settings
from ..models.appointment import AppointmentView, PatientDashboard, MedicalRecord
from ..models.queue import TodayQueues, QueueDetail
from ..models.user import CurrentUser
from ..models.view import FetchError, FetchErrorKind
from ..token_store import TokenProvider

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Something went wrong. Please try again."


class ApiError(Exception):
    """A failed backend call, already classified."""

    def __init__(self, kind: FetchErrorKind, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code

    def to_fetch_error(self) -> FetchError:
        return FetchError(kind=self.kind, message=self.message, status_code=self.status_code)

    @property
    def is_session_failure(self) -> bool:
        """401, or 403 whose message talks about the session."""
        if self.status_code == 401:
            return True
        return self.status_code == 403 and "session" in self.message.lower()


def classify_status(status_code: int) -> FetchErrorKind:
    """Map an HTTP error status to a failure class."""
    if status_code in (401, 403):
        return FetchErrorKind.AUTH
    if status_code == 404:
        return FetchErrorKind.NOT_FOUND
    return FetchErrorKind.SERVER


def _server_message(response: httpx.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message:
            return message
    return None


class QueueApiClient:
    """Read-only client for queue and appointment endpoints."""

    def __init__(
        self,
        token_provider: TokenProvider,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        session_token_provider: Optional[Callable[[], Optional[str]]] = None,
        on_unauthorized: Optional[Callable[["ApiError"], Awaitable[None]]] = None
    ):
        settings = get_settings()
        self.token_provider = token_provider
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.REQUEST_TIMEOUT_SECONDS
        self.transport = transport
        self.session_token_provider = session_token_provider
        self.on_unauthorized = on_unauthorized

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        token = self.token_provider.get_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        if self.session_token_provider:
            session_token = self.session_token_provider()
            if session_token:
                headers["x-session-token"] = session_token
        return headers

    async def request(
        self,
        method: str,
        path: str,
        fallback_message: str = GENERIC_ERROR,
        params: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Perform one authenticated request and return the decoded JSON body.

        Raises:
            ApiError: for transport failures, non-2xx responses and bodies
                that are not JSON objects.
        """
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self.transport
            ) as client:
                response = await client.request(method, path, params=params, headers=self._headers())
        except httpx.HTTPError as e:
            logger.warning(f"{method} {path} transport failure: {e}")
            raise ApiError(FetchErrorKind.NETWORK, fallback_message) from e

        if response.is_error:
            error = ApiError(
                classify_status(response.status_code),
                _server_message(response) or fallback_message,
                response.status_code
            )
            logger.warning(f"{method} {path} -> {response.status_code}: {error.message}")
            if error.is_session_failure and self.on_unauthorized:
                try:
                    await self.on_unauthorized(error)
                except Exception:
                    logger.exception("Unauthorized hook failed")
            raise error

        try:
            body = response.json()
        except ValueError as e:
            raise ApiError(FetchErrorKind.INVALID_RESPONSE, fallback_message, response.status_code) from e
        if not isinstance(body, dict):
            raise ApiError(FetchErrorKind.INVALID_RESPONSE, fallback_message, response.status_code)
        return body

    async def get(self, path: str, fallback_message: str = GENERIC_ERROR, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return await self.request("GET", path, fallback_message, params)

    @staticmethod
    def _parse(model, data: Any, fallback_message: str):
        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Unexpected {model.__name__} payload: {e.error_count()} errors")
            raise ApiError(FetchErrorKind.INVALID_RESPONSE, fallback_message) from e

    @classmethod
    def _parse_list(cls, model, data: Any, fallback_message: str) -> List[Any]:
        if data is None:
            return []
        if not isinstance(data, list):
            raise ApiError(FetchErrorKind.INVALID_RESPONSE, fallback_message)
        return [cls._parse(model, item, fallback_message) for item in data]

    # Patient

    async def get_patient_appointments(self) -> List[AppointmentView]:
        """All of the signed-in patient's appointments."""
        message = "Failed to load appointments. Please try again."
        body = await self.get("/api/appointment/get-all-appoinement-patient", message)
        return self._parse_list(AppointmentView, body.get("appointments"), message)

    async def get_patient_appointment(self, appointment_id: str) -> AppointmentView:
        """One appointment with its queue snapshot."""
        message = "Failed to load appointment details. Please try again."
        body = await self.get(f"/api/appointment/get-appoinement-detail-patient/{appointment_id}", message)
        if not body.get("appointment"):
            raise ApiError(FetchErrorKind.NOT_FOUND, "Appointment not found", 404)
        return self._parse(AppointmentView, body["appointment"], message)

    async def get_patient_dashboard(self) -> PatientDashboard:
        message = "Failed to load your dashboard"
        body = await self.get("/api/patient/dashboard/info", message)
        if body.get("success") is False:
            raise ApiError(FetchErrorKind.SERVER, body.get("message") or message)
        return self._parse(PatientDashboard, body, message)

    async def get_medical_history(self) -> List[MedicalRecord]:
        message = "Failed to load medical history. Please try again."
        body = await self.get("/api/appointment/medical-history", message)
        return self._parse_list(MedicalRecord, body.get("records"), message)

    # Reception

    async def get_today_queues(self, department: Optional[str] = None) -> TodayQueues:
        """Every doctor queue for today, optionally for one department."""
        message = "Failed to fetch queue data"
        params = {"department": department} if department and department != "all" else None
        body = await self.get("/api/appointment/today", message, params=params)
        return self._parse(TodayQueues, body, message)

    async def get_queue(self, queue_id: str) -> QueueDetail:
        message = "Failed to fetch queue details"
        body = await self.get(f"/api/appointment/queue/{queue_id}", message)
        if not body.get("queue"):
            raise ApiError(FetchErrorKind.NOT_FOUND, "Queue not found", 404)
        return self._parse(QueueDetail, body["queue"], message)

    # Doctor

    async def get_doctor_appointments(self, doctor_id: str) -> List[AppointmentView]:
        message = "Failed to load appointments"
        body = await self.get(f"/api/appointment/get-all-appoinment-doctor/{doctor_id}", message)
        return self._parse_list(AppointmentView, body.get("appointments"), message)

    # Identity

    async def get_current_user(self) -> CurrentUser:
        message = "Failed to load your profile"
        body = await self.get("/api/user/me", message)
        if not body.get("user"):
            raise ApiError(FetchErrorKind.INVALID_RESPONSE, message)
        return self._parse(CurrentUser, body["user"], message)

    async def logout(self) -> None:
        await self.request("POST", "/api/user/logout", "Logout failed")
