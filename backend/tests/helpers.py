"""
Test doubles: a fake hospital backend and loaders the test controls.
"""

import asyncio
from typing import Any, Dict, List, Tuple

import httpx

BASE_URL = "http://backend.test"


class FakeBackend:
    """(method, path) -> (status, json body) table with a request log."""

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Tuple[int, Any]] = {}
        self.requests: List[httpx.Request] = []

    def reply(self, path: str, body: Any, status_code: int = 200, method: str = "GET"):
        self.routes[(method, path)] = (status_code, body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key not in self.routes:
            return httpx.Response(404, json={"message": "Route not found"})
        status_code, body = self.routes[key]
        if isinstance(body, Exception):
            raise body
        if isinstance(body, (bytes, str)):
            return httpx.Response(status_code, content=body)
        return httpx.Response(status_code, json=body)

    def calls_to(self, path: str, method: str = "GET") -> List[httpx.Request]:
        return [r for r in self.requests if r.url.path == path and r.method == method]


class GatedLoader:
    """Each call blocks until the test resolves its future."""

    def __init__(self):
        self.calls: List[asyncio.Future] = []

    async def __call__(self):
        future = asyncio.get_running_loop().create_future()
        self.calls.append(future)
        return await future


class ListLoader:
    """Returns (or raises) queued results in order, then repeats the last one."""

    def __init__(self, *results):
        self.results = list(results)
        self.count = 0

    async def __call__(self):
        index = min(self.count, len(self.results) - 1)
        self.count += 1
        result = self.results[index]
        if isinstance(result, Exception):
            raise result
        return result


async def settle(rounds: int = 5):
    """Let ready tasks run up to their next suspension point."""
    for _ in range(rounds):
        await asyncio.sleep(0)


def appointment_payload(token_number=12, current_token=9, status="scheduled", **extra) -> Dict[str, Any]:
    payload = {
        "_id": "apt-1",
        "doctor": {"_id": "doc-1", "name": "Dr. Meera Shah", "specialization": "Cardiology"},
        "department": "Cardiology",
        "reason": "Chest pain follow-up",
        "date": "2024-01-05T00:00:00.000Z",
        "appointmentTime": "10:30 AM",
        "status": status,
        "queueInfo": {
            "tokenNumber": token_number,
            "currentToken": current_token,
            "patientsAhead": max(0, token_number - current_token),
            "totalPatientsInQueue": 20,
            "completedPatients": max(0, current_token - 1),
            "waitingTime": "15 mins",
            "estimatedStartTime": "10:45 AM",
            "averageConsultationTime": 5
        }
    }
    payload.update(extra)
    return payload
