# Per-patient request tracking for patient-data reads
from __future__ import annotations

import logging
import re
from typing import Awaitable, Callable, Optional, Tuple

from fastapi import Request
from starlette.responses import Response

from stores import PatientStore

logger = logging.getLogger(__name__)

PATIENT_PATH = re.compile(r"^/patients/([^/]+)(?:/(.*))?$")
HEART_RATE_SEGMENT = "heart-rate"
REQUESTS_SEGMENT = "requests"


def parse_patient_path(path: str) -> Optional[Tuple[str, str]]:
    """Split /patients/{id}[/{rest}] into (id, rest). None if the shape doesn't match."""
    match = PATIENT_PATH.match(path or "")
    if not match:
        return None
    return match.group(1), match.group(2) or ""


class PatientRequestTracker:
    """
    Counts reads of a patient's profile and heart-rate data.

    GET /patients/{id} and GET /patients/{id}/heart-rate... are counted;
    GET /patients/{id}/requests is not, so reading the counter leaves it
    unchanged. Counting happens before the route runs and regardless of
    its outcome; the store drops unknown ids. Paths with a trailing slash
    are left alone: the router redirects them to the canonical path,
    which is counted when the client follows the redirect.
    """

    def __init__(self, patients: PatientStore):
        self.patients = patients

    def tracked_patient_id(self, method: str, path: str) -> Optional[str]:
        """Return the patient id to count for this request, if any."""
        if method.upper() != "GET" or path.endswith("/"):
            return None
        parsed = parse_patient_path(path)
        if parsed is None:
            return None
        patient_id, rest = parsed

        is_profile = rest == ""
        is_heart_rate = rest.startswith(HEART_RATE_SEGMENT)
        is_requests = rest == REQUESTS_SEGMENT
        if (is_profile or is_heart_rate) and not is_requests:
            return patient_id
        return None

    def observe(self, method: str, path: str) -> None:
        try:
            patient_id = self.tracked_patient_id(method, path)
            if patient_id is not None:
                self.patients.increment_request_count(patient_id)
        except Exception:
            # Tracking must never fail the read it observes
            logger.exception("request tracking failed", extra={"context": {"path": path}})


def tracker_middleware(
    tracker: PatientRequestTracker,
) -> Callable[[Request, Callable[[Request], Awaitable[Response]]], Awaitable[Response]]:
    """HTTP middleware that runs the tracker before the request is routed."""

    async def track_patient_requests(request: Request, call_next):
        tracker.observe(request.method, request.url.path)
        return await call_next(request)

    return track_patient_requests
