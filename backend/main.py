# Backend main entry point - patients & heart-rate API
import logging
import time
import uuid
from http import HTTPStatus
from typing import Annotated, List, Optional, Union

from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from analytics import DEFAULT_THRESHOLD, HeartRateAnalytics
from config import Settings, get_settings
from errors import ERROR_MESSAGES, ERROR_STATUS, AppError, ErrCode
from logging_config import configure_logging
from models import PatientGender
from patients import PatientService
from seed import seed_data
from stores import PatientStore, ReadingStore
from time_window import parse_timestamp
from tracker import PatientRequestTracker, tracker_middleware

logger = logging.getLogger("api")

PROBLEM_JSON = "application/problem+json"
REQUEST_ID_HEADER = "x-request-id"


# Response models
class PatientResponse(BaseModel):
    id: str
    name: str
    age: int
    gender: PatientGender


class HeartRateEvent(BaseModel):
    timestamp: str
    heartRate: Union[int, float]


class HighEventsResponse(BaseModel):
    patientId: str
    count: int
    events: List[HeartRateEvent]


class AnalyticsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    patientId: str
    from_: str = Field(alias="from")
    to: str
    count: int
    avg: Optional[float] = None
    min: Optional[Union[int, float]] = None
    max: Optional[Union[int, float]] = None


class RequestsCountResponse(BaseModel):
    patientId: str
    requestsCount: int


def _require_iso8601(value: str) -> str:
    if parse_timestamp(value) is None:
        raise ValueError("must be an ISO-8601 timestamp")
    return value


IsoTimestamp = Annotated[str, AfterValidator(_require_iso8601)]


def problem_response(
    request: Request,
    code: Optional[ErrCode],
    detail=None,
    context=None,
    status: Optional[int] = None,
    title: Optional[str] = None,
) -> JSONResponse:
    """RFC 7807 problem document; `code` is omitted for plain HTTP errors."""
    body = {
        "type": "about:blank",
        "title": title or (ERROR_MESSAGES[code] if code else HTTPStatus(status).phrase),
        "status": status or ERROR_STATUS[code],
        "instance": request.url.path,
    }
    if code is not None:
        body["code"] = code.value
    if detail is not None:
        body["detail"] = detail
    if context:
        body["context"] = context
    headers = {}
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        headers[REQUEST_ID_HEADER] = request_id
    return JSONResponse(status_code=body["status"], content=body, media_type=PROBLEM_JSON, headers=headers)


def create_app(
    settings: Optional[Settings] = None,
    patient_store: Optional[PatientStore] = None,
    reading_store: Optional[ReadingStore] = None,
    seed: bool = True,
) -> FastAPI:
    """Assemble stores, services and routes into a FastAPI app."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    patient_store = patient_store if patient_store is not None else PatientStore()
    reading_store = reading_store if reading_store is not None else ReadingStore()
    if seed:
        seed_data(patient_store, reading_store, settings.seed_file)

    patient_service = PatientService(patient_store)
    analytics = HeartRateAnalytics(patient_store, reading_store)
    tracker = PatientRequestTracker(patient_store)

    app = FastAPI(title="Patients & Heart Rate API")
    app.state.patient_store = patient_store
    app.state.reading_store = reading_store
    app.state.patient_service = patient_service
    app.state.analytics = analytics
    app.state.tracker = tracker

    # Tracker runs inside the request-id middleware, before routing
    app.middleware("http")(tracker_middleware(tracker))

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        started = time.perf_counter()
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        logger.info(
            "request completed",
            extra={
                "context": {
                    "requestId": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "status": response.status_code,
                    "durationMs": round((time.perf_counter() - started) * 1000, 2),
                }
            },
        )
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        return problem_response(request, exc.code, exc.detail, exc.context)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        # Unmatched routes, wrong methods
        response = problem_response(request, None, status=exc.status_code)
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
            for err in exc.errors()
        ]
        return problem_response(request, ErrCode.VALIDATION_FAILED, errors)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("unhandled error", extra={"context": {"path": request.url.path}})
        return problem_response(request, ErrCode.INTERNAL_ERROR)

    @app.get("/")
    def read_root():
        return {"message": "Patients & Heart Rate API"}

    @app.get("/health")
    def health_check():
        return {"status": "healthy"}

    @app.get("/patients", response_model=List[PatientResponse])
    def list_patients():
        """List all patients"""
        return [p.to_dict() for p in patient_service.get_all()]

    @app.get("/patients/{patient_id}", response_model=PatientResponse)
    def get_patient(patient_id: str):
        """Get one patient's profile"""
        return patient_service.get_by_id(patient_id).to_dict()

    @app.get("/patients/{patient_id}/requests", response_model=RequestsCountResponse)
    def get_requests_count(patient_id: str):
        """Number of tracked profile / heart-rate reads for this patient"""
        return patient_service.get_requests_count(patient_id)

    @app.get("/patients/{patient_id}/heart-rate/events", response_model=HighEventsResponse)
    def get_heart_rate_events(
        patient_id: str,
        threshold: int = Query(DEFAULT_THRESHOLD, ge=0, description="HR threshold (default 100)"),
    ):
        """All readings strictly above the threshold, oldest first"""
        return analytics.get_high_events(patient_id, threshold)

    @app.get("/patients/{patient_id}/heart-rate/analytics", response_model=AnalyticsResponse)
    def get_heart_rate_analytics(
        patient_id: str,
        from_: Annotated[IsoTimestamp, Query(alias="from")],
        to: Annotated[IsoTimestamp, Query()],
    ):
        """Min / max / avg and count for a closed time window"""
        return analytics.get_analytics(patient_id, from_, to)

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    uvicorn.run(app, host=_settings.host, port=_settings.port)
