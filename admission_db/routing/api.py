"""
HTTP routes for the admission workflows.

Mount with ``app.include_router(router)`` after putting an initialized
``AdmissionDatabase`` on ``app.state.admission_db``. Failure results from the
domain layer become HTTP errors whose status depends on the error type.
"""

from typing import Any, Optional, Union

from fastapi import APIRouter, Body, Depends, HTTPException, Request
from pydantic import BaseModel, ConfigDict

from ..dependencies import get_admission_db, get_admissions, get_search, get_snapshots
from ..services import AdmissionService, ApplicationSearch, SnapshotService

router = APIRouter()

_ERROR_STATUS = {
    "NotFound": 404,
    "ConstraintViolation": 409,
    "SerializationError": 422,
    "NotInitializedError": 503,
    "TypeError": 400,
    "ValueError": 400,
    "KeyError": 400,
}

RecordId = Union[str, int]


class _OpenModel(BaseModel):
    """Declared fields are checked; anything else is stored as given."""

    model_config = ConfigDict(extra="allow")


class ApplicationIn(_OpenModel):
    studentId: RecordId
    stream: Optional[str] = None


class DocumentIn(_OpenModel):
    applicationId: RecordId
    studentId: RecordId
    type: str


class StudentIn(_OpenModel):
    email: str
    name: Optional[str] = None
    phone: Optional[str] = None


class VerifyDocumentIn(BaseModel):
    adminId: RecordId
    comment: str = ""


class StreamIn(BaseModel):
    name: str
    code: Optional[str] = None


class AnalyticsIn(BaseModel):
    data: Any = None


def _unwrap(result: dict[str, Any]) -> dict[str, Any]:
    if result["success"]:
        return result
    status_code = _ERROR_STATUS.get(result.get("errorType", ""), 500)
    raise HTTPException(status_code, result["error"])


@router.get("/status")
async def get_status(request: Request) -> dict[str, Any]:
    """Status is readable even before the database is initialized."""
    db = getattr(request.app.state, "admission_db", None)
    if db is None:
        raise HTTPException(503, "Admission database not configured")
    return {"status": db.status.value, "initialized": db.initialized}


@router.post("/applications", status_code=201)
async def create_application(
    body: ApplicationIn, admissions: AdmissionService = Depends(get_admissions)
):
    return _unwrap(await admissions.create_application(body.model_dump(exclude_unset=True)))


@router.get("/applications/search")
async def search_applications(q: str, search: ApplicationSearch = Depends(get_search)):
    return await search.search_applications(q)


@router.post("/documents", status_code=201)
async def upload_document(
    body: DocumentIn, admissions: AdmissionService = Depends(get_admissions)
):
    return _unwrap(await admissions.upload_document(body.model_dump(exclude_unset=True)))


@router.post("/documents/{document_id}/verify")
async def verify_document(
    document_id: str,
    body: VerifyDocumentIn,
    admissions: AdmissionService = Depends(get_admissions),
):
    return _unwrap(await admissions.verify_document(document_id, body.adminId, body.comment))


@router.post("/students", status_code=201)
async def register_student(
    body: StudentIn, admissions: AdmissionService = Depends(get_admissions)
):
    return _unwrap(await admissions.register_student(body.model_dump(exclude_unset=True)))


@router.get("/students/{student_id}/notifications")
async def get_notifications(
    student_id: str, admissions: AdmissionService = Depends(get_admissions)
):
    return await admissions.get_unread_notifications(student_id)


@router.post("/notifications/{notification_id}/read")
async def mark_notification_as_read(
    notification_id: str, admissions: AdmissionService = Depends(get_admissions)
):
    return _unwrap(await admissions.mark_notification_as_read(notification_id))


@router.get("/streams")
async def get_streams(admissions: AdmissionService = Depends(get_admissions)):
    return await admissions.get_all_streams()


@router.post("/streams", status_code=201)
async def add_stream(body: StreamIn, admissions: AdmissionService = Depends(get_admissions)):
    return _unwrap(await admissions.add_stream(body.model_dump()))


@router.delete("/streams/{stream_id}")
async def delete_stream(stream_id: str, admissions: AdmissionService = Depends(get_admissions)):
    return _unwrap(await admissions.delete_stream(stream_id))


@router.get("/analytics/{metric}")
async def get_analytics(
    metric: str,
    start: Optional[str] = None,
    end: Optional[str] = None,
    admissions: AdmissionService = Depends(get_admissions),
):
    if (start is None) != (end is None):
        raise HTTPException(400, "start and end must be given together")
    date_range = {"start": start, "end": end} if start is not None else None
    return await admissions.get_analytics_data(metric, date_range)


@router.post("/analytics/{metric}", status_code=201)
async def update_analytics(
    metric: str, body: AnalyticsIn, admissions: AdmissionService = Depends(get_admissions)
):
    return _unwrap(await admissions.update_analytics(metric, body.data))


@router.get("/export")
async def export_data(snapshots: SnapshotService = Depends(get_snapshots)):
    return _unwrap(await snapshots.export_data())["data"]


@router.post("/import")
async def import_data(
    snapshot: dict[str, Any] = Body(...),
    snapshots: SnapshotService = Depends(get_snapshots),
):
    return _unwrap(await snapshots.import_data(snapshot))


@router.get("/metrics")
async def get_metrics(db=Depends(get_admission_db)):
    return db.get_metrics()
