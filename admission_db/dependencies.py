"""
FastAPI Dependencies for ADMISSION_DB

The application owns one ``AdmissionDatabase`` on ``app.state.admission_db``
(typically created in a lifespan handler); routes receive it through these
dependencies.

Usage:
    from fastapi import Depends
    from admission_db.dependencies import get_admissions

    @app.get("/students/{student_id}/notifications")
    async def notifications(student_id: str, admissions=Depends(get_admissions)):
        return await admissions.get_unread_notifications(student_id)
"""

from typing import TYPE_CHECKING

from fastapi import HTTPException, Request

if TYPE_CHECKING:
    from .core.engine import AdmissionDatabase
    from .services import AdmissionService, ApplicationSearch, SnapshotService


async def get_admission_db(request: Request) -> "AdmissionDatabase":
    """Get the AdmissionDatabase instance from app state."""
    db = getattr(request.app.state, "admission_db", None)
    if not db:
        raise HTTPException(503, "Admission database not configured")
    if not db.initialized:
        raise HTTPException(503, "Admission database not initialized")
    return db


async def get_admissions(request: Request) -> "AdmissionService":
    return (await get_admission_db(request)).admissions


async def get_search(request: Request) -> "ApplicationSearch":
    return (await get_admission_db(request)).search


async def get_snapshots(request: Request) -> "SnapshotService":
    return (await get_admission_db(request)).snapshots
