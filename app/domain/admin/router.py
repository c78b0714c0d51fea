"""Admin router - user, doctor and appointment oversight"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import require_admin
from ...database import get_db
from ...models import User
from ...schemas import ApiResponse, UserResponse
from ..appointments.schemas import AppointmentResponse
from ..doctors.router import get_doctor_service
from ..doctors.schemas import DoctorResponse, DoctorStatusUpdate, DoctorUpdate
from ..doctors.service import DoctorService
from .schemas import DashboardStats
from .service import AdminService

router = APIRouter(prefix="/api/admin", tags=["Admin"])


def get_admin_service(db: Session = Depends(get_db)) -> AdminService:
    """Dependency injection for AdminService"""
    return AdminService(db)


@router.get("/users", response_model=ApiResponse[list[UserResponse]])
async def get_all_users(
    _: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    users = service.list_users()
    return ApiResponse(count=len(users), data=[UserResponse.model_validate(u) for u in users])


@router.get("/doctors", response_model=ApiResponse[list[DoctorResponse]])
async def get_all_doctors(
    status: Optional[str] = Query(None, pattern="^(pending|approved|rejected)$"),
    _: User = Depends(require_admin),
    service: DoctorService = Depends(get_doctor_service),
):
    """All doctor profiles, newest first, optionally filtered by review status"""
    doctors = service.list_doctors(status)
    return ApiResponse(count=len(doctors), data=[DoctorResponse.model_validate(d) for d in doctors])


@router.put("/doctors/{doctor_id}/status", response_model=ApiResponse[DoctorResponse])
async def update_doctor_status(
    doctor_id: str,
    data: DoctorStatusUpdate,
    _: User = Depends(require_admin),
    service: DoctorService = Depends(get_doctor_service),
):
    """Approve or reject a doctor application"""
    doctor = service.review_application(doctor_id, data.status, data.rejection_reason)
    return ApiResponse(
        message=f"Doctor {doctor.status} successfully",
        data=DoctorResponse.model_validate(doctor),
    )


@router.put("/doctors/{doctor_id}/profile", response_model=ApiResponse[DoctorResponse])
async def update_doctor_profile(
    doctor_id: str,
    data: DoctorUpdate,
    _: User = Depends(require_admin),
    service: DoctorService = Depends(get_doctor_service),
):
    doctor = service.update_profile(service.get_doctor(doctor_id), data)
    return ApiResponse(message="Doctor profile updated successfully", data=DoctorResponse.model_validate(doctor))


@router.get("/appointments", response_model=ApiResponse[list[AppointmentResponse]])
async def get_all_appointments(
    _: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    appointments = service.list_appointments()
    return ApiResponse(
        count=len(appointments),
        data=[AppointmentResponse.model_validate(a) for a in appointments],
    )


@router.get("/stats", response_model=ApiResponse[DashboardStats])
async def get_dashboard_stats(
    _: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    return ApiResponse(data=DashboardStats.model_validate(service.dashboard_stats()))
