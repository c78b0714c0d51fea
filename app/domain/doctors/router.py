"""Doctor router - public directory, doctor applications and the doctor's ledger"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_doctor
from ...database import get_db
from ...models import User
from ...schemas import ApiResponse
from ...shared.payloads import parse_model, read_payload
from ..appointments.router import get_appointment_service
from ..appointments.schemas import AppointmentResponse, AppointmentStatusUpdate
from ..appointments.service import AppointmentService
from .schemas import DoctorApply, DoctorResponse, DoctorUpdate, SlotsResponse
from .service import DoctorService

router = APIRouter(prefix="/api/doctors", tags=["Doctors"])


def get_doctor_service(db: Session = Depends(get_db)) -> DoctorService:
    """Dependency injection for DoctorService"""
    return DoctorService(db)


@router.get("", response_model=ApiResponse[list[DoctorResponse]])
async def search_doctors(
    specialization: Optional[str] = None,
    city: Optional[str] = None,
    min_experience: Optional[int] = Query(None, alias="minExperience", ge=0),
    max_fees: Optional[float] = Query(None, alias="maxFees", ge=0),
    service: DoctorService = Depends(get_doctor_service),
):
    """Approved doctors matching all given filters, best rated first"""
    doctors = service.search_doctors(specialization, city, min_experience, max_fees)
    return ApiResponse(count=len(doctors), data=[DoctorResponse.model_validate(d) for d in doctors])


@router.post("/apply", response_model=ApiResponse[DoctorResponse], status_code=status.HTTP_201_CREATED)
async def apply_as_doctor(
    data: DoctorApply,
    current_user: User = Depends(get_current_user),
    service: DoctorService = Depends(get_doctor_service),
):
    doctor = service.apply(current_user, data)
    return ApiResponse(message="Application submitted successfully", data=DoctorResponse.model_validate(doctor))


@router.put("/profile", response_model=ApiResponse[DoctorResponse])
async def update_doctor_profile(
    data: DoctorUpdate,
    current_user: User = Depends(get_current_user),
    service: DoctorService = Depends(get_doctor_service),
):
    """Update the caller's own doctor profile"""
    doctor = service.update_own_profile(current_user, data)
    return ApiResponse(message="Profile updated successfully", data=DoctorResponse.model_validate(doctor))


@router.get("/appointments/list", response_model=ApiResponse[list[AppointmentResponse]])
async def get_doctor_appointments(
    doctor_id: Optional[str] = Query(None, alias="doctorId"),
    current_user: User = Depends(require_doctor),
    service: AppointmentService = Depends(get_appointment_service),
):
    """The doctor's bookings; admins may pass doctorId to read any doctor's"""
    appointments = service.list_doctor_appointments(current_user, doctor_id)
    return ApiResponse(
        count=len(appointments),
        data=[AppointmentResponse.model_validate(a) for a in appointments],
    )


@router.put("/appointments/{appointment_id}", response_model=ApiResponse[AppointmentResponse])
async def update_appointment_status(
    appointment_id: str,
    request: Request,
    current_user: User = Depends(require_doctor),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Approve, reject, complete or cancel a booking, optionally with notes"""
    fields, _ = await read_payload(request)
    data = parse_model(AppointmentStatusUpdate, fields)

    appointment = service.update_appointment_status(current_user, appointment_id, data)
    return ApiResponse(
        message=f"Appointment {appointment.status} successfully",
        data=AppointmentResponse.model_validate(appointment),
    )


@router.get("/{doctor_id}/slots", response_model=ApiResponse[SlotsResponse])
async def get_available_slots(
    doctor_id: str,
    date: Optional[str] = None,
    service: DoctorService = Depends(get_doctor_service),
):
    slots = service.get_available_slots(doctor_id, date)
    return ApiResponse(count=len(slots["slots"]), data=SlotsResponse.model_validate(slots))


@router.get("/{doctor_id}", response_model=ApiResponse[DoctorResponse])
async def get_doctor(
    doctor_id: str,
    service: DoctorService = Depends(get_doctor_service),
):
    doctor = service.get_doctor(doctor_id)
    return ApiResponse(data=DoctorResponse.model_validate(doctor))
