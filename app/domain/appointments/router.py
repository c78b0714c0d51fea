"""Appointment router - booking endpoints for patients"""

from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ...schemas import ApiResponse
from ...shared.payloads import parse_model, read_payload
from ...storage import DocumentUpload
from .schemas import AppointmentResponse, BookingRequest, CancelRequest, RescheduleRequest
from .service import AppointmentService

router = APIRouter(prefix="/api/appointments", tags=["Appointments"])


def get_appointment_service(db: Session = Depends(get_db)) -> AppointmentService:
    """Dependency injection for AppointmentService"""
    return AppointmentService(db)


@router.post("", response_model=ApiResponse[AppointmentResponse], status_code=status.HTTP_201_CREATED)
async def book_appointment(
    request: Request,
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    """
    Book an appointment.

    Accepts a JSON body, or multipart/form-data with up to five files in the
    "documents" field (timeSlot then arrives as a JSON string).
    """
    fields, files = await read_payload(request)
    data = parse_model(BookingRequest, fields)
    documents = [
        DocumentUpload(filename=f.filename, content_type=f.content_type, content=await f.read())
        for f in files
    ]

    appointment = service.book_appointment(current_user, data, documents)
    return ApiResponse(
        message="Appointment booked successfully",
        data=AppointmentResponse.model_validate(appointment),
    )


@router.get("/my-appointments", response_model=ApiResponse[list[AppointmentResponse]])
async def get_my_appointments(
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    appointments = service.list_user_appointments(current_user)
    return ApiResponse(
        count=len(appointments),
        data=[AppointmentResponse.model_validate(a) for a in appointments],
    )


@router.put("/{appointment_id}/cancel", response_model=ApiResponse[AppointmentResponse])
async def cancel_appointment(
    appointment_id: str,
    data: Optional[CancelRequest] = None,
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    appointment = service.cancel_appointment(current_user, appointment_id, data.reason if data else None)
    return ApiResponse(
        message="Appointment cancelled successfully",
        data=AppointmentResponse.model_validate(appointment),
    )


@router.put("/{appointment_id}/reschedule", response_model=ApiResponse[AppointmentResponse])
async def reschedule_appointment(
    appointment_id: str,
    request: Request,
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    fields, _ = await read_payload(request)
    data = parse_model(RescheduleRequest, fields)

    appointment = service.reschedule_appointment(current_user, appointment_id, data)
    return ApiResponse(
        message="Appointment rescheduled successfully",
        data=AppointmentResponse.model_validate(appointment),
    )
