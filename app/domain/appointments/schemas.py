"""Appointment domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Any, Optional

from pydantic import Field

from ...schemas import CamelModel


class TimeSlot(CamelModel):
    start: str
    end: str


class BookingRequest(CamelModel):
    """
    Raw booking fields. Required-field checks and time slot decoding happen
    in the service so JSON and multipart bodies get identical errors.
    """

    doctor_id: Optional[str] = None
    date: Optional[Any] = None
    time_slot: Optional[Any] = None
    reason: Optional[str] = Field(None, max_length=1000)


class RescheduleRequest(CamelModel):
    date: Optional[Any] = None
    time_slot: Optional[Any] = None


class CancelRequest(CamelModel):
    reason: Optional[str] = Field(None, max_length=500)


class AppointmentStatusUpdate(CamelModel):
    status: Optional[str] = None
    notes: Optional[str] = Field(None, max_length=2000)


class DocumentRef(CamelModel):
    filename: str
    path: str
    uploaded_at: Optional[str] = None


class AppointmentResponse(CamelModel):
    id: str
    doctor_id: str
    user_id: str
    doctor_info: dict
    user_info: dict
    date: datetime
    time_slot: TimeSlot
    documents: list[DocumentRef] = []
    status: str
    payment_status: str
    reason: Optional[str] = None
    notes: Optional[str] = None
    cancellation_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
