"""Doctor domain schemas - Pydantic models for validation"""

from datetime import date, datetime
from typing import Optional

from pydantic import Field, field_validator, model_validator

from ...schemas import CamelModel
from ...shared.validators import time_to_minutes, validate_phone, validate_time


class AddressSchema(CamelModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    full_address: Optional[str] = None


class DayTiming(CamelModel):
    """Working hours for one weekday"""

    start: Optional[str] = None
    end: Optional[str] = None
    available: bool = False

    @field_validator("start", "end")
    @classmethod
    def validate_times(cls, v):
        if v in (None, ""):
            return None
        return validate_time(v)

    @model_validator(mode="after")
    def check_window(self):
        if self.available and self.start and self.end:
            if time_to_minutes(self.end) <= time_to_minutes(self.start):
                raise ValueError("End time must be after start time")
        return self


class WeeklyTimings(CamelModel):
    monday: Optional[DayTiming] = None
    tuesday: Optional[DayTiming] = None
    wednesday: Optional[DayTiming] = None
    thursday: Optional[DayTiming] = None
    friday: Optional[DayTiming] = None
    saturday: Optional[DayTiming] = None
    sunday: Optional[DayTiming] = None


class Qualification(CamelModel):
    degree: str
    institution: Optional[str] = None
    year: Optional[int] = Field(None, ge=1900, le=2100)


class DoctorProfileFields(CamelModel):
    """Fields a doctor may set on their own profile"""

    full_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[AddressSchema] = None
    specialization: Optional[str] = None
    experience: Optional[int] = Field(None, ge=0)
    fees: Optional[float] = Field(None, ge=0)
    timings: Optional[WeeklyTimings] = None
    qualifications: Optional[list[Qualification]] = None
    bio: Optional[str] = Field(None, max_length=500)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        if v:
            return validate_phone(v)
        return v

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Full name cannot be empty")
        return v.strip() if v else v

    @field_validator("specialization")
    @classmethod
    def validate_specialization(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Specialization cannot be empty")
        return v.strip() if v else v


class DoctorApply(DoctorProfileFields):
    """Application to become a doctor. Name and phone default to the account's."""


class DoctorUpdate(DoctorProfileFields):
    """Partial update; only fields present in the request are applied"""


class DoctorStatusUpdate(CamelModel):
    status: Optional[str] = None
    rejection_reason: Optional[str] = None


class DoctorResponse(CamelModel):
    id: str
    user_id: str
    full_name: str
    email: str
    phone: str
    address: AddressSchema
    specialization: Optional[str] = None
    experience: Optional[int] = None
    fees: Optional[float] = None
    timings: Optional[dict] = None
    status: str
    qualifications: Optional[list] = None
    profile_image: Optional[str] = None
    bio: Optional[str] = None
    rating: float = 0
    total_reviews: int = 0
    created_at: Optional[datetime] = None


class SlotsResponse(CamelModel):
    doctor_id: str
    date: date
    weekday: str
    available: bool
    slots: list[str]
    booked: list[str]
