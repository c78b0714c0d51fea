from datetime import datetime
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire; accepts either on input"""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True, alias_generator=to_camel)


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope shared by every endpoint"""

    success: bool = True
    message: Optional[str] = None
    count: Optional[int] = None
    data: Optional[T] = None


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class UserResponse(CamelModel):
    id: str
    name: str
    email: str
    phone: str
    role: str
    is_doctor: bool
    created_at: Optional[datetime] = None
