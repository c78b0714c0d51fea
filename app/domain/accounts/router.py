"""Account router - registration, login and own profile"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ...schemas import ApiResponse, UserResponse
from ..doctors.schemas import DoctorResponse
from .schemas import AuthData, LoginRequest, ProfileData, ProfileUpdateRequest, RegisterRequest
from .service import AccountService

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


def get_account_service(db: Session = Depends(get_db)) -> AccountService:
    """Dependency injection for AccountService"""
    return AccountService(db)


def auth_data(user: User, token: str, doctor_status=None) -> AuthData:
    return AuthData(
        **UserResponse.model_validate(user).model_dump(),
        token=token,
        doctor_status=doctor_status,
    )


@router.post("/register", response_model=ApiResponse[AuthData], status_code=status.HTTP_201_CREATED)
async def register(data: RegisterRequest, service: AccountService = Depends(get_account_service)):
    user, token = service.register(data)
    return ApiResponse(message="Registration successful", data=auth_data(user, token))


@router.post("/login", response_model=ApiResponse[AuthData])
async def login(data: LoginRequest, service: AccountService = Depends(get_account_service)):
    user, token, doctor_status = service.login(data)
    return ApiResponse(message="Login successful", data=auth_data(user, token, doctor_status))


@router.get("/profile", response_model=ApiResponse[ProfileData])
async def get_profile(
    current_user: User = Depends(get_current_user),
    service: AccountService = Depends(get_account_service),
):
    user, doctor = service.get_profile(current_user)
    return ApiResponse(
        data=ProfileData(
            user=UserResponse.model_validate(user),
            doctor=DoctorResponse.model_validate(doctor) if doctor else None,
        )
    )


@router.put("/profile", response_model=ApiResponse[AuthData])
async def update_profile(
    data: ProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    service: AccountService = Depends(get_account_service),
):
    user, token = service.update_profile(current_user, data)
    return ApiResponse(message="Profile updated successfully", data=auth_data(user, token))
