# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Controller: Authentication — registration, login, password resets, profile."""
from fastapi import APIRouter, Depends

from taskhub.core.config import settings
from taskhub.core.dependencies import get_current_user, get_user_service
from taskhub.core.errors import ServiceError
from taskhub.core.responses import http_error, success
from taskhub.schemas.auth import ChangePasswordRequest, LoginRequest, RegisterRequest, ResetPasswordRequest
from taskhub.services.user_service import UserService

router = APIRouter(prefix=f"{settings.API_PREFIX}/auth", tags=["Auth"])


@router.post("/register", status_code=201)
def register(body: RegisterRequest, service: UserService = Depends(get_user_service)):
    try:
        user = service.register(body.name, body.email, body.password)
    except ServiceError as exc:
        raise http_error(exc)
    return success(user, "User registered successfully.")


@router.post("/login")
def login(body: LoginRequest, service: UserService = Depends(get_user_service)):
    try:
        result = service.login(body.email, body.password)
    except ServiceError as exc:
        raise http_error(exc)
    if result["mustResetPassword"]:
        return success(result, "Password reset required before continuing.")
    return success(result, "Login successful.")


@router.post("/reset-password")
def reset_password(body: ResetPasswordRequest, service: UserService = Depends(get_user_service)):
    try:
        user = service.reset_password(body.email, body.new_password)
    except ServiceError as exc:
        raise http_error(exc)
    return success(user, "Password reset successfully. Please log in.")


@router.get("/profile")
def profile(user: dict = Depends(get_current_user),
            service: UserService = Depends(get_user_service)):
    return success(service.profile(user), "Profile fetched")


@router.post("/reset-password-auth")
def change_password(body: ChangePasswordRequest, user: dict = Depends(get_current_user),
                    service: UserService = Depends(get_user_service)):
    try:
        updated = service.change_password(user, body.current_password, body.new_password)
    except ServiceError as exc:
        raise http_error(exc)
    return success(updated, "Password changed successfully.")
