"""Authentication and account endpoints."""

from fastapi import APIRouter, HTTPException, status

from tess_backoffice.api.dependencies import AdminUser, CurrentUser, Users
from tess_backoffice.api.schemas import (
    CreateAdminRequest,
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    SignupRequest,
    UserResponse,
)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={401: {"model": ErrorResponse}},
)
async def login(users: Users, payload: LoginRequest) -> LoginResponse:
    """Log in to the admin or employee portal and receive an access token."""
    user = users.authenticate(payload.username, payload.password, payload.role)
    if user is None:
        # Same message for wrong password and wrong portal
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
        )
    return LoginResponse(
        access_token=users.issue_token(user),
        user=UserResponse.model_validate(user),
    )


@router.post(
    "/signup",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse}},
)
async def sign_up(users: Users, payload: SignupRequest) -> UserResponse:
    """Register an employee account."""
    user = users.sign_up_employee(payload.username, payload.password, payload.confirm_password)
    return UserResponse.model_validate(user)


@router.post(
    "/admins",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={403: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def create_admin(
    users: Users,
    _: AdminUser,
    payload: CreateAdminRequest,
) -> UserResponse:
    """Create another admin account."""
    user = users.create_admin(
        payload.username, payload.password, payload.confirm_password, payload.name
    )
    return UserResponse.model_validate(user)


@router.get("/me", response_model=UserResponse)
async def me(user: CurrentUser) -> UserResponse:
    return UserResponse.model_validate(user)
