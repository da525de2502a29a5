"""Login, signup and token verification endpoints."""

from fastapi import APIRouter, status

from employee_mgmt.api.dependencies import AppSettings, CurrentIdentity, DbSession
from employee_mgmt.api.schemas import (
    AuthResponse,
    ErrorResponse,
    LoginRequest,
    SignupRequest,
    UserResponse,
    VerifyResponse,
)
from employee_mgmt.errors import AuthenticationError
from employee_mgmt.models import User
from employee_mgmt.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_service(db: DbSession, settings: AppSettings) -> AuthService:
    return AuthService(db, settings.jwt_secret, settings.token_ttl_hours)


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
)
async def login(db: DbSession, settings: AppSettings, payload: LoginRequest) -> AuthResponse:
    """Exchange email and password for a bearer token."""
    user, token = await _auth_service(db, settings).login(payload.email, payload.password)
    return AuthResponse(user=UserResponse.model_validate(user), token=token)


@router.post(
    "/signup",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def signup(db: DbSession, settings: AppSettings, payload: SignupRequest) -> AuthResponse:
    """Register an account. Employee accounts get a default profile."""
    user, token = await _auth_service(db, settings).signup(
        payload.first_name,
        payload.last_name,
        payload.email,
        payload.password,
        payload.role,
    )
    await db.commit()
    await db.refresh(user)
    return AuthResponse(user=UserResponse.model_validate(user), token=token)


@router.get(
    "/verify",
    response_model=VerifyResponse,
    responses={401: {"model": ErrorResponse}},
)
async def verify(db: DbSession, identity: CurrentIdentity) -> VerifyResponse:
    """Return the account behind the presented token."""
    user = await db.get(User, identity.id)
    if user is None:
        raise AuthenticationError("Invalid token")
    return VerifyResponse(user=UserResponse.model_validate(user))
