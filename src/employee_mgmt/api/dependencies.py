"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator, Callable, Coroutine
from typing import Annotated, Any

from fastapi import Depends, Header, Request, Response
from fastapi.routing import APIRoute
from sqlalchemy.ext.asyncio import AsyncSession

from employee_mgmt.clock import Clock
from employee_mgmt.config import Settings
from employee_mgmt.security import (
    ROLE_ADMIN,
    ROLE_EMPLOYEE,
    Identity,
    check_role,
    decode_token,
    parse_bearer,
)
from employee_mgmt.services.auth_service import AuthService
from employee_mgmt.services.document_service import DocumentStorage


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    async with request.app.state.session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_clock(request: Request) -> Clock:
    return request.app.state.clock


def get_storage(request: Request) -> DocumentStorage:
    return request.app.state.storage


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
AppSettings = Annotated[Settings, Depends(get_app_settings)]
AppClock = Annotated[Clock, Depends(get_clock)]
Storage = Annotated[DocumentStorage, Depends(get_storage)]


async def get_identity(
    db: DbSession,
    settings: AppSettings,
    authorization: Annotated[str | None, Header()] = None,
) -> Identity:
    """Resolve the bearer token to a live account identity."""
    auth = AuthService(db, settings.jwt_secret, settings.token_ttl_hours)
    user = await auth.resolve(parse_bearer(authorization))
    return Identity(id=user.id, email=user.email, role=user.role)


CurrentIdentity = Annotated[Identity, Depends(get_identity)]


def require_role(role: str):
    """Dependency allowing only identities whose role claim is ``role``."""

    async def dependency(identity: CurrentIdentity) -> Identity:
        check_role(identity, role)
        return identity

    dependency.__name__ = f"require_{role}"
    dependency.required_role = role
    return dependency


AdminIdentity = Annotated[Identity, Depends(require_role(ROLE_ADMIN))]
EmployeeIdentity = Annotated[Identity, Depends(require_role(ROLE_EMPLOYEE))]


class RoleGatedRoute(APIRoute):
    """Route that checks the bearer token's role before reading the body.

    FastAPI parses the request body before it solves dependencies, so a
    malformed body would otherwise be reported ahead of a role refusal.
    """

    def get_route_handler(self) -> Callable[[Request], Coroutine[Any, Any, Response]]:
        handler = super().get_route_handler()
        roles = {
            getattr(dep.call, "required_role", None) for dep in self.dependant.dependencies
        } - {None}
        if not roles:
            return handler

        async def gated_handler(request: Request) -> Response:
            settings: Settings = request.app.state.settings
            token = parse_bearer(request.headers.get("authorization"))
            identity = decode_token(token, settings.jwt_secret)
            for role in roles:
                check_role(identity, role)
            return await handler(request)

        return gated_handler
