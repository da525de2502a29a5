"""Account signup, login and token resolution."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from employee_mgmt.errors import AuthenticationError, ConflictError, ValidationError
from employee_mgmt.models import Employee, User
from employee_mgmt.security import (
    ROLE_EMPLOYEE,
    ROLES,
    Identity,
    decode_token,
    hash_password,
    issue_token,
    verify_password,
)

logger = logging.getLogger(__name__)


class AuthService:
    """Credential store operations.

    Operations:
    - signup: create an account (and an employee profile for employees)
    - login: verify credentials and issue a bearer token
    - resolve: turn a bearer token back into a live account
    """

    def __init__(self, session: AsyncSession, secret: str, ttl_hours: int = 24):
        self.session = session
        self.secret = secret
        self.ttl_hours = ttl_hours

    async def find_by_email(self, email: str) -> User | None:
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def create_account(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        role: str = ROLE_EMPLOYEE,
        conflict_message: str = "User already exists",
    ) -> User:
        """Insert an account, auto-provisioning a profile for employees.

        Flushes but does not commit.
        """
        if role not in ROLES:
            raise ValidationError("Invalid role")
        if await self.find_by_email(email) is not None:
            raise ConflictError(conflict_message)

        user = User(
            first_name=first_name,
            last_name=last_name,
            email=email,
            password_hash=hash_password(password),
            role=role,
        )
        if role == ROLE_EMPLOYEE:
            user.employee = Employee(
                phone="",
                position="Employee",
                department="General",
                status="active",
                hire_date=None,
                salary=None,
            )
        self.session.add(user)
        await self.session.flush()
        logger.info("Created %s account %s (id=%s)", role, email, user.id)
        return user

    async def signup(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        role: str | None = None,
    ) -> tuple[User, str]:
        """Register a new account and return it with a fresh token."""
        user = await self.create_account(
            first_name, last_name, email, password, role or ROLE_EMPLOYEE
        )
        return user, self.token_for(user)

    async def login(self, email: str, password: str) -> tuple[User, str]:
        """Verify credentials. Unknown email and wrong password look the same."""
        user = await self.find_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            raise AuthenticationError("Invalid credentials")
        logger.info("Account %s logged in", user.id)
        return user, self.token_for(user)

    def token_for(self, user: User) -> str:
        identity = Identity(id=user.id, email=user.email, role=user.role)
        return issue_token(identity, self.secret, self.ttl_hours)

    async def resolve(self, token: str) -> User:
        """Return the account behind a token, rejecting deleted accounts."""
        identity = decode_token(token, self.secret)
        user = await self.session.get(User, identity.id)
        if user is None:
            raise AuthenticationError("Invalid token")
        return user
