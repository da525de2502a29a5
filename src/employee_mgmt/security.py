"""Password hashing, bearer tokens and role checks."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from employee_mgmt.errors import AuthenticationError, AuthorizationError, ValidationError

TOKEN_ALGORITHM = "HS256"
BCRYPT_ROUNDS = 10
# bcrypt ignores (newer releases reject) anything past 72 bytes
MAX_PASSWORD_BYTES = 72

ROLE_ADMIN = "admin"
ROLE_EMPLOYEE = "employee"
ROLES = (ROLE_ADMIN, ROLE_EMPLOYEE)


@dataclass(frozen=True)
class Identity:
    """Caller identity decoded from a bearer token."""

    id: int
    email: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


def hash_password(password: str) -> str:
    """Hash a plaintext password with bcrypt."""
    raw = password.encode("utf-8")
    if len(raw) > MAX_PASSWORD_BYTES:
        raise ValidationError("Password is too long")
    return bcrypt.hashpw(raw, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plaintext password against a stored bcrypt hash."""
    raw = password.encode("utf-8")
    if len(raw) > MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(raw, password_hash.encode("utf-8"))
    except ValueError:
        return False


def issue_token(
    identity: Identity,
    secret: str,
    ttl_hours: int = 24,
    issued_at: datetime | None = None,
) -> str:
    """Sign a token carrying the caller's id, email and role."""
    issued_at = issued_at or datetime.now(timezone.utc)
    payload = {
        "id": identity.id,
        "email": identity.email,
        "role": identity.role,
        "iat": issued_at,
        "exp": issued_at + timedelta(hours=ttl_hours),
    }
    return jwt.encode(payload, secret, algorithm=TOKEN_ALGORITHM)


def decode_token(token: str, secret: str) -> Identity:
    """Verify signature and expiry, returning the embedded identity.

    Raises AuthenticationError for anything that is not a live token.
    """
    try:
        claims = jwt.decode(
            token,
            secret,
            algorithms=[TOKEN_ALGORITHM],
            options={"require": ["exp", "iat"]},
        )
    except jwt.PyJWTError as exc:
        raise AuthenticationError("Invalid token") from exc

    try:
        return Identity(id=int(claims["id"]), email=str(claims["email"]), role=str(claims["role"]))
    except (KeyError, TypeError, ValueError) as exc:
        raise AuthenticationError("Invalid token") from exc


def parse_bearer(authorization: str | None) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        raise AuthenticationError("No token provided")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("No token provided")
    return token.strip()


def check_role(identity: Identity, required_role: str) -> None:
    """Allow the call only if the identity holds ``required_role``."""
    if identity.role != required_role:
        if required_role == ROLE_ADMIN:
            raise AuthorizationError("Access denied. Admin only.")
        raise AuthorizationError("Access denied. Employees only.")
