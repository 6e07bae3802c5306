"""
GymCMS Backend — Credential Service
=====================================

What:  Verifies email/password pairs, issues and validates bearer tokens,
       and resolves a token to a user identity.
Why:   Every privileged operation, and every read that may reveal hidden
       records, depends on knowing who the caller is.
How:   bcrypt digests for passwords; HS256 JWTs (python-jose) carrying the
       user id, email and role. verify() re-reads the user row on every
       call, so deleting a user revokes their outstanding tokens.

Failure modes:
    missing token                    → AuthRequiredError      (401)
    wrong email or wrong password    → InvalidCredentialsError (401, same text)
    expired token                    → TokenExpiredError      (401)
    malformed / badly signed token   → TokenInvalidError      (403)
    token for a deleted user         → UserNotFoundError      (401)
    role not allowed                 → ForbiddenError         (403)
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional, Tuple

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gymcms.config import settings
from gymcms.exceptions import (
    AuthError,
    AuthRequiredError,
    ForbiddenError,
    InvalidCredentialsError,
    PasswordTooShortError,
    TokenExpiredError,
    TokenInvalidError,
    UserNotFoundError,
    ValidationError,
)
from gymcms.models import User
from gymcms.models.user import ROLES
from gymcms.models.common import utcnow
from gymcms.services.activity_service import ActivityJournal
from gymcms.services.caller import Caller, Identity

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8

# Roles allowed to use the admin endpoints
ADMIN_ROLES = ROLES


# ── Password Digests ──────────────────────────────────────────────────────

def hash_password(password: str, rounds: Optional[int] = None) -> str:
    salt = bcrypt.gensalt(rounds=rounds or settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt digest
        logger.warning("Stored password digest could not be parsed")
        return False


# ── Tokens ────────────────────────────────────────────────────────────────

def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    claims = {
        "userId": user.id,
        "email": user.email,
        "role": user.role,
        "exp": expire,
        "iat": now,
        "type": "access",
    }
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict:
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError:
        raise TokenExpiredError()
    except JWTError as e:
        logger.debug("Rejected token: %s", str(e))
        raise TokenInvalidError()

    if payload.get("type") != "access" or not isinstance(payload.get("userId"), int):
        raise TokenInvalidError()
    return payload


def parse_bearer(authorization: Optional[str]) -> Optional[str]:
    """Extract the token from an `Authorization: Bearer <token>` header."""
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]


def _identity(user: User) -> Identity:
    return Identity(id=user.id, email=user.email, name=user.name, role=user.role)


class CredentialService:
    """Stateful only in its session; construct one per unit of work."""

    def __init__(self, session: AsyncSession, journal: Optional[ActivityJournal] = None):
        self.session = session
        self.journal = journal or ActivityJournal(session)

    async def _user_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    async def login(
        self,
        email: Optional[str],
        password: Optional[str],
        ip_address: Optional[str] = None,
    ) -> Tuple[str, User]:
        """
        Authenticate an email/password pair.

        Returns:
            (token, user) on success.
        Raises:
            ValidationError: email or password missing.
            InvalidCredentialsError: unknown email or digest mismatch.
        """
        if not email or not password:
            raise ValidationError("Email and password are required")

        user = await self._user_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            logger.info("Failed login attempt for %s", email.lower())
            raise InvalidCredentialsError()

        user.last_login = utcnow()
        await self.session.flush()

        caller = Caller(identity=_identity(user), ip_address=ip_address)
        await self.journal.record(caller, "login", "user", user.id)
        return create_access_token(user), user

    async def verify(self, token: str) -> Identity:
        payload = decode_access_token(token)
        user = await self.session.get(User, payload["userId"])
        if user is None:
            raise UserNotFoundError(payload["userId"])
        return _identity(user)

    async def resolve_caller(
        self,
        authorization: Optional[str],
        ip_address: Optional[str] = None,
        required: bool = False,
    ) -> Caller:
        """
        Turn an Authorization header into a Caller, once per request.

        With required=False a missing or unusable token yields an anonymous
        caller, so public reads keep working with a stale token in the browser.
        """
        token = parse_bearer(authorization)
        if token is None:
            if required:
                raise AuthRequiredError()
            return Caller.anonymous(ip_address)

        try:
            identity = await self.verify(token)
        except AuthError as e:
            if required:
                raise
            logger.debug("Treating request as anonymous: %s", e.message)
            return Caller.anonymous(ip_address)
        return Caller(identity=identity, ip_address=ip_address)

    async def current_user(self, caller: Caller) -> User:
        if not caller.is_authenticated:
            raise AuthRequiredError()
        user = await self.session.get(User, caller.user_id)
        if user is None:
            raise UserNotFoundError(caller.user_id)
        return user

    async def logout(self, caller: Caller) -> None:
        # Tokens are stateless; the client discards its copy
        if not caller.is_authenticated:
            raise AuthRequiredError()
        await self.journal.record(caller, "logout", "user", caller.user_id)

    async def change_password(
        self,
        caller: Caller,
        current_password: Optional[str],
        new_password: Optional[str],
    ) -> None:
        if not current_password or not new_password:
            raise ValidationError("Current and new password are required")
        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise PasswordTooShortError(MIN_PASSWORD_LENGTH)

        user = await self.current_user(caller)
        if not verify_password(current_password, user.password_hash):
            raise InvalidCredentialsError("Current password is incorrect")

        user.password_hash = hash_password(new_password)
        await self.session.flush()
        await self.journal.record(caller, "password_change", "user", user.id)
        logger.info("Password changed for user %s", user.id)


def has_role(identity: Optional[Identity], allowed_roles: Iterable[str]) -> bool:
    return identity is not None and identity.role in set(allowed_roles)


def require_role(identity: Optional[Identity], allowed_roles: Iterable[str]) -> bool:
    if identity is None:
        raise AuthRequiredError()
    if not has_role(identity, allowed_roles):
        raise ForbiddenError(context={"role": identity.role})
    return True
