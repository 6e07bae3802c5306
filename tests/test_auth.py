"""
GymCMS Backend — Credential Service Tests
===========================================

What:  Tests for login, token verification, caller resolution and
       password changes.
Why:   Authentication gates every mutation and every hidden read.

What we test:
    ✅ Unknown email and wrong password fail identically
    ✅ Login is case-insensitive on email, stamps last_login, journals
    ✅ Expired, malformed and orphaned tokens map to distinct failures
    ✅ Optional resolution degrades to anonymous; required resolution raises
    ✅ Role gate
    ✅ Password change rules
"""

from datetime import timedelta

import pytest
from jose import jwt

from gymcms.config import settings
from gymcms.exceptions import (
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
from gymcms.services.auth_service import (
    ADMIN_ROLES,
    CredentialService,
    create_access_token,
    hash_password,
    parse_bearer,
    require_role,
    verify_password,
)
from gymcms.services.caller import Identity

ADMIN_EMAIL = settings.admin_email.lower()
ADMIN_PASSWORD = settings.admin_password


class TestPasswords:

    def test_hash_round_trip(self):
        digest = hash_password("s3cret-pass", rounds=4)
        assert digest != "s3cret-pass"
        assert verify_password("s3cret-pass", digest) is True
        assert verify_password("wrong", digest) is False

    def test_garbage_digest_does_not_verify(self):
        assert verify_password("anything", "not-a-bcrypt-digest") is False


class TestLogin:

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_email_are_indistinguishable(self, session):
        service = CredentialService(session)

        with pytest.raises(InvalidCredentialsError) as wrong_password:
            await service.login(ADMIN_EMAIL, "not-the-password")
        with pytest.raises(InvalidCredentialsError) as unknown_email:
            await service.login("nobody@example.com", ADMIN_PASSWORD)

        assert wrong_password.value.message == unknown_email.value.message
        assert wrong_password.value.status_code == unknown_email.value.status_code == 401

    @pytest.mark.asyncio
    async def test_missing_fields_are_a_validation_error(self, session):
        with pytest.raises(ValidationError):
            await CredentialService(session).login("", "")

    @pytest.mark.asyncio
    async def test_login_returns_verifiable_token(self, session, journal_count):
        service = CredentialService(session)

        token, user = await service.login(ADMIN_EMAIL.upper(), ADMIN_PASSWORD, "10.0.0.1")
        identity = await service.verify(token)

        assert identity.email == ADMIN_EMAIL
        assert identity.role == "super_admin"
        assert user.last_login is not None
        assert await journal_count(action="login", entity_type="user") == 1


class TestTokens:

    @pytest.mark.asyncio
    async def test_expired_token(self, session, admin_user):
        token = create_access_token(admin_user, expires_delta=timedelta(seconds=-10))
        with pytest.raises(TokenExpiredError):
            await CredentialService(session).verify(token)

    @pytest.mark.asyncio
    async def test_badly_signed_token_is_forbidden(self, session, admin_user):
        forged = jwt.encode(
            {"userId": admin_user.id, "type": "access"}, "some-other-secret", algorithm="HS256"
        )
        with pytest.raises(TokenInvalidError) as exc_info:
            await CredentialService(session).verify(forged)
        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    async def test_token_without_user_id_is_invalid(self, session):
        token = jwt.encode(
            {"email": "x@example.com", "type": "access"},
            settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
        )
        with pytest.raises(TokenInvalidError):
            await CredentialService(session).verify(token)

    @pytest.mark.asyncio
    async def test_token_for_deleted_user(self, session):
        user = User(email="gone@example.com", password_hash=hash_password("x" * 8, rounds=4), name="Gone")
        session.add(user)
        await session.flush()
        token = create_access_token(user)
        await session.delete(user)
        await session.flush()

        with pytest.raises(UserNotFoundError):
            await CredentialService(session).verify(token)

    def test_parse_bearer(self):
        assert parse_bearer("Bearer abc.def") == "abc.def"
        assert parse_bearer("bearer abc") == "abc"
        assert parse_bearer("Basic abc") is None
        assert parse_bearer("Bearer") is None
        assert parse_bearer(None) is None


class TestResolveCaller:

    @pytest.mark.asyncio
    async def test_no_header_is_anonymous(self, session):
        caller = await CredentialService(session).resolve_caller(None, "1.2.3.4")
        assert caller.is_authenticated is False
        assert caller.ip_address == "1.2.3.4"

    @pytest.mark.asyncio
    async def test_bad_token_on_optional_read_is_anonymous(self, session):
        caller = await CredentialService(session).resolve_caller("Bearer garbage")
        assert caller.is_authenticated is False

    @pytest.mark.asyncio
    async def test_required_without_header_raises(self, session):
        with pytest.raises(AuthRequiredError):
            await CredentialService(session).resolve_caller(None, required=True)

    @pytest.mark.asyncio
    async def test_required_with_bad_token_raises(self, session):
        with pytest.raises(TokenInvalidError):
            await CredentialService(session).resolve_caller("Bearer garbage", required=True)

    @pytest.mark.asyncio
    async def test_valid_token_resolves_identity(self, session, admin_user):
        token = create_access_token(admin_user)
        caller = await CredentialService(session).resolve_caller(f"Bearer {token}", required=True)
        assert caller.user_id == admin_user.id


class TestRoles:

    def test_admin_roles_pass(self):
        for role in ADMIN_ROLES:
            assert require_role(Identity(id=1, email="a@b.c", name="A", role=role), ADMIN_ROLES)

    def test_unknown_role_is_forbidden(self):
        with pytest.raises(ForbiddenError):
            require_role(Identity(id=1, email="a@b.c", name="A", role="editor"), ADMIN_ROLES)

    def test_missing_identity_requires_auth(self):
        with pytest.raises(AuthRequiredError):
            require_role(None, ADMIN_ROLES)


class TestPasswordChange:

    @pytest.mark.asyncio
    async def test_change_password(self, session, admin_caller, journal_count):
        service = CredentialService(session)

        await service.change_password(admin_caller, ADMIN_PASSWORD, "brand-new-password")

        token, _ = await service.login(ADMIN_EMAIL, "brand-new-password")
        assert token
        assert await journal_count(action="password_change") == 1

    @pytest.mark.asyncio
    async def test_short_new_password(self, session, admin_caller):
        with pytest.raises(PasswordTooShortError):
            await CredentialService(session).change_password(admin_caller, ADMIN_PASSWORD, "short")

    @pytest.mark.asyncio
    async def test_wrong_current_password(self, session, admin_caller):
        with pytest.raises(InvalidCredentialsError) as exc_info:
            await CredentialService(session).change_password(
                admin_caller, "not-it", "long-enough-password"
            )
        assert exc_info.value.message == "Current password is incorrect"
