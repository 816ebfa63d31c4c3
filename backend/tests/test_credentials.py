"""
ChoreoNotes Backend — Credential Service Tests
===============================================

What we test:
    ✅ bcrypt hashing and verification
    ✅ Token issue / verify, including expired, forged and malformed tokens
    ✅ register → login → get_current_user round trip
    ✅ Duplicate email is a conflict, email matching is case-sensitive
    ✅ Unknown email and wrong password fail with the same message
"""

from datetime import timedelta

import jwt
import pytest

from choreonotes.config import settings
from choreonotes.exceptions import ConflictError, NotFoundError, UnauthorizedError
from choreonotes.services.credentials import (
    INVALID_LOGIN_MESSAGE,
    CredentialService,
    create_access_token,
    hash_password,
    verify_password,
    verify_token,
)


class TestPasswordHashing:
    def test_hash_is_not_plaintext_and_verifies(self):
        hashed = hash_password("secret123", rounds=4)
        assert hashed != "secret123"
        assert hashed.startswith("$2")
        assert verify_password("secret123", hashed)

    def test_wrong_password_does_not_verify(self):
        hashed = hash_password("secret123", rounds=4)
        assert not verify_password("secret124", hashed)

    def test_same_password_gets_different_salts(self):
        assert hash_password("secret123", rounds=4) != hash_password("secret123", rounds=4)

    def test_malformed_hash_is_a_mismatch(self):
        assert not verify_password("secret123", "not-a-bcrypt-hash")


class TestTokens:
    def test_round_trip_carries_id_and_email(self):
        token = create_access_token(7, "dancer@example.com")
        claims = verify_token(token)
        assert claims["id"] == 7
        assert claims["email"] == "dancer@example.com"
        assert claims["exp"] > claims["iat"]

    def test_expired_token_is_rejected(self):
        token = create_access_token(7, "dancer@example.com", expires_in=timedelta(seconds=-10))
        with pytest.raises(UnauthorizedError):
            verify_token(token)

    def test_token_signed_with_another_secret_is_rejected(self):
        forged = jwt.encode(
            {"id": 7, "email": "x@example.com", "iat": 0, "exp": 9999999999},
            "some-other-secret-entirely",
            algorithm="HS256",
        )
        with pytest.raises(UnauthorizedError):
            verify_token(forged)

    def test_garbage_is_rejected(self):
        with pytest.raises(UnauthorizedError):
            verify_token("not.a.jwt")

    def test_token_without_id_claim_is_rejected(self):
        token = jwt.encode(
            {"email": "x@example.com", "iat": 0, "exp": 9999999999},
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )
        with pytest.raises(UnauthorizedError):
            verify_token(token)


class TestCredentialService:
    @pytest.mark.asyncio
    async def test_register_login_and_resolve(self, db_session):
        service = CredentialService(db_session)

        user, token = await service.register("a@x.com", "secret123", "alice")
        assert user.id is not None
        assert user.password_hash != "secret123"
        assert verify_token(token)["id"] == user.id

        logged_in, login_token = await service.login("a@x.com", "secret123")
        assert logged_in.id == user.id

        current = await service.get_current_user(verify_token(login_token)["id"])
        assert current.email == "a@x.com"
        assert current.username == "alice"

    @pytest.mark.asyncio
    async def test_duplicate_email_conflicts(self, db_session):
        service = CredentialService(db_session)
        await service.register("a@x.com", "secret123", "alice")

        with pytest.raises(ConflictError) as exc_info:
            await service.register("a@x.com", "other-pass", "alice2")
        assert exc_info.value.message == "Email already registered"

    @pytest.mark.asyncio
    async def test_email_match_is_case_sensitive(self, db_session):
        service = CredentialService(db_session)
        first, _ = await service.register("Dancer@x.com", "secret123", "upper")
        second, _ = await service.register("dancer@x.com", "secret123", "lower")
        assert first.id != second.id

    @pytest.mark.asyncio
    async def test_unknown_email_and_wrong_password_look_the_same(self, db_session):
        service = CredentialService(db_session)
        await service.register("a@x.com", "secret123", "alice")

        with pytest.raises(UnauthorizedError) as unknown:
            await service.login("nobody@x.com", "secret123")
        with pytest.raises(UnauthorizedError) as wrong:
            await service.login("a@x.com", "wrong-password")

        assert unknown.value.message == wrong.value.message == INVALID_LOGIN_MESSAGE

    @pytest.mark.asyncio
    async def test_get_current_user_missing(self, db_session):
        service = CredentialService(db_session)
        with pytest.raises(NotFoundError):
            await service.get_current_user(9999)
