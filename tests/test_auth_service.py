"""Credential service behaviour, exercised without HTTP."""

from datetime import timedelta

import pytest

from models.refresh_token import RefreshToken
from models.user import User
from services.tokens import TokenError, TokenSigner
from utils.exceptions import BadRequestError, ConflictError, UnauthorizedError
from utils.security import OTP_MAX, OTP_MIN, utcnow

PASSWORD = "Passw0rd!"


def register(services, email="ada@example.com", password=PASSWORD):
    return services.auth.register(email=email, password=password, first_name="Ada", last_name="Lovelace")


class TestRegister:
    def test_returns_tokens_and_public_user(self, services, outbox):
        result = register(services)

        assert set(result) == {"user", "access_token", "refresh_token"}
        assert result["user"]["email"] == "ada@example.com"
        assert result["user"]["role"] == "learner"
        assert "password_hash" not in result["user"]
        assert "otp" not in result["user"]
        assert [m["subject"] for m in outbox] == ["Welcome to our platform!"]

    def test_password_is_hashed(self, services):
        register(services)
        user = services.auth.users.find_by_email("ada@example.com")
        assert user.password_hash != PASSWORD
        assert user.password_hash.startswith("$argon2")

    def test_second_registration_conflicts(self, services):
        register(services)
        with pytest.raises(ConflictError):
            register(services)
        assert services.auth.users.storage.count(User) == 1

    def test_email_failure_does_not_block_registration(self, services):
        services.mailer.fail = True
        result = register(services)
        assert result["user"]["id"]
        assert services.mailer.outbox == []

    def test_refresh_token_is_persisted(self, services):
        result = register(services)
        stored = services.auth.tokens.find_by_token(result["refresh_token"])
        assert stored is not None
        assert stored.user_id == result["user"]["id"]
        assert stored.expires_at > utcnow()


class TestLogin:
    def test_unknown_email_and_wrong_password_look_the_same(self, services):
        register(services)
        with pytest.raises(UnauthorizedError) as unknown:
            services.auth.login("nobody@example.com", PASSWORD)
        with pytest.raises(UnauthorizedError) as wrong:
            services.auth.login("ada@example.com", "Wr0ngpass!")

        assert unknown.value.error == wrong.value.error
        assert unknown.value.message == wrong.value.message == "Invalid credentials"

    def test_each_login_adds_a_refresh_token(self, services):
        result = register(services)
        user_id = result["user"]["id"]
        services.auth.login("ada@example.com", PASSWORD)
        services.auth.login("ada@example.com", PASSWORD)
        assert services.auth.tokens.count_for_user(user_id) == 3

    def test_email_match_is_exact(self, services):
        register(services)
        with pytest.raises(UnauthorizedError):
            services.auth.login("ADA@example.com", PASSWORD)

    def test_login_sweeps_own_expired_tokens(self, services):
        first = register(services)
        stored = services.auth.tokens.find_by_token(first["refresh_token"])
        stored.expires_at = utcnow() - timedelta(minutes=1)
        services.auth.tokens.storage.save()

        services.auth.login("ada@example.com", PASSWORD)

        assert services.auth.tokens.find_by_token(first["refresh_token"]) is None
        assert services.auth.tokens.count_for_user(first["user"]["id"]) == 1


class TestRefresh:
    def test_access_token_carries_same_identity(self, services):
        registered = register(services)
        logged_in = services.auth.login("ada@example.com", PASSWORD)
        refreshed = services.auth.refresh(logged_in["refresh_token"])

        original = services.signer.verify_access(registered["access_token"])
        renewed = services.signer.verify_access(refreshed["access_token"])
        for claim in ("sub", "email", "role", "first_name", "last_name"):
            assert renewed[claim] == original[claim]
        assert renewed["sub"] == str(registered["user"]["id"])

    def test_refresh_does_not_rotate(self, services):
        result = register(services)
        services.auth.refresh(result["refresh_token"])
        # same token keeps working
        assert "access_token" in services.auth.refresh(result["refresh_token"])

    def test_garbage_token_rejected(self, services):
        with pytest.raises(UnauthorizedError) as exc:
            services.auth.refresh("not-a-jwt")
        assert exc.value.message == "Invalid refresh token"

    def test_access_token_cannot_refresh(self, services):
        result = register(services)
        with pytest.raises(UnauthorizedError):
            services.auth.refresh(result["access_token"])

    def test_stored_expiry_in_past_rejected(self, services):
        result = register(services)
        stored = services.auth.tokens.find_by_token(result["refresh_token"])
        stored.expires_at = utcnow() - timedelta(seconds=1)
        services.auth.tokens.storage.save()

        with pytest.raises(UnauthorizedError):
            services.auth.refresh(result["refresh_token"])

    def test_unknown_but_well_signed_token_rejected(self, services):
        result = register(services)
        services.auth.logout(result["user"]["id"])
        with pytest.raises(UnauthorizedError):
            services.auth.refresh(result["refresh_token"])


class TestPasswordReset:
    def test_unknown_email_gets_generic_answer_and_no_code(self, services, outbox):
        register(services)
        outbox.clear()
        response = services.auth.forgot_password("ghost@example.com")

        assert response == {"message": "If the email exists, a reset code has been sent"}
        session = services.auth.users.storage.get_session()
        assert session.query(User).filter(User.otp.isnot(None)).count() == 0
        assert outbox == []

    def test_known_email_gets_same_answer_and_a_code(self, services, outbox):
        register(services)
        outbox.clear()
        response = services.auth.forgot_password("ada@example.com")

        assert response == {"message": "If the email exists, a reset code has been sent"}
        user = services.auth.users.find_by_email("ada@example.com")
        assert OTP_MIN <= user.otp <= OTP_MAX
        assert outbox[0]["subject"] == "Password Reset Request"
        assert str(user.otp) in outbox[0]["html"]

    def test_reset_revokes_every_refresh_token(self, services):
        first = register(services)
        second = services.auth.login("ada@example.com", PASSWORD)
        services.auth.forgot_password("ada@example.com")
        otp = services.auth.users.find_by_email("ada@example.com").otp

        services.auth.reset_password("ada@example.com", otp, "N3wPassw0rd!")

        for token in (first["refresh_token"], second["refresh_token"]):
            with pytest.raises(UnauthorizedError):
                services.auth.refresh(token)
        assert services.auth.users.find_by_email("ada@example.com").otp is None
        assert services.auth.login("ada@example.com", "N3wPassw0rd!")["access_token"]
        with pytest.raises(UnauthorizedError):
            services.auth.login("ada@example.com", PASSWORD)

    def test_wrong_code_rejected(self, services):
        register(services)
        services.auth.forgot_password("ada@example.com")
        otp = services.auth.users.find_by_email("ada@example.com").otp
        wrong = OTP_MIN if otp != OTP_MIN else OTP_MAX

        with pytest.raises(BadRequestError) as exc:
            services.auth.reset_password("ada@example.com", wrong, "N3wPassw0rd!")
        assert exc.value.message == "Invalid reset code"

    def test_reset_without_requested_code_rejected(self, services):
        register(services)
        with pytest.raises(BadRequestError):
            services.auth.reset_password("ada@example.com", 123456, "N3wPassw0rd!")

    def test_unknown_email_rejected(self, services):
        with pytest.raises(BadRequestError):
            services.auth.reset_password("ghost@example.com", 123456, "N3wPassw0rd!")


class TestLogout:
    def test_single_token(self, services):
        first = register(services)
        second = services.auth.login("ada@example.com", PASSWORD)
        services.auth.logout(first["user"]["id"], first["refresh_token"])

        with pytest.raises(UnauthorizedError):
            services.auth.refresh(first["refresh_token"])
        assert services.auth.refresh(second["refresh_token"])["access_token"]

    def test_all_tokens(self, services):
        first = register(services)
        services.auth.login("ada@example.com", PASSWORD)
        services.auth.logout(first["user"]["id"])
        assert services.auth.tokens.count_for_user(first["user"]["id"]) == 0

    def test_cannot_revoke_someone_elses_token(self, services):
        ada = register(services)
        bob = register(services, email="bob@example.com")
        services.auth.logout(bob["user"]["id"], ada["refresh_token"])
        assert services.auth.refresh(ada["refresh_token"])["access_token"]


def test_purge_removes_only_expired(services):
    first = register(services)
    second = register(services, email="bob@example.com")
    stale = services.auth.tokens.find_by_token(first["refresh_token"])
    stale.expires_at = utcnow() - timedelta(days=1)
    services.auth.tokens.storage.save()

    assert services.auth.purge_expired_tokens() == 1
    session = services.auth.tokens.storage.get_session()
    remaining = [t.token for t in session.query(RefreshToken).all()]
    assert remaining == [second["refresh_token"]]


class TestTokenSigner:
    def test_secrets_must_differ(self):
        with pytest.raises(ValueError):
            TokenSigner("same-secret-0123456789abcdef0123", "same-secret-0123456789abcdef0123")

    def test_expired_access_token(self):
        signer = TokenSigner(
            "a-access-secret-0123456789abcdef",
            "a-refresh-secret-0123456789abcdef",
            access_ttl=timedelta(seconds=-1),
        )
        user = User(id=1, email="x@example.com", role="learner", first_name="X", last_name="Y")
        with pytest.raises(TokenError):
            signer.verify_access(signer.issue_access(user))

    def test_tokens_issued_together_differ(self, services):
        user = User(id=7, email="x@example.com", role="learner", first_name="X", last_name="Y")
        first = services.signer.issue_pair(user)
        second = services.signer.issue_pair(user)
        assert first.refresh_token != second.refresh_token
        assert first.access_token != second.access_token
