"""Auth endpoint tests: registration, email verification, two-step login, passwords."""

from datetime import timedelta

from httpx import AsyncClient

from course_advising.domain.entities.pending_challenge import PendingChallenge
from course_advising.main import app
from course_advising.shared.utils.datetime import utc_now

from tests.conftest import DEFAULT_PASSWORD, code_from, token_from
from tests.fakes import RecordingNotifier


async def _register(client: AsyncClient, email: str = "ada@example.com") -> dict:
    response = await client.post(
        "/api/v1/auth/register",
        json={
            "first_name": "Ada",
            "last_name": "Lovelace",
            "email": email,
            "password": DEFAULT_PASSWORD,
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


async def _login(client: AsyncClient, email: str, password: str = DEFAULT_PASSWORD):
    return await client.post(
        "/api/v1/auth/login", json={"email": email, "password": password}
    )


async def test_register_verify_login_two_factor_flow(
    client: AsyncClient, notifier: RecordingNotifier
) -> None:
    created = await _register(client)
    assert created["is_verified"] is False
    assert "password" not in created and "hashed_password" not in created

    verify_mail = notifier.last_to("ada@example.com")
    assert verify_mail.subject == "Verify your email"

    response = await _login(client, "ada@example.com")
    assert response.status_code == 403
    assert response.json()["error"] == "ACCOUNT_NOT_VERIFIED"

    response = await client.get(
        "/api/v1/auth/verify", params={"token": token_from(verify_mail.html_body)}
    )
    assert response.status_code == 302
    assert response.headers["location"].endswith("/login")
    assert notifier.last_to("ada@example.com").subject == "Your Email Has Been Verified!"

    response = await _login(client, "ada@example.com")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "2fa_required"
    assert data["message"] == "2FA code sent"
    assert data["user_id"] == created["id"]
    assert data["email"] == "ada@example.com"
    assert "access_token" not in data

    code_mail = notifier.last_to("ada@example.com")
    assert code_mail.subject == "Your login verification code"
    code = code_from(code_mail.html_body)
    wrong = f"{(int(code) + 1) % 1_000_000:06d}"

    response = await client.post(
        "/api/v1/auth/verify-2fa", json={"user_id": created["id"], "code": wrong}
    )
    assert response.status_code == 401
    assert response.json()["error"] == "CODE_MISMATCH"

    response = await client.post(
        "/api/v1/auth/verify-2fa", json={"user_id": created["id"], "code": code}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "success"
    assert data["user"]["email"] == "ada@example.com"
    assert data["token_type"] == "bearer"
    token = data["access_token"]

    response = await client.post(
        "/api/v1/auth/verify-2fa", json={"user_id": created["id"], "code": code}
    )
    assert response.status_code == 401
    assert response.json()["error"] == "NO_PENDING_CHALLENGE"

    response = await client.get(
        "/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 200
    assert response.json()["id"] == created["id"]


async def test_register_duplicate_email_returns_409(client: AsyncClient) -> None:
    await _register(client)
    response = await client.post(
        "/api/v1/auth/register",
        json={
            "first_name": "Other",
            "last_name": "Person",
            "email": "ADA@example.com",
            "password": DEFAULT_PASSWORD,
        },
    )
    assert response.status_code == 409
    assert response.json()["error"] == "EMAIL_ALREADY_REGISTERED"


async def test_register_validation_returns_422(client: AsyncClient) -> None:
    response = await client.post("/api/v1/auth/register", json={"email": "not-an-email"})
    assert response.status_code == 422


async def test_verify_with_unknown_token_returns_400(client: AsyncClient) -> None:
    response = await client.get("/api/v1/auth/verify", params={"token": "deadbeef"})
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid or expired verification token"


async def test_login_bad_credentials_are_indistinguishable(client: AsyncClient, make_user) -> None:
    await make_user("grace@example.com")
    wrong_password = await _login(client, "grace@example.com", "not-the-password")
    unknown_email = await _login(client, "nobody@example.com")
    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json()
    assert wrong_password.json()["message"] == "Invalid email or password"


async def test_login_succeeds_when_code_email_fails(
    client: AsyncClient, make_user, notifier: RecordingNotifier
) -> None:
    user = await make_user("grace@example.com")
    notifier.fail = True
    response = await _login(client, "grace@example.com")
    assert response.status_code == 200
    assert response.json()["user_id"] == user.id


async def test_verify_two_factor_requires_fields(client: AsyncClient) -> None:
    response = await client.post("/api/v1/auth/verify-2fa", json={"user_id": 1})
    assert response.status_code == 400
    assert response.json()["error"] == "VALIDATION_ERROR"


async def test_verify_two_factor_without_login(client: AsyncClient, make_user) -> None:
    user = await make_user("grace@example.com")
    response = await client.post(
        "/api/v1/auth/verify-2fa", json={"user_id": user.id, "code": "123456"}
    )
    assert response.status_code == 401
    assert response.json()["message"] == "No 2FA request found or already verified"


async def _store_code(user_id: int, code: str) -> None:
    await app.state.challenge_store.put(
        user_id, PendingChallenge(code=code, expires_at=utc_now() + timedelta(minutes=5))
    )


async def test_verify_two_factor_accepts_client_field_names(
    client: AsyncClient, make_user
) -> None:
    user = await make_user("grace@example.com")
    await _store_code(user.id, "123456")
    response = await client.post(
        "/api/v1/auth/verify-2fa", json={"userId": user.id, "code": 123456}
    )
    assert response.status_code == 200, response.text
    assert response.json()["user"]["id"] == user.id


async def test_numeric_code_loses_leading_zero(client: AsyncClient, make_user) -> None:
    user = await make_user("grace@example.com")
    await _store_code(user.id, "012345")
    response = await client.post(
        "/api/v1/auth/verify-2fa", json={"userId": user.id, "code": 12345}
    )
    assert response.status_code == 401
    assert response.json()["error"] == "CODE_MISMATCH"
    response = await client.post(
        "/api/v1/auth/verify-2fa", json={"userId": user.id, "code": " 012345 "}
    )
    assert response.status_code == 200


async def test_resend_accepts_client_field_name(client: AsyncClient, make_user) -> None:
    user = await make_user("grace@example.com")
    response = await client.post("/api/v1/auth/resend-2fa", json={"userId": user.id})
    assert response.status_code == 200


async def test_resend_issues_new_code(
    client: AsyncClient, make_user, notifier: RecordingNotifier
) -> None:
    user = await make_user("grace@example.com")
    await _login(client, "grace@example.com")
    response = await client.post("/api/v1/auth/resend-2fa", json={"user_id": user.id})
    assert response.status_code == 200
    resent = notifier.last_to("grace@example.com")
    assert resent.subject == "Your login verification code (resend)"
    response = await client.post(
        "/api/v1/auth/verify-2fa",
        json={"user_id": user.id, "code": code_from(resent.html_body)},
    )
    assert response.status_code == 200


async def test_resend_unknown_user_returns_404(client: AsyncClient) -> None:
    response = await client.post("/api/v1/auth/resend-2fa", json={"user_id": 999})
    assert response.status_code == 404


async def test_resend_requires_user_id(client: AsyncClient) -> None:
    response = await client.post("/api/v1/auth/resend-2fa", json={})
    assert response.status_code == 400


async def test_me_requires_token(client: AsyncClient) -> None:
    response = await client.get("/api/v1/auth/me")
    assert response.status_code == 401
    response = await client.get(
        "/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert response.status_code == 401


async def test_forgot_and_reset_password(
    client: AsyncClient, make_user, notifier: RecordingNotifier
) -> None:
    await make_user("grace@example.com")
    response = await client.post(
        "/api/v1/auth/forgot-password", json={"email": "grace@example.com"}
    )
    assert response.status_code == 200
    reset_mail = notifier.last_to("grace@example.com")
    assert reset_mail.subject == "Password Reset Request"
    assert "/reset-password?token=" in reset_mail.html_body
    token = token_from(reset_mail.html_body)

    response = await client.post(
        "/api/v1/auth/reset-password",
        json={"token": token, "new_password": "BrandNewPass9"},
    )
    assert response.status_code == 200

    assert (await _login(client, "grace@example.com")).status_code == 401
    assert (await _login(client, "grace@example.com", "BrandNewPass9")).status_code == 200

    # Token is single use.
    response = await client.post(
        "/api/v1/auth/reset-password",
        json={"token": token, "new_password": "AnotherPass9"},
    )
    assert response.status_code == 400


async def test_forgot_password_unknown_email_returns_404(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/auth/forgot-password", json={"email": "ghost@example.com"}
    )
    assert response.status_code == 404


async def test_forgot_password_email_failure_returns_503(
    client: AsyncClient, make_user, notifier: RecordingNotifier
) -> None:
    await make_user("grace@example.com")
    notifier.fail = True
    response = await client.post(
        "/api/v1/auth/forgot-password", json={"email": "grace@example.com"}
    )
    assert response.status_code == 503
    assert response.json() == {
        "error": "DEPENDENCY_ERROR",
        "message": "Server error",
        "details": {},
    }


async def test_change_password(client: AsyncClient, make_user) -> None:
    user = await make_user("grace@example.com")
    response = await client.post(
        f"/api/v1/auth/change-password/{user.id}",
        json={"current_password": "wrong-one", "new_password": "BrandNewPass9"},
    )
    assert response.status_code == 401
    response = await client.post(
        f"/api/v1/auth/change-password/{user.id}",
        json={"current_password": DEFAULT_PASSWORD, "new_password": "BrandNewPass9"},
    )
    assert response.status_code == 200
    assert (await _login(client, "grace@example.com", "BrandNewPass9")).status_code == 200
