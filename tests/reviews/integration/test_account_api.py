"""Integration tests for login and the caller's own account endpoints."""

import asyncio

from protean import current_domain
from reviews.account.user import User
from reviews.notifications import set_email_channel
from reviews.notifications.fake_email import FakeEmailAdapter

PASSWORD = "correct-horse-battery"  # make_user default
BODY = "Our deposit came back in full and every repair was handled within the week."


def _login(client, email="tenant@example.com", password=PASSWORD):
    return client.post("/auth/login", json={"email": email, "password": password})


def _bearer(response):
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


class TestSelfServiceJourney:
    def test_register_verify_login_and_submit(self, client, email_channel):
        registered = client.post(
            "/auth/register",
            json={"username": "newtenant", "email": "new@example.com", "password": PASSWORD},
        )
        assert registered.status_code == 201

        token = current_domain.repository_for(User).get(registered.json()["id"]).email_verification_token
        assert client.get(f"/auth/verify-email/{token}").status_code == 200

        login = _login(client, email="new@example.com")
        assert login.status_code == 200
        assert login.json()["token_type"] == "bearer"

        submitted = client.post(
            "/reviews",
            data={"property_name": "Maple Court", "rating": "4", "title": "Fair landlord", "body": BODY},
            headers=_bearer(login),
        )
        assert submitted.status_code == 201

        mine = client.get("/reviews/mine", headers=_bearer(login))
        assert [review["id"] for review in mine.json()["items"]] == [submitted.json()["review_id"]]


class TestLoginAPI:
    def test_login(self, client, author):
        response = _login(client)
        assert response.status_code == 200
        assert response.json()["id"] == str(author.id)

    def test_wrong_password(self, client, author):
        response = _login(client, password="not-my-password")
        assert response.status_code == 401
        assert response.json() == {"error": {"credentials": ["Invalid credentials"]}}

    def test_suspended_account(self, client, admin, author, auth_for):
        client.put(f"/admin/users/{author.id}/suspend", headers=auth_for(admin))
        assert _login(client).status_code == 403

    def test_failed_attempts_are_limited(self, client, author):
        for _ in range(5):
            assert _login(client, password="not-my-password").status_code == 401

        response = _login(client)
        assert response.status_code == 429
        assert "Too many authentication attempts" in str(response.json())

    def test_successful_logins_are_not_counted(self, client, author):
        for _ in range(6):
            assert _login(client).status_code == 200


class TestResendVerificationLimit:
    def test_ten_per_hour(self, client, make_user):
        make_user(email="late@example.com", verified=False)
        for _ in range(10):
            assert client.post("/auth/resend-verification", json={"email": "late@example.com"}).status_code == 200

        response = client.post("/auth/resend-verification", json={"email": "late@example.com"})
        assert response.status_code == 429
        assert "Too many verification emails sent" in str(response.json())


class TestMeAPI:
    def test_me(self, client, author, auth_for):
        response = client.get("/auth/me", headers=auth_for(author))
        assert response.status_code == 200
        body = response.json()
        assert body["email"] == "tenant@example.com"
        assert body["is_email_verified"] is True
        assert "password_hash" not in body

    def test_requires_token(self, client):
        assert client.get("/auth/me").status_code == 401


class TestPasswordAPI:
    def test_change_password(self, client, author, auth_for):
        response = client.put(
            "/auth/password",
            json={"current_password": PASSWORD, "new_password": "staple-lantern-river"},
            headers=auth_for(author),
        )
        assert response.status_code == 200
        assert _login(client, password="staple-lantern-river").status_code == 200

    def test_wrong_current_password(self, client, author, auth_for):
        response = client.put(
            "/auth/password",
            json={"current_password": "guess-guess", "new_password": "staple-lantern-river"},
            headers=auth_for(author),
        )
        assert response.status_code == 401

    def test_too_short(self, client, author, auth_for):
        response = client.put(
            "/auth/password",
            json={"current_password": PASSWORD, "new_password": "short"},
            headers=auth_for(author),
        )
        assert response.status_code == 400


class TestProfileAPI:
    def test_update_profile(self, client, author, auth_for, email_channel):
        response = client.put(
            "/auth/profile",
            json={"username": "renamed", "email": "moved@example.com"},
            headers=auth_for(author),
        )
        assert response.status_code == 200
        assert response.json()["username"] == "renamed"
        assert response.json()["is_email_verified"] is False
        assert email_channel.sent_emails[-1]["to"] == "moved@example.com"

    def test_duplicate_email(self, client, author, make_user, auth_for):
        make_user(email="taken@example.com")
        response = client.put(
            "/auth/profile",
            json={"username": "tenant", "email": "taken@example.com"},
            headers=auth_for(author),
        )
        assert response.status_code == 400


class TestDeleteAccountAPI:
    def test_delete_account(self, client, author, auth_for):
        headers = auth_for(author)
        response = client.request("DELETE", "/auth/account", json={"password": PASSWORD}, headers=headers)
        assert response.status_code == 200
        assert client.get("/auth/me", headers=headers).status_code == 401

    def test_wrong_password_keeps_account(self, client, author, auth_for):
        response = client.request(
            "DELETE", "/auth/account", json={"password": "not-my-password"}, headers=auth_for(author)
        )
        assert response.status_code == 401
        assert current_domain.repository_for(User).get(author.id)


class EventLoopRecordingEmail(FakeEmailAdapter):
    """Notes, per message, whether delivery happened on a running event loop."""

    def __init__(self):
        super().__init__()
        self.on_event_loop = []

    def send(self, to, subject, body, html_body=None):
        try:
            asyncio.get_running_loop()
            self.on_event_loop.append(True)
        except RuntimeError:
            self.on_event_loop.append(False)
        return super().send(to, subject, body, html_body)


class TestEmailDeliveryOffEventLoop:
    def test_registration_email_sent_from_worker_thread(self, client):
        channel = EventLoopRecordingEmail()
        set_email_channel(channel)

        response = client.post(
            "/auth/register",
            json={"username": "newtenant", "email": "new@example.com", "password": PASSWORD},
        )

        assert response.status_code == 201
        assert channel.on_event_loop == [False]
