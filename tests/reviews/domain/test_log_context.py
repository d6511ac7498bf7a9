import structlog
from reviews.utils.logging import bind_request, bind_user, get_log_level


class TestLogContext:
    def teardown_method(self):
        structlog.contextvars.clear_contextvars()

    def test_request_fields_bound(self):
        bind_request("GET", "/reviews")
        assert structlog.contextvars.get_contextvars() == {"method": "GET", "path": "/reviews"}

    def test_user_added_to_request(self):
        bind_request("POST", "/reviews")
        bind_user("user-1")
        assert structlog.contextvars.get_contextvars()["user_id"] == "user-1"

    def test_new_request_drops_previous_user(self):
        bind_request("GET", "/auth/me")
        bind_user("user-1")
        bind_request("GET", "/reviews")
        assert "user_id" not in structlog.contextvars.get_contextvars()


class TestLogLevel:
    def test_level_follows_environment(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.setenv("ENV", "production")
        assert get_log_level() == "INFO"

    def test_explicit_level_wins(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "ERROR")
        assert get_log_level() == "ERROR"
