"""Environment-driven settings for the reviews context.

Values are read on access so tests and deployments can override them
through environment variables without re-importing modules.
"""

import os
from dataclasses import dataclass

REDACTED_ADDRESS = "Redacted for privacy/protection"

ALLOWED_DOCUMENT_EXTENSIONS = (".png", ".jpg", ".jpeg", ".pdf")


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value in (None, ""):
        return default
    return int(value)


def upload_path() -> str:
    return os.getenv("UPLOAD_PATH", "./uploads")


def max_file_size() -> int:
    return _int_env("MAX_FILE_SIZE", 10 * 1024 * 1024)


def max_documents() -> int:
    return _int_env("MAX_DOCUMENTS", 5)


def master_admin_email() -> str | None:
    email = os.getenv("ADMIN_EMAIL")
    return email.strip().lower() if email else None


def master_admin_id() -> str | None:
    return os.getenv("ADMIN_ID") or None


def secret_key() -> str:
    return os.getenv("SECRET_KEY", "clearwindow-development-secret")


def jwt_algorithm() -> str:
    return os.getenv("JWT_ALGORITHM", "HS256")


def access_token_expire_minutes() -> int:
    return _int_env("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24 * 7)


def email_verification_ttl_hours() -> int:
    return _int_env("EMAIL_VERIFICATION_TTL_HOURS", 24)


def app_url() -> str:
    return os.getenv("APP_URL", "http://localhost:8000").rstrip("/")


def rate_limit_sweep_seconds() -> int:
    return _int_env("RATE_LIMIT_SWEEP_SECONDS", 60)


def email_channel() -> str:
    return os.getenv("EMAIL_CHANNEL", "fake").strip().lower()


@dataclass(frozen=True)
class SmtpSettings:
    host: str
    port: int
    username: str
    password: str
    use_tls: bool
    from_email: str
    timeout: int


def smtp_settings() -> SmtpSettings:
    return SmtpSettings(
        host=os.getenv("SMTP_HOST", "localhost"),
        port=_int_env("SMTP_PORT", 587),
        username=os.getenv("SMTP_USERNAME", ""),
        password=os.getenv("SMTP_PASSWORD", ""),
        use_tls=os.getenv("SMTP_USE_TLS", "true").lower() == "true",
        from_email=os.getenv("EMAIL_FROM", "noreply@clearwindow.local"),
        timeout=_int_env("SMTP_TIMEOUT", 10),
    )


def bcrypt_rounds() -> int:
    return _int_env("BCRYPT_ROUNDS", 12)
