"""Password hashing for reviewer and admin accounts (bcrypt via passlib)."""

from passlib.context import CryptContext

from reviews import config

MIN_PASSWORD_LENGTH = 8

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=config.bcrypt_rounds())


def password_errors(password: str | None) -> list[str]:
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        return [f"Password must be at least {MIN_PASSWORD_LENGTH} characters"]
    return []


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str | None, password_hash: str | None) -> bool:
    if not password or not password_hash:
        return False
    return pwd_context.verify(password, password_hash)
