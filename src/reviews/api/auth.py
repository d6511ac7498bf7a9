"""Bearer-token identity for API requests.

Tokens are issued at signup and login and carry the user id as ``sub``.
This module encodes and decodes them and loads the account.
"""

from datetime import UTC, datetime, timedelta

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from reviews import config
from reviews.account.user import AccountStatus, User
from reviews.throttle import get_rate_limiter
from reviews.utils.logging import bind_user

bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(user_id: str, expires_minutes: int | None = None) -> str:
    expire = datetime.now(UTC) + timedelta(minutes=expires_minutes or config.access_token_expire_minutes())
    return jwt.encode({"sub": str(user_id), "exp": expire}, config.secret_key(), algorithm=config.jwt_algorithm())


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _user_from_token(token: str) -> User:
    try:
        payload = jwt.decode(token, config.secret_key(), algorithms=[config.jwt_algorithm()])
    except JWTError as exc:
        raise _unauthorized("Could not validate credentials") from exc

    subject = payload.get("sub")
    if subject is None:
        raise _unauthorized("Could not validate credentials")

    try:
        user = current_domain.repository_for(User).get(subject)
    except ObjectNotFoundError as exc:
        raise _unauthorized("User not found") from exc

    if user.account_status == AccountStatus.DELETED.value:
        raise _unauthorized("User not found")
    bind_user(str(user.id))
    return user


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> User:
    if credentials is None:
        raise _unauthorized("Not authenticated")
    return _user_from_token(credentials.credentials)


async def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> User | None:
    if credentials is None:
        return None
    return _user_from_token(credentials.credentials)


async def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin or not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return user


def client_address(request: Request) -> str:
    return request.client.host if request.client else "unknown"


async def api_rate_limit(request: Request) -> None:
    """General per-address request budget."""
    get_rate_limiter("api").hit(client_address(request))
