"""Account routes: registration, login, email verification and the
caller's own profile, password and deletion.

Signup and login share the ``auth`` limiter, which only counts failed
attempts; verification resends use the ``email`` limiter.
"""

from fastapi import APIRouter, Depends, Request

from reviews.account.credentials import ChangePassword, DeleteOwnAccount, LogIn, UpdateProfile
from reviews.account.queries import get_user
from reviews.account.registration import ConfirmEmail, RegisterUser, ResendVerification
from reviews.account.user import User
from reviews.api.auth import api_rate_limit, client_address, create_access_token, get_current_user
from reviews.api.commands import dispatch
from reviews.api.schemas import (
    AccountResponse,
    ChangePasswordRequest,
    DeleteAccountRequest,
    LoginRequest,
    RegisterRequest,
    ResendVerificationRequest,
    StatusResponse,
    TokenResponse,
    UpdateProfileRequest,
)
from reviews.throttle import get_rate_limiter

auth_router = APIRouter(prefix="/auth", tags=["auth"], dependencies=[Depends(api_rate_limit)])


@auth_router.post("/register", status_code=201, response_model=TokenResponse)
async def register(request: Request, body: RegisterRequest) -> TokenResponse:
    """Create an account, email a verification link and sign the caller in."""
    with get_rate_limiter("auth").counting_failures(client_address(request)):
        user_id = await dispatch(RegisterUser(username=body.username, email=body.email, password=body.password))
    return TokenResponse(id=user_id, access_token=create_access_token(user_id))


@auth_router.post("/login", response_model=TokenResponse)
async def login(request: Request, body: LoginRequest) -> TokenResponse:
    with get_rate_limiter("auth").counting_failures(client_address(request)):
        user_id = await dispatch(LogIn(email=body.email, password=body.password))
    return TokenResponse(id=user_id, access_token=create_access_token(user_id))


@auth_router.get("/verify-email/{token}", response_model=StatusResponse)
async def verify_email(token: str) -> StatusResponse:
    await dispatch(ConfirmEmail(token=token))
    return StatusResponse()


@auth_router.post("/resend-verification", response_model=StatusResponse)
async def resend_verification(request: Request, body: ResendVerificationRequest) -> StatusResponse:
    get_rate_limiter("email").hit(client_address(request))
    await dispatch(ResendVerification(email=body.email))
    return StatusResponse()


@auth_router.get("/me", response_model=AccountResponse)
async def me(user: User = Depends(get_current_user)) -> dict:
    return get_user(user.id)


@auth_router.put("/password", response_model=StatusResponse)
async def change_password(body: ChangePasswordRequest, user: User = Depends(get_current_user)) -> StatusResponse:
    await dispatch(
        ChangePassword(user_id=str(user.id), current_password=body.current_password, new_password=body.new_password)
    )
    return StatusResponse()


@auth_router.put("/profile", response_model=AccountResponse)
async def update_profile(body: UpdateProfileRequest, user: User = Depends(get_current_user)) -> dict:
    """Change username or email; a new email address has to be verified again."""
    await dispatch(UpdateProfile(user_id=str(user.id), username=body.username, email=body.email))
    return get_user(user.id)


@auth_router.delete("/account", response_model=StatusResponse)
async def delete_account(body: DeleteAccountRequest, user: User = Depends(get_current_user)) -> StatusResponse:
    await dispatch(DeleteOwnAccount(user_id=str(user.id), password=body.password))
    return StatusResponse()
