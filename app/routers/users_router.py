# app/routers/users_router.py
import logging

from fastapi import APIRouter, Depends, Response

from ..application.ports.user_repo import UserDto
from ..application.services.auth_service import AuthManager
from ..application.services.user_service import UserService
from ..dependencies import get_auth_manager, get_current_user, get_refresh_user_id, get_user_service
from ..schemas import (
    ConfirmEmailRequest, ConfirmNicknameRequest, PhoneNumberRequest, ConfirmAuthNumberRequest,
    CreateUserRequest, CreateUserResponse, FindEmailRequest, FindEmailResponse, PasswordResetRequest,
    SignInRequest, TokenPairResponse, AccessTokenResponse, UserResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["USER"])


@router.post("/confirm/email", status_code=204, summary="Check email availability")
def confirm_email(body: ConfirmEmailRequest, users: UserService = Depends(get_user_service)):
    users.confirm_email(body.email)
    return Response(status_code=204)


@router.post("/confirm/nickname", status_code=204, summary="Check nickname availability")
def confirm_nickname(body: ConfirmNicknameRequest, users: UserService = Depends(get_user_service)):
    users.confirm_nickname(body.nickname)
    return Response(status_code=204)


@router.post("/confirm/phone", status_code=204, summary="Check phone availability and send auth number")
def confirm_phone_number(body: PhoneNumberRequest, users: UserService = Depends(get_user_service)):
    users.confirm_phone_number(body.phoneNumber)
    return Response(status_code=204)


@router.post("/auth-number", status_code=204, summary="Send auth number for email lookup or password reset")
def send_auth_number(body: PhoneNumberRequest, users: UserService = Depends(get_user_service)):
    users.send_auth_number(body.phoneNumber)
    return Response(status_code=204)


@router.post("/confirm/auth", status_code=204, summary="Confirm auth number")
def confirm_auth_number(body: ConfirmAuthNumberRequest, users: UserService = Depends(get_user_service)):
    users.confirm_auth_number(body.type, body.phoneNumber, body.authNumber)
    return Response(status_code=204)


@router.post("", status_code=201, response_model=CreateUserResponse, summary="Sign up")
def create_user(body: CreateUserRequest, users: UserService = Depends(get_user_service)):
    return users.create_user(body.email, body.nickname, body.phoneNumber, body.password)


@router.post("/email", response_model=FindEmailResponse, summary="Find email by verified phone number")
def find_email(body: FindEmailRequest, users: UserService = Depends(get_user_service)):
    return users.find_email(body.phoneNumber)


@router.put("/password", status_code=204, summary="Reset password")
def reset_password(body: PasswordResetRequest, users: UserService = Depends(get_user_service)):
    users.reset_password(body.email, body.phoneNumber, body.password)
    return Response(status_code=204)


@router.post("/sign", response_model=TokenPairResponse, response_model_exclude_none=True, summary="Sign in")
def sign_in(body: SignInRequest, auth: AuthManager = Depends(get_auth_manager)):
    return auth.sign_in(body.email, body.password).to_dict()


@router.get("/refresh", response_model=AccessTokenResponse, summary="Reissue access token")
def refresh_token(user_id: int = Depends(get_refresh_user_id), auth: AuthManager = Depends(get_auth_manager)):
    return auth.create_access_token(user_id).to_dict()


@router.get("/me", response_model=UserResponse, summary="Current user")
def read_me(user: UserDto = Depends(get_current_user)):
    return UserResponse(
        id=user.id,
        email=user.email,
        nickname=user.nickname,
        phoneNumber=user.phone_number,
        createdAt=user.created_at,
        deletedAt=user.deleted_at,
    )


@router.delete("/sign", status_code=204, summary="Sign out")
def sign_out(user: UserDto = Depends(get_current_user)):
    # tokens are stateless; the client discards them
    logger.info(f"User {user.id} signed out")
    return Response(status_code=204)


@router.delete("", status_code=204, summary="Delete account")
def delete_user(user: UserDto = Depends(get_current_user), users: UserService = Depends(get_user_service)):
    users.delete_user(user.id)
    return Response(status_code=204)
