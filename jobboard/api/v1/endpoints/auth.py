from typing import Any, Optional

from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials

from jobboard.core.auth import bearer_scheme, get_auth_client
from jobboard.core.exceptions import (
    AuthenticationRequired,
    DuplicateEmail,
    InvalidCredentials,
    SignUpFailed,
)
from jobboard.core.supabase_client import DUPLICATE_ACCOUNT_MESSAGE, SupabaseAuthClient
from jobboard.schemas.auth import AuthSession, SignInRequest, SignUpRequest
from jobboard.schemas.response import CreateResponse, ErrorResponse, Messages, SuccessResponse

router = APIRouter()


@router.post(
    "/signup",
    response_model=CreateResponse[None],
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def sign_up(
    *,
    user_in: SignUpRequest,
    auth_client: SupabaseAuthClient = Depends(get_auth_client),
) -> Any:
    """
    Register a new account; Supabase sends the confirmation email.
    """
    result = await auth_client.sign_up(user_in.email, user_in.password)
    if not result.success:
        if result.error == DUPLICATE_ACCOUNT_MESSAGE:
            raise DuplicateEmail()
        raise SignUpFailed(detail=result.error or "Sign up failed")
    return CreateResponse(message=Messages.REGISTER_SUCCESS)


@router.post("/signin", response_model=SuccessResponse[AuthSession])
async def sign_in(
    *,
    user_in: SignInRequest,
    auth_client: SupabaseAuthClient = Depends(get_auth_client),
) -> Any:
    result = await auth_client.sign_in(user_in.email, user_in.password)
    if not result.success:
        raise InvalidCredentials(detail=result.error or "Invalid credentials")
    return SuccessResponse(message=Messages.LOGIN_SUCCESS, data=result.session)


@router.post("/signout", response_model=SuccessResponse[None])
async def sign_out(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth_client: SupabaseAuthClient = Depends(get_auth_client),
) -> Any:
    if credentials is None:
        raise AuthenticationRequired()
    await auth_client.sign_out(credentials.credentials)
    return SuccessResponse(message=Messages.LOGOUT_SUCCESS)
