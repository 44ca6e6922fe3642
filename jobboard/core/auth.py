from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from jobboard.core.exceptions import AuthenticationRequired
from jobboard.core.supabase_client import SupabaseAuthClient
from jobboard.schemas.auth import CurrentUser

bearer_scheme = HTTPBearer(auto_error=False)


def get_auth_client(request: Request) -> SupabaseAuthClient:
    return request.app.state.auth_client


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth_client: SupabaseAuthClient = Depends(get_auth_client),
) -> Optional[CurrentUser]:
    """Authenticated user if a valid bearer token was sent, otherwise None."""
    if credentials is None:
        return None
    return await auth_client.get_user(credentials.credentials)


async def get_current_user(
    user: Optional[CurrentUser] = Depends(get_optional_user),
) -> CurrentUser:
    if user is None:
        raise AuthenticationRequired()
    return user
