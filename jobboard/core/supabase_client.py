import logging
from typing import Any, Awaitable, Callable, Optional

from supabase import AsyncClient, acreate_client

from jobboard.schemas.auth import AuthSession, CurrentUser

logger = logging.getLogger(__name__)

ClientFactory = Callable[[], Awaitable[AsyncClient]]

DUPLICATE_ACCOUNT_MESSAGE = "An account with this email already exists"


class AuthResult:
    def __init__(
        self,
        success: bool,
        error: Optional[str] = None,
        session: Optional[AuthSession] = None,
    ):
        self.success = success
        self.error = error
        self.session = session


class SupabaseAuthClient:
    """Thin adapter over Supabase Auth: token verification, sign up/in/out."""

    def __init__(
        self,
        url: Optional[str],
        key: Optional[str],
        site_url: str = "http://localhost:3000",
        client_factory: Optional[ClientFactory] = None,
    ):
        self.url = url
        self.key = key
        self.site_url = site_url.rstrip("/")
        self._client_factory = client_factory
        self._client: Optional[AsyncClient] = None

    async def _new_client(self) -> AsyncClient:
        if self._client_factory is not None:
            return await self._client_factory()
        if not self.url or not self.key:
            raise ValueError(
                "SUPABASE_URL and SUPABASE_KEY must be configured in settings"
            )
        return await acreate_client(self.url, self.key)

    async def _shared_client(self) -> AsyncClient:
        if self._client is None:
            self._client = await self._new_client()
        return self._client

    @staticmethod
    def _to_user(user: Any) -> Optional[CurrentUser]:
        if user is None or not getattr(user, "id", None):
            return None
        return CurrentUser(id=str(user.id), email=getattr(user, "email", None))

    async def get_user(self, access_token: str) -> Optional[CurrentUser]:
        """User owning ``access_token``, or None when it is invalid or expired."""
        if not access_token:
            return None
        try:
            client = await self._shared_client()
            response = await client.auth.get_user(access_token)
        except Exception as e:
            logger.warning(f"Supabase token verification failed: {e}")
            return None
        if response is None:
            return None
        return self._to_user(response.user)

    async def sign_up(self, email: str, password: str) -> AuthResult:
        # Fresh client per call: sign-up/in store the session on the client
        try:
            client = await self._new_client()
            await client.auth.sign_up(
                {
                    "email": email,
                    "password": password,
                    "options": {"email_redirect_to": f"{self.site_url}/auth/callback"},
                }
            )
        except Exception as e:
            message = str(e)
            if "already registered" in message.lower():
                return AuthResult(success=False, error=DUPLICATE_ACCOUNT_MESSAGE)
            logger.error(f"Supabase sign up failed for {email}: {message}")
            return AuthResult(success=False, error=message or "Sign up failed")

        logger.info(f"User signed up: {email}")
        return AuthResult(success=True)

    async def sign_in(self, email: str, password: str) -> AuthResult:
        try:
            client = await self._new_client()
            response = await client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except Exception as e:
            logger.info(f"Supabase sign in failed for {email}: {e}")
            return AuthResult(success=False, error=str(e) or "Invalid credentials")

        session = getattr(response, "session", None)
        user = self._to_user(getattr(response, "user", None))
        if session is None or user is None:
            return AuthResult(success=False, error="Invalid credentials")

        return AuthResult(
            success=True,
            session=AuthSession(
                access_token=session.access_token,
                refresh_token=getattr(session, "refresh_token", None),
                expires_in=getattr(session, "expires_in", None),
                user=user,
            ),
        )

    async def sign_out(self, access_token: str) -> bool:
        try:
            client = await self._shared_client()
            await client.auth.admin.sign_out(access_token)
            return True
        except Exception as e:
            logger.warning(f"Supabase sign out failed: {e}")
            return False
