"""Identity provider HTTP client for verifying bearer tokens"""

import httpx
from savings_gateway.domain.exceptions import AuthenticationError, IdentityServiceError
from savings_gateway.config import settings


class IdentityClient:
    """Client for the external auth service that issues session tokens"""

    def __init__(self, base_url: str | None = None, api_key: str | None = None, timeout: float | None = None):
        self.base_url = base_url or settings.auth_api_base
        self.api_key = api_key if api_key is not None else settings.auth_api_key
        self.timeout = timeout or settings.http_timeout_seconds

    async def get_user_id(self, token: str) -> str:
        """
        Resolve a session token to the authenticated user's id.

        Raises:
            AuthenticationError: Token rejected by the identity provider
            IdentityServiceError: On timeout, server errors, or invalid response
        """
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                response = await client.get(
                    f"{self.base_url}/auth/v1/user",
                    headers={"Authorization": f"Bearer {token}", "apikey": self.api_key},
                )
                if response.status_code in (401, 403):
                    raise AuthenticationError("Invalid token")
                response.raise_for_status()
                user_id = response.json()["id"]

            except httpx.TimeoutException as e:
                raise IdentityServiceError(f"Identity service timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise IdentityServiceError(f"Identity service error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise IdentityServiceError(f"Identity service unreachable: {e}") from e
            except (KeyError, ValueError, TypeError) as e:
                raise IdentityServiceError(f"Invalid user payload from identity service: {e}") from e

        if not user_id:
            raise AuthenticationError("User not found")
        return str(user_id)
