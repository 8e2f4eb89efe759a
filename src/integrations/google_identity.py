"""
Google identity verification.

Two sign-in flows reach ``POST /auth/google``:
    - ID token (``credential``): checked against the tokeninfo endpoint,
      including the audience when a client id is known.
    - OAuth access token: exchanged for the profile at the userinfo
      endpoint. A profile sent by the client is never trusted.
"""

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from src.core.config import settings
from src.exceptions import AuthenticationError, ExternalServiceError, InvalidInputError

logger = logging.getLogger(__name__)

TOKENINFO_URL = "https://oauth2.googleapis.com/tokeninfo"
USERINFO_URL = "https://www.googleapis.com/oauth2/v3/userinfo"


@dataclass(frozen=True)
class GoogleIdentity:
    """Verified Google profile."""

    email: str
    google_id: str | None
    name: str | None = None
    picture: str | None = None


class GoogleIdentityClient:
    """
    Verify Google credentials over HTTPS.

    Usage:
        identity = await GoogleIdentityClient().verify_id_token(credential, client_id)
    """

    def __init__(self, timeout: float | None = None):
        self.timeout = timeout or settings.http_timeout_seconds

    async def verify_id_token(self, credential: str, client_id: str | None = None) -> GoogleIdentity:
        """
        Verify a Google ID token.

        Args:
            credential: ID token (JWT) issued by Google
            client_id: Expected audience; falls back to GOOGLE_CLIENT_ID

        Returns:
            Verified identity

        Raises:
            AuthenticationError: Token rejected, or issued for another client
        """
        payload = await self._get(TOKENINFO_URL, params={"id_token": credential})
        if payload.get("error") or payload.get("error_description"):
            raise AuthenticationError("Invalid Google token")

        audience = client_id or settings.google_client_id
        if audience and payload.get("aud") != audience:
            logger.warning("Google ID token audience mismatch")
            raise AuthenticationError("Token was not issued for this application")

        return self._identity(payload)

    async def verify_access_token(self, access_token: str) -> GoogleIdentity:
        """
        Resolve an OAuth access token to its Google profile.

        Raises:
            AuthenticationError: Token rejected by Google
        """
        payload = await self._get(
            USERINFO_URL,
            headers={"Authorization": f"Bearer {access_token}"},
        )
        return self._identity(payload)

    async def _get(self, url: str, **kwargs: Any) -> dict[str, Any]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Google identity request failed: {e}")
            raise ExternalServiceError(
                message="Could not reach Google to verify the sign-in",
                service="google",
            ) from e

        if response.status_code in (400, 401, 403):
            raise AuthenticationError("Failed to verify Google token")
        if response.status_code >= 400:
            logger.error(f"Google identity endpoint returned {response.status_code}")
            raise ExternalServiceError(
                message="Google sign-in verification failed",
                service="google",
            )
        return response.json()

    @staticmethod
    def _identity(payload: dict[str, Any]) -> GoogleIdentity:
        email = payload.get("email")
        if not email:
            raise InvalidInputError(field="email", message="Email not provided by Google")

        # tokeninfo returns the flag as a string, userinfo as a boolean
        if str(payload.get("email_verified", "true")).lower() == "false":
            raise AuthenticationError("Google account e-mail is not verified")

        return GoogleIdentity(
            email=email.strip().lower(),
            google_id=payload.get("sub"),
            name=payload.get("name"),
            picture=payload.get("picture"),
        )
