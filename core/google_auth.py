from dataclasses import dataclass
from typing import Optional

from google.auth.transport import requests as google_requests
from google.oauth2 import id_token
from loguru import logger

from core.errors import AuthenticationError


@dataclass
class GoogleIdentity:
    google_id: str
    email: str
    name: Optional[str] = None
    picture: Optional[str] = None


def verify_google_credential(credential: str, client_id: str) -> GoogleIdentity:
    """Verify a Google Sign-In ID token and return the identity it asserts.

    Raises AuthenticationError when the token is malformed, expired, issued
    for another audience, or lacks an email.
    """
    try:
        payload = id_token.verify_oauth2_token(credential, google_requests.Request(), client_id)
    except ValueError as e:
        logger.warning(f"Google token verification failed: {e}")
        raise AuthenticationError("Invalid Google credential") from e

    email = payload.get("email")
    if not email:
        raise AuthenticationError("Google account has no email address")

    return GoogleIdentity(
        google_id=payload["sub"],
        email=email,
        name=payload.get("name"),
        picture=payload.get("picture"),
    )
