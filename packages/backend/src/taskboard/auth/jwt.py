"""JWT token creation and verification.

Learn: JWT (JSON Web Token) provides stateless authentication.
The token carries only the user id (as "sub") plus iat/exp. Validity is
decided by signature and expiry alone, so logout is just the client
throwing the token away.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from taskboard.config import settings
from taskboard.errors import AuthenticationError


class TokenError(AuthenticationError):
    """Raised when token verification fails."""


class InvalidTokenError(TokenError):
    default_message = "Invalid token."


class TokenExpiredError(TokenError):
    default_message = "Token expired."


def create_access_token(
    user_id: str,
    expires_minutes: Optional[int] = None,
) -> str:
    """Create a signed access token for a user id."""
    now = datetime.now(timezone.utc)
    if expires_minutes is None:
        expires_minutes = settings.access_token_expire_minutes
    payload = {
        "sub": user_id,
        "iat": now,
        "exp": now + timedelta(minutes=expires_minutes),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> str:
    """Verify a token and return the user id it encodes.

    Raises TokenExpiredError past expiry, InvalidTokenError for anything
    else wrong with the token (bad signature, garbage, missing subject).
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise TokenExpiredError()
    except jwt.InvalidTokenError:
        raise InvalidTokenError()

    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id:
        raise InvalidTokenError()
    return user_id
