"""JWT access-token handling for the identity provider boundary.

Tokens are issued by the external identity service; this core only
verifies them and extracts the stable user id from the ``sub`` claim.
``create_access_token`` exists for local tooling and tests.

Using HS256 (symmetric HMAC) with a shared JWT_SECRET.
"""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from config.settings import settings
from src.mk_common.errors import InvalidCredentialsError

_ALGORITHM = settings.JWT_ALGORITHM  # "HS256"
_ACCESS_EXPIRE = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)


def create_access_token(user_id: str, expires_in: timedelta | None = None) -> str:
    """Issue an access token (default lifetime: JWT_EXPIRE_MINUTES)."""
    now = datetime.now(UTC)
    payload = {
        "sub": user_id,
        "type": "access",
        "iat": now,
        "exp": now + (expires_in if expires_in is not None else _ACCESS_EXPIRE),
    }
    return str(jwt.encode(payload, settings.JWT_SECRET, algorithm=_ALGORITHM))


def decode_user_id(token: str) -> str:
    """Decode an access token and return its subject (user id).

    Raises:
        InvalidCredentialsError: signature invalid, token expired, wrong token
            type, or missing subject.
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[_ALGORITHM],  # Explicit list prevents algorithm confusion
        )
    except JWTError:
        raise InvalidCredentialsError() from None

    if payload.get("type") != "access":
        raise InvalidCredentialsError()

    user_id = payload.get("sub")
    if not user_id:
        raise InvalidCredentialsError()
    return str(user_id)
