"""FastAPI identity dependencies.

Usage in any router:
    from src.mk_gateway.auth.dependencies import get_current_user_id

    @router.post("/orders")
    async def place(user_id: str = Depends(get_current_user_id)):
        ...

``get_optional_user_id`` returns None for anonymous callers, so read
projections can answer "not logged in" with an empty result instead of an
error. A token that is present but invalid is always rejected.
"""

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer

from src.mk_common.errors import AuthenticationRequiredError
from src.mk_gateway.auth.jwt_handler import decode_user_id

# auto_error=False: missing header yields None instead of FastAPI's own 401
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/token", auto_error=False)


async def get_optional_user_id(token: str | None = Depends(oauth2_scheme)) -> str | None:
    if token is None:
        return None
    return decode_user_id(token)


async def get_current_user_id(
    user_id: str | None = Depends(get_optional_user_id),
) -> str:
    """Require an authenticated caller; raises 401 (AuthenticationRequiredError) otherwise."""
    if user_id is None:
        raise AuthenticationRequiredError()
    return user_id
