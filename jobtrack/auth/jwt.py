"""
JWT Token Verification

Tokens are issued by the external identity provider; this service only
verifies them and extracts the owner id.
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from ..config import get_config
from ..errors import Unauthenticated

security = HTTPBearer(auto_error=False)


def verify_token(token: str) -> str:
    """Verify and decode a JWT token, returning the owner id."""
    auth = get_config().auth
    try:
        payload = jwt.decode(token, auth.secret_key, algorithms=[auth.algorithm])
    except JWTError:
        raise Unauthenticated("Invalid token")

    owner_id = payload.get(auth.owner_claim)
    if not owner_id:
        raise Unauthenticated("Invalid token")
    return str(owner_id)


async def get_current_owner(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    """Resolve the authenticated owner id from the bearer token"""
    if credentials is None or not credentials.credentials:
        raise Unauthenticated()
    return verify_token(credentials.credentials)
