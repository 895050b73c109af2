"""
Caller identity.

Users authenticate with an external identity provider which issues HS256
bearer tokens whose ``sub`` claim is the user id. This module only reads the
token and hands an explicit ``SessionContext`` to the services.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from formbuilder.config import get_settings

settings = get_settings()

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class SessionContext:
    """The authenticated caller, passed explicitly into service calls."""
    user_id: str


class AuthService:
    """Token helpers."""

    @staticmethod
    def create_access_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
        """Create a JWT access token (development and tests)."""
        expire = datetime.utcnow() + (
            expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
        )
        to_encode = {"sub": str(user_id), "exp": expire}
        return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)

    @staticmethod
    def decode_token(token: str) -> Optional[SessionContext]:
        """Decode a token into a session; None when it is not valid."""
        try:
            payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
        except JWTError:
            return None
        user_id = payload.get("sub")
        if not user_id:
            return None
        return SessionContext(user_id=str(user_id))


async def get_current_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> SessionContext:
    """Dependency resolving the bearer token into a SessionContext."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise credentials_exception

    session = AuthService.decode_token(credentials.credentials)
    if session is None:
        raise credentials_exception
    return session
