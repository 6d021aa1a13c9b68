import jwt
import datetime
from typing import Any, Dict, Optional

from config.settings import settings  # must define SECRET_KEY and ALGORITHM


def create_access_token(
    payload: Dict[str, Any],
    expires_minutes: Optional[int] = None,
) -> str:
    """
    Generate a JWT access token with the given payload and expiration.
    """
    minutes = expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES
    expire = datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(minutes=minutes)
    to_encode = payload.copy()
    to_encode.update({"exp": expire})

    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_user_token(user_id: int, expires_minutes: Optional[int] = None) -> str:
    """
    Generate a JWT for an identity. Only the identity id is embedded:
    the role is resolved per request, never trusted from the token.
    """
    return create_access_token({"id": user_id}, expires_minutes)


def decode_access_token(token: str) -> Optional[int]:
    """
    Return the identity id carried by `token`, or None if the token is
    expired, malformed or has no id.
    """
    try:
        decoded = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.InvalidTokenError:
        # ExpiredSignatureError is a subclass
        return None
    user_id = decoded.get("id")
    if not isinstance(user_id, int):
        return None
    return user_id
