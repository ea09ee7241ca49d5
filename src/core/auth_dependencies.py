"""
FastAPI dependencies for JWT authentication.
Tokens are issued by the platform's auth service; this API only verifies them.
"""
import jwt
from fastapi import Header, HTTPException, status
from typing import Optional
from src.core import config


def verify_token(authorization: Optional[str] = Header(None)) -> str:
    """
    Verify the bearer JWT from the Authorization header.

    Args:
        authorization: Authorization header value (Bearer <token>)

    Returns:
        Subject (uploader id) from the token

    Raises:
        HTTPException: 401 if the token is missing, malformed, invalid or expired
    """
    if not authorization:
        raise _unauthorized("Missing authorization header")

    scheme, _, token = authorization.partition(' ')
    if scheme.lower() != 'bearer' or not token:
        raise _unauthorized("Invalid authorization header format")

    try:
        payload = jwt.decode(
            token,
            config.settings.jwt_secret,
            algorithms=[config.settings.jwt_algorithm]
        )
    except jwt.ExpiredSignatureError:
        raise _unauthorized("Token has expired")
    except jwt.InvalidTokenError:
        raise _unauthorized("Invalid token")

    subject = payload.get('sub')
    if not subject:
        raise _unauthorized("Invalid token payload")
    return subject


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"}
    )
