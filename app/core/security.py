from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Optional
import jwt
from jwt import PyJWTError
from app.core.config import settings
import logging
from fastapi import HTTPException, status

logger = logging.getLogger(__name__)

SUPPORTED_ALGORITHMS = ['HS256', 'HS384', 'HS512']

def create_access_token(
    subject: str,
    extra_claims: Optional[Dict[str, Any]] = None,
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Issue a signed bearer token for the given subject.

    Args:
        subject: Stable identifier of the authenticated principal (``sub`` claim)
        extra_claims: Optional profile claims such as ``email`` and ``name``
        expires_delta: Token lifetime, defaults to ACCESS_TOKEN_EXPIRE_MINUTES

    Returns:
        Encoded JWT string
    """
    now = datetime.now(timezone.utc)
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    payload: Dict[str, Any] = dict(extra_claims or {})
    payload.update({"sub": subject, "iat": now, "nbf": now, "exp": now + lifetime})
    if settings.JWT_ISSUER:
        payload["iss"] = settings.JWT_ISSUER

    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)

def verify_access_token(token: str) -> Dict[str, Any]:
    """
    Verify a bearer token and return its subject and claims.

    Args:
        token: The JWT token to verify

    Returns:
        Dict containing user_id (the ``sub`` claim) and full payload

    Raises:
        HTTPException: If token is invalid, expired, or verification fails
    """
    if settings.JWT_ALGORITHM not in SUPPORTED_ALGORITHMS:
        logger.error(f"Unsupported JWT algorithm configured: {settings.JWT_ALGORITHM}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Authentication service misconfigured"
        )

    options = {
        "verify_signature": True,
        "verify_exp": True,
        "verify_nbf": True,
        "verify_iat": True,
        "require": ["exp", "sub"],
    }

    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            leeway=settings.JWT_CLOCK_SKEW_TOLERANCE_SECONDS,
            issuer=settings.JWT_ISSUER or None,
            options=options
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token expired"
        )
    except PyJWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token"
        )

    user_id = payload.get('sub')
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token claims"
        )

    return {"user_id": user_id, "payload": payload}
