# JWT Utilities

from datetime import datetime, timedelta, timezone
from typing import List, Optional
import uuid
import logging

import jwt  # JSON Web Token implementation

from product_reviews.config import Config
from product_reviews.errors import InvalidToken

logger = logging.getLogger(__name__)


def create_access_token(
    user_data: dict,
    permissions: List[str],
    expiry: Optional[timedelta] = None
) -> str:
    """Create a JWT access token carrying the caller's capabilities.

    Args:
        user_data (dict): Caller information to encode in the token
        permissions (List[str]): Capabilities granted, e.g. "ReadReviews"
        expiry (timedelta, optional): Custom lifetime. Defaults to ACCESS_TOKEN_EXPIRY_MINUTES

    Returns:
        str: Encoded JWT token
    """
    lifetime = expiry if expiry is not None else timedelta(minutes=Config.ACCESS_TOKEN_EXPIRY_MINUTES)
    payload = {
        'user': user_data,
        'permissions': list(permissions),
        'exp': datetime.now(timezone.utc) + lifetime,
        'jti': str(uuid.uuid4())
    }

    token = jwt.encode(
        payload = payload,
        key = Config.JWT_SECRET,
        algorithm = Config.JWT_ALGORITHM
    )

    return token


def decode_token(token: str) -> dict:
    """Decode and verify a JWT token.

    Raises:
        InvalidToken: If the token is missing, malformed, badly signed or expired
    """
    if not token:
        raise InvalidToken()

    try:
        return jwt.decode(
            jwt = token,
            key = Config.JWT_SECRET,
            algorithms = [Config.JWT_ALGORITHM]
        )
    except jwt.ExpiredSignatureError as e:
        logger.warning(f"Token expired: {str(e)}")
        raise InvalidToken()
    except jwt.PyJWTError as e:
        logger.error(f"JWT error: {str(e)}")
        raise InvalidToken()
