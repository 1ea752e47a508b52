# Standard library imports
from typing import Any, Dict

# External package imports
import jwt
from jwt.exceptions import InvalidTokenError, DecodeError

# Local application imports
from .config import get_settings


def decode_jwt_token(token: str) -> Dict[str, Any]:
    """
    Decode and validate a JWT token issued by the account service

    Args:
        token: The JWT token string to decode

    Returns:
        Dictionary containing decoded token claims

    Raises:
        ValueError: If token is invalid, expired or cannot be decoded
    """
    settings = get_settings()
    try:
        decoded = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm]
        )
        return decoded
    except (InvalidTokenError, DecodeError) as e:
        raise ValueError(f"Invalid token: {str(e)}")
