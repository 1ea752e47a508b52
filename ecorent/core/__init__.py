from .config import Settings, get_settings
from .security import decode_jwt_token

__all__ = [
    "Settings",
    "get_settings",
    "decode_jwt_token",
]
