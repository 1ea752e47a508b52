"""Constants for domain model field names"""

from .user_fields import UserFields
from .device_fields import DeviceFields

__all__ = [
    "UserFields",
    "DeviceFields",
]
