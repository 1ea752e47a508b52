from .user_dto import AuthenticatedUser
from .device_dto import (
    DeviceCreateRequest,
    DeviceUpdateRequest,
    DeviceResponse,
    DeviceCreatedResponse,
    DeviceUpdatedResponse,
    DeviceImageSchema,
    DimensionsSchema,
    ImageDimensionSchema,
    MessageResponse,
    OwnerResponse,
    to_device_response,
)

__all__ = [
    "AuthenticatedUser",
    "DeviceCreateRequest",
    "DeviceUpdateRequest",
    "DeviceResponse",
    "DeviceCreatedResponse",
    "DeviceUpdatedResponse",
    "DeviceImageSchema",
    "DimensionsSchema",
    "ImageDimensionSchema",
    "MessageResponse",
    "OwnerResponse",
    "to_device_response",
]
