from .device_events import (
    DeviceEvent,
    DeviceEventHandler,
    DeviceEventType,
    LoggingDeviceEventHandler,
)

__all__ = [
    "DeviceEvent",
    "DeviceEventHandler",
    "DeviceEventType",
    "LoggingDeviceEventHandler",
]
