from .device import Device, DeviceImage, DeviceOwner, Dimensions

__all__ = ["Device", "DeviceImage", "DeviceOwner", "Dimensions"]
