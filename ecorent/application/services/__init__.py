from .field_coercer import coerce_form_fields, coerce_value
from .device_lifecycle_service import DeviceLifecycleService

__all__ = ["coerce_form_fields", "coerce_value", "DeviceLifecycleService"]
