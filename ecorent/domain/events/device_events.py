"""Device lifecycle events and the handler capability that consumes them"""

# Standard library imports
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Protocol

logger = logging.getLogger(__name__)


class DeviceEventType(str, Enum):
    CREATED = "CREATED"
    UPDATED = "UPDATED"
    DELETED = "DELETED"


@dataclass(frozen=True)
class DeviceEvent:
    """Emitted after a device mutation has been committed"""
    type: DeviceEventType
    device_id: str
    owner_id: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    data: Optional[Dict[str, Any]] = None


class DeviceEventHandler(Protocol):
    """Anything with a handle(event) method can observe device lifecycle events"""

    def handle(self, event: DeviceEvent) -> None:
        ...


class LoggingDeviceEventHandler:
    """Writes every device event to the application log."""

    def handle(self, event: DeviceEvent) -> None:
        logger.info(
            f"Device event {event.type.value}: device={event.device_id} "
            f"owner={event.owner_id} at {event.timestamp.isoformat()}"
        )
