from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence
from ..models.device import Device


class DeviceRepository(ABC):
    """
    Repository interface - defines contract for device data access.

    ``owner_fields`` selects which user fields are expanded into
    ``Device.owner``; None leaves the owner unexpanded.
    """

    @abstractmethod
    async def insert(self, device: Device) -> Device:
        """Insert a new device and return it with its store-assigned ID"""
        pass

    @abstractmethod
    async def find_by_id(
        self,
        device_id: str,
        owner_fields: Optional[Sequence[str]] = None,
    ) -> Optional[Device]:
        """Find device by ID"""
        pass

    @abstractmethod
    async def find_by_owner(self, owner_id: str) -> List[Device]:
        """Find all devices owned by a user"""
        pass

    @abstractmethod
    async def find_all(self, owner_fields: Optional[Sequence[str]] = None) -> List[Device]:
        """Find every device"""
        pass

    @abstractmethod
    async def update_by_id(
        self,
        device_id: str,
        updates: Dict[str, Any],
        owner_id: Optional[str] = None,
    ) -> Optional[Device]:
        """
        Apply field updates (keyed by DeviceFields names) and return the updated device.

        When ``owner_id`` is given the write only matches a device with that owner.
        Returns None when nothing matched.
        """
        pass

    @abstractmethod
    async def delete_by_id(self, device_id: str) -> bool:
        """Delete device by ID; True if a document was removed"""
        pass
