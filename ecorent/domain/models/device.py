# Standard library imports
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class DeviceImage:
    """Image stored in the object store; dimensions come from the uploader."""
    url: str
    width: float
    height: float


@dataclass
class Dimensions:
    length: str
    width: str
    height: str


@dataclass
class DeviceOwner:
    """
    Restricted view of the owning user.

    Only the fields requested by the read path are filled in; the rest stay None.
    """
    id: str
    name: Optional[str] = None
    surname: Optional[str] = None
    phone_number: Optional[str] = None
    town: Optional[str] = None
    street: Optional[str] = None
    region: Optional[str] = None


@dataclass
class Device:
    """
    Pure domain model for Device entity.

    Represents a rentable power device (power station, battery pack, ...)
    listed by its owner. The owner is fixed at creation time.
    """
    id: Optional[str]
    owner_id: str
    title: str
    manufacturer: str
    device_model: str
    condition: str
    battery_capacity: float
    weight: float
    type_c: float
    type_a: float
    sockets: float
    remote_use: str
    dimensions: Dimensions
    battery_type: str
    signal_shape: str
    price: float
    min_rent_term: float
    max_rent_term: float
    policy_agreement: bool
    description: Optional[str] = None
    additional: Optional[str] = None
    images: List[DeviceImage] = field(default_factory=list)
    is_in_rent: bool = False
    owner: Optional[DeviceOwner] = None

    def __post_init__(self) -> None:
        """Business validations"""
        if not self.owner_id:
            raise ValueError("Owner ID is required")
        if not self.title or len(self.title.strip()) < 1:
            raise ValueError("Device title is required")
