# Standard library imports
from typing import Any, List, Optional, Union

# External package imports
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Local application imports
from ...domain.models.device import Device, DeviceOwner

# Counts keep their integer form; only measured values are fractional
Number = Union[int, float]


def _bool_to_text(value: Any) -> Any:
    """Booleans produced by form coercion go back to their lowercase text"""
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


_TEXT_FIELDS = (
    "title",
    "description",
    "manufacturer",
    "device_model",
    "condition",
    "remote_use",
    "battery_type",
    "signal_shape",
    "additional",
)


class _CamelModel(BaseModel):
    """Base for device payloads: camelCase on the wire, snake_case in Python"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        allow_inf_nan=False,
        extra="ignore",
    )


class DimensionsSchema(_CamelModel):
    length: str
    width: str
    height: str

    @field_validator("length", "width", "height", mode="before")
    @classmethod
    def text_from_bool(cls, value: Any) -> Any:
        return _bool_to_text(value)


class DeviceImageSchema(_CamelModel):
    url: str
    width: Number
    height: Number


class ImageDimensionSchema(_CamelModel):
    """Caller-supplied size of one uploaded image, matched by position"""
    width: Number
    height: Number


class DeviceCreateRequest(_CamelModel):
    """DTO for device attributes supplied on creation (after form coercion)"""
    title: str = Field(min_length=1)
    description: Optional[str] = None
    manufacturer: str
    device_model: str
    condition: str
    battery_capacity: Number
    weight: Number
    type_c: Number
    type_a: Number
    sockets: Number
    remote_use: str
    dimensions: DimensionsSchema
    battery_type: str
    signal_shape: str
    additional: Optional[str] = None
    price: Number
    min_rent_term: Number
    max_rent_term: Number
    policy_agreement: bool

    @field_validator(*_TEXT_FIELDS, mode="before")
    @classmethod
    def text_from_bool(cls, value: Any) -> Any:
        return _bool_to_text(value)


class DeviceUpdateRequest(_CamelModel):
    """DTO for a partial device update; only the fields sent are applied"""
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    manufacturer: Optional[str] = None
    device_model: Optional[str] = None
    condition: Optional[str] = None
    battery_capacity: Optional[Number] = None
    weight: Optional[Number] = None
    type_c: Optional[Number] = None
    type_a: Optional[Number] = None
    sockets: Optional[Number] = None
    remote_use: Optional[str] = None
    dimensions: Optional[DimensionsSchema] = None
    battery_type: Optional[str] = None
    signal_shape: Optional[str] = None
    additional: Optional[str] = None
    images: Optional[List[DeviceImageSchema]] = None
    price: Optional[Number] = None
    min_rent_term: Optional[Number] = None
    max_rent_term: Optional[Number] = None
    policy_agreement: Optional[bool] = None
    is_in_rent: Optional[bool] = None

    @field_validator(*_TEXT_FIELDS, mode="before")
    @classmethod
    def text_from_bool(cls, value: Any) -> Any:
        return _bool_to_text(value)


class OwnerResponse(_CamelModel):
    """Restricted owner view; unselected fields are omitted from the payload"""
    id: str = Field(alias="_id")
    name: Optional[str] = None
    surname: Optional[str] = None
    phone_number: Optional[str] = None
    town: Optional[str] = None
    street: Optional[str] = None
    region: Optional[str] = None


class DeviceResponse(_CamelModel):
    """DTO for device response"""
    id: str = Field(alias="_id")
    title: str
    description: Optional[str] = None
    manufacturer: str
    device_model: str
    condition: str
    battery_capacity: Number
    weight: Number
    type_c: Number
    type_a: Number
    sockets: Number
    remote_use: str
    dimensions: DimensionsSchema
    battery_type: str
    signal_shape: str
    additional: Optional[str] = None
    images: List[DeviceImageSchema]
    price: Number
    min_rent_term: Number
    max_rent_term: Number
    policy_agreement: bool
    is_in_rent: bool
    owner_id: str
    owner: Optional[OwnerResponse] = None


class DeviceCreatedResponse(BaseModel):
    message: str
    device: DeviceResponse


class DeviceUpdatedResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    updated_device: DeviceResponse = Field(alias="updatedDevice")


class MessageResponse(BaseModel):
    message: str


def _owner_to_response(owner: DeviceOwner) -> OwnerResponse:
    return OwnerResponse(
        id=owner.id,
        name=owner.name,
        surname=owner.surname,
        phone_number=owner.phone_number,
        town=owner.town,
        street=owner.street,
        region=owner.region,
    )


def to_device_response(device: Device) -> DeviceResponse:
    """Convert a Device domain model to its response DTO"""
    return DeviceResponse(
        id=device.id or "",
        title=device.title,
        description=device.description,
        manufacturer=device.manufacturer,
        device_model=device.device_model,
        condition=device.condition,
        battery_capacity=device.battery_capacity,
        weight=device.weight,
        type_c=device.type_c,
        type_a=device.type_a,
        sockets=device.sockets,
        remote_use=device.remote_use,
        dimensions=DimensionsSchema(
            length=device.dimensions.length,
            width=device.dimensions.width,
            height=device.dimensions.height,
        ),
        battery_type=device.battery_type,
        signal_shape=device.signal_shape,
        additional=device.additional,
        images=[
            DeviceImageSchema(url=image.url, width=image.width, height=image.height)
            for image in device.images
        ],
        price=device.price,
        min_rent_term=device.min_rent_term,
        max_rent_term=device.max_rent_term,
        policy_agreement=device.policy_agreement,
        is_in_rent=device.is_in_rent,
        owner_id=device.owner_id,
        owner=_owner_to_response(device.owner) if device.owner else None,
    )
