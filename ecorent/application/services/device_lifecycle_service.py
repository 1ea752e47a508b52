# Standard library imports
import asyncio
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

# External package imports
from pydantic import ValidationError

# Local application imports
from ...domain.constants import DeviceFields, UserFields
from ...domain.events import DeviceEvent, DeviceEventHandler, DeviceEventType
from ...domain.exceptions import (
    BadRequestError,
    DeviceServiceError,
    NotFoundError,
    UnavailableError,
)
from ...domain.gateways.object_storage_gateway import ImageBlob, ObjectStorageGateway
from ...domain.models.device import Device, DeviceImage, Dimensions
from ...domain.repositories.device_repository import DeviceRepository
from ...domain.services.ownership_guard import authorize
from ..dto.device_dto import (
    DeviceCreateRequest,
    DeviceUpdateRequest,
    ImageDimensionSchema,
)
from .field_coercer import coerce_form_fields

logger = logging.getLogger(__name__)

# Fields that may be cleared with null through an update
_NULLABLE_FIELDS = (DeviceFields.DESCRIPTION, DeviceFields.ADDITIONAL)


class DeviceLifecycleService:
    """
    Create, read, update and delete devices across the document store and the
    object store.

    The two stores share no transaction. Image uploads happen before the
    document insert, and image deletions before the document delete; a failure
    in between is logged and propagated, never compensated.
    """

    def __init__(
        self,
        device_repository: DeviceRepository,
        object_storage: ObjectStorageGateway,
        event_handlers: Optional[Sequence[DeviceEventHandler]] = None,
        max_images: int = 10,
        require_policy_agreement: bool = True,
    ) -> None:
        self.device_repository = device_repository
        self.object_storage = object_storage
        self.event_handlers: List[DeviceEventHandler] = list(event_handlers or [])
        self.max_images = max_images
        self.require_policy_agreement = require_policy_agreement

    async def create(
        self,
        raw_fields: Mapping[str, Any],
        attachments: Sequence[ImageBlob],
        caller_id: str,
    ) -> Device:
        """
        Create a device owned by the caller

        Args:
            raw_fields: Form fields as received (string values)
            attachments: Image files, positionally matched with imageDimensions
            caller_id: ID of the authenticated user

        Returns:
            The persisted Device

        Raises:
            BadRequestError: If the input is invalid or image counts do not match
            UnavailableError: If an upload or the insert fails
        """
        fields = coerce_form_fields(raw_fields)
        image_dimensions = self._pop_image_dimensions(fields)

        if len(attachments) > self.max_images:
            raise BadRequestError(
                f"Too many images: at most {self.max_images} are allowed, got {len(attachments)}"
            )
        if len(image_dimensions) != len(attachments):
            raise BadRequestError(
                f"Image dimensions count ({len(image_dimensions)}) does not match "
                f"uploaded images count ({len(attachments)})"
            )

        attributes = self._validate_create(fields)

        locators = await self._upload_images(attachments)
        images = [
            DeviceImage(url=locator, width=size.width, height=size.height)
            for locator, size in zip(locators, image_dimensions)
        ]

        new_device = self._build_device(attributes, images, caller_id)

        try:
            saved_device = await self.device_repository.insert(new_device)
        except DeviceServiceError:
            if locators:
                logger.error(
                    f"Device insert failed after {len(locators)} image(s) were uploaded; "
                    f"orphaned blobs: {locators}"
                )
            raise

        logger.info(
            f"Created device {saved_device.id} for user {caller_id} with {len(images)} image(s)"
        )
        self._notify(DeviceEventType.CREATED, saved_device)
        return saved_device

    async def get_by_id(self, device_id: str) -> Device:
        """
        Get a device by ID with its owner's contact details expanded

        Raises:
            NotFoundError: If the device does not exist
        """
        device = await self.device_repository.find_by_id(
            device_id,
            owner_fields=UserFields.OWNER_DETAIL_PROJECTION,
        )
        if device is None:
            raise NotFoundError(f"Device {device_id} not found")
        return device

    async def list_by_owner(self, owner_id: str) -> List[Device]:
        """List the devices owned by a user (owner not expanded)"""
        return await self.device_repository.find_by_owner(owner_id)

    async def list_all(self) -> List[Device]:
        """List every device, exposing only the owner's town"""
        return await self.device_repository.find_all(
            owner_fields=UserFields.OWNER_TOWN_PROJECTION,
        )

    async def update(
        self,
        device_id: str,
        updates: Mapping[str, Any],
        caller_id: str,
    ) -> Device:
        """
        Apply a partial update to a device owned by the caller

        Ownership is checked against the stored device before anything is written.

        Raises:
            NotFoundError: If the device does not exist
            ForbiddenError: If the caller is not the owner
            BadRequestError: If an update value is invalid
        """
        existing_device = await self.device_repository.find_by_id(device_id)
        if existing_device is None:
            raise NotFoundError(f"Device {device_id} not found")

        authorize(existing_device.owner_id, caller_id)

        changes = self._validate_update(updates)
        if not changes:
            logger.info(f"Update of device {device_id} carried no changes")
            return existing_device

        updated_device = await self.device_repository.update_by_id(
            device_id,
            changes,
            owner_id=caller_id,
        )
        if updated_device is None:
            raise NotFoundError(f"Device {device_id} not found")

        logger.info(f"Updated device {device_id} fields {sorted(changes)}")
        self._notify(DeviceEventType.UPDATED, updated_device, {"fields": sorted(changes)})
        return updated_device

    async def delete(self, device_id: str, caller_id: str) -> None:
        """
        Delete a device owned by the caller together with its images

        Raises:
            NotFoundError: If the device does not exist
            ForbiddenError: If the caller is not the owner
            UnavailableError: If a blob or the document cannot be deleted
        """
        device = await self.device_repository.find_by_id(device_id)
        if device is None:
            raise NotFoundError(f"Device {device_id} not found")

        authorize(device.owner_id, caller_id)

        await self._delete_images(device)

        deleted = await self.device_repository.delete_by_id(device_id)
        if not deleted:
            raise NotFoundError(f"Device {device_id} not found")

        logger.info(f"Deleted device {device_id} and {len(device.images)} image(s)")
        self._notify(DeviceEventType.DELETED, device)

    def _pop_image_dimensions(self, fields: Dict[str, Any]) -> List[ImageDimensionSchema]:
        raw_dimensions = fields.pop(DeviceFields.IMAGE_DIMENSIONS, None)
        if raw_dimensions is None:
            return []
        if not isinstance(raw_dimensions, list):
            raise BadRequestError("imageDimensions must be a list of {width, height} objects")

        try:
            return [ImageDimensionSchema.model_validate(item) for item in raw_dimensions]
        except ValidationError as e:
            raise BadRequestError(
                "Invalid imageDimensions entry",
                details={"errors": e.errors(include_url=False, include_context=False)},
            )

    def _validate_create(self, fields: Dict[str, Any]) -> DeviceCreateRequest:
        try:
            attributes = DeviceCreateRequest.model_validate(fields)
        except ValidationError as e:
            raise BadRequestError(
                "Invalid device data",
                details={"errors": e.errors(include_url=False, include_context=False)},
            )

        if self.require_policy_agreement and not attributes.policy_agreement:
            raise BadRequestError("The rental policy must be accepted")
        return attributes

    def _validate_update(self, updates: Mapping[str, Any]) -> Dict[str, Any]:
        if not isinstance(updates, Mapping):
            raise BadRequestError("Update payload must be an object")

        ignored = [key for key in updates if key in DeviceFields.IMMUTABLE]
        if ignored:
            logger.warning(f"Ignoring immutable fields in device update: {ignored}")
        mutable = {key: value for key, value in updates.items() if key not in DeviceFields.IMMUTABLE}

        try:
            request = DeviceUpdateRequest.model_validate(mutable)
        except ValidationError as e:
            raise BadRequestError(
                "Invalid device update",
                details={"errors": e.errors(include_url=False, include_context=False)},
            )

        changes = request.model_dump(by_alias=True, exclude_unset=True)
        cleared = [key for key, value in changes.items() if value is None and key not in _NULLABLE_FIELDS]
        if cleared:
            raise BadRequestError(f"Fields cannot be cleared: {sorted(cleared)}")
        return changes

    def _build_device(
        self,
        attributes: DeviceCreateRequest,
        images: List[DeviceImage],
        owner_id: str,
    ) -> Device:
        try:
            return Device(
                id=None,
                owner_id=owner_id,
                title=attributes.title,
                description=attributes.description,
                manufacturer=attributes.manufacturer,
                device_model=attributes.device_model,
                condition=attributes.condition,
                battery_capacity=attributes.battery_capacity,
                weight=attributes.weight,
                type_c=attributes.type_c,
                type_a=attributes.type_a,
                sockets=attributes.sockets,
                remote_use=attributes.remote_use,
                dimensions=Dimensions(
                    length=attributes.dimensions.length,
                    width=attributes.dimensions.width,
                    height=attributes.dimensions.height,
                ),
                battery_type=attributes.battery_type,
                signal_shape=attributes.signal_shape,
                additional=attributes.additional,
                images=images,
                price=attributes.price,
                min_rent_term=attributes.min_rent_term,
                max_rent_term=attributes.max_rent_term,
                policy_agreement=attributes.policy_agreement,
                is_in_rent=False,
            )
        except ValueError as e:
            raise BadRequestError(str(e))

    async def _upload_images(self, attachments: Sequence[ImageBlob]) -> List[str]:
        if not attachments:
            return []

        results = await asyncio.gather(
            *(self.object_storage.put(blob) for blob in attachments),
            return_exceptions=True,
        )

        failures = [result for result in results if isinstance(result, BaseException)]
        if failures:
            uploaded = [result for result in results if not isinstance(result, BaseException)]
            logger.error(
                f"{len(failures)} of {len(attachments)} image upload(s) failed; "
                f"already uploaded blobs are left in place: {uploaded}"
            )
            raise self._as_service_error(failures[0], "upload image")

        return list(results)

    async def _delete_images(self, device: Device) -> None:
        if not device.images:
            return

        locators = [image.url for image in device.images]
        results = await asyncio.gather(
            *(self.object_storage.delete(locator) for locator in locators),
            return_exceptions=True,
        )

        failed = [locator for locator, result in zip(locators, results) if isinstance(result, BaseException)]
        if failed:
            logger.error(
                f"Could not delete {len(failed)} of {len(locators)} image(s) of device {device.id}; "
                f"device record kept. Failed: {failed}"
            )
            first_failure = next(result for result in results if isinstance(result, BaseException))
            raise self._as_service_error(first_failure, "delete image")

    def _as_service_error(self, error: BaseException, operation: str) -> BaseException:
        if isinstance(error, DeviceServiceError) or not isinstance(error, Exception):
            return error
        return UnavailableError(f"Failed to {operation}: {error}", operation=operation)

    def _notify(
        self,
        event_type: DeviceEventType,
        device: Device,
        data: Optional[Dict[str, Any]] = None,
    ) -> None:
        event = DeviceEvent(
            type=event_type,
            device_id=device.id or "",
            owner_id=device.owner_id,
            data=data,
        )
        for handler in self.event_handlers:
            try:
                handler.handle(event)
            except Exception as e:
                logger.error(
                    f"Device event handler {type(handler).__name__} failed for {event_type.value}: {e}",
                    exc_info=True,
                )
