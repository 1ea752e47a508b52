from typing import TYPE_CHECKING
from ...core.config import get_settings
from ...domain.events import LoggingDeviceEventHandler
from ...domain.gateways.object_storage_gateway import ObjectStorageGateway
from ...domain.repositories.device_repository import DeviceRepository
from ...application.services.device_lifecycle_service import DeviceLifecycleService

if TYPE_CHECKING:
    from ..base_container import BaseContainer


class DeviceProvider:
    """Device service provider - registers the device lifecycle service"""

    @staticmethod
    def register(container: "BaseContainer") -> None:
        """
        Register the device lifecycle service.
        The service is created on-demand via a factory.
        """
        settings = get_settings()
        event_handlers = [LoggingDeviceEventHandler()]

        container.register_factory(
            DeviceLifecycleService,
            lambda: DeviceLifecycleService(
                device_repository=container.get(DeviceRepository),
                object_storage=container.get(ObjectStorageGateway),
                event_handlers=event_handlers,
                max_images=settings.device_max_images,
                require_policy_agreement=settings.require_policy_agreement,
            )
        )
