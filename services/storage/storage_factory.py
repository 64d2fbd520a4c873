from flask import current_app
from .cloudinary_storage_service import CloudinaryStorageService
from .local_storage_service import LocalStorageService

PROVIDERS = {
    'cloudinary': CloudinaryStorageService,
    'local': LocalStorageService,
}


def get_storage_service(app_config=None):
    """
    Factory function to get the appropriate storage service instance.

    Args:
        app_config: Flask app config object. If None, uses current_app.config

    Returns:
        BaseStorageService: Instance of the configured storage service

    Raises:
        ValueError: If provider is not supported
    """
    if app_config is None:
        app_config = current_app.config

    provider = app_config.get('STORAGE_PROVIDER', 'cloudinary').lower()
    service_class = PROVIDERS.get(provider)
    if service_class is None:
        raise ValueError(
            f"Unsupported storage provider: {provider}. "
            f"Supported providers: {', '.join(sorted(PROVIDERS))}"
        )
    return service_class(app_config)
