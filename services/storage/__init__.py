from .base_storage_service import BaseStorageService, StorageError
from .cloudinary_storage_service import CloudinaryStorageService
from .local_storage_service import LocalStorageService
from .storage_factory import get_storage_service

__all__ = [
    'BaseStorageService',
    'StorageError',
    'CloudinaryStorageService',
    'LocalStorageService',
    'get_storage_service'
]
