import os
import time
from abc import ABC, abstractmethod
from datetime import datetime
from http import HTTPStatus
from typing import Dict, Iterable, List

from werkzeug.utils import secure_filename


class StorageError(Exception):
    """Raised when a file cannot be validated, stored or removed."""

    def __init__(self, message, status_code=HTTPStatus.INTERNAL_SERVER_ERROR):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class BaseStorageService(ABC):
    """Abstract base class for image storage services."""

    def __init__(self, config):
        self.config = config
        self.allowed_extensions = {ext.lower() for ext in config.get('ALLOWED_IMAGE_EXTENSIONS', [])}
        self.max_file_size = config.get('MAX_UPLOAD_FILE_SIZE', 10 * 1024 * 1024)

    def validate(self, file) -> str:
        """
        Check extension and size of an uploaded file.

        Returns:
            str: The sanitized filename
        """
        if not file or not file.filename:
            raise StorageError("No file provided", HTTPStatus.BAD_REQUEST)

        filename = secure_filename(file.filename).lower()
        extension = filename.rsplit('.', 1)[1] if '.' in filename else ''
        if extension not in self.allowed_extensions:
            raise StorageError(
                f"Invalid file type. Allowed types: {', '.join(sorted(self.allowed_extensions))}",
                HTTPStatus.BAD_REQUEST
            )

        stream = file.stream
        stream.seek(0, os.SEEK_END)
        size = stream.tell()
        stream.seek(0)
        if size > self.max_file_size:
            raise StorageError(
                f"File too large. Maximum size is {self.max_file_size // (1024 * 1024)} MB",
                HTTPStatus.REQUEST_ENTITY_TOO_LARGE
            )
        return filename

    @staticmethod
    def build_object_path(folder: str, filename: str, now: datetime = None) -> str:
        """``<folder>/<YYYY>/<MM>/<epoch millis>-<filename>``"""
        now = now or datetime.utcnow()
        safe_name = '-'.join(filename.lower().split())
        return f"{folder}/{now.year}/{now.month:02d}/{int(time.time() * 1000)}-{safe_name}"

    @abstractmethod
    def upload_image(self, file, bucket: str, folder: str) -> Dict:
        """
        Upload an image file.

        Args:
            file: werkzeug FileStorage from request.files
            bucket: Logical bucket name (merchant-images, blog-images, ...)
            folder: Folder inside the bucket

        Returns:
            Dict with keys:
                - url: str - Public URL of the stored object
                - path: str - Object path inside the bucket
        """
        pass

    @abstractmethod
    def delete_by_url(self, url: str) -> bool:
        """
        Delete an object by the public URL previously returned from upload_image.

        Returns:
            bool: True if an object was deleted, False if the URL is not ours
        """
        pass

    def delete_files_by_urls(self, urls: Iterable[str]) -> List[str]:
        """Delete every URL, raising one StorageError listing the failures."""
        deleted, failures = [], []
        for url in urls:
            try:
                if self.delete_by_url(url):
                    deleted.append(url)
            except Exception as e:
                failures.append(f"{url}: {e}")
        if failures:
            raise StorageError("Failed to delete files: " + "; ".join(failures))
        return deleted
