import logging
import os
from typing import Dict
from urllib.parse import urlparse, unquote

from .base_storage_service import BaseStorageService, StorageError

logger = logging.getLogger(__name__)

URL_PREFIX = '/uploads/'


class LocalStorageService(BaseStorageService):
    """Stores images on local disk; app.py serves them under /uploads/."""

    def __init__(self, config):
        super().__init__(config)
        self.root = config.get('UPLOAD_FOLDER')

    def upload_image(self, file, bucket: str, folder: str) -> Dict:
        filename = self.validate(file)
        path = f"{bucket}/{self.build_object_path(folder, filename)}"
        target = os.path.join(self.root, *path.split('/'))
        try:
            os.makedirs(os.path.dirname(target), exist_ok=True)
            file.save(target)
        except OSError as e:
            logger.error(f"Local image upload failed: {str(e)}")
            raise StorageError(f"Image upload failed: {str(e)}")
        return {'url': f"{URL_PREFIX}{path}", 'path': path}

    def path_from_url(self, url: str):
        if not url:
            return None
        path = unquote(urlparse(url).path)
        if not path.startswith(URL_PREFIX):
            return None
        relative = os.path.normpath(path[len(URL_PREFIX):])
        if relative.startswith('..') or os.path.isabs(relative):
            return None
        return os.path.join(self.root, relative)

    def delete_by_url(self, url: str) -> bool:
        target = self.path_from_url(url)
        if not target or not os.path.exists(target):
            return False
        os.remove(target)
        return True
