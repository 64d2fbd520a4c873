import logging
import re
from typing import Dict

import cloudinary
import cloudinary.uploader
from .base_storage_service import BaseStorageService, StorageError

logger = logging.getLogger(__name__)

# https://res.cloudinary.com/<cloud>/image/upload/v123/<public_id>.<ext>
_PUBLIC_ID = re.compile(r'/upload/(?:[^/]+/)*?(?:v\d+/)?(?P<public_id>.+?)(?:\.\w+)?$')


class CloudinaryStorageService(BaseStorageService):
    """Cloudinary implementation of storage service."""

    def __init__(self, config):
        super().__init__(config)
        # Cloudinary is already configured in app.py, but we ensure it's set here too
        cloudinary.config(
            cloud_name=config.get('CLOUDINARY_CLOUD_NAME'),
            api_key=config.get('CLOUDINARY_API_KEY'),
            api_secret=config.get('CLOUDINARY_API_SECRET'),
            secure=True
        )

    def upload_image(self, file, bucket: str, folder: str) -> Dict:
        filename = self.validate(file)
        path = self.build_object_path(folder, filename)
        public_id = f"{bucket}/{path.rsplit('.', 1)[0]}"

        try:
            upload_result = cloudinary.uploader.upload(
                file,
                public_id=public_id,
                resource_type='image',
                overwrite=False
            )
        except Exception as e:
            logger.error(f"Cloudinary image upload failed: {str(e)}")
            raise StorageError(f"Image upload failed: {str(e)}")

        return {
            'url': upload_result.get('secure_url'),
            'path': upload_result.get('public_id', public_id),
        }

    @staticmethod
    def public_id_from_url(url: str):
        if not url or 'res.cloudinary.com' not in url:
            return None
        match = _PUBLIC_ID.search(url.split('?', 1)[0])
        return match.group('public_id') if match else None

    def delete_by_url(self, url: str) -> bool:
        public_id = self.public_id_from_url(url)
        if not public_id:
            return False
        result = cloudinary.uploader.destroy(public_id, resource_type='image')
        if result.get('result') not in ('ok', 'not found'):
            raise StorageError(f"Cloudinary refused to delete {public_id}: {result}")
        return result.get('result') == 'ok'
