import logging

from flask import current_app

from services.storage import get_storage_service, StorageError

logger = logging.getLogger(__name__)


class UploadFailed(Exception):
    """An image field of a form could not be stored."""

    def __init__(self, label, error):
        super().__init__(f"{label} upload failed: {error.message}")
        self.label = label
        self.error = error


def upload_request_files(files, field_map, bucket, folder):
    """
    Upload every file present in ``files`` for the given form fields.

    Args:
        files: request.files
        field_map: {form_field: (column_name, label)}
        bucket: storage bucket
        folder: folder inside the bucket

    Returns:
        dict: {column_name: public_url} for each uploaded field
    """
    storage = get_storage_service()
    uploaded = {}
    for field, (column, label) in field_map.items():
        file = files.get(field)
        if not file or not file.filename:
            continue
        try:
            uploaded[column] = storage.upload_image(file, bucket, folder)['url']
        except StorageError as e:
            # Roll back the files of this request that did make it
            discard_files(uploaded.values())
            raise UploadFailed(label, e)
    return uploaded


def discard_files(urls):
    """Best-effort removal of stored files; failures are only logged."""
    urls = [url for url in urls if url]
    if not urls:
        return 0
    try:
        return len(get_storage_service().delete_files_by_urls(urls))
    except StorageError as e:
        current_app.logger.error(f"File deletion failed: {e.message}")
        return 0
