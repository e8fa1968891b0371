"""
Services for the media file sanitizer
"""

import os
from pathlib import Path
from typing import Any, Callable, Hashable, Protocol

from api.media.models import UploadRequest
from core.logger import logger
from core.utils import sanitize_file_name


class MediaStore(Protocol):
    """Storage operations the reconciler needs from the host"""

    def list_all_media_ids(self) -> list[Hashable]: ...

    def get_file_path(self, media_id: Hashable) -> str | None: ...

    def set_file_path(self, media_id: Hashable, file_path: str) -> None: ...

    def get_metadata(self, media_id: Hashable) -> dict[str, Any] | None: ...

    def set_metadata(self, media_id: Hashable, metadata: dict[str, Any]) -> None: ...


def sanitize_uploaded_file_name(
    request: UploadRequest,
    sanitize: Callable[[str], str] = sanitize_file_name,
) -> UploadRequest:
    """
    Sanitize the proposed name of an incoming upload.
    Returns a copy; every other field is passed through untouched.
    """
    return request.model_copy(update={"name": sanitize(request.name)})


def preserve_media_attachment(file: str, attachment_id: Hashable) -> str:
    """Attachment URLs and links are never rewritten by this plugin"""
    return file


def rename_file(source: str, target: str) -> None:
    """
    Rename source to target, refusing to replace an existing file.
    """
    if os.path.lexists(target):
        raise FileExistsError(f"Target file already exists: {target}")
    Path(source).rename(target)


class MediaReconciler:
    """
    Renames stored media files to their sanitized names and rewrites
    every stored reference to them.

    Items are processed one at a time and each store update is persisted
    before the next one starts, so an interrupted run leaves at most the
    item in flight half-updated.
    """

    def __init__(
        self,
        store: MediaStore,
        sanitize: Callable[[str], str] = sanitize_file_name,
        rename: Callable[[str, str], None] = rename_file,
        exists: Callable[[str], bool] = os.path.exists,
    ):
        self.store = store
        self.sanitize = sanitize
        self.rename = rename
        self.exists = exists

    def reconcile_all(self) -> None:
        """
        Sanitize every media item in the store. Failures are logged and
        never interrupt the batch.
        """
        media_ids = self.store.list_all_media_ids()
        logger.info("Sanitizing file names of %d media items", len(media_ids))

        renamed = 0
        for media_id in media_ids:
            try:
                if self.reconcile(media_id):
                    renamed += 1
            except Exception:
                logger.exception("Failed to sanitize media item %s", media_id)

        logger.info("Renamed %d of %d media items", renamed, len(media_ids))

    def reconcile(self, media_id: Hashable) -> bool:
        """
        Sanitize a single media item. Returns True if its primary file was
        renamed.
        """
        file_path = self.store.get_file_path(media_id)
        if not file_path:
            return False

        file_name = os.path.basename(file_path)
        sanitized_file_name = self.sanitize(file_name)
        if sanitized_file_name == file_name:
            return False

        # Literal substitution: every occurrence of the old name in the path changes
        new_file_path = file_path.replace(file_name, sanitized_file_name)

        try:
            self.rename(file_path, new_file_path)
        except OSError as e:
            logger.warning(
                "Could not rename %s to %s for media item %s: %s",
                file_path, new_file_path, media_id, e,
            )
            return False

        self.store.set_file_path(media_id, new_file_path)
        logger.info("Renamed media item %s: %s -> %s", media_id, file_name, sanitized_file_name)

        metadata = self.store.get_metadata(media_id)
        if metadata:
            for key, value in metadata.items():
                if isinstance(value, str):
                    metadata[key] = value.replace(file_name, sanitized_file_name)
            self.store.set_metadata(media_id, metadata)

        self._reconcile_sizes(media_id, os.path.dirname(new_file_path))
        return True

    def _reconcile_sizes(self, media_id: Hashable, directory: str) -> None:
        metadata = self.store.get_metadata(media_id)
        if not metadata or not metadata.get("sizes"):
            return

        for size, size_info in metadata["sizes"].items():
            if not isinstance(size_info, dict) or not size_info.get("file"):
                continue

            size_file_name = os.path.basename(size_info["file"])
            sanitized_size_file_name = self.sanitize(size_file_name)
            if sanitized_size_file_name == size_file_name:
                continue

            old_size_path = os.path.join(directory, size_file_name)
            new_size_path = os.path.join(directory, sanitized_size_file_name)
            if not self.exists(old_size_path):
                continue

            try:
                self.rename(old_size_path, new_size_path)
            except OSError as e:
                logger.warning(
                    "Could not rename %s size of media item %s: %s", size, media_id, e
                )
                continue

            size_info["file"] = sanitized_size_file_name

        self.store.set_metadata(media_id, metadata)
