"""
Services for the Media API
"""

import copy
import html
import os
import shutil
import tempfile
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Literal

from fastapi import HTTPException, UploadFile, status
from pydantic import PositiveInt
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, func, select

from api.media.models import (
    MediaItem,
    MediaItemPublic,
    MediaItemsPublic,
    UploadRequest,
)
from core.config import Settings
from core.hooks import HookRegistry
from core.logger import logger
from core.utils import unique_file_name


def relative_upload_path(path: str, upload_dir: str | Path) -> str:
    """
    Strip the upload directory prefix from path.
    Paths outside the upload directory are returned unchanged.
    """
    prefix = str(Path(upload_dir)).rstrip("/") + "/"
    if path.startswith(prefix):
        return path[len(prefix):]
    return path


def get_attached_file(item: MediaItem, upload_dir: str | Path) -> str | None:
    """Full path of the primary file for a media item, or None"""
    if not item.file:
        return None
    if os.path.isabs(item.file):
        return item.file
    return str(Path(upload_dir) / item.file)


class SQLMediaStore:
    """
    Media store backed by the mediaitem table.

    Every setter commits, so changes are persisted in the order they are
    made. A failed commit is rolled back before the error is re-raised,
    leaving the session usable for the next item.
    """

    def __init__(self, session: Session, upload_dir: str | Path):
        self.session = session
        self.upload_dir = upload_dir

    def _get(self, media_id: uuid.UUID) -> MediaItem | None:
        return self.session.get(MediaItem, media_id)

    def _require(self, media_id: uuid.UUID) -> MediaItem:
        item = self._get(media_id)
        if item is None:
            raise LookupError(f"Media item {media_id} not found")
        return item

    def _commit(self) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise

    def list_all_media_ids(self) -> list[uuid.UUID]:
        return list(
            self.session.exec(
                select(MediaItem.id).order_by(MediaItem.upload_date, MediaItem.id)
            ).all()
        )

    def get_file_path(self, media_id: uuid.UUID) -> str | None:
        item = self._get(media_id)
        if item is None:
            return None
        return get_attached_file(item, self.upload_dir)

    def set_file_path(self, media_id: uuid.UUID, file_path: str) -> None:
        item = self._require(media_id)
        item.file = relative_upload_path(file_path, self.upload_dir)
        self.session.add(item)
        self._commit()

    def get_metadata(self, media_id: uuid.UUID) -> dict[str, Any] | None:
        item = self._get(media_id)
        if item is None or not item.attachment_metadata:
            return None
        # Callers edit the returned mapping freely
        return copy.deepcopy(item.attachment_metadata)

    def set_metadata(self, media_id: uuid.UUID, metadata: dict[str, Any]) -> None:
        item = self._require(media_id)
        item.attachment_metadata = copy.deepcopy(metadata)
        self.session.add(item)
        self._commit()


def handle_upload(
    session: Session,
    upload: UploadFile,
    settings: Settings,
    registry: HookRegistry,
) -> MediaItem:
    """
    Store an uploaded file under the upload directory and create its
    media item. The upload_prefilter hook sees the request before
    anything is moved into place.
    """
    upload_dir = Path(settings.UPLOAD_DIR)
    upload_dir.mkdir(parents=True, exist_ok=True)

    # Buffer to the upload directory so the final move stays on one filesystem
    with tempfile.NamedTemporaryFile(
        dir=upload_dir, prefix=".upload-", delete=False
    ) as tmp:
        shutil.copyfileobj(upload.file, tmp)
        tmp_name = tmp.name

    request = UploadRequest(
        name=upload.filename or "",
        type=upload.content_type,
        tmp_name=tmp_name,
        size=os.path.getsize(tmp_name),
    )
    request = registry.apply_filters("upload_prefilter", request)

    filename = Path(request.name).name
    if request.error or filename in ("", ".", ".."):
        Path(tmp_name).unlink(missing_ok=True)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid file name: '{request.name}'",
        )

    target_dir = upload_dir
    if settings.UPLOADS_USE_YEARMONTH_FOLDERS:
        target_dir = upload_dir / datetime.utcnow().strftime("%Y/%m")
    target_dir.mkdir(parents=True, exist_ok=True)

    filename = unique_file_name(target_dir, filename)
    target = target_dir / filename
    Path(request.tmp_name).replace(target)

    relative = relative_upload_path(str(target), upload_dir)
    item = MediaItem(
        title=Path(filename).stem,
        file=relative,
        mime_type=request.type or "application/octet-stream",
        attachment_metadata={
            "file": relative,
            "filesize": request.size,
            "sizes": {},
        },
    )
    session.add(item)
    session.commit()
    session.refresh(item)

    logger.info("Stored upload '%s' as %s", upload.filename, relative)
    return item


def get_media_item(session: Session, media_id: uuid.UUID) -> MediaItem:
    """
    Retrieve a media item by id
    """
    item = session.get(MediaItem, media_id)
    if item is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Media item with id {media_id} not found",
        )
    return item


def get_media_items(
    *,
    session: Session,
    page: PositiveInt,
    per_page: PositiveInt,
    sort_by: str,
    sort_order: Literal["asc", "desc"],
) -> MediaItemsPublic:
    """
    Returns all media items from the database along
    with pagination information.
    """
    total_count = session.exec(select(func.count()).select_from(MediaItem)).one()

    total_pages = (total_count + per_page - 1) // per_page  # Ceiling division

    sort_field = getattr(MediaItem, sort_by, MediaItem.upload_date)
    sort_direction = sort_field.asc() if sort_order == "asc" else sort_field.desc()

    items = session.exec(
        select(MediaItem)
        .order_by(sort_direction)
        .limit(per_page)
        .offset((page - 1) * per_page)
    ).all()

    return MediaItemsPublic(
        data=[
            MediaItemPublic.model_validate(item, from_attributes=True)
            for item in items
        ],
        total_items=total_count,
        total_pages=total_pages,
        current_page=page,
        per_page=per_page,
        has_next=page < total_pages,
        has_prev=page > 1,
    )


def get_attachment_url(
    session: Session,
    media_id: uuid.UUID,
    settings: Settings,
    registry: HookRegistry,
) -> str:
    """
    Public URL of a media item's primary file, passed through the
    attachment_url hook.
    """
    item = get_media_item(session, media_id)
    if not item.file:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Media item with id {media_id} has no attached file",
        )

    base_url = settings.UPLOAD_URL_BASE.rstrip("/")
    if os.path.isabs(item.file):
        url = f"{base_url}/{Path(item.file).name}"
    else:
        url = f"{base_url}/{item.file}"

    return registry.apply_filters("attachment_url", url, item.id)


def get_attachment_link(
    session: Session,
    media_id: uuid.UUID,
    settings: Settings,
    registry: HookRegistry,
) -> str:
    """
    HTML anchor pointing at a media item's file, passed through the
    attachment_link hook.
    """
    item = get_media_item(session, media_id)
    url = get_attachment_url(session, media_id, settings, registry)
    link = f'<a href="{html.escape(url)}">{html.escape(item.title)}</a>'
    return registry.apply_filters("attachment_link", link, item.id)
