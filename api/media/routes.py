"""
Routes/endpoints for the Media API

HTTP   URI                          Action
----   ---                          ------
POST   /api/v1/media                Upload a media file
GET    /api/v1/media                Retrieve a list of media items
GET    /api/v1/media/[id]           Retrieve info about a specific media item
GET    /api/v1/media/[id]/url       Retrieve the public URL of a media item
GET    /api/v1/media/[id]/link      Retrieve an HTML link to a media item
"""

import uuid
from typing import Literal
from fastapi import APIRouter, File, Query, UploadFile, status
from core.deps import HooksDep, SessionDep, SettingsDep
from api.media.models import (
    MediaItem,
    MediaItemPublic,
    MediaItemsPublic,
    MediaLinkPublic,
    MediaUrlPublic,
)
from api.media import services

MediaSortField = Literal["upload_date", "title", "file", "mime_type"]

router = APIRouter(prefix="/media", tags=["Media Endpoints"])


@router.post(
    "",
    response_model=MediaItemPublic,
    status_code=status.HTTP_201_CREATED,
    tags=["Media Endpoints"],
)
def upload_media(
    session: SessionDep,
    settings: SettingsDep,
    registry: HooksDep,
    file: UploadFile = File(..., description="Media file to upload"),
) -> MediaItem:
    """
    Upload a media file. The stored file name may differ from the
    uploaded one once upload filters have run.
    """
    return services.handle_upload(
        session=session,
        upload=file,
        settings=settings,
        registry=registry,
    )


@router.get(
    "",
    response_model=MediaItemsPublic,
    status_code=status.HTTP_200_OK,
    tags=["Media Endpoints"],
)
def get_media_items(
    session: SessionDep,
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    per_page: int = Query(20, ge=1, le=100, description="Number of items per page"),
    sort_by: MediaSortField = Query("upload_date", description="Field to sort by"),
    sort_order: Literal["asc", "desc"] = Query(
        "asc", description="Sort order (asc or desc)"
    ),
) -> MediaItemsPublic:
    """
    Returns a paginated list of media items.
    """
    return services.get_media_items(
        session=session,
        page=page,
        per_page=per_page,
        sort_by=sort_by,
        sort_order=sort_order,
    )


@router.get(
    "/{media_id}",
    response_model=MediaItemPublic,
    status_code=status.HTTP_200_OK,
    tags=["Media Endpoints"],
)
def get_media_item(session: SessionDep, media_id: uuid.UUID) -> MediaItem:
    """
    Retrieve a specific media item.
    """
    return services.get_media_item(session=session, media_id=media_id)


@router.get(
    "/{media_id}/url",
    response_model=MediaUrlPublic,
    status_code=status.HTTP_200_OK,
    tags=["Media Endpoints"],
)
def get_media_url(
    session: SessionDep,
    settings: SettingsDep,
    registry: HooksDep,
    media_id: uuid.UUID,
) -> MediaUrlPublic:
    url = services.get_attachment_url(
        session=session, media_id=media_id, settings=settings, registry=registry
    )
    return MediaUrlPublic(id=media_id, url=url)


@router.get(
    "/{media_id}/link",
    response_model=MediaLinkPublic,
    status_code=status.HTTP_200_OK,
    tags=["Media Endpoints"],
)
def get_media_link(
    session: SessionDep,
    settings: SettingsDep,
    registry: HooksDep,
    media_id: uuid.UUID,
) -> MediaLinkPublic:
    link = services.get_attachment_link(
        session=session, media_id=media_id, settings=settings, registry=registry
    )
    return MediaLinkPublic(id=media_id, link=link)
