"""
Registration and activation of the media file sanitizer
"""

from pathlib import Path

from sqlmodel import Session

from api.media.services import SQLMediaStore
from api.sanitizer.services import (
    MediaReconciler,
    preserve_media_attachment,
    sanitize_uploaded_file_name,
)
from api.settings.services import get_setting_value, set_setting_value
from core.hooks import HookRegistry
from core.logger import logger

PLUGIN_NAME = "media-file-sanitizer"
ACTIVATED_SETTING_KEY = "MEDIA_FILE_SANITIZER_ACTIVATED"


def sanitize_existing_media(session: Session, upload_dir: str | Path) -> None:
    """Rename all stored media files to sanitized names"""
    MediaReconciler(SQLMediaStore(session, upload_dir)).reconcile_all()


def register(registry: HookRegistry) -> None:
    """Attach the sanitizer's callbacks to the host hooks"""
    registry.add_filter("upload_prefilter", sanitize_uploaded_file_name)
    registry.add_filter("attachment_url", preserve_media_attachment, 10, 2)
    registry.add_filter("attachment_link", preserve_media_attachment, 10, 2)
    registry.register_activation_hook(PLUGIN_NAME, sanitize_existing_media, accepted_args=2)


def activate(session: Session, registry: HookRegistry, upload_dir: str | Path) -> bool:
    """
    Run the plugin's activation hook unless it has run before.
    Returns True if the hook ran.
    """
    if get_setting_value(session, ACTIVATED_SETTING_KEY) == "true":
        logger.info("Plugin %s already activated", PLUGIN_NAME)
        return False

    logger.info("Activating plugin %s", PLUGIN_NAME)
    registry.activate(PLUGIN_NAME, session, upload_dir)
    set_setting_value(
        session,
        ACTIVATED_SETTING_KEY,
        "true",
        name="Media file sanitizer activated",
        description="Existing media files have been renamed to sanitized names",
        tags=[{"key": "plugin", "value": PLUGIN_NAME}],
    )
    return True
