"""
Services for reading and writing persisted settings
"""
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session
from api.settings.models import Setting


def get_setting_value(session: Session, key: str) -> str | None:
    """
    Value of a setting, or None if it is unset or cannot be read.

    Example:
        >>> get_setting_value(session, "MEDIA_FILE_SANITIZER_ACTIVATED")
        'true'
    """
    try:
        setting = session.get(Setting, key)
    except SQLAlchemyError:
        return None

    if setting and setting.value:
        return setting.value
    return None


def set_setting_value(
    session: Session,
    key: str,
    value: str,
    name: str | None = None,
    description: str | None = None,
    tags: list[dict[str, str]] | None = None,
) -> Setting:
    """
    Create or overwrite a setting value.
    name defaults to the key for new settings; other fields left as None
    keep their stored value.
    """
    setting = session.get(Setting, key)
    if setting is None:
        setting = Setting(
            key=key,
            value=value,
            name=name or key,
            description=description,
            tags=tags,
        )
    else:
        setting.value = value
        if name is not None:
            setting.name = name
        if description is not None:
            setting.description = description
        if tags is not None:
            setting.tags = tags

    session.add(setting)
    session.commit()
    session.refresh(setting)
    return setting
