"""
Define functions/aliases for dependency injection
"""
from collections.abc import Generator
from typing import Annotated, TypeAlias
from sqlmodel import Session
from fastapi import Depends

from core.config import Settings, get_settings
from core.db import get_engine
from core.hooks import HookRegistry, hooks

# Define db dependency
def get_db() -> Generator[Session, None, None]:
  with Session(get_engine()) as session:
    yield session

def get_hooks() -> HookRegistry:
  return hooks

SessionDep: TypeAlias = Annotated[Session, Depends(get_db)]
SettingsDep: TypeAlias = Annotated[Settings, Depends(get_settings)]
HooksDep: TypeAlias = Annotated[HookRegistry, Depends(get_hooks)]
