"""
Initialize the database and the media upload directory.
"""
from pathlib import Path

from core.config import get_settings
from core.db import create_db_and_tables
from core.logger import logger


def init_db():
  logger.info("Create tables...")
  create_db_and_tables()

  upload_dir = Path(get_settings().UPLOAD_DIR)
  if not upload_dir.exists():
    logger.info("Creating upload directory %s", upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)


if __name__ == "__main__":
  init_db()
