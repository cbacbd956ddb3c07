"""
Local Filesystem Storage Implementation.
"""

import logging
import os
import aiofiles
from pathlib import Path
from typing import Optional
from .interface import StorageInterface

logger = logging.getLogger(__name__)


class LocalStorage(StorageInterface):
    """
    Stores each key as a file under a base directory.
    """

    def __init__(self, base_dir: str = "./data"):
        """
        Initialize local storage with a base directory.

        Args:
            base_dir: Base directory for all stored files
        """
        self.base_dir = Path(base_dir).resolve()
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _get_full_path(self, path: str) -> Path:
        """Convert relative path to full absolute path within base directory."""
        full_path = (self.base_dir / path).resolve()

        # Reject paths that escape base_dir
        if full_path != self.base_dir and self.base_dir not in full_path.parents:
            raise ValueError(f"Invalid path: {path} - path traversal detected")

        return full_path

    async def save(self, path: str, content: bytes | str) -> bool:
        """Write content atomically via a temporary sibling file."""
        full_path = self._get_full_path(path)
        tmp_path = full_path.with_suffix(full_path.suffix + ".tmp")
        try:
            full_path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, str):
                async with aiofiles.open(tmp_path, 'w', encoding='utf-8') as f:
                    await f.write(content)
            else:
                async with aiofiles.open(tmp_path, 'wb') as f:
                    await f.write(content)
            os.replace(tmp_path, full_path)
            return True
        except OSError as e:
            logger.error(f"Error saving file {path}: {e}", exc_info=True)
            return False

    async def load(self, path: str) -> Optional[bytes]:
        """Load content from local filesystem."""
        full_path = self._get_full_path(path)
        if not full_path.exists():
            return None
        try:
            async with aiofiles.open(full_path, 'rb') as f:
                return await f.read()
        except OSError as e:
            logger.error(f"Error loading file {path}: {e}", exc_info=True)
            return None

    async def exists(self, path: str) -> bool:
        """Check if file exists."""
        return self._get_full_path(path).exists()

    async def delete(self, path: str) -> bool:
        """Delete file from local filesystem."""
        full_path = self._get_full_path(path)
        if not full_path.exists():
            return False
        try:
            full_path.unlink()
            return True
        except OSError as e:
            logger.error(f"Error deleting file {path}: {e}", exc_info=True)
            return False
