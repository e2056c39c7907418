"""
GallerySync Client - Key/Value Storage

Durable string key/value stores backing the local replica. The replica
only needs get/set/remove on two keys ("images" and "lastSync").

Author: GallerySync Project
"""

import logging
import os
from pathlib import Path
from typing import Dict, Optional

# Configure logging
logger = logging.getLogger(__name__)


class JsonFileStorage:
    """
    Stores each key as a JSON text file inside a data directory.

    Writes go to a temporary file that then replaces the target, so a
    reader sees either the previous value or the new one.
    """

    def __init__(self, data_dir):
        """
        Initialize file storage.

        Args:
            data_dir: Directory holding one <key>.json file per key
        """
        self.data_dir = Path(data_dir)

    def _key_path(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        """
        Read the value stored under key.

        Returns:
            Stored text, or None if the key has never been written

        Raises:
            OSError: If the file exists but cannot be read
        """
        path = self._key_path(key)
        if not path.exists():
            return None
        return path.read_text(encoding='utf-8')

    def set_item(self, key: str, value: str):
        """
        Replace the value stored under key.

        Raises:
            OSError: If the directory or file cannot be written
        """
        self.data_dir.mkdir(parents=True, exist_ok=True)
        path = self._key_path(key)
        temp_path = path.with_name(path.name + ".tmp")
        with open(temp_path, 'w', encoding='utf-8') as f:
            f.write(value)
            f.flush()
            os.fsync(f.fileno())
        os.replace(temp_path, path)
        logger.debug(f"Wrote {len(value)} bytes to {path}")

    def remove_item(self, key: str):
        """Delete the value stored under key; no-op if absent."""
        path = self._key_path(key)
        if path.exists():
            path.unlink()


class MemoryStorage:
    """In-process storage with the same interface as JsonFileStorage."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str):
        self.items[key] = str(value)

    def remove_item(self, key: str):
        self.items.pop(key, None)
