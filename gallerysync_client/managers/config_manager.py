"""
GallerySync Client - Configuration Manager

Reads the client settings (server address, request timeout, replica
location, logging) from config.json, writing the defaults on first run.

Author: GallerySync Project
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional, Dict, Any

from gallerysync_client.exceptions import GallerySyncDataError

# Configure logging
logger = logging.getLogger(__name__)


# Settings written to a fresh config.json and filled in for absent keys
DEFAULT_CONFIG = {
    "server_url": "http://localhost",
    "server_port": 4000,
    "verify_ssl": True,
    "request_timeout": 30,  # Seconds; a timeout fails the sync round like any transport error
    "data_dir": None,  # None means a "data" folder next to config.json
    "log_level": "INFO",
    "log_retention_days": 30
}


class ConfigManager:
    """
    Client settings backed by config.json.

    config.json and the logs folder share `base_dir`. The replica lives in
    `data_dir` when set, else in `base_dir/data`.
    """

    def __init__(self, base_dir: Optional[Path] = None):
        """
        Args:
            base_dir: Folder for config.json. Omitted, it is the folder of the
                      frozen executable, or the current directory for a script.
        """
        if base_dir is None:
            if getattr(sys, 'frozen', False):
                base_dir = Path(sys.executable).parent
            else:
                base_dir = Path.cwd()

        self.base_dir = Path(base_dir)
        self.config_file = self.base_dir / "config.json"
        self.config: Dict[str, Any] = {}

    def load_config(self) -> Dict[str, Any]:
        """
        Read config.json, or write DEFAULT_CONFIG there if it is absent.

        Keys missing from an existing file take their default; extra keys
        are kept untouched.

        Raises:
            GallerySyncDataError: If config.json is not a JSON object
        """
        if not self.config_file.exists():
            logger.info(f"No config.json at {self.base_dir}, writing defaults")
            self.config = dict(DEFAULT_CONFIG)
            self.save_config()
            return self.config

        logger.debug(f"Reading {self.config_file}")
        try:
            stored = json.loads(self.config_file.read_text())
        except ValueError as e:
            raise GallerySyncDataError(f"{self.config_file} is not valid JSON ({e})") from e
        if not isinstance(stored, dict):
            raise GallerySyncDataError(f"{self.config_file} must hold a JSON object")

        self.config = {**DEFAULT_CONFIG, **stored}
        logger.info(f"Settings loaded from {self.config_file}")
        return self.config

    def save_config(self):
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self.config_file.write_text(json.dumps(self.config, indent=2))
        logger.debug(f"Wrote {self.config_file}")

    def get(self, key: str, default=None) -> Any:
        return self.config.get(key, default)

    def set(self, key: str, value: Any):
        """Change one setting and write config.json immediately."""
        self.config[key] = value
        self.save_config()

    def get_data_dir(self) -> Path:
        """Folder holding the local replica's files."""
        data_dir = self.get("data_dir")
        if data_dir:
            return Path(data_dir).expanduser()
        return self.base_dir / "data"
