"""Configuration management for the LocalShare client."""

import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional

from common.logging_config import get_logger
from localshare.constants import NOTIFICATION_TTL_SECONDS

logger = get_logger(__name__)


class Config:
    """Manages client configuration stored in a JSON file."""

    DEFAULT_CONFIG = {
        "server_host": os.environ.get("LOCALSHARE_HOST", "localhost"),
        "server_port": int(os.environ.get("LOCALSHARE_PORT", "8080")),
        "use_https": False,
        "timeout": 30,
        "notification_ttl": NOTIFICATION_TTL_SECONDS,
        "download_dir": str(Path.home() / "Downloads"),
        "log_file": None,
    }

    def __init__(self, config_path: Path):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to config JSON file (typically ~/.localshare/config.json)
        """
        self.config_path = config_path
        self.data = self._load()

    def _load(self) -> dict:
        """
        Load configuration from file, creating defaults if necessary.

        Returns:
            Configuration dictionary
        """
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
        except PermissionError:
            self.config_path = Path(tempfile.gettempdir()) / '.localshare' / 'config.json'
            self.config_path.parent.mkdir(parents=True, exist_ok=True)

        config = self.DEFAULT_CONFIG.copy()

        if not self.config_path.exists():
            try:
                with open(self.config_path, 'w') as f:
                    json.dump(config, f, indent=2)
            except IOError as e:
                logger.warning(f"Could not write default config to {self.config_path}: {e}")
            return config

        try:
            with open(self.config_path, 'r') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("config root must be an object")
        except (json.JSONDecodeError, ValueError, IOError) as e:
            backup_path = self.config_path.with_suffix('.json.bak')
            logger.warning(f"Corrupted config {self.config_path} ({e}), backing up to {backup_path}")
            try:
                shutil.copy(self.config_path, backup_path)
            except IOError as copy_error:
                logger.warning(f"Could not back up config: {copy_error}")
            return config

        config.update(data)
        return config

    def save(self) -> None:
        """Save current configuration to file."""
        try:
            with open(self.config_path, 'w') as f:
                json.dump(self.data, f, indent=2)
        except IOError as e:
            logger.warning(f"Could not save config to {self.config_path}: {e}")

    def get_base_url(self) -> str:
        """
        Get server base URL.

        Returns:
            Base URL string (e.g., "http://localhost:8080")
        """
        host = self.data.get('server_host', 'localhost')
        port = self.data.get('server_port', 8080)
        scheme = 'https' if self.data.get('use_https') else 'http'
        return f"{scheme}://{host}:{port}"

    def get_timeout(self) -> Optional[float]:
        """
        Get request timeout in seconds.

        Returns:
            Timeout in seconds, or None to wait indefinitely
        """
        return self.data.get('timeout', 30)

    def get_notification_ttl(self) -> float:
        return float(self.data.get('notification_ttl', NOTIFICATION_TTL_SECONDS))

    def get_download_dir(self) -> Path:
        return Path(self.data.get('download_dir') or '.').expanduser()

    def get_log_file(self) -> Optional[str]:
        return self.data.get('log_file')
