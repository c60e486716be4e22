"""
Environment settings for the todo manager.

Values come from the process environment first, then from the nearest
``.env`` file (current directory or up to three parents), loaded with
python-dotenv without overriding variables that are already set.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

ENV_FILE_NAME = ".env"
ENV_SEARCH_DEPTH = 3
TRUTHY_VALUES = ("true", "1", "yes", "on")


def _find_env_file(start: Path) -> Optional[Path]:
    """Nearest .env at or above ``start``, stopping at the filesystem root."""
    candidates = [start, *start.parents][:ENV_SEARCH_DEPTH + 1]
    for directory in candidates:
        candidate = directory / ENV_FILE_NAME
        if candidate.is_file():
            return candidate
    return None


class EnvConfig:
    """Typed access to ``TODO_*`` settings and the .env loader."""

    @staticmethod
    def load_env_file(path: Optional[str] = None) -> bool:
        """
        Load a .env file into the process environment.

        Args:
            path: Explicit file; when omitted the nearest .env is used

        Returns:
            Whether a file was found and loaded
        """
        env_path = Path(path) if path else _find_env_file(Path.cwd())
        if env_path is None or not env_path.is_file():
            return False

        load_dotenv(env_path)
        logger.debug(f"[CONFIG] Loaded settings from {env_path}")
        return True

    @staticmethod
    def get(key: str, default: Optional[str] = None) -> Optional[str]:
        return os.getenv(key, default)

    @staticmethod
    def get_bool(key: str, default: bool = False) -> bool:
        raw = os.getenv(key)
        if raw is None:
            return default
        return raw.strip().lower() in TRUTHY_VALUES

    @staticmethod
    def get_int(key: str, default: int = 0) -> int:
        raw = os.getenv(key)
        if raw is None:
            return default
        try:
            return int(raw)
        except ValueError:
            logger.warning(f"[CONFIG] {key}={raw!r} is not an integer, using {default}")
            return default

    @staticmethod
    def get_float(key: str, default: float = 0.0) -> float:
        raw = os.getenv(key)
        if raw is None:
            return default
        try:
            return float(raw)
        except ValueError:
            logger.warning(f"[CONFIG] {key}={raw!r} is not a number, using {default}")
            return default

    @staticmethod
    def get_json(key: str, default: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        """Decode a JSON-valued variable; unset or malformed values give ``default``."""
        raw = os.getenv(key)
        if not raw:
            return default
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"[CONFIG] {key} does not hold valid JSON")
            return default

    @staticmethod
    def get_list(key: str, default: Optional[List[str]] = None) -> List[str]:
        """Split a comma-separated variable, dropping blank items."""
        raw = os.getenv(key)
        if not raw:
            return list(default or [])
        return [item.strip() for item in raw.split(",") if item.strip()]

    @staticmethod
    def check_required(*keys: str) -> bool:
        """Log and report False when any of ``keys`` is unset or empty."""
        absent = [key for key in keys if not os.getenv(key)]
        if absent:
            logger.error(f"[CONFIG] Missing required settings: {', '.join(absent)}")
            return False
        return True

    @staticmethod
    def show_config_template(profile: str = "local") -> str:
        """
        .env template for a deployment profile.

        Args:
            profile: local, api, redis or server (unknown names give local)
        """
        templates = {
            "local": """
# Local file storage
TODO_DEFAULT_STRATEGY=local
TODO_AUTO_SWITCH=true
TODO_LOCAL_DIR=./data
TODO_STORAGE_KEY=todos
TODO_LOCAL_QUOTA_BYTES=5242880
TODO_LOG_LEVEL=INFO
""",
            "api": """
# Remote todo API with local fallback
TODO_DEFAULT_STRATEGY=api
TODO_AUTO_SWITCH=true
TODO_STRATEGY_ORDER=api,local
TODO_API_BASE_URL=http://localhost:3000
TODO_API_TIMEOUT=10
TODO_API_RETRY_COUNT=3
TODO_API_RETRY_DELAY=1
TODO_API_TOKEN=
TODO_LOCAL_DIR=./data
TODO_LOG_LEVEL=INFO
""",
            "redis": """
# Redis storage as an extra fallback
TODO_STRATEGY_ORDER=local,api,redis
TODO_REDIS_ENABLED=true
TODO_REDIS_HOST=localhost
TODO_REDIS_PORT=6379
TODO_REDIS_DB=0
TODO_REDIS_PASSWORD=
TODO_REDIS_KEY_PREFIX=todo_manager:
""",
            "server": """
# Remote todo API service
TODO_SERVER_HOST=127.0.0.1
TODO_SERVER_PORT=3000
TODO_SERVER_DATA_DIR=./server_data
TODO_SERVER_PERSIST=true
TODO_API_TOKEN=
TODO_LOG_LEVEL=INFO
TODO_ENABLE_FILE_LOGGING=false
""",
        }

        return templates.get(profile, templates["local"])
