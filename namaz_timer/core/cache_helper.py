import hashlib
import json
import logging
import os
import time
from datetime import datetime
from typing import Any, Optional

logger = logging.getLogger(__name__)


class CacheHelper:
    """JSON file cache. Keys already carry the date they are valid for; old files are pruned on save."""

    DEFAULT_CACHE_DIR = ".cache"
    DEFAULT_MAX_AGE_DAYS = 7

    def __init__(self, cache_dir: Optional[str] = None, component_name: str = "",
                 max_age_days: Optional[float] = DEFAULT_MAX_AGE_DAYS):
        """Initialize cache helper with specific cache directory
        Args:
            cache_dir: Base cache directory from config, if None uses DEFAULT_CACHE_DIR
            component_name: Source specific subdirectory
            max_age_days: Files not written for this many days are deleted on save; None keeps everything
        """
        base_dir = os.path.expanduser(cache_dir or self.DEFAULT_CACHE_DIR)
        self.cache_dir = os.path.join(base_dir, component_name) if component_name else base_dir
        self.max_age_days = max_age_days
        os.makedirs(self.cache_dir, exist_ok=True)

    def _get_cache_file(self, key: str) -> str:
        """Generate cache filename from key"""
        key_hash = hashlib.md5(key.encode()).hexdigest()
        return os.path.join(self.cache_dir, f"{key_hash}.json")

    def get_cached_content(self, key: str) -> Optional[Any]:
        """Return cached content for key, or None when absent or unreadable"""
        cache_file = self._get_cache_file(key)
        if not os.path.exists(cache_file):
            return None
        try:
            with open(cache_file, "r") as f:
                cached = json.load(f)
            if cached.get("key") != key:
                logger.warning(f"Cache key mismatch in {cache_file}, ignoring")
                return None
            return cached["content"]
        except (OSError, ValueError, KeyError) as e:
            logger.error(f"Error reading cache: {e}")
            return None

    def save_to_cache(self, key: str, content: Any) -> None:
        """Save JSON-serializable content under key, then prune expired files"""
        cache_data = {
            "key": key,
            "saved_at": datetime.now().isoformat(timespec="seconds"),
            "content": content,
        }
        try:
            with open(self._get_cache_file(key), "w") as f:
                json.dump(cache_data, f)
        except OSError as e:
            logger.error(f"Error saving to cache: {e}")
        self.prune()

    def prune(self) -> int:
        """Delete cache files older than max_age_days; returns how many were removed"""
        if self.max_age_days is None:
            return 0
        cutoff = time.time() - self.max_age_days * 86400
        removed = 0
        for name in os.listdir(self.cache_dir):
            if not name.endswith(".json"):
                continue
            path = os.path.join(self.cache_dir, name)
            try:
                if os.path.getmtime(path) < cutoff:
                    os.remove(path)
                    removed += 1
            except OSError as e:
                logger.warning(f"Could not prune cache file {path}: {e}")
        if removed:
            logger.debug(f"Pruned {removed} expired cache files from {self.cache_dir}")
        return removed
