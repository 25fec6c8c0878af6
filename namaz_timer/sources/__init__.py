import logging
from typing import Any, Dict, Optional

from .aladhan import AladhanProvider
from .astronomical import AstronomicalProvider
from .base import BaseTimesProvider

__all__ = ["AladhanProvider", "AstronomicalProvider", "BaseTimesProvider", "get_provider"]

logger = logging.getLogger(__name__)

_PROVIDERS = {
    "astronomical": AstronomicalProvider,
    "aladhan": AladhanProvider,
}


def get_provider(source_type: str, config: Optional[Dict[str, Any]] = None) -> Optional[BaseTimesProvider]:
    """Factory: return provider instance for given type, or None if unknown."""
    cls = _PROVIDERS.get((source_type or "").lower())
    if not cls:
        logger.error(f"Unknown timing source: {source_type}")
        return None
    return cls(config or {})
