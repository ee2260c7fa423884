from abc import ABC, abstractmethod
from typing import Any


class CachePort(ABC):
    @abstractmethod
    def get(self, key: str) -> Any | None:
        """Cached value, or None when missing or expired."""
        raise NotImplementedError

    @abstractmethod
    def set(self, key: str, value: Any, ttl: float) -> None:
        raise NotImplementedError

    @abstractmethod
    def invalidate(self, key: str) -> None:
        raise NotImplementedError
