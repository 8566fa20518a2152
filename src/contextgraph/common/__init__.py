from __future__ import annotations

from .cache import TTLCache

__all__ = ["TTLCache"]
