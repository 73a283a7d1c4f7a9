"""API utilities and dependencies.

This package contains shared API utilities:
- deps: FastAPI dependency injection functions
"""

from .deps import get_dispatcher, get_registry, get_stream_manager, require_session

__all__ = [
    "get_registry",
    "get_dispatcher",
    "get_stream_manager",
    "require_session",
]
