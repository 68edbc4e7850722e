"""Cart domain - session-scoped pending orders"""

from .router import router

__all__ = ["router"]
