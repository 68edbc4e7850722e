"""Order domain - sales records written at checkout"""

from .router import router

__all__ = ["router"]
