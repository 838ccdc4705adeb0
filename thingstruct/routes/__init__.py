# API Routes
from .templates import router as templates_router
from .states import router as states_router
from .stream import router as stream_router

__all__ = [
    "templates_router",
    "states_router",
    "stream_router",
]
