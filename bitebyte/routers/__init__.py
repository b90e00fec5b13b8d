# Routers package
from . import analysis_router
from . import ui_router

__all__ = [
    "analysis_router",
    "ui_router",
]
