"""API package exports."""

from src.api.middleware import CorrelationIdMiddleware
from src.api.routes import router
from src.api.widget import router as widget_router

__all__ = ["router", "widget_router", "CorrelationIdMiddleware"]
