"""API routers."""

from shelfwise.api.router import api_router

__all__ = ["api_router"]
