"""
fleetdesk/api/routers package marker.
"""

from fleetdesk.api.routers.imports import router as imports_router

__all__ = ["imports_router"]
