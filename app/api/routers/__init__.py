"""
app/api/routers package marker.
"""

from app.api.routers.analytics_router import router as analytics_router
from app.api.routers.dataset_router import router as dataset_router
from app.api.routers.export_router import router as export_router
from app.api.routers.insight_router import router as insight_router

__all__ = [
    "analytics_router",
    "dataset_router",
    "export_router",
    "insight_router",
]
