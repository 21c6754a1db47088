"""API routers."""

from vdfy.api.routers.analysis import router as analysis_router
from vdfy.api.routers.links import router as links_router
from vdfy.api.routers.meta import router as meta_router
from vdfy.api.routers.uploads import router as uploads_router
from vdfy.api.routers.videos import router as videos_router

__all__ = ["analysis_router", "links_router", "meta_router", "uploads_router", "videos_router"]
