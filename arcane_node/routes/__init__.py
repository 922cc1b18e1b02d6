"""FastAPI API endpoints under /api.

Endpoint groups: health/settings, campaigns, memory (nested under
/api/campaigns/{id}/memory), and detection (detect + conjure, nested under
/api/campaigns/{id}/).
"""

from fastapi import APIRouter

from .campaigns import router as campaigns_router
from .detection import router as detection_router
from .memory import router as memory_router
from .settings import router as settings_router

router = APIRouter()
router.include_router(settings_router)
router.include_router(campaigns_router)
router.include_router(memory_router)
router.include_router(detection_router)
