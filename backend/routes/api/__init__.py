"""HTTP API: every router mounted under /api."""

from fastapi import APIRouter

from .admin import router as admin_router
from .auth import router as auth_router
from .chat import router as chat_router
from .files import router as files_router
from .health import router as health_router
from .mentors import router as mentors_router
from .meta import router as meta_router
from .quiz import router as quiz_router
from .resources import router as resources_router
from .sessions import router as sessions_router
from .students import router as students_router

router = APIRouter(prefix="/api")
router.include_router(health_router)
router.include_router(meta_router)
router.include_router(auth_router)
router.include_router(students_router)
router.include_router(mentors_router)
router.include_router(sessions_router)
router.include_router(quiz_router)
router.include_router(resources_router)
router.include_router(chat_router)
router.include_router(files_router)
router.include_router(admin_router)

api_router = router
