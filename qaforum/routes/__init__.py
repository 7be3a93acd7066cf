from fastapi import APIRouter
from .system import router as system_router
from .users import router as users_router
from .profile import router as profile_router
from .posts import router as posts_router
from .comments import router as comments_router

router = APIRouter()
router.include_router(system_router, tags=['system'])
router.include_router(users_router, tags=['users'])
router.include_router(profile_router, prefix='/user', tags=['profile'])
router.include_router(posts_router, prefix='/posts', tags=['posts'])
router.include_router(comments_router, prefix='/comments', tags=['comments'])
