"""
Profile page routes.

The caller identifies itself with a plain user id (query parameter or the
X-User-Id header); see ``auth.get_caller_id``.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from ..schemas.users import RoleOut
from ..schemas.posts import OwnPostsOut, OwnCommentsOut
from ..crud import get_user_role, list_posts_by_author, list_comments_by_author
from ..auth import get_caller_id
from ..core import get_sessions
from ..timeutil import normalize_timestamp

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get('/role', response_model=RoleOut)
async def role(user_id: Optional[int] = None, sessions=Depends(get_sessions)):
    """Role of a user, used by the frontend to decide which delete buttons to show."""
    if user_id is None:
        raise HTTPException(400, 'user_id is required')
    try:
        found = await get_user_role(sessions, user_id)
    except Exception as e:
        logger.exception({'msg': 'get_role_failed', 'user_id': user_id})
        raise HTTPException(500, f'server error: {e}')
    if found is None:
        raise HTTPException(404, 'user not found')
    return {'data': {'role': found}}


@router.get('/posts', response_model=OwnPostsOut)
async def my_posts(sessions=Depends(get_sessions), caller_id: int = Depends(get_caller_id)):
    try:
        rows = await list_posts_by_author(sessions, caller_id)
    except Exception as e:
        logger.exception({'msg': 'list_own_posts_failed', 'user_id': caller_id})
        raise HTTPException(500, f'server error: {e}')

    posts = [{**r, 'created_at': normalize_timestamp(r['created_at'])} for r in rows]
    return {'data': {'posts': posts}}


@router.get('/comments', response_model=OwnCommentsOut)
async def my_comments(sessions=Depends(get_sessions), caller_id: int = Depends(get_caller_id)):
    try:
        rows = await list_comments_by_author(sessions, caller_id)
    except Exception as e:
        logger.exception({'msg': 'list_own_comments_failed', 'user_id': caller_id})
        raise HTTPException(500, f'server error: {e}')

    comments = [{**r, 'created_at': normalize_timestamp(r['created_at'])} for r in rows]
    return {'data': {'comments': comments}}
