import asyncio
import logging
import math
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from ..schemas.posts import (
    PostIn,
    OperatorIn,
    AuthorOut,
    PostOut,
    PostListOut,
    PostDetailOut,
)
from ..schemas.users import ActionOkOut
from ..crud import (
    list_posts,
    get_post,
    get_post_owner,
    post_exists,
    create_post,
    delete_post_with_comments,
    get_user_by_id,
    get_user_role,
)
from ..auth import can_delete
from ..core import get_sessions
from ..timeutil import normalize_timestamp

logger = logging.getLogger(__name__)

router = APIRouter()

DEFAULT_PAGE_SIZE = 5
MAX_PAGE_SIZE = 20


def _post_out(row) -> PostOut:
    return PostOut(
        post_id=row['post_id'],
        title=row['title'],
        content=row['content'],
        author=AuthorOut.build(row['author_id'], row['author_name']),
        created_at=normalize_timestamp(row['created_at']),
    )


def _int_or_default(raw: Optional[str], default: int) -> int:
    """Missing, non-numeric and zero values all fall back to the default."""
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value or default


@router.get('', response_model=PostListOut)
async def list_page(page: Optional[str] = None, limit: Optional[str] = None, sessions=Depends(get_sessions)):
    page = _int_or_default(page, 1)
    limit = _int_or_default(limit, DEFAULT_PAGE_SIZE)
    if page < 1:
        raise HTTPException(400, 'page must be at least 1')
    if limit < 1 or limit > MAX_PAGE_SIZE:
        raise HTTPException(400, f'limit must be between 1 and {MAX_PAGE_SIZE}')

    try:
        rows, total = await list_posts(sessions, offset=(page - 1) * limit, limit=limit)
    except Exception as e:
        logger.exception({'msg': 'list_posts_failed', 'page': page, 'limit': limit})
        raise HTTPException(500, f'server error: {e}')

    return {
        'data': {
            'posts': [_post_out(r) for r in rows],
            'pagination': {
                'currentPage': page,
                'pageSize': limit,
                'totalPages': math.ceil(total / limit),
                'totalPosts': total,
            },
        },
    }


@router.get('/{post_id}', response_model=PostDetailOut)
async def detail(post_id: int, sessions=Depends(get_sessions)):
    try:
        row = await get_post(sessions, post_id)
    except Exception as e:
        logger.exception({'msg': 'get_post_failed', 'post_id': post_id})
        raise HTTPException(500, f'server error: {e}')
    if not row:
        raise HTTPException(404, 'post not found')
    return {'data': {'post': _post_out(row)}}


@router.post('', response_model=ActionOkOut)
async def create(payload: PostIn, sessions=Depends(get_sessions)):
    try:
        if not await get_user_by_id(sessions, payload.author_id):
            raise HTTPException(403, 'current user does not exist, cannot publish')
        affected = await create_post(sessions, payload.title, payload.content, payload.author_id)
        if affected < 1:
            raise HTTPException(500, 'publish failed, database write error')
    except HTTPException:
        raise
    except Exception as e:
        logger.exception({'msg': 'create_post_failed', 'author_id': payload.author_id})
        raise HTTPException(500, f'server error: {e}')

    return ActionOkOut(message='question published')


@router.delete('/{post_id}', response_model=ActionOkOut)
async def remove(post_id: int, payload: OperatorIn, sessions=Depends(get_sessions)):
    try:
        # disjoint tables, so the two lookups can go out together
        owner, operator_role = await asyncio.gather(
            get_post_owner(sessions, post_id),
            get_user_role(sessions, payload.operator_id),
        )
        if owner is None:
            raise HTTPException(404, 'post not found')
        if not can_delete(payload.operator_id, operator_role, owner.author_id):
            raise HTTPException(403, 'not allowed to delete this post')

        await delete_post_with_comments(sessions, post_id)

        if await post_exists(sessions, post_id):
            raise HTTPException(500, 'delete failed, post is still present')
    except HTTPException:
        raise
    except Exception as e:
        logger.exception({'msg': 'delete_post_failed', 'post_id': post_id, 'operator_id': payload.operator_id})
        raise HTTPException(500, f'delete failed: {e}')

    logger.info({'msg': 'post_deleted', 'post_id': post_id, 'operator_id': payload.operator_id})
    return ActionOkOut(message='post and its comments deleted')
