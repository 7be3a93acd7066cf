import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..schemas.posts import CommentIn, OperatorIn, AuthorOut, CommentOut, CommentListOut
from ..schemas.users import ActionOkOut
from ..crud import list_comments, create_comment, get_comment_owner, delete_comment, get_user_role
from ..auth import can_delete
from ..core import get_sessions
from ..timeutil import normalize_timestamp

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get('', response_model=CommentListOut)
async def list_for_post(post_id: Optional[int] = Query(None, alias='postId'), sessions=Depends(get_sessions)):
    if post_id is None:
        raise HTTPException(400, 'postId is required')
    try:
        rows = await list_comments(sessions, post_id)
    except Exception as e:
        logger.exception({'msg': 'list_comments_failed', 'post_id': post_id})
        raise HTTPException(500, f'server error: {e}')

    comments = [
        CommentOut(
            comment_id=r['comment_id'],
            content=r['content'],
            post_id=r['post_id'],
            author=AuthorOut.build(r['author_id'], r['author_name']),
            created_at=normalize_timestamp(r['created_at']),
        )
        for r in rows
    ]
    return {'data': {'comments': comments}}


@router.post('', response_model=ActionOkOut)
async def create(payload: CommentIn, sessions=Depends(get_sessions)):
    try:
        affected = await create_comment(sessions, payload.post_id, payload.content, payload.author_id)
        if affected < 1:
            raise HTTPException(500, 'comment failed, database write error')
    except HTTPException:
        raise
    except Exception as e:
        logger.exception({'msg': 'create_comment_failed', 'post_id': payload.post_id})
        raise HTTPException(500, f'server error: {e}')

    return ActionOkOut(message='comment published')


@router.delete('/{comment_id}', response_model=ActionOkOut)
async def remove(comment_id: int, payload: OperatorIn, sessions=Depends(get_sessions)):
    try:
        owner, operator_role = await asyncio.gather(
            get_comment_owner(sessions, comment_id),
            get_user_role(sessions, payload.operator_id),
        )
        if owner is None:
            raise HTTPException(404, 'comment not found')
        if not can_delete(payload.operator_id, operator_role, owner.author_id):
            raise HTTPException(403, 'not allowed to delete this comment')

        affected = await delete_comment(sessions, comment_id)
        if affected < 1:
            raise HTTPException(500, 'comment delete failed')
    except HTTPException:
        raise
    except Exception as e:
        logger.exception({'msg': 'delete_comment_failed', 'comment_id': comment_id})
        raise HTTPException(500, f'server error: {e}')

    return ActionOkOut(message='comment deleted')
