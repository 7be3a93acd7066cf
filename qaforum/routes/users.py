import logging

from fastapi import APIRouter, Depends, HTTPException

from ..schemas.users import (
    RegisterIn,
    LoginIn,
    LoginOut,
    UsernameChangeIn,
    PasswordChangeIn,
    ActionOkOut,
)
from ..crud import (
    create_user,
    get_user_by_username,
    get_user_by_id,
    username_taken,
    update_username,
    update_password,
)
from ..auth import hash_password, verify_password
from ..core import get_sessions
from ..timeutil import normalize_timestamp

logger = logging.getLogger(__name__)

router = APIRouter()

INVALID_CREDENTIALS = 'invalid username or password'


@router.post('/register', response_model=ActionOkOut)
async def register(payload: RegisterIn, sessions=Depends(get_sessions)):
    try:
        # advisory only, two concurrent registrations can both pass
        if await username_taken(sessions, payload.username):
            raise HTTPException(400, 'username already exists')

        hashed = await hash_password(payload.password)
        affected = await create_user(sessions, payload.username, hashed, payload.role)
        if affected < 1:
            raise HTTPException(500, 'registration failed, database write error')
    except HTTPException:
        raise
    except Exception as e:
        logger.exception({'msg': 'register_failed', 'username': payload.username})
        raise HTTPException(500, f'server error: {e}')

    logger.info({'msg': 'user_registered', 'username': payload.username, 'role': payload.role})
    return ActionOkOut(message='registration succeeded, please log in')


@router.post('/login', response_model=LoginOut)
async def login(payload: LoginIn, sessions=Depends(get_sessions)):
    try:
        user = await get_user_by_username(sessions, payload.username)
        if not user:
            raise HTTPException(400, INVALID_CREDENTIALS)
        if user.role != payload.role:
            raise HTTPException(400, 'user role does not match')
        if not await verify_password(payload.password, user.password):
            raise HTTPException(400, INVALID_CREDENTIALS)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception({'msg': 'login_failed', 'username': payload.username})
        raise HTTPException(500, f'server error: {e}')

    return {
        'message': 'login succeeded',
        'user': {
            'user_id': user.user_id,
            'username': user.username,
            'role': user.role,
            'created_at': normalize_timestamp(user.created_at),
        },
    }


@router.put('/users/{user_id}/username', response_model=ActionOkOut)
async def change_username(user_id: int, payload: UsernameChangeIn, sessions=Depends(get_sessions)):
    # the body id is whatever the client claims to be, this only stops editing someone else by URL
    if user_id != payload.user_id:
        raise HTTPException(403, 'not allowed to modify this user')

    try:
        if await username_taken(sessions, payload.new_username):
            raise HTTPException(400, 'username already taken')
        affected = await update_username(sessions, user_id, payload.new_username)
        if affected < 1:
            raise HTTPException(404, 'user not found')
    except HTTPException:
        raise
    except Exception as e:
        logger.exception({'msg': 'change_username_failed', 'user_id': user_id})
        raise HTTPException(500, f'server error: {e}')

    return ActionOkOut(message='username updated')


@router.put('/users/{user_id}/password', response_model=ActionOkOut)
async def change_password(user_id: int, payload: PasswordChangeIn, sessions=Depends(get_sessions)):
    if user_id != payload.user_id:
        raise HTTPException(403, 'not allowed to modify this user')

    try:
        user = await get_user_by_id(sessions, user_id)
        if not user:
            raise HTTPException(404, 'user not found')
        if not await verify_password(payload.old_password, user.password):
            raise HTTPException(400, 'old password is incorrect')

        hashed = await hash_password(payload.new_password)
        await update_password(sessions, user_id, hashed)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception({'msg': 'change_password_failed', 'user_id': user_id})
        raise HTTPException(500, f'server error: {e}')

    return ActionOkOut(message='password updated')
