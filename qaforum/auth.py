import os
from typing import Optional

from fastapi import Header, HTTPException
from passlib.context import CryptContext
from starlette.concurrency import run_in_threadpool

BCRYPT_ROUNDS = int(os.getenv('BCRYPT_ROUNDS', '10'))

pwd_ctx = CryptContext(schemes=['bcrypt'], deprecated='auto', bcrypt__rounds=BCRYPT_ROUNDS)


async def hash_password(password: str) -> str:
    # bcrypt is CPU bound, keep it off the event loop
    return await run_in_threadpool(pwd_ctx.hash, password)


async def verify_password(password: str, hashed: str) -> bool:
    return await run_in_threadpool(pwd_ctx.verify, password, hashed)


async def get_caller_id(x_user_id: Optional[str] = Header(None)) -> int:
    """
    User id asserted by the client in the X-User-Id header.

    Nothing verifies the value: the frontend stores the id it got from
    /login and sends it back as-is.
    """
    if not x_user_id:
        raise HTTPException(401, 'please log in first')
    try:
        return int(x_user_id)
    except ValueError:
        raise HTTPException(400, 'X-User-Id must be an integer user id')


def can_delete(operator_id: int, operator_role: Optional[str], author_id: Optional[int]) -> bool:
    """Admins may delete anything, everyone else only what they wrote."""
    return operator_role == 'admin' or (author_id is not None and operator_id == author_id)
