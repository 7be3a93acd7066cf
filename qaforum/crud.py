from sqlalchemy import select, insert, update, delete, func
from sqlalchemy.ext.asyncio import async_sessionmaker

from .models.users import User
from .models.posts import Post
from .models.comments import Comment

# users

async def get_user_by_username(sessions: async_sessionmaker, username: str):
    async with sessions() as session:
        q = await session.execute(select(User).where(User.username == username))
        return q.scalars().first()

async def get_user_by_id(sessions: async_sessionmaker, user_id: int):
    async with sessions() as session:
        q = await session.execute(select(User).where(User.user_id == user_id))
        return q.scalars().first()

async def username_taken(sessions: async_sessionmaker, username: str) -> bool:
    async with sessions() as session:
        q = await session.execute(select(User.user_id).where(User.username == username))
        return q.first() is not None

async def get_user_role(sessions: async_sessionmaker, user_id: int):
    async with sessions() as session:
        return await session.scalar(select(User.role).where(User.user_id == user_id))

async def create_user(sessions: async_sessionmaker, username: str, hashed_password: str, role: str) -> int:
    """Insert a user stamped with the database clock. Returns the affected row count."""
    async with sessions() as session:
        res = await session.execute(
            insert(User).values(username=username, password=hashed_password, role=role, created_at=func.now())
        )
        await session.commit()
        return res.rowcount

async def update_username(sessions: async_sessionmaker, user_id: int, new_username: str) -> int:
    async with sessions() as session:
        res = await session.execute(update(User).where(User.user_id == user_id).values(username=new_username))
        await session.commit()
        return res.rowcount

async def update_password(sessions: async_sessionmaker, user_id: int, hashed_password: str) -> int:
    async with sessions() as session:
        res = await session.execute(update(User).where(User.user_id == user_id).values(password=hashed_password))
        await session.commit()
        return res.rowcount

# posts

def _post_columns():
    return (
        Post.post_id, Post.title, Post.content, Post.author_id, Post.created_at,
        User.username.label('author_name'),
    )

async def list_posts(sessions: async_sessionmaker, offset: int, limit: int):
    """One page of posts, newest first, plus the total post count."""
    async with sessions() as session:
        q = await session.execute(
            select(*_post_columns())
            .outerjoin(User, Post.author_id == User.user_id)
            .order_by(Post.created_at.desc(), Post.post_id.desc())
            .offset(offset)
            .limit(limit)
        )
        rows = q.mappings().all()
        total = await session.scalar(select(func.count()).select_from(Post))
        return rows, total

async def get_post(sessions: async_sessionmaker, post_id: int):
    async with sessions() as session:
        q = await session.execute(
            select(*_post_columns())
            .outerjoin(User, Post.author_id == User.user_id)
            .where(Post.post_id == post_id)
        )
        return q.mappings().first()

async def get_post_owner(sessions: async_sessionmaker, post_id: int):
    """Row holding the post's author_id, or None when the post does not exist."""
    async with sessions() as session:
        q = await session.execute(select(Post.author_id).where(Post.post_id == post_id))
        return q.first()

async def post_exists(sessions: async_sessionmaker, post_id: int) -> bool:
    async with sessions() as session:
        q = await session.execute(select(Post.post_id).where(Post.post_id == post_id))
        return q.first() is not None

async def create_post(sessions: async_sessionmaker, title: str, content: str, author_id: int) -> int:
    async with sessions() as session:
        res = await session.execute(
            insert(Post).values(title=title, content=content, author_id=author_id, created_at=func.now())
        )
        await session.commit()
        return res.rowcount

async def delete_post_with_comments(sessions: async_sessionmaker, post_id: int):
    # both deletes commit together or not at all
    async with sessions() as session:
        async with session.begin():
            await session.execute(delete(Comment).where(Comment.post_id == post_id))
            await session.execute(delete(Post).where(Post.post_id == post_id))

async def list_posts_by_author(sessions: async_sessionmaker, author_id: int):
    async with sessions() as session:
        q = await session.execute(
            select(Post.post_id, Post.title, Post.content, Post.created_at)
            .where(Post.author_id == author_id)
            .order_by(Post.created_at.desc(), Post.post_id.desc())
        )
        return q.mappings().all()

# comments

async def list_comments(sessions: async_sessionmaker, post_id: int):
    async with sessions() as session:
        q = await session.execute(
            select(
                Comment.comment_id, Comment.content, Comment.post_id, Comment.author_id, Comment.created_at,
                User.username.label('author_name'),
            )
            .outerjoin(User, Comment.author_id == User.user_id)
            .where(Comment.post_id == post_id)
            .order_by(Comment.created_at.desc(), Comment.comment_id.desc())
        )
        return q.mappings().all()

async def get_comment_owner(sessions: async_sessionmaker, comment_id: int):
    async with sessions() as session:
        q = await session.execute(select(Comment.author_id).where(Comment.comment_id == comment_id))
        return q.first()

async def create_comment(sessions: async_sessionmaker, post_id: int, content: str, author_id: int) -> int:
    async with sessions() as session:
        res = await session.execute(
            insert(Comment).values(content=content, post_id=post_id, author_id=author_id, created_at=func.now())
        )
        await session.commit()
        return res.rowcount

async def delete_comment(sessions: async_sessionmaker, comment_id: int) -> int:
    async with sessions() as session:
        res = await session.execute(delete(Comment).where(Comment.comment_id == comment_id))
        await session.commit()
        return res.rowcount

async def list_comments_by_author(sessions: async_sessionmaker, author_id: int):
    async with sessions() as session:
        q = await session.execute(
            select(
                Comment.comment_id, Comment.content, Comment.post_id, Comment.created_at,
                Post.title.label('post_title'),
            )
            .outerjoin(Post, Comment.post_id == Post.post_id)
            .where(Comment.author_id == author_id)
            .order_by(Comment.created_at.desc(), Comment.comment_id.desc())
        )
        return q.mappings().all()
