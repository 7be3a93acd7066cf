from pydantic import BaseModel, field_validator
from typing import List, Optional

from ..models.posts import TITLE_MAX_LENGTH

ANONYMOUS = 'anonymous'


class PostIn(BaseModel):
    title: str
    content: str
    author_id: int

    @field_validator('title')
    @classmethod
    def title_valid(cls, v):
        if not v.strip():
            raise ValueError('title must not be empty')
        if len(v) > TITLE_MAX_LENGTH:
            raise ValueError(f'title must be at most {TITLE_MAX_LENGTH} characters')
        return v

    @field_validator('content')
    @classmethod
    def content_not_empty(cls, v):
        if not v.strip():
            raise ValueError('content must not be empty')
        return v


class CommentIn(BaseModel):
    post_id: int
    content: str
    author_id: int

    @field_validator('content')
    @classmethod
    def content_not_empty(cls, v):
        if not v.strip():
            raise ValueError('content must not be empty')
        return v


class OperatorIn(BaseModel):
    operator_id: int


class AuthorOut(BaseModel):
    user_id: Optional[int]
    username: str

    @classmethod
    def build(cls, user_id, username):
        return cls(user_id=user_id, username=username or ANONYMOUS)


class PostOut(BaseModel):
    post_id: int
    title: str
    content: str
    author: AuthorOut
    created_at: str


class PaginationOut(BaseModel):
    currentPage: int
    pageSize: int
    totalPages: int
    totalPosts: int


class PostListData(BaseModel):
    posts: List[PostOut]
    pagination: PaginationOut


class PostListOut(BaseModel):
    success: bool = True
    data: PostListData


class PostDetailData(BaseModel):
    post: PostOut


class PostDetailOut(BaseModel):
    success: bool = True
    data: PostDetailData


class CommentOut(BaseModel):
    comment_id: int
    content: str
    post_id: int
    author: AuthorOut
    created_at: str


class CommentListData(BaseModel):
    comments: List[CommentOut]


class CommentListOut(BaseModel):
    success: bool = True
    data: CommentListData


# per-user listings for the profile page
class OwnPostOut(BaseModel):
    post_id: int
    title: str
    content: str
    created_at: str


class OwnPostsData(BaseModel):
    posts: List[OwnPostOut]


class OwnPostsOut(BaseModel):
    success: bool = True
    data: OwnPostsData


class OwnCommentOut(BaseModel):
    comment_id: int
    content: str
    post_id: Optional[int]
    post_title: Optional[str]
    created_at: str


class OwnCommentsData(BaseModel):
    comments: List[OwnCommentOut]


class OwnCommentsOut(BaseModel):
    success: bool = True
    data: OwnCommentsData
