from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, func
from . import Base

class Comment(Base):
    __tablename__ = 'comments'
    comment_id = Column(Integer, primary_key=True, index=True)
    content = Column(Text, nullable=False)
    post_id = Column(Integer, ForeignKey('posts.post_id'), index=True)
    author_id = Column(Integer, ForeignKey('users.user_id'), index=True)
    created_at = Column(DateTime, server_default=func.now())
