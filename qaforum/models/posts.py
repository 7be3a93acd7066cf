from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, func
from . import Base

TITLE_MAX_LENGTH = 200

class Post(Base):
    __tablename__ = 'posts'
    post_id = Column(Integer, primary_key=True, index=True)
    title = Column(String(TITLE_MAX_LENGTH), nullable=False)
    content = Column(Text, nullable=False)
    author_id = Column(Integer, ForeignKey('users.user_id'))
    created_at = Column(DateTime, server_default=func.now())
