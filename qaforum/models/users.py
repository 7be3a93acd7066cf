from sqlalchemy import Column, Integer, String, DateTime, func
from . import Base

ROLES = ('user', 'admin')

class User(Base):
    __tablename__ = 'users'
    user_id = Column(Integer, primary_key=True, index=True)
    # uniqueness is checked by a query before insert, not by the schema
    username = Column(String(50), index=True, nullable=False)
    password = Column(String(255), nullable=False)
    role = Column(String(10), nullable=False, default='user')
    created_at = Column(DateTime, server_default=func.now())
