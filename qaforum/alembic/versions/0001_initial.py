"""initial

Revision ID: 0001
Revises: 
Create Date: 2026-10-18 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = '0001'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table('users',
        sa.Column('user_id', sa.Integer, primary_key=True),
        sa.Column('username', sa.String(50), nullable=False),
        sa.Column('password', sa.String(255), nullable=False),
        sa.Column('role', sa.String(10), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now())
    )
    op.create_index('ix_users_username', 'users', ['username'])
    op.create_table('posts',
        sa.Column('post_id', sa.Integer, primary_key=True),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('author_id', sa.Integer, sa.ForeignKey('users.user_id')),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now())
    )
    op.create_table('comments',
        sa.Column('comment_id', sa.Integer, primary_key=True),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('post_id', sa.Integer, sa.ForeignKey('posts.post_id')),
        sa.Column('author_id', sa.Integer, sa.ForeignKey('users.user_id')),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now())
    )
    op.create_index('ix_comments_post_id', 'comments', ['post_id'])
    op.create_index('ix_comments_author_id', 'comments', ['author_id'])

def downgrade():
    op.drop_table('comments')
    op.drop_table('posts')
    op.drop_table('users')
