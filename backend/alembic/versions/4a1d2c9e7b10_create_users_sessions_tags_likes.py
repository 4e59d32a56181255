"""create users, sessions, session tags and likes

Revision ID: 4a1d2c9e7b10
Revises:
Create Date: 2026-10-18 09:12:40.118204

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# define the enum types once so we can create/drop them explicitly
user_role = postgresql.ENUM('user', 'admin', name='user_role', create_type=False)
session_status = postgresql.ENUM('draft', 'published', name='session_status', create_type=False)
session_difficulty = postgresql.ENUM('beginner', 'intermediate', 'advanced', name='session_difficulty', create_type=False)
session_category = postgresql.ENUM(
    'yoga', 'meditation', 'fitness', 'wellness', 'breathing', 'stretching', 'other',
    name='session_category', create_type=False,
)
ENUMS = (user_role, session_status, session_difficulty, session_category)


# revision identifiers, used by Alembic.
revision: str = '4a1d2c9e7b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # 1) enum types
    for enum_type in ENUMS:
        enum_type.create(op.get_bind(), checkfirst=True)

    # 2) users
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('role', user_role, nullable=False, server_default='user'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    # 3) sessions
    op.create_table(
        'sessions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('json_file_url', sa.String(length=2048), nullable=True),
        sa.Column('status', session_status, nullable=False, server_default='draft'),
        sa.Column('duration', sa.String(length=50), nullable=False, server_default='30 min'),
        sa.Column('difficulty', session_difficulty, nullable=False, server_default='beginner'),
        sa.Column('category', session_category, nullable=False, server_default='wellness'),
        sa.Column('views', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_featured', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
    )
    op.create_index('ix_sessions_user_id', 'sessions', ['user_id'])
    op.create_index('ix_sessions_user_status', 'sessions', ['user_id', 'status'])
    op.create_index('ix_sessions_status_created', 'sessions', ['status', 'created_at'])

    # 4) tags: one row per (session, tag), position keeps the author's order
    op.create_table(
        'session_tags',
        sa.Column('session_id', sa.Integer(), sa.ForeignKey('sessions.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('tag', sa.String(length=64), primary_key=True),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
    )
    op.create_index('ix_session_tags_tag', 'session_tags', ['tag'])

    # 5) likes: membership set
    op.create_table(
        'session_likes',
        sa.Column('session_id', sa.Integer(), sa.ForeignKey('sessions.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
    )


def downgrade() -> None:
    # drop child tables in reverse order
    op.drop_table('session_likes')
    op.drop_index('ix_session_tags_tag', table_name='session_tags')
    op.drop_table('session_tags')
    op.drop_index('ix_sessions_status_created', table_name='sessions')
    op.drop_index('ix_sessions_user_status', table_name='sessions')
    op.drop_index('ix_sessions_user_id', table_name='sessions')
    op.drop_table('sessions')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_index('ix_users_id', table_name='users')
    op.drop_table('users')

    # finally drop enum types
    for enum_type in reversed(ENUMS):
        enum_type.drop(op.get_bind(), checkfirst=True)
