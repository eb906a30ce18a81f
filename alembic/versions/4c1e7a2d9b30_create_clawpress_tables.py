"""create_clawpress_tables

Revision ID: 4c1e7a2d9b30
Revises:
Create Date: 2026-02-14 10:12:41.208315

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '4c1e7a2d9b30'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_login', sa.String(length=60), nullable=False),
        sa.Column('user_email', sa.String(length=100), nullable=False),
        sa.Column('display_name', sa.String(length=250), nullable=False),
        sa.Column('role', sa.String(length=50), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_user_login', 'users', ['user_login'], unique=True)

    # Unique (user_id, name) makes create-if-absent atomic for the reserved name
    op.create_table(
        'application_passwords',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('app_id', sa.String(length=100), nullable=True),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('last_used_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_ip', sa.String(length=45), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_app_password_lookup', 'application_passwords', ['user_id', 'name'], unique=True
    )

    op.create_table(
        'posts',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('post_author', sa.Integer(), nullable=False),
        sa.Column('post_type', sa.String(length=20), nullable=False),
        sa.Column('post_title', sa.Text(), nullable=False),
        sa.Column('post_status', sa.String(length=20), nullable=False),
        sa.Column('post_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('post_mime_type', sa.String(length=100), nullable=True),
        sa.ForeignKeyConstraint(['post_author'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_posts_post_author', 'posts', ['post_author'])
    op.create_index('ix_posts_author_type', 'posts', ['post_author', 'post_type', 'post_status'])

    op.create_table(
        'postmeta',
        sa.Column('meta_id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('post_id', sa.Integer(), nullable=False),
        sa.Column('meta_key', sa.String(length=255), nullable=False),
        sa.Column('meta_value', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['post_id'], ['posts.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('meta_id'),
    )
    op.create_index('ix_postmeta_meta_key', 'postmeta', ['meta_key'])
    op.create_index('ix_postmeta_post_key', 'postmeta', ['post_id', 'meta_key'])

    op.create_table(
        'flash_state',
        sa.Column('key', sa.String(length=191), nullable=False),
        sa.Column('value', sa.JSON().with_variant(postgresql.JSONB(), 'postgresql'), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('key'),
    )
    op.create_index('ix_flash_state_expires_at', 'flash_state', ['expires_at'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_flash_state_expires_at', table_name='flash_state')
    op.drop_table('flash_state')
    op.drop_index('ix_postmeta_post_key', table_name='postmeta')
    op.drop_index('ix_postmeta_meta_key', table_name='postmeta')
    op.drop_table('postmeta')
    op.drop_index('ix_posts_author_type', table_name='posts')
    op.drop_index('ix_posts_post_author', table_name='posts')
    op.drop_table('posts')
    op.drop_index('ix_app_password_lookup', table_name='application_passwords')
    op.drop_table('application_passwords')
    op.drop_index('ix_users_user_login', table_name='users')
    op.drop_table('users')
