"""create_album_tables

Revision ID: 4b7d1e9a2c05
Revises:
Create Date: 2026-10-19 09:12:44.310592

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4b7d1e9a2c05'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create profiles, albums, album_members and album_invitations tables."""
    op.create_table('profiles',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=100), nullable=True),
        sa.Column('avatar_url', sa.String(length=500), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )

    op.create_table('albums',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_by', sa.UUID(), nullable=False),
        sa.Column('privacy_level', sa.String(length=20), nullable=False, server_default='private'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint("privacy_level IN ('private', 'public')", name='ck_albums_privacy_level'),
        sa.ForeignKeyConstraint(['created_by'], ['profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_albums_created_by', 'albums', ['created_by'], unique=False)

    op.create_table('album_members',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('album_id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False, server_default='viewer'),
        sa.Column('joined_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint("role IN ('admin', 'contributor', 'viewer')", name='ck_album_members_role'),
        sa.ForeignKeyConstraint(['album_id'], ['albums.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('album_id', 'user_id', name='uq_album_members_album_user'),
    )
    op.create_index('ix_album_members_user_id', 'album_members', ['user_id'], unique=False)

    op.create_table('album_invitations',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('album_id', sa.UUID(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('role', sa.String(length=20), nullable=False, server_default='viewer'),
        sa.Column('token', sa.String(length=255), nullable=False),
        sa.Column('invited_by', sa.UUID(), nullable=False),
        sa.Column('is_shareable', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('max_uses', sa.Integer(), nullable=True),
        sa.Column('uses_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('used_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint("role IN ('admin', 'contributor', 'viewer')", name='ck_album_invitations_role'),
        sa.CheckConstraint('max_uses IS NULL OR uses_count <= max_uses', name='ck_album_invitations_uses_within_max'),
        sa.CheckConstraint('max_uses IS NULL OR max_uses > 0', name='ck_album_invitations_max_uses_positive'),
        sa.ForeignKeyConstraint(['album_id'], ['albums.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['invited_by'], ['profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('token'),
    )
    # Supports the "active invitations for album" queries
    op.create_index(
        'ix_album_invitations_active',
        'album_invitations',
        ['album_id', 'is_shareable', 'used_at', 'expires_at'],
        unique=False,
    )
    # Supports pending invitations by recipient
    op.create_index('ix_album_invitations_email', 'album_invitations', ['email'], unique=False)


def downgrade() -> None:
    """Drop album tables."""
    op.drop_index('ix_album_invitations_email', table_name='album_invitations')
    op.drop_index('ix_album_invitations_active', table_name='album_invitations')
    op.drop_table('album_invitations')
    op.drop_index('ix_album_members_user_id', table_name='album_members')
    op.drop_table('album_members')
    op.drop_index('ix_albums_created_by', table_name='albums')
    op.drop_table('albums')
    op.drop_table('profiles')
