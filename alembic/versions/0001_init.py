"""initial

Revision ID: 0001_init
Revises: 
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '0001_init'
down_revision = None
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table('user',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('email', sa.Text(), nullable=True, unique=True),
        sa.Column('password_hash', sa.Text(), nullable=True),
        sa.Column('is_anonymous', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
    )
    op.create_table('outfit',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('user.id', ondelete='CASCADE'), nullable=False),
        sa.Column('image_ref', sa.Text(), nullable=False),
        sa.Column('category', sa.String(length=16), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('style_analysis', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column('mood', sa.Text(), nullable=True),
        sa.Column('occasion', sa.Text(), nullable=True),
        sa.Column('season', sa.String(length=16), nullable=True),
        sa.Column('favorite', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.CheckConstraint('rating BETWEEN 1 AND 10', name='ck_outfit_rating_range'),
        sa.CheckConstraint(
            "category IN ('casual','formal','street','party','business','athletic')",
            name='ck_outfit_category',
        ),
    )
    op.create_index('ix_outfit_user_created', 'outfit', ['user_id', 'created_at'])


def downgrade() -> None:
    op.drop_index('ix_outfit_user_created', table_name='outfit')
    op.drop_table('outfit')
    op.drop_table('user')
