"""Initial schema - inventory items, sync metadata and sync runs

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSONType = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def upgrade() -> None:
    op.create_table(
        'inventory_items',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('wholecell_id', sa.Integer(), nullable=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('sku', sa.String(), nullable=False),
        sa.Column('condition', sa.String(), nullable=False),
        sa.Column('status', sa.String(), nullable=False, server_default='new'),
        sa.Column('listed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('details', JSONType, nullable=False),
        sa.Column('photos', JSONType, nullable=False),
        sa.Column('listing', JSONType, nullable=True),
        sa.Column('sale_price', sa.Float(), nullable=True),
        sa.Column('total_price_paid', sa.Float(), nullable=True),
        sa.Column('warehouse', sa.String(), nullable=True),
        sa.Column('location', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('last_updated', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_inventory_items_wholecell_id', 'inventory_items', ['wholecell_id'], unique=True)
    op.create_index('ix_inventory_items_status', 'inventory_items', ['status'])

    op.create_table(
        'sync_metadata',
        sa.Column('key', sa.String(), nullable=False),
        sa.Column('value', sa.String(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('key'),
    )

    op.create_table(
        'sync_runs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('source', sa.String(), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('finished_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('duration_seconds', sa.Float(), nullable=True),
        sa.Column('synced', sa.Integer(), nullable=True),
        sa.Column('errors', sa.Integer(), nullable=True),
        sa.Column('total', sa.Integer(), nullable=True),
        sa.Column('since', sa.String(), nullable=True),
        sa.Column('checkpoint_advanced', sa.Boolean(), nullable=True),
        sa.Column('message', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_sync_runs_id', 'sync_runs', ['id'])
    op.create_index('ix_sync_runs_source', 'sync_runs', ['source'])
    op.create_index('ix_sync_runs_started_at', 'sync_runs', ['started_at'])


def downgrade() -> None:
    op.drop_index('ix_sync_runs_started_at', table_name='sync_runs')
    op.drop_index('ix_sync_runs_source', table_name='sync_runs')
    op.drop_index('ix_sync_runs_id', table_name='sync_runs')
    op.drop_table('sync_runs')
    op.drop_table('sync_metadata')
    op.drop_index('ix_inventory_items_status', table_name='inventory_items')
    op.drop_index('ix_inventory_items_wholecell_id', table_name='inventory_items')
    op.drop_table('inventory_items')
