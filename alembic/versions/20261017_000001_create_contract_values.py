"""create contract_values table

Revision ID: 20261017_000001
Revises: 
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261017_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create contract_values table."""
    op.create_table(
        'contract_values',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('value', sa.Text(), nullable=False),
        sa.Column(
            'timestamp',
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column('tx_hash', sa.Text(), nullable=True),
        sa.Column('source', sa.String(20), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_index('idx_contract_values_timestamp', 'contract_values', ['timestamp'])


def downgrade() -> None:
    """Drop contract_values table."""
    op.drop_index('idx_contract_values_timestamp', table_name='contract_values')
    op.drop_table('contract_values')
