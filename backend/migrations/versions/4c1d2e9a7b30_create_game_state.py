"""create game_state table

Revision ID: 4c1d2e9a7b30
Revises:
Create Date: 2026-10-18 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '4c1d2e9a7b30'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    # Deployments that started with AUTO_CREATE_TABLES already have the table
    if 'game_state' in insp.get_table_names():
        return
    op.create_table(
        'game_state',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('key', sa.String(length=64), nullable=False),
        sa.Column('payload', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('game_state') as batch_op:
        batch_op.create_index(batch_op.f('ix_game_state_key'), ['key'], unique=True)


def downgrade():
    with op.batch_alter_table('game_state') as batch_op:
        batch_op.drop_index(batch_op.f('ix_game_state_key'))
    op.drop_table('game_state')
