"""create game_session table

Revision ID: 4b7d9e1c2a60
Revises:
Create Date: 2026-10-19 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '4b7d9e1c2a60'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    if 'game_session' in set(insp.get_table_names()):
        return
    op.create_table(
        'game_session',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('game_code', sa.String(length=4), nullable=False),
        sa.Column('difficulty', sa.String(length=16), nullable=False),
        sa.Column('phase', sa.String(length=32), nullable=False),
        sa.Column('level', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('game_session') as batch_op:
        batch_op.create_index(batch_op.f('ix_game_session_game_code'), ['game_code'], unique=True)


def downgrade():
    with op.batch_alter_table('game_session') as batch_op:
        batch_op.drop_index(batch_op.f('ix_game_session_game_code'))
    op.drop_table('game_session')
