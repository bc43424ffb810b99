"""create account, bingo_game and player tables

Revision ID: a1c0b1n60001
Revises:
Create Date: 2026-10-16 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'a1c0b1n60001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    existing_tables = set(insp.get_table_names())

    if 'account' not in existing_tables:
        op.create_table(
            'account',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('holder', sa.String(length=64), nullable=False),
            sa.Column('balance', sa.BigInteger(), nullable=False, server_default='0'),
            sa.UniqueConstraint('holder'),
        )
        op.create_index('ix_account_holder', 'account', ['holder'])

    if 'bingo_game' not in existing_tables:
        op.create_table(
            'bingo_game',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('creator', sa.String(length=64), nullable=False),
            sa.Column('entry_fee', sa.BigInteger(), nullable=False),
            sa.Column('join_duration', sa.Integer(), nullable=False),
            sa.Column('turn_duration', sa.Integer(), nullable=False),
            sa.Column('start_time', sa.Float(), nullable=False),
            sa.Column('last_draw_time', sa.Float(), nullable=False),
            sa.Column('end_time', sa.Float(), nullable=False, server_default='0'),
            sa.Column('pot', sa.BigInteger(), nullable=False, server_default='0'),
            sa.Column('winner', sa.String(length=64), nullable=True),
            sa.Column('cancelled', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('drawn_numbers', sa.Text(), nullable=False, server_default='[]'),
        )
        op.create_index('ix_bingo_game_creator', 'bingo_game', ['creator'])

    if 'player' not in existing_tables:
        op.create_table(
            'player',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('game_id', sa.Integer(), sa.ForeignKey('bingo_game.id'), nullable=False),
            sa.Column('participant', sa.String(length=64), nullable=False),
            sa.Column('board', sa.Text(), nullable=False),
            sa.Column('joined_at', sa.Float(), nullable=False),
            sa.UniqueConstraint('game_id', 'participant', name='uq_player_game_participant'),
        )
        op.create_index('ix_player_game_id', 'player', ['game_id'])


def downgrade():
    op.drop_index('ix_player_game_id', table_name='player')
    op.drop_table('player')
    op.drop_index('ix_bingo_game_creator', table_name='bingo_game')
    op.drop_table('bingo_game')
    op.drop_index('ix_account_holder', table_name='account')
    op.drop_table('account')
