"""initial schema: users, chats, messages, game instances

Revision ID: 5c7d2a91b3e4
Revises:
Create Date: 2026-10-19 00:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5c7d2a91b3e4'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'user',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=64), nullable=False),
        sa.Column('password_hash', sa.String(length=256), nullable=False),
        sa.Column('biography', sa.Text(), nullable=False, server_default=''),
        sa.Column('date_joined', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_user_username'), 'user', ['username'], unique=True)

    op.create_table(
        'chat',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'chat_participant',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('chat_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['chat_id'], ['chat.id']),
        sa.ForeignKeyConstraint(['user_id'], ['user.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('chat_id', 'user_id', name='uq_chat_participant'),
    )
    op.create_index(op.f('ix_chat_participant_chat_id'), 'chat_participant', ['chat_id'], unique=False)
    op.create_index(op.f('ix_chat_participant_user_id'), 'chat_participant', ['user_id'], unique=False)

    op.create_table(
        'message',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('msg', sa.Text(), nullable=False),
        sa.Column('msg_from', sa.String(length=64), nullable=False),
        sa.Column('msg_date_time', sa.DateTime(), nullable=False),
        sa.Column('type', sa.String(length=16), nullable=False),
        sa.Column('chat_id', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['chat_id'], ['chat.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_message_msg_from'), 'message', ['msg_from'], unique=False)
    op.create_index(op.f('ix_message_chat_id'), 'message', ['chat_id'], unique=False)

    op.create_table(
        'game_instance',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('game_id', sa.String(length=36), nullable=False),
        sa.Column('game_type', sa.String(length=32), nullable=False),
        sa.Column('status', sa.String(length=32), nullable=False),
        sa.Column('players', sa.Text(), nullable=False),
        sa.Column('state', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_game_instance_game_id'), 'game_instance', ['game_id'], unique=True)
    op.create_index(op.f('ix_game_instance_game_type'), 'game_instance', ['game_type'], unique=False)
    op.create_index(op.f('ix_game_instance_status'), 'game_instance', ['status'], unique=False)


def downgrade():
    op.drop_index(op.f('ix_game_instance_status'), table_name='game_instance')
    op.drop_index(op.f('ix_game_instance_game_type'), table_name='game_instance')
    op.drop_index(op.f('ix_game_instance_game_id'), table_name='game_instance')
    op.drop_table('game_instance')
    op.drop_index(op.f('ix_message_chat_id'), table_name='message')
    op.drop_index(op.f('ix_message_msg_from'), table_name='message')
    op.drop_table('message')
    op.drop_index(op.f('ix_chat_participant_user_id'), table_name='chat_participant')
    op.drop_index(op.f('ix_chat_participant_chat_id'), table_name='chat_participant')
    op.drop_table('chat_participant')
    op.drop_table('chat')
    op.drop_index(op.f('ix_user_username'), table_name='user')
    op.drop_table('user')
