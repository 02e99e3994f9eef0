"""create chat tables

Revision ID: 20250101_0001
Revises:
Create Date: 2025-01-01 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20250101_0001'
down_revision = None
branch_labels = None
depends_on = None


def _base_columns() -> list[sa.Column]:
    """Columns shared by every table (BaseModel + SoftDeleteMixin)."""
    return [
        sa.Column('id', sa.String(length=64), primary_key=True, nullable=False),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text('CURRENT_TIMESTAMP'),
            comment='When the record was created'
        ),
        sa.Column(
            'updated_at',
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text('CURRENT_TIMESTAMP'),
            comment='When the record was last updated'
        ),
        sa.Column(
            'is_active',
            sa.Boolean(),
            nullable=False,
            server_default=sa.true(),
            comment='Soft delete flag'
        ),
    ]


def upgrade() -> None:
    """Create users, catalog, entitlement, chat and message tables."""

    op.create_table(
        'users',
        *_base_columns(),
        sa.Column('email', sa.String(length=255), nullable=False, comment='User email address - unique'),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('avatar_url', sa.String(length=1024), nullable=True),
        sa.Column('provider', sa.String(length=50), nullable=False, comment='Originating OAuth provider'),
        sa.Column('subscription', sa.String(length=20), nullable=False, server_default='free'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_is_active', 'users', ['is_active'])
    op.create_index('ix_users_email_is_active', 'users', ['email', 'is_active'])

    op.create_table(
        'agent_categories',
        *_base_columns(),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.String(length=1000), nullable=True),
        sa.Column('icon', sa.String(length=255), nullable=True),
        sa.Column('display_order', sa.Integer(), nullable=False, server_default='0'),
    )
    op.create_index('ix_agent_categories_name', 'agent_categories', ['name'])
    op.create_index('ix_agent_categories_is_active', 'agent_categories', ['is_active'])

    op.create_table(
        'agents',
        *_base_columns(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.String(length=2000), nullable=True),
        sa.Column('price', sa.Float(), nullable=False, server_default='0'),
        sa.Column('category_id', sa.String(length=64), nullable=False),
        sa.Column('model', sa.String(length=255), nullable=True, comment='Provider model id'),
        sa.Column('capabilities', sa.JSON(), nullable=True),
        sa.Column('system_prompt', sa.Text(), nullable=True),
        sa.Column('temperature', sa.Float(), nullable=True),
        sa.Column('max_tokens', sa.Integer(), nullable=True),
        sa.Column('is_free', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('icon', sa.String(length=255), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=True),
    )
    op.create_index('ix_agents_category_id', 'agents', ['category_id'])
    op.create_index('ix_agents_is_active', 'agents', ['is_active'])
    op.create_index('ix_agents_category_id_name', 'agents', ['category_id', 'name'])

    op.create_table(
        'user_agents',
        *_base_columns(),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('agent_id', sa.String(length=64), nullable=False),
        sa.Column('purchased_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=True, comment='Null means no expiry'),
        sa.Column('payment_ref', sa.String(length=255), nullable=True),
        sa.Column('message_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_used_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_user_agents_user_id', 'user_agents', ['user_id'])
    op.create_index('ix_user_agents_agent_id', 'user_agents', ['agent_id'])
    op.create_index('ix_user_agents_is_active', 'user_agents', ['is_active'])
    op.create_index(
        'ix_user_agents_user_agent_active',
        'user_agents',
        ['user_id', 'agent_id', 'is_active'],
    )

    op.create_table(
        'chats',
        *_base_columns(),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('agent_id', sa.String(length=64), nullable=False),
        sa.Column('message_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_message_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_chats_user_id', 'chats', ['user_id'])
    op.create_index('ix_chats_agent_id', 'chats', ['agent_id'])
    op.create_index('ix_chats_is_active', 'chats', ['is_active'])
    op.create_index('ix_chats_last_message_at', 'chats', ['last_message_at'])
    op.create_index('ix_chats_user_id_is_active', 'chats', ['user_id', 'is_active'])

    op.create_table(
        'messages',
        *_base_columns(),
        sa.Column('chat_id', sa.String(length=64), nullable=False),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False, comment='user, assistant or system'),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('message_metadata', sa.JSON(), nullable=True),
    )
    op.create_index('ix_messages_chat_id', 'messages', ['chat_id'])
    op.create_index('ix_messages_user_id', 'messages', ['user_id'])
    op.create_index('ix_messages_is_active', 'messages', ['is_active'])
    op.create_index('ix_messages_chat_id_created_at', 'messages', ['chat_id', 'created_at'])


def downgrade() -> None:
    """Drop every table created by this revision (indexes go with them)."""
    for table in ('messages', 'chats', 'user_agents', 'agents', 'agent_categories', 'users'):
        op.drop_table(table)
