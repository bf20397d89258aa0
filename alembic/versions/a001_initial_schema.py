"""Initial schema creation

Revision ID: a001
Revises: 
Create Date: 2025-09-01

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'a001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create initial database schema."""

    # Create users table
    op.create_table(
        'users',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('username', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('first_name', sa.String(255), nullable=True),
        sa.Column('last_name', sa.String(255), nullable=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('username')
    )
    op.create_index('ix_users_username', 'users', ['username'])

    # Create shifts table; date is the UTC start instant
    op.create_table(
        'shifts',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.Column('credit_tips', sa.Float(), nullable=False),
        sa.Column('cash_tips', sa.Float(), nullable=False),
        sa.Column('tipout', sa.Float(), nullable=False),
        sa.Column('hours_worked', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'])
    )
    op.create_index('ix_shifts_user_id', 'shifts', ['user_id'])
    op.create_index('ix_shifts_date', 'shifts', ['date'])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table('shifts')
    op.drop_table('users')
