"""baseline - exercises, workout blueprints, generation requests

Revision ID: 3f1c2a9b7d4e
Revises:
Create Date: 2026-10-19 09:12:40.118204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9b7d4e'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSONType = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def upgrade() -> None:
    op.create_table(
        'exercises',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('muscle_group', sa.String(), nullable=True),
        sa.Column('equipment', sa.String(), nullable=True),
        sa.Column('is_public', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_exercises_name'), 'exercises', ['name'], unique=False)

    op.create_table(
        'workout_blueprints',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('spec_hash', sa.String(length=64), nullable=False),
        sa.Column('routine_data', JSONType, nullable=False,
                  comment='Routine snapshot (exercise ids, order, sets, reps, rest)'),
        sa.Column('usage_count', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('last_used_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_workout_blueprints_spec_hash'), 'workout_blueprints', ['spec_hash'], unique=True)
    op.create_index(op.f('ix_workout_blueprints_last_used_at'), 'workout_blueprints', ['last_used_at'], unique=False)

    op.create_table(
        'generation_requests',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('spec_hash', sa.String(length=64), nullable=False),
        sa.Column('blueprint_id', sa.String(length=36), nullable=True),
        sa.Column('request_data', JSONType, nullable=False),
        sa.Column('idempotency_key', sa.String(), nullable=True),
        sa.Column('result', JSONType, nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('error', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['blueprint_id'], ['workout_blueprints.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_generation_requests_user_id'), 'generation_requests', ['user_id'], unique=False)
    op.create_index(op.f('ix_generation_requests_idempotency_key'), 'generation_requests', ['idempotency_key'], unique=False)
    op.create_index(op.f('ix_generation_requests_status'), 'generation_requests', ['status'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_generation_requests_status'), table_name='generation_requests')
    op.drop_index(op.f('ix_generation_requests_idempotency_key'), table_name='generation_requests')
    op.drop_index(op.f('ix_generation_requests_user_id'), table_name='generation_requests')
    op.drop_table('generation_requests')
    op.drop_index(op.f('ix_workout_blueprints_last_used_at'), table_name='workout_blueprints')
    op.drop_index(op.f('ix_workout_blueprints_spec_hash'), table_name='workout_blueprints')
    op.drop_table('workout_blueprints')
    op.drop_index(op.f('ix_exercises_name'), table_name='exercises')
    op.drop_table('exercises')
