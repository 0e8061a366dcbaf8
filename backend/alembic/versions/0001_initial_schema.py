"""Initial schema: users, tests and questions, solutions, subscriptions

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('full_name', sa.String(255), nullable=True),
        sa.Column('email', sa.String(256), nullable=False),
        sa.Column('role', sa.String(16), nullable=False, server_default='USER'),
        sa.Column('is_active', sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column('is_premium', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('premium_expiration_date', sa.DateTime, nullable=True),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime, nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'tests',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('is_active', sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column('is_premium', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        'closed_questions',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('test_id', sa.Uuid(as_uuid=True), sa.ForeignKey('tests.id', ondelete='CASCADE'), nullable=False),
        sa.Column('text', sa.String(1000), nullable=False),
        sa.Column('points', sa.Integer, nullable=False, server_default='1'),
        sa.Column('position', sa.Integer, nullable=False, server_default='0'),
    )
    op.create_index('ix_closed_questions_test_id', 'closed_questions', ['test_id'])

    op.create_table(
        'answer_options',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('question_id', sa.Uuid(as_uuid=True), sa.ForeignKey('closed_questions.id', ondelete='CASCADE'), nullable=False),
        sa.Column('text', sa.String(1000), nullable=False),
        sa.Column('order_index', sa.Integer, nullable=False),
        sa.Column('is_correct', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.UniqueConstraint('question_id', 'order_index', name='uq_answer_option_order'),
    )

    op.create_table(
        'open_questions',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('test_id', sa.Uuid(as_uuid=True), sa.ForeignKey('tests.id', ondelete='CASCADE'), nullable=False),
        sa.Column('text', sa.Text, nullable=False),
        sa.Column('points', sa.Integer, nullable=False, server_default='1'),
        sa.Column('correct_answer', sa.Text, nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime, nullable=True),
    )
    op.create_index('ix_open_questions_test_id', 'open_questions', ['test_id'])

    op.create_table(
        'user_solutions',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('user_id', sa.Uuid(as_uuid=True), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('test_id', sa.Uuid(as_uuid=True), sa.ForeignKey('tests.id'), nullable=False),
        sa.Column('started_at', sa.DateTime, nullable=False),
        sa.Column('submitted_at', sa.DateTime, nullable=False),
        sa.Column('completed_at', sa.DateTime, nullable=False),
        sa.Column('score', sa.SmallInteger, nullable=False),
        sa.Column('correct_count', sa.Integer, nullable=False, server_default='0'),
        sa.Column('total_closed', sa.Integer, nullable=False, server_default='0'),
        sa.Column('total_points', sa.Integer, nullable=False, server_default='0'),
        sa.Column('earned_points', sa.Integer, nullable=False, server_default='0'),
        sa.Column('has_open_answers', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.CheckConstraint('score BETWEEN 0 AND 100', name='ck_user_solutions_score_range'),
    )
    op.create_index('ix_user_solutions_user_submitted', 'user_solutions', ['user_id', 'submitted_at'])

    op.create_table(
        'user_answers',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('user_solution_id', sa.Uuid(as_uuid=True), sa.ForeignKey('user_solutions.id', ondelete='CASCADE'), nullable=False),
        sa.Column('question_id', sa.Uuid(as_uuid=True), sa.ForeignKey('closed_questions.id'), nullable=False),
        sa.Column('position', sa.Integer, nullable=False, server_default='0'),
        sa.Column('selected_option_index', sa.SmallInteger, nullable=False),
        sa.Column('correct_option_index', sa.SmallInteger, nullable=False),
        sa.Column('is_correct', sa.Boolean, nullable=False),
        sa.Column('points_earned', sa.Integer, nullable=True),
    )
    op.create_index('ix_user_answers_solution_id', 'user_answers', ['user_solution_id'])

    op.create_table(
        'subscriptions',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('user_id', sa.Uuid(as_uuid=True), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('currency', sa.String(3), nullable=False, server_default='AZN'),
        sa.Column('start_date', sa.DateTime, nullable=False),
        sa.Column('end_date', sa.DateTime, nullable=False),
        sa.Column('payment_id', sa.String(64), nullable=False),
        sa.Column('payment_status', sa.String(16), nullable=False, server_default='PENDING'),
        sa.Column('payment_error', sa.String(255), nullable=True),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime, nullable=True),
        sa.UniqueConstraint('payment_id', name='uq_subscriptions_payment_id'),
        sa.CheckConstraint(
            "payment_status IN ('PENDING', 'SUCCESS', 'FAILED')",
            name='ck_subscriptions_payment_status',
        ),
    )
    op.create_index('ix_subscriptions_user_created', 'subscriptions', ['user_id', 'created_at'])
    op.create_index('ix_subscriptions_end_date', 'subscriptions', ['end_date'])


def downgrade() -> None:
    op.drop_index('ix_subscriptions_end_date', table_name='subscriptions')
    op.drop_index('ix_subscriptions_user_created', table_name='subscriptions')
    op.drop_table('subscriptions')

    op.drop_index('ix_user_answers_solution_id', table_name='user_answers')
    op.drop_table('user_answers')

    op.drop_index('ix_user_solutions_user_submitted', table_name='user_solutions')
    op.drop_table('user_solutions')

    op.drop_index('ix_open_questions_test_id', table_name='open_questions')
    op.drop_table('open_questions')

    op.drop_table('answer_options')

    op.drop_index('ix_closed_questions_test_id', table_name='closed_questions')
    op.drop_table('closed_questions')

    op.drop_table('tests')

    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
