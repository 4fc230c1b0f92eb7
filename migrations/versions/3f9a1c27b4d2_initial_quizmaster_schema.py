"""Initial quizmaster schema

Revision ID: 3f9a1c27b4d2
Revises:
Create Date: 2026-10-19 09:12:04.118532

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect

# revision identifiers, used by Alembic.
revision = '3f9a1c27b4d2'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    inspector = inspect(op.get_bind())
    tables = inspector.get_table_names()

    if 'users' not in tables:
        op.create_table('users',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('email', sa.String(length=255), nullable=False),
            sa.Column('password_hash', sa.String(length=255), nullable=False),
            sa.Column('name', sa.String(length=255), nullable=False),
            sa.Column('role', sa.String(length=20), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=False),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('ix_users_email', 'users', ['email'], unique=True)
        op.create_index('ix_users_role', 'users', ['role'], unique=False)

    if 'quizzes' not in tables:
        op.create_table('quizzes',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('title', sa.String(length=200), nullable=False),
            sa.Column('description', sa.Text(), nullable=True),
            sa.Column('time_limit', sa.Integer(), nullable=False),
            sa.Column('published', sa.Boolean(), nullable=False),
            sa.Column('teacher_id', sa.Integer(), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=False),
            sa.Column('deleted_at', sa.DateTime(), nullable=True),
            sa.ForeignKeyConstraint(['teacher_id'], ['users.id']),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('ix_quizzes_published', 'quizzes', ['published'], unique=False)
        op.create_index('ix_quizzes_teacher_id', 'quizzes', ['teacher_id'], unique=False)
        op.create_index('ix_quizzes_created_at', 'quizzes', ['created_at'], unique=False)
        op.create_index('ix_quizzes_deleted_at', 'quizzes', ['deleted_at'], unique=False)
        op.create_index('ix_quizzes_teacher_deleted', 'quizzes', ['teacher_id', 'deleted_at'], unique=False)

    if 'questions' not in tables:
        op.create_table('questions',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('quiz_id', sa.Integer(), nullable=False),
            sa.Column('text', sa.Text(), nullable=False),
            sa.Column('options', sa.JSON(), nullable=False),
            sa.Column('correct_option', sa.Integer(), nullable=False),
            sa.Column('explanation', sa.Text(), nullable=True),
            sa.Column('order', sa.Integer(), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('deleted_at', sa.DateTime(), nullable=True),
            sa.ForeignKeyConstraint(['quiz_id'], ['quizzes.id']),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('ix_questions_quiz_id', 'questions', ['quiz_id'], unique=False)
        op.create_index('ix_questions_deleted_at', 'questions', ['deleted_at'], unique=False)
        op.create_index('ix_questions_quiz_order', 'questions', ['quiz_id', 'order'], unique=False)

    if 'submissions' not in tables:
        op.create_table('submissions',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('quiz_id', sa.Integer(), nullable=False),
            sa.Column('total_questions', sa.Integer(), nullable=False),
            sa.Column('started_at', sa.DateTime(), nullable=False),
            sa.Column('score', sa.Integer(), nullable=True),
            sa.Column('submitted_at', sa.DateTime(), nullable=True),
            sa.Column('in_progress', sa.Boolean(), nullable=True),
            sa.ForeignKeyConstraint(['user_id'], ['users.id']),
            sa.ForeignKeyConstraint(['quiz_id'], ['quizzes.id']),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('user_id', 'quiz_id', 'in_progress', name='uq_submission_open_attempt')
        )
        op.create_index('ix_submissions_user_id', 'submissions', ['user_id'], unique=False)
        op.create_index('ix_submissions_quiz_id', 'submissions', ['quiz_id'], unique=False)
        op.create_index('ix_submissions_started_at', 'submissions', ['started_at'], unique=False)
        op.create_index('ix_submissions_submitted_at', 'submissions', ['submitted_at'], unique=False)

    if 'answers' not in tables:
        op.create_table('answers',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('submission_id', sa.Integer(), nullable=False),
            sa.Column('question_id', sa.Integer(), nullable=False),
            sa.Column('selected_option', sa.Integer(), nullable=False),
            sa.Column('is_correct', sa.Boolean(), nullable=False),
            sa.ForeignKeyConstraint(['submission_id'], ['submissions.id']),
            sa.ForeignKeyConstraint(['question_id'], ['questions.id']),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('submission_id', 'question_id', name='uq_answer_submission_question')
        )
        op.create_index('ix_answers_submission_id', 'answers', ['submission_id'], unique=False)
        op.create_index('ix_answers_question_id', 'answers', ['question_id'], unique=False)


def downgrade():
    op.drop_table('answers')
    op.drop_table('submissions')
    op.drop_table('questions')
    op.drop_table('quizzes')
    op.drop_table('users')
