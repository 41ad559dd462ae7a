# Create catalog and attempt tables for the assessment service

"""create assessment tables"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "a1c3e5f70001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "tests",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("course_id", sa.Integer(), nullable=True),
        sa.Column("lesson_id", sa.Integer(), nullable=True),
        sa.Column("created_by", sa.Integer(), nullable=True),
        sa.Column("time_limit_minutes", sa.Integer(), nullable=True),
        sa.Column("max_attempts", sa.Integer(), nullable=True),
        sa.Column("passing_score", sa.Float(), nullable=False),
        sa.Column("shuffle_questions", sa.Boolean(), nullable=False),
        sa.Column("shuffle_options", sa.Boolean(), nullable=False),
        sa.Column("show_results_immediately", sa.Boolean(), nullable=False),
        sa.Column("is_published", sa.Boolean(), nullable=False),
        sa.Column("available_from", sa.DateTime(), nullable=True),
        sa.Column("available_until", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_tests_id", "tests", ["id"])
    op.create_index("ix_tests_course_id", "tests", ["course_id"])
    op.create_index("ix_tests_lesson_id", "tests", ["lesson_id"])
    op.create_index("ix_tests_created_by", "tests", ["created_by"])

    op.create_table(
        "questions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("question_text", sa.Text(), nullable=False),
        sa.Column("question_type", sa.String(30), nullable=False),
        sa.Column("points", sa.Integer(), nullable=False),
        sa.Column("explanation", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_questions_id", "questions", ["id"])

    op.create_table(
        "question_options",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "question_id",
            sa.Integer(),
            sa.ForeignKey("questions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("option_text", sa.Text(), nullable=False),
        sa.Column("is_correct", sa.Boolean(), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=False),
    )
    op.create_index("ix_question_options_id", "question_options", ["id"])
    op.create_index(
        "ix_question_options_question_id", "question_options", ["question_id"]
    )

    op.create_table(
        "test_questions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "test_id",
            sa.Integer(),
            sa.ForeignKey("tests.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "question_id",
            sa.Integer(),
            sa.ForeignKey("questions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        sa.UniqueConstraint("test_id", "question_id"),
    )
    op.create_index("ix_test_questions_id", "test_questions", ["id"])
    op.create_index("ix_test_questions_test_id", "test_questions", ["test_id"])
    op.create_index("ix_test_questions_question_id", "test_questions", ["question_id"])

    op.create_table(
        "user_test_results",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column(
            "test_id",
            sa.Integer(),
            sa.ForeignKey("tests.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("attempt_number", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("total_points", sa.Integer(), nullable=False),
        sa.Column("earned_points", sa.Integer(), nullable=True),
        sa.Column("score", sa.Float(), nullable=True),
        sa.Column("is_passed", sa.Boolean(), nullable=True),
        sa.Column("started_at", sa.DateTime(), nullable=False),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        sa.Column("time_spent_minutes", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_user_test_results_id", "user_test_results", ["id"])
    op.create_index("ix_user_test_results_user_id", "user_test_results", ["user_id"])
    op.create_index("ix_user_test_results_test_id", "user_test_results", ["test_id"])
    op.create_index("ix_user_test_results_status", "user_test_results", ["status"])
    op.create_index(
        "uq_user_test_results_active",
        "user_test_results",
        ["user_id", "test_id"],
        unique=True,
        postgresql_where=sa.text("status = 'IN_PROGRESS'"),
        sqlite_where=sa.text("status = 'IN_PROGRESS'"),
    )

    op.create_table(
        "user_answers",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "test_result_id",
            sa.Integer(),
            sa.ForeignKey("user_test_results.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "question_id",
            sa.Integer(),
            sa.ForeignKey("questions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "selected_option_id",
            sa.Integer(),
            sa.ForeignKey("question_options.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("answer_text", sa.Text(), nullable=True),
        sa.Column("is_correct", sa.Boolean(), nullable=True),
        sa.Column("points_earned", sa.Integer(), nullable=False),
        sa.Column("answered_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_user_answers_id", "user_answers", ["id"])
    op.create_index("ix_user_answers_test_result_id", "user_answers", ["test_result_id"])


def downgrade():
    op.drop_table("user_answers")
    op.drop_index("uq_user_test_results_active", table_name="user_test_results")
    op.drop_table("user_test_results")
    op.drop_table("test_questions")
    op.drop_table("question_options")
    op.drop_table("questions")
    op.drop_table("tests")
