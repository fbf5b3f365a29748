"""initial verification schema

Revision ID: base_0001
Revises:
Create Date: 2026-10-19 09:12:44.018311

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "base_0001"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "subject",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("slug", sa.String(length=200), nullable=False, unique=True),
    )
    op.create_table(
        "topic",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("slug", sa.String(length=200), nullable=False),
        sa.Column(
            "parent_topic_id",
            sa.Integer(),
            sa.ForeignKey("topic.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column("subject_id", sa.Integer(), sa.ForeignKey("subject.id"), nullable=False),
    )
    op.create_index("ix_topic_parent_topic_id", "topic", ["parent_topic_id"])

    op.create_table(
        "question",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("subject_id", sa.Integer(), sa.ForeignKey("subject.id"), nullable=True),
        sa.Column("current_revision_id", sa.Integer(), nullable=True),
        sa.Column("specification", sa.Text(), nullable=True),
        sa.Column("question_type", sa.String(length=32), nullable=True),
        sa.Column("level", sa.String(length=32), nullable=True),
        sa.Column("paper", sa.String(length=64), nullable=True),
        sa.Column("difficulty", sa.Integer(), nullable=True),
        sa.Column("is_staging", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("difficulty BETWEEN 1 AND 10", name="difficulty_range"),
    )
    op.create_table(
        "question_revision",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "question_id",
            sa.String(length=36),
            sa.ForeignKey("question.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_question_revision_question_id", "question_revision", ["question_id"])

    for table in ("question_part", "question_option"):
        extra = (
            [sa.Column("marks", sa.Integer(), nullable=True)]
            if table == "question_part"
            else [sa.Column("correct", sa.Boolean(), nullable=False, server_default=sa.false())]
        )
        op.create_table(
            table,
            sa.Column("id", sa.String(length=36), primary_key=True),
            sa.Column(
                "revision_id",
                sa.Integer(),
                sa.ForeignKey("question_revision.id", ondelete="CASCADE"),
                nullable=False,
            ),
            sa.Column("content", sa.Text(), nullable=False),
            sa.Column("markscheme", sa.Text(), nullable=True),
            sa.Column("order", sa.Integer(), nullable=False),
            *extra,
            sa.UniqueConstraint("revision_id", "order"),
        )

    op.create_table(
        "question_topic",
        sa.Column(
            "question_id",
            sa.String(length=36),
            sa.ForeignKey("question.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "topic_id", sa.Integer(), sa.ForeignKey("topic.id", ondelete="CASCADE"), primary_key=True
        ),
    )

    op.create_table(
        "question_verification",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("question_id", sa.String(length=36), sa.ForeignKey("question.id"), nullable=False),
        sa.Column(
            "reference_question_id",
            sa.String(length=36),
            sa.ForeignKey("question.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("approver_user_ids", sa.JSON(), nullable=False),
        sa.Column("rejected_user_ids", sa.JSON(), nullable=False),
        sa.Column("reference_source", sa.String(length=500), nullable=True),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="pending"),
        sa.Column("metadata", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "status IN ('pending','approved','rejected','needImage')", name="status_values"
        ),
    )
    op.create_index(
        "ix_question_verification_question_id", "question_verification", ["question_id"]
    )
    op.create_index("ix_question_verification_status", "question_verification", ["status"])
    op.create_index(
        "ix_question_verification_created_at", "question_verification", ["created_at"]
    )


def downgrade() -> None:
    op.drop_index("ix_question_verification_created_at", table_name="question_verification")
    op.drop_index("ix_question_verification_status", table_name="question_verification")
    op.drop_index("ix_question_verification_question_id", table_name="question_verification")
    op.drop_table("question_verification")
    op.drop_table("question_topic")
    op.drop_table("question_option")
    op.drop_table("question_part")
    op.drop_index("ix_question_revision_question_id", table_name="question_revision")
    op.drop_table("question_revision")
    op.drop_table("question")
    op.drop_index("ix_topic_parent_topic_id", table_name="topic")
    op.drop_table("topic")
    op.drop_table("subject")
