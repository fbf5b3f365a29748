from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import List, Optional

import sqlalchemy as sa
from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db import Base

VERIFICATION_STATUSES = ("pending", "approved", "rejected", "needImage")


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _new_id() -> str:
    return str(uuid.uuid4())


# questions <-> topics classification
question_topic = sa.Table(
    "question_topic",
    Base.metadata,
    sa.Column("question_id", String(36), ForeignKey("question.id", ondelete="CASCADE"), primary_key=True),
    sa.Column("topic_id", Integer, ForeignKey("topic.id", ondelete="CASCADE"), primary_key=True),
)


class Subject(Base):
    __tablename__ = "subject"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(200))
    slug: Mapped[str] = mapped_column(String(200), unique=True)


class Topic(Base):
    __tablename__ = "topic"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(200))
    slug: Mapped[str] = mapped_column(String(200))
    parent_topic_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("topic.id", ondelete="CASCADE"), nullable=True, index=True
    )
    subject_id: Mapped[int] = mapped_column(ForeignKey("subject.id"))

    child_topics: Mapped[List["Topic"]] = relationship(order_by="Topic.id")


class Question(Base):
    __tablename__ = "question"
    __table_args__ = (
        sa.CheckConstraint("difficulty BETWEEN 1 AND 10", name="difficulty_range"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    subject_id: Mapped[Optional[int]] = mapped_column(ForeignKey("subject.id"), nullable=True)
    # points at question_revision.id; no FK to avoid a table cycle
    current_revision_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    specification: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    question_type: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    level: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    paper: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    difficulty: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    is_staging: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    subject: Mapped[Optional[Subject]] = relationship()
    topics: Mapped[List[Topic]] = relationship(secondary=question_topic, order_by="Topic.id")


class QuestionRevision(Base):
    __tablename__ = "question_revision"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    question_id: Mapped[str] = mapped_column(ForeignKey("question.id", ondelete="CASCADE"), index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)


class QuestionPart(Base):
    __tablename__ = "question_part"
    __table_args__ = (sa.UniqueConstraint("revision_id", "order"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    revision_id: Mapped[int] = mapped_column(ForeignKey("question_revision.id", ondelete="CASCADE"))
    content: Mapped[str] = mapped_column(Text, default="")
    markscheme: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    marks: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    order: Mapped[int] = mapped_column("order", Integer)


class QuestionOption(Base):
    __tablename__ = "question_option"
    __table_args__ = (sa.UniqueConstraint("revision_id", "order"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    revision_id: Mapped[int] = mapped_column(ForeignKey("question_revision.id", ondelete="CASCADE"))
    content: Mapped[str] = mapped_column(Text, default="")
    correct: Mapped[bool] = mapped_column(Boolean, default=False)
    order: Mapped[int] = mapped_column("order", Integer)
    markscheme: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class QuestionVerification(Base):
    __tablename__ = "question_verification"
    __table_args__ = (
        sa.CheckConstraint(
            "status IN ('pending','approved','rejected','needImage')", name="status_values"
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    question_id: Mapped[str] = mapped_column(ForeignKey("question.id"), index=True)
    reference_question_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("question.id", ondelete="SET NULL"), nullable=True
    )
    # append-only reviewer audit trails
    approver_user_ids: Mapped[list] = mapped_column(JSON, default=list)
    rejected_user_ids: Mapped[list] = mapped_column(JSON, default=list)
    reference_source: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    status: Mapped[str] = mapped_column(String(16), default="pending", index=True)
    # "metadata" is reserved on declarative classes
    meta: Mapped[Optional[dict]] = mapped_column("metadata", JSON(none_as_null=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )
