"""Read side of the verification queue: filtered listing, detail assembly, topic counts."""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import String, and_, cast, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, aliased

from errors import NotFoundError, StoreUnavailableError
from models import (
    VERIFICATION_STATUSES,
    Question,
    QuestionOption,
    QuestionPart,
    QuestionVerification,
    Subject,
    Topic,
    question_topic,
)
from schemas.questions import QuestionOptionOut, QuestionOut, QuestionPartOut, SubjectOut, TopicOut
from schemas.verifications import (
    VerificationDetailOut,
    VerificationFilters,
    VerificationListOut,
    VerificationOut,
)

logger = logging.getLogger("question-verification.queries")

DEFAULT_BATCH_SIZE = int(os.getenv("VERIFICATION_BATCH_SIZE", "50"))
MAX_BATCH_SIZE = 200
CHALLENGE_TRUE = ("true", "1")


# --- Predicate building ---------------------------------------------------------


def _parse_difficulty(raw: Any) -> Optional[int]:
    if raw is None or raw == "" or raw == "all":
        return None
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return None
    return value if 1 <= value <= 10 else None


def build_predicates(filters: VerificationFilters) -> List[Any]:
    """
    Turn the filter state into a list of WHERE clauses over the
    verification/question join. Every active filter contributes one clause and
    they are ANDed together; unknown values contribute nothing.
    """
    conds: List[Any] = []

    if filters.status in VERIFICATION_STATUSES:
        conds.append(QuestionVerification.status == filters.status)

    difficulty = _parse_difficulty(filters.difficulty)
    if difficulty is not None:
        conds.append(Question.difficulty == difficulty)

    source = (filters.reference_source or "").strip()
    if source:
        conds.append(QuestionVerification.reference_source.icontains(source, autoescape=True))

    # compared as text so non-boolean values never break the query; SQLite
    # extracts JSON true as 1, Postgres as 'true'
    flag = cast(QuestionVerification.meta["challengeQuestion"].as_string(), String)
    if filters.challenge_question == "challenge":
        conds.append(flag.in_(CHALLENGE_TRUE))
    elif filters.challenge_question == "regular":
        conds.append(or_(flag.is_(None), flag.not_in(CHALLENGE_TRUE)))

    if filters.topic_ids:
        # a selected top-level topic stands for all of its subtopics
        classified = (
            select(question_topic.c.question_id)
            .join(Topic, Topic.id == question_topic.c.topic_id)
            .where(
                or_(
                    Topic.id.in_(filters.topic_ids),
                    Topic.parent_topic_id.in_(filters.topic_ids),
                )
            )
        )
        conds.append(QuestionVerification.question_id.in_(classified))

    return conds


def batch_limit(limit: Optional[int] = None) -> int:
    """Requested (or configured) batch size, clamped to [1, MAX_BATCH_SIZE]."""
    if limit is None:
        limit = DEFAULT_BATCH_SIZE
    return max(1, min(limit, MAX_BATCH_SIZE))


def _order_by(sort_by: str) -> Tuple[Any, ...]:
    if sort_by == "difficulty":
        primary = (Question.difficulty.desc().nulls_last(), QuestionVerification.created_at.desc())
    elif sort_by == "status":
        primary = (QuestionVerification.status.asc(), QuestionVerification.created_at.desc())
    else:
        primary = (QuestionVerification.created_at.desc(),)
    # id breaks timestamp ties so repeated fetches return the same batch
    return primary + (QuestionVerification.id.desc(),)


def _to_verification_out(v: QuestionVerification, q: Optional[Question], s: Optional[Subject]) -> VerificationOut:
    return VerificationOut(
        id=v.id,
        question_id=v.question_id,
        reference_question_id=v.reference_question_id,
        approver_user_ids=list(v.approver_user_ids or []),
        rejected_user_ids=list(v.rejected_user_ids or []),
        reference_source=v.reference_source,
        status=v.status,
        metadata=v.meta,
        created_at=v.created_at,
        updated_at=v.updated_at,
        question_specification=q.specification if q else None,
        question_difficulty=q.difficulty if q else None,
        question_type=q.question_type if q else None,
        question_level=q.level if q else None,
        question_paper=q.paper if q else None,
        question_subject_id=q.subject_id if q else None,
        subject_title=s.title if s else None,
        subject_slug=s.slug if s else None,
    )


# --- Public API -----------------------------------------------------------------


def list_verifications(
    db: Session,
    filters: Optional[VerificationFilters] = None,
    limit: Optional[int] = None,
) -> VerificationListOut:
    filters = filters or VerificationFilters()
    limit = batch_limit(limit)
    conds = build_predicates(filters)

    joined = (
        select(QuestionVerification, Question, Subject)
        .outerjoin(Question, Question.id == QuestionVerification.question_id)
        .outerjoin(Subject, Subject.id == Question.subject_id)
    )
    count_stmt = (
        select(func.count())
        .select_from(QuestionVerification)
        .outerjoin(Question, Question.id == QuestionVerification.question_id)
        .outerjoin(Subject, Subject.id == Question.subject_id)
    )
    if conds:
        joined = joined.where(and_(*conds))
        count_stmt = count_stmt.where(and_(*conds))

    # one extra row tells us whether the batch is truncated
    stmt = joined.order_by(*_order_by(filters.sort_by)).limit(limit + 1)

    try:
        total = db.execute(count_stmt).scalar_one()
        rows = db.execute(stmt).all()
    except SQLAlchemyError as e:
        logger.exception("listing verifications failed")
        raise StoreUnavailableError(f"verification listing failed: {type(e).__name__}") from e

    has_more = len(rows) > limit
    items = [_to_verification_out(v, q, s) for v, q, s in rows[:limit]]
    logger.info(
        "listed %d verifications (total=%d, has_more=%s, predicates=%d)",
        len(items),
        total,
        has_more,
        len(conds),
    )
    return VerificationListOut(items=items, total=int(total), has_more=has_more)


def _load_question(db: Session, question: Question) -> QuestionOut:
    parts: List[QuestionPart] = []
    options: List[QuestionOption] = []
    # parts/options belong to a revision; only the current one is shown
    if question.current_revision_id is not None:
        parts = list(
            db.scalars(
                select(QuestionPart)
                .where(QuestionPart.revision_id == question.current_revision_id)
                .order_by(QuestionPart.order)
            )
        )
        options = list(
            db.scalars(
                select(QuestionOption)
                .where(QuestionOption.revision_id == question.current_revision_id)
                .order_by(QuestionOption.order)
            )
        )

    return QuestionOut(
        id=question.id,
        specification=question.specification,
        question_type=question.question_type,
        level=question.level,
        paper=question.paper,
        subject_id=question.subject_id,
        difficulty=question.difficulty,
        current_revision_id=question.current_revision_id,
        parts=[
            QuestionPartOut(
                id=p.id,
                content=p.content,
                markscheme=p.markscheme or "",
                marks=p.marks or 0,
                order=p.order,
            )
            for p in parts
        ],
        options=[
            QuestionOptionOut(
                id=o.id,
                content=o.content,
                correct=bool(o.correct),
                order=o.order,
                markscheme=o.markscheme or "",
            )
            for o in options
        ],
    )


def load_detail(db: Session, verification_id: str) -> VerificationDetailOut:
    """
    Load one verification with its question and, when it has one that still
    resolves, the reference question. A dangling reference id yields
    ``reference_question=None`` rather than an error.
    """
    try:
        v = db.get(QuestionVerification, verification_id)
        if v is None:
            raise NotFoundError("verification", verification_id)

        question = db.get(Question, v.question_id)
        if question is None:
            raise NotFoundError("question", v.question_id)

        reference = None
        if v.reference_question_id:
            ref = db.get(Question, v.reference_question_id)
            if ref is not None:
                reference = _load_question(db, ref)

        detail = VerificationDetailOut(
            verification=_to_verification_out(v, question, question.subject),
            question=_load_question(db, question),
            reference_question=reference,
            subject=SubjectOut.model_validate(question.subject) if question.subject else None,
            topics=[TopicOut.model_validate(t) for t in question.topics],
        )
    except SQLAlchemyError as e:
        logger.exception("loading verification %s failed", verification_id)
        raise StoreUnavailableError(f"verification detail failed: {type(e).__name__}") from e

    return detail


def list_topics(db: Session) -> List[TopicOut]:
    """Top-level topics with their subtopics nested underneath."""
    try:
        roots = db.scalars(
            select(Topic).where(Topic.parent_topic_id.is_(None)).order_by(Topic.id)
        ).all()
        return [TopicOut.model_validate(t) for t in roots]
    except SQLAlchemyError as e:
        raise StoreUnavailableError(f"topic listing failed: {type(e).__name__}") from e


def topic_counts(db: Session) -> Dict[int, int]:
    """
    Number of distinct questions classified under each topic. A top-level
    topic also counts questions filed under any of its subtopics. Every topic
    is present in the result, empty ones with 0.
    """
    child = aliased(Topic)
    # topic -> itself plus its direct children
    scope = (
        select(Topic.id.label("topic_id"), Topic.id.label("member_id"))
        .union_all(
            select(Topic.id.label("topic_id"), child.id.label("member_id")).join(
                child, child.parent_topic_id == Topic.id
            )
        )
        .subquery()
    )
    stmt = (
        select(scope.c.topic_id, func.count(question_topic.c.question_id.distinct()))
        .select_from(scope)
        .outerjoin(question_topic, question_topic.c.topic_id == scope.c.member_id)
        .group_by(scope.c.topic_id)
    )
    try:
        rows = db.execute(stmt).all()
    except SQLAlchemyError as e:
        raise StoreUnavailableError(f"topic counts failed: {type(e).__name__}") from e
    return {int(topic_id): int(n) for topic_id, n in rows}
