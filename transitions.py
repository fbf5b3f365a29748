"""Approve / reject / needs-image decisions on a verification."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from errors import NotFoundError
from models import Question, QuestionVerification
from schemas.verifications import TransitionResult

logger = logging.getLogger("question-verification.transitions")


def _append_once(ids: Optional[List[str]], reviewer_id: str) -> List[str]:
    current = list(ids or [])
    if reviewer_id not in current:
        current.append(reviewer_id)
    return current


def _apply(db: Session, verification_id: str, reviewer_id: str, status: str) -> TransitionResult:
    """
    Set the status and its side effects in one commit. Missing rows and store
    errors come back as a failed result with nothing written; anything else
    propagates.
    """
    if not reviewer_id:
        raise ValueError("reviewer_id is required")

    try:
        v = db.get(QuestionVerification, verification_id)
        if v is None:
            raise NotFoundError("verification", verification_id)

        v.status = status
        v.updated_at = datetime.now(UTC)
        # JSON columns are only flushed on reassignment, never mutate in place
        if status == "approved":
            v.approver_user_ids = _append_once(v.approver_user_ids, reviewer_id)
            question = db.get(Question, v.question_id)
            if question is None:
                raise NotFoundError("question", v.question_id)
            question.is_staging = False
        elif status == "rejected":
            v.rejected_user_ids = _append_once(v.rejected_user_ids, reviewer_id)

        db.commit()
    except NotFoundError as e:
        db.rollback()
        logger.warning("%s -> %s refused: %s", verification_id, status, e)
        return TransitionResult(
            ok=False, verification_id=verification_id, error=str(e), code="not_found"
        )
    except SQLAlchemyError:
        db.rollback()
        logger.exception("%s -> %s failed against the store", verification_id, status)
        return TransitionResult(
            ok=False,
            verification_id=verification_id,
            error=f"Failed to set status {status}",
            code="store_unavailable",
        )

    logger.info("verification %s -> %s by %s", verification_id, status, reviewer_id)
    return TransitionResult(ok=True, verification_id=verification_id, status=status)


# Public API
def approve(db: Session, verification_id: str, reviewer_id: str) -> TransitionResult:
    """Mark approved, record the approver and publish the owning question."""
    return _apply(db, verification_id, reviewer_id, "approved")


def reject(db: Session, verification_id: str, reviewer_id: str) -> TransitionResult:
    return _apply(db, verification_id, reviewer_id, "rejected")


def needs_image(db: Session, verification_id: str, reviewer_id: str) -> TransitionResult:
    # reviewer is logged but not recorded on either audit list
    return _apply(db, verification_id, reviewer_id, "needImage")
