# verification/routers/verifications.py
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

import transitions
from db import SessionLocal
from deps.auth import require_reviewer
from errors import NotFoundError, StoreUnavailableError
from schemas.verifications import (
    SortKey,
    TransitionResult,
    VerificationDetailOut,
    VerificationFilters,
    VerificationListOut,
)
from verifications import MAX_BATCH_SIZE, list_verifications, load_detail

router = APIRouter(prefix="/verifications", tags=["verifications"])


@router.get("", response_model=VerificationListOut)
def verifications_list(
    status: str = "all",
    difficulty: str = "all",
    reference_source: str = "",
    challenge_question: str = "all",
    topic_ids: List[int] = Query(default=[]),
    sort_by: SortKey = "created",
    limit: Optional[int] = Query(default=None, ge=1, le=MAX_BATCH_SIZE),
):
    filters = VerificationFilters(
        status=status,
        difficulty=difficulty,
        reference_source=reference_source,
        challenge_question=challenge_question,
        topic_ids=topic_ids,
        sort_by=sort_by,
    )
    try:
        with SessionLocal() as db:
            return list_verifications(db, filters, limit)
    except StoreUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.get("/{verification_id}", response_model=VerificationDetailOut)
def verification_detail(verification_id: str):
    try:
        with SessionLocal() as db:
            return load_detail(db, verification_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StoreUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))


# Ordinary failures (missing id, store error) come back as ok=False with 200
# so the UI can revert its optimistic state.


@router.post("/{verification_id}/approve", response_model=TransitionResult)
def verification_approve(verification_id: str, reviewer: str = Depends(require_reviewer)):
    with SessionLocal() as db:
        return transitions.approve(db, verification_id, reviewer)


@router.post("/{verification_id}/reject", response_model=TransitionResult)
def verification_reject(verification_id: str, reviewer: str = Depends(require_reviewer)):
    with SessionLocal() as db:
        return transitions.reject(db, verification_id, reviewer)


@router.post("/{verification_id}/need-image", response_model=TransitionResult)
def verification_need_image(verification_id: str, reviewer: str = Depends(require_reviewer)):
    with SessionLocal() as db:
        return transitions.needs_image(db, verification_id, reviewer)
