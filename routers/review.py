# verification/routers/review.py
# Server-held review sessions for clients that keep no navigation state.
from __future__ import annotations

import os
import time
import uuid
from collections import OrderedDict
from typing import Tuple

from fastapi import APIRouter, HTTPException

from review_session import ReviewSession
from schemas.review import ReviewPosition, ReviewSessionCreate, ReviewSessionOut

router = APIRouter(prefix="/review-sessions", tags=["review"])

MAX_SESSIONS = int(os.getenv("REVIEW_SESSION_LIMIT", "500"))
SESSION_TTL_S = float(os.getenv("REVIEW_SESSION_TTL_S", "3600"))

# in-process only; lost on restart. Oldest-touched first.
_SESSIONS: "OrderedDict[str, Tuple[ReviewSession, float]]" = OrderedDict()

_now = time.monotonic


def _prune() -> None:
    """Drop idle sessions, then the least recently used ones beyond the cap."""
    cutoff = _now() - SESSION_TTL_S
    while _SESSIONS:
        sid, (_, touched) = next(iter(_SESSIONS.items()))
        if touched >= cutoff and len(_SESSIONS) <= MAX_SESSIONS:
            break
        del _SESSIONS[sid]


def _state(session_id: str, s: ReviewSession) -> ReviewSessionOut:
    index, total = s.position()
    return ReviewSessionOut(
        session_id=session_id,
        current_id=s.current_id,
        position=ReviewPosition(index=index, total=total),
        batch_ended=s.batch_ended,
    )


def _get(session_id: str) -> ReviewSession:
    _prune()
    entry = _SESSIONS.get(session_id)
    if entry is None:
        raise HTTPException(status_code=404, detail="Review session not found")
    _SESSIONS[session_id] = (entry[0], _now())
    _SESSIONS.move_to_end(session_id)
    return entry[0]


@router.post("", response_model=ReviewSessionOut)
def review_start(req: ReviewSessionCreate):
    s = ReviewSession()
    try:
        s.select_for_review(req.batch, req.verification_id)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    session_id = uuid.uuid4().hex
    _SESSIONS[session_id] = (s, _now())
    _prune()
    return _state(session_id, s)


@router.get("/{session_id}", response_model=ReviewSessionOut)
def review_state(session_id: str):
    return _state(session_id, _get(session_id))


@router.post("/{session_id}/advance", response_model=ReviewSessionOut)
def review_advance(session_id: str):
    s = _get(session_id)
    s.advance()
    return _state(session_id, s)


@router.post("/{session_id}/return", response_model=ReviewSessionOut)
def review_return(session_id: str):
    s = _get(session_id)
    del _SESSIONS[session_id]
    s.return_to_list()
    return _state(session_id, s)
