# verification/routers/topics.py
from __future__ import annotations

from typing import Dict, List

from fastapi import APIRouter, HTTPException

from db import SessionLocal
from errors import StoreUnavailableError
from schemas.questions import TopicOut
from verifications import list_topics, topic_counts

router = APIRouter(prefix="/topics", tags=["topics"])


@router.get("", response_model=List[TopicOut])
def topics_tree():
    try:
        with SessionLocal() as db:
            return list_topics(db)
    except StoreUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.get("/counts", response_model=Dict[int, int])
def topics_question_counts():
    # used by the UI to hide topics with no questions
    try:
        with SessionLocal() as db:
            return topic_counts(db)
    except StoreUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))
