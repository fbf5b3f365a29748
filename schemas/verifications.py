from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from schemas.questions import QuestionOut, SubjectOut, TopicOut

VerificationStatus = Literal["pending", "approved", "rejected", "needImage"]
SortKey = Literal["created", "difficulty", "status"]


# ---------- Filters ----------


class VerificationFilters(BaseModel):
    # Values outside the known vocabulary mean "no predicate" for that field.
    status: str = "all"
    difficulty: Union[int, str] = "all"
    reference_source: str = ""
    challenge_question: str = "all"  # all | challenge | regular
    topic_ids: List[int] = Field(default_factory=list)
    sort_by: SortKey = "created"


# ---------- Listing ----------


class VerificationOut(BaseModel):
    id: str
    question_id: str
    reference_question_id: Optional[str] = None
    approver_user_ids: List[str] = Field(default_factory=list)
    rejected_user_ids: List[str] = Field(default_factory=list)
    reference_source: Optional[str] = None
    status: VerificationStatus
    metadata: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    # joined from question / subject, display only
    question_specification: Optional[str] = None
    question_difficulty: Optional[int] = None
    question_type: Optional[str] = None
    question_level: Optional[str] = None
    question_paper: Optional[str] = None
    question_subject_id: Optional[int] = None
    subject_title: Optional[str] = None
    subject_slug: Optional[str] = None


class VerificationListOut(BaseModel):
    items: List[VerificationOut]
    total: int
    has_more: bool


# ---------- Detail ----------


class VerificationDetailOut(BaseModel):
    verification: VerificationOut
    question: QuestionOut
    reference_question: Optional[QuestionOut] = None
    subject: Optional[SubjectOut] = None
    topics: List[TopicOut] = Field(default_factory=list)


# ---------- Transitions ----------


class TransitionResult(BaseModel):
    ok: bool
    verification_id: str
    status: Optional[VerificationStatus] = None
    error: Optional[str] = None
    code: Optional[Literal["not_found", "store_unavailable"]] = None
