from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class QuestionPartOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    content: str
    markscheme: str = ""
    marks: int = 0
    order: int


class QuestionOptionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    content: str
    correct: bool
    order: int
    markscheme: str = ""


class QuestionOut(BaseModel):
    id: str
    specification: Optional[str] = None
    question_type: Optional[str] = None
    level: Optional[str] = None
    paper: Optional[str] = None
    subject_id: Optional[int] = None
    difficulty: Optional[int] = None
    current_revision_id: Optional[int] = None
    # open-response questions carry parts, multiple-choice ones carry options
    parts: List[QuestionPartOut] = Field(default_factory=list)
    options: List[QuestionOptionOut] = Field(default_factory=list)


class SubjectOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    title: str
    slug: str


class TopicOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    title: str
    slug: str
    parent_topic_id: Optional[int] = None
    subject_id: int
    child_topics: List["TopicOut"] = Field(default_factory=list)
