from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class ReviewSessionCreate(BaseModel):
    batch: List[str] = Field(min_length=1)
    verification_id: str


class ReviewPosition(BaseModel):
    index: int
    total: int


class ReviewSessionOut(BaseModel):
    session_id: str
    current_id: Optional[str] = None
    position: ReviewPosition
    batch_ended: bool = False
