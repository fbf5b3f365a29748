import os
from typing import Annotated

from fastapi import Header, HTTPException


def require_reviewer(
    x_reviewer_id: Annotated[str | None, Header(alias="x-reviewer-id")] = None,
) -> str:
    """
    Resolve the acting reviewer. Uses the X-Reviewer-Id header, or the
    REVIEWER_ID configured on the server when the header is absent.
    """
    reviewer = (x_reviewer_id or "").strip() or os.getenv("REVIEWER_ID", "").strip()
    if not reviewer:
        raise HTTPException(status_code=400, detail="Reviewer identity required (x-reviewer-id).")
    return reviewer
