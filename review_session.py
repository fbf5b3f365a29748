from __future__ import annotations

from typing import List, Optional, Sequence, Tuple


class ReviewSession:
    """
    Walks a fetched batch of verification ids one at a time.

    The batch is captured when a verification is selected and never
    re-fetched, so decisions taken mid-review do not reorder what comes next.
    """

    def __init__(self) -> None:
        self.batch: List[str] = []
        self.current_id: Optional[str] = None
        self.batch_ended = False

    def select_for_review(self, batch: Sequence[str], verification_id: str) -> None:
        batch = list(batch)
        if verification_id not in batch:
            raise ValueError(f"{verification_id} is not part of the batch")
        if len(set(batch)) != len(batch):
            raise ValueError("batch contains duplicate verification ids")
        self.batch = batch
        self.current_id = verification_id
        self.batch_ended = False

    def advance(self) -> bool:
        """Move to the next verification; on the last one raise the batch-end flag instead."""
        if self.current_id is None or not self.batch:
            return False

        nxt = self.batch.index(self.current_id) + 1
        if nxt >= len(self.batch):
            self.batch_ended = True
            return False

        self.current_id = self.batch[nxt]
        self.batch_ended = False
        return True

    def position(self) -> Tuple[int, int]:
        # 1-based, for "question 3 of 50"
        if self.current_id is None or not self.batch:
            return (0, 0)
        return (self.batch.index(self.current_id) + 1, len(self.batch))

    def return_to_list(self) -> List[str]:
        """Leave detail mode and hand the batch back to the caller."""
        batch = self.batch
        self.current_id = None
        self.batch_ended = False
        self.batch = []
        return batch
