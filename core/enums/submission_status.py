from __future__ import annotations

from enum import Enum


class SubmissionStatus(str, Enum):
    """Review state of a team tile submission or of one piece of proof."""

    PENDING = "pending"
    APPROVED = "approved"
    DECLINED = "declined"
    NEEDS_REVIEW = "needs_review"


ALL_STATUSES: tuple[SubmissionStatus, ...] = (
    SubmissionStatus.PENDING,
    SubmissionStatus.APPROVED,
    SubmissionStatus.DECLINED,
    SubmissionStatus.NEEDS_REVIEW,
)
