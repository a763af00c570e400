"""Majority rules shared by vote casting and electorate recalculation."""

from dataclasses import dataclass
from typing import Optional

from apps.proposals.models import ItemStatus


@dataclass(frozen=True)
class VoteTally:
    approvals: int
    rejections: int
    required: Optional[int]
    eligible_participants: int

    def as_dict(self) -> dict:
        return {
            'approvals': self.approvals,
            'rejections': self.rejections,
            'required': self.required,
            'eligible_participants': self.eligible_participants,
        }


def required_votes(eligible_participants: int) -> Optional[int]:
    """
    Strict majority of the eligible voters: floor(n / 2) + 1.

    Returns None when nobody is eligible; such a threshold can never be
    reached, so the item stays PENDING.
    """
    if eligible_participants <= 0:
        return None
    return eligible_participants // 2 + 1


def decide_status(approvals: int, rejections: int, required: Optional[int]) -> str:
    """Approval wins when both sides reach the threshold."""
    if required is None:
        return ItemStatus.PENDING
    if approvals >= required:
        return ItemStatus.APPROVED
    if rejections >= required:
        return ItemStatus.REJECTED
    return ItemStatus.PENDING
