"""Domain models for attendance statistics."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CourseStats:
    """Per-course attendance and subscription usage tallies."""

    course_name: str
    total: int
    replacements: int
    present: int
    absent: int
    pending_regular: int
    pending_replacement: int
    used: int
    makeup_eligible: int

    @property
    def regular(self) -> int:
        return self.total - self.replacements

    @property
    def pending(self) -> int:
        return self.pending_regular + self.pending_replacement


@dataclass(frozen=True)
class ReplacementBudget:
    """Course-wide makeup entitlement."""

    eligible: int
    used: int

    @property
    def remaining(self) -> int:
        return max(self.eligible - self.used, 0)

    @property
    def exhausted(self) -> bool:
        return self.used >= self.eligible
