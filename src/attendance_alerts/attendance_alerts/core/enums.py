from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Requester roles used for report scoping."""

    ADMIN = "admin"
    COORDINATOR = "coordinator"
    INSTRUCTOR = "instructor"
    LEARNER = "learner"


class CohortStatus(str, Enum):
    """Lifecycle status of a cohort as stored upstream."""

    ACTIVE = "ACTIVE"
    CLOSING = "CLOSING"
    FINISHED = "FINISHED"


class AlertCriterion(str, Enum):
    """Reason a learner is flagged at risk."""

    NONE = "NONE"
    CONSECUTIVE = "CONSECUTIVE"
    MONTHLY = "MONTHLY"
    BOTH = "BOTH"


class StreakMode(str, Enum):
    """How consecutive unexcused absences are measured.

    TRAILING counts back from the most recent session (live alert list).
    BEST_RUN keeps the longest run anywhere in the range (dashboards).
    """

    TRAILING = "TRAILING"
    BEST_RUN = "BEST_RUN"
