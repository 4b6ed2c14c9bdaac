from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..core.enums import AlertCriterion


@dataclass(frozen=True)
class SessionMark:
    """Compact view of one attended/missed session, used in alert details."""

    session_date: date
    present: bool
    excused: bool


@dataclass(frozen=True)
class LearnerAlert:
    """Risk classification of one learner over a range. Recomputed on every query."""

    learner_id: int
    consecutive_unexcused: int
    monthly_unexcused: int
    criterion: AlertCriterion
    display_name: Optional[str] = None
    document_id: Optional[str] = None
    recent_sessions: tuple[SessionMark, ...] = field(default_factory=tuple)

    @property
    def is_alert(self) -> bool:
        return self.criterion != AlertCriterion.NONE
