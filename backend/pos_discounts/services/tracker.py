from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Set
from pos_discounts.schemas.result import EvaluationWarning


@dataclass
class OneTimeTracker:
    """
    Учёт правил, уже сработавших в этой транзакции.
    Работает только для кампаний с is_one_time_per_transaction.
    """
    enabled: bool = False
    applied: Set[str] = field(default_factory=set)

    def claim(self, identity: str) -> bool:
        """True, если правило можно засчитать; False, если уже было применено"""
        if not self.enabled:
            return True
        if identity in self.applied:
            return False
        self.applied.add(identity)
        return True


@dataclass
class EvaluationContext:
    """Локальное состояние одного вызова оценки"""
    evaluated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    tracker: OneTimeTracker = field(default_factory=OneTimeTracker)
    warnings: List[EvaluationWarning] = field(default_factory=list)

    @classmethod
    def for_campaign(cls, campaign, evaluated_at: Optional[datetime] = None) -> "EvaluationContext":
        one_time = bool(campaign and campaign.is_one_time_per_transaction)
        return cls(
            evaluated_at=evaluated_at or datetime.now(timezone.utc),
            tracker=OneTimeTracker(enabled=one_time),
        )

    @property
    def one_time(self) -> bool:
        return self.tracker.enabled

    def warn(self, code: str, message: str) -> None:
        self.warnings.append(EvaluationWarning(code=code, message=message))
