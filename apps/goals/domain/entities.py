# apps/goals/domain/entities.py
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Union


class IntervalType(str, Enum):
    DAILY = 'daily'
    WEEKLY = 'weekly'
    MONTHLY = 'monthly'
    QUARTERLY = 'quarterly'
    YEARLY = 'yearly'

    @classmethod
    def lookup(cls, value) -> Optional['IntervalType']:
        """Dokładne dopasowanie wartości; None dla wszystkiego innego."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None

    @classmethod
    def parse(cls, value) -> Optional['IntervalType']:
        """Jak lookup, ale toleruje wielkość liter i spacje (dane od użytkownika)."""
        if isinstance(value, cls) or value is None:
            return cls.lookup(value)
        return cls.lookup(str(value).strip().lower())


class PeriodStatus(str, Enum):
    COMPLETED = 'completed'
    IN_PROGRESS = 'in_progress'
    AT_RISK = 'at_risk'


class ProgressLabel(str, Enum):
    # Drobniejszy podział tylko do wyświetlania
    COMPLETED = 'completed'
    ON_TRACK = 'on_track'
    NEEDS_IMPROVEMENT = 'needs_improvement'
    JUST_STARTED = 'just_started'


@dataclass
class GoalDefinitionEntity:
    id: Optional[int]  # None przed zapisem
    owner_id: int
    name: str
    interval_type: Union[IntervalType, str]  # str tylko dla wiersza z nieznaną wartością w bazie
    description: str = ""
    base_target: float = 0
    is_active: bool = True

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class PeriodInstanceEntity:
    id: Optional[int]
    definition_id: int
    start_date: datetime
    end_date: datetime
    target: float = 0
    completed_amount: float = 0

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class DefinitionWithLatest:
    definition: GoalDefinitionEntity
    latest_instance: Optional[PeriodInstanceEntity] = None
