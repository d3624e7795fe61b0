# apps/goals/domain/services/status.py
import math

from apps.goals.domain.entities import PeriodStatus, ProgressLabel
from apps.goals.domain.errors import InvalidInput

COMPLETED_THRESHOLD = 1.0
IN_PROGRESS_THRESHOLD = 0.7
NEEDS_IMPROVEMENT_THRESHOLD = 0.3


def validate_amount(value, field_name: str = 'completed_amount') -> float:
    """Akceptuje tylko skończone, nieujemne liczby (bool to nie liczba)."""
    if isinstance(value, bool):
        raise InvalidInput(f"{field_name} must be a number")
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            raise InvalidInput(f"{field_name} must be a number")
    if not isinstance(value, (int, float)):
        raise InvalidInput(f"{field_name} must be a number")
    if math.isnan(value) or math.isinf(value):
        raise InvalidInput(f"{field_name} must be a finite number")
    if value < 0:
        raise InvalidInput(f"{field_name} cannot be negative")
    return value


def completion_rate(completed, target) -> float:
    if not target:
        return 0.0
    return completed / target


def classify_status(completed, target) -> PeriodStatus:
    rate = completion_rate(completed, target)
    if rate >= COMPLETED_THRESHOLD:
        return PeriodStatus.COMPLETED
    if rate >= IN_PROGRESS_THRESHOLD:
        return PeriodStatus.IN_PROGRESS
    return PeriodStatus.AT_RISK


def progress_percent(completed, target) -> int:
    return int(round(completion_rate(completed, target) * 100))


def progress_label(completed, target) -> ProgressLabel:
    """Podział na cztery poziomy dla widoków (ponad trzy statusy raportowe)."""
    percent = progress_percent(completed, target)
    if percent >= 100:
        return ProgressLabel.COMPLETED
    if percent >= 70:
        return ProgressLabel.ON_TRACK
    if percent >= 30:
        return ProgressLabel.NEEDS_IMPROVEMENT
    return ProgressLabel.JUST_STARTED
