# apps/goals/domain/errors.py
from dataclasses import dataclass
from typing import Optional


class GoalError(Exception):
    """Bazowy wyjątek modułu celów."""


class InvalidInput(GoalError, ValueError):
    pass


class InvalidInterval(InvalidInput):
    def __init__(self, interval):
        self.interval = interval
        super().__init__(f"Invalid interval type: {interval!r}")


class NotFound(GoalError, LookupError):
    pass


class DuplicatePeriod(GoalError):
    """Instancja dla tej definicji i tego dnia już istnieje (unikalność w bazie)."""

    def __init__(self, definition_id, start_day):
        self.definition_id = definition_id
        self.start_day = start_day
        super().__init__(f"Period for definition {definition_id} starting {start_day} already exists")


@dataclass
class SchedulerRunFailure:
    """Rekord błędu jednej definicji w przebiegu schedulera. Nie jest rzucany."""
    definition_id: Optional[int]
    error_type: str
    message: str

    @classmethod
    def from_exception(cls, definition_id, exc: Exception) -> 'SchedulerRunFailure':
        return cls(definition_id=definition_id, error_type=type(exc).__name__, message=str(exc))
