# apps/goals/domain/services/recurrence.py
import calendar
from datetime import timedelta

from dateutil.relativedelta import relativedelta

from apps.goals.domain.entities import IntervalType
from apps.goals.domain.errors import InvalidInterval


# Krok kalendarzowy dla każdego typu interwału.
# relativedelta przycina dzień do ostatniego dnia miesiąca docelowego
# (31.01 + 1 miesiąc = 28/29.02, 29.02 + 1 rok = 28.02 w roku nieprzestępnym).
INTERVAL_STEPS = {
    IntervalType.DAILY: timedelta(days=1),
    IntervalType.WEEKLY: timedelta(days=7),
    IntervalType.MONTHLY: relativedelta(months=1),
    IntervalType.QUARTERLY: relativedelta(months=3),
    IntervalType.YEARLY: relativedelta(years=1),
}


def last_day_of_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def clamped_day(day: int, year: int, month: int) -> int:
    """Dzień miesiąca przycięty do długości miesiąca docelowego."""
    return min(day, last_day_of_month(year, month))


def months_between(earlier, later) -> int:
    """Różnica w miesiącach liczona z pól rok/miesiąc (bez dni)."""
    return (later.year - earlier.year) * 12 + (later.month - earlier.month)


def interval_step(interval):
    interval_type = IntervalType.lookup(interval)
    if interval_type is None:
        raise InvalidInterval(interval)
    return INTERVAL_STEPS[interval_type]


def calculate_end_date(start, interval):
    """
    Zwraca koniec okresu zaczynającego się w `start`.
    Działa na polach kalendarza, nie na upływie czasu, więc godzina i strefa
    czasowa przechodzą bez zmian. Dla nieznanego interwału rzuca InvalidInterval.
    """
    return start + interval_step(interval)
