# apps/goals/domain/services/due_check.py
import logging
from datetime import datetime, timedelta

from apps.goals.domain.entities import IntervalType
from apps.goals.domain.services.recurrence import clamped_day, interval_step, months_between

logger = logging.getLogger(__name__)


def _calendar_dates(now, last):
    """Sprowadza oba momenty do dat kalendarzowych w strefie czasowej `now`."""
    if isinstance(last, datetime) and isinstance(now, datetime):
        if last.tzinfo is not None and now.tzinfo is not None:
            last = last.astimezone(now.tzinfo)
    now_day = now.date() if isinstance(now, datetime) else now
    last_day = last.date() if isinstance(last, datetime) else last
    return now_day, last_day


def _elapsed(now, last) -> timedelta:
    """Upływ czasu; dla samych dat liczony w pełnych dniach."""
    if isinstance(now, datetime) and isinstance(last, datetime):
        return now - last
    today, last_day = _calendar_dates(now, last)
    return timedelta(days=(today - last_day).days)


def _daily_due(now, last) -> bool:
    today, last_day = _calendar_dates(now, last)
    return (today - last_day).days >= 1


def _weekly_due(now, last) -> bool:
    today, last_day = _calendar_dates(now, last)
    return today.weekday() == last_day.weekday() and _elapsed(now, last) >= timedelta(days=7)


def _monthly_due(now, last) -> bool:
    today, last_day = _calendar_dates(now, last)
    if months_between(last_day, today) < 1:
        return False
    return today.day == clamped_day(last_day.day, today.year, today.month)


def _quarterly_due(now, last) -> bool:
    today, last_day = _calendar_dates(now, last)
    months = months_between(last_day, today)
    if months < 3 or months % 3 != 0:
        return False
    return today.day == clamped_day(last_day.day, today.year, today.month)


def _yearly_due(now, last) -> bool:
    today, last_day = _calendar_dates(now, last)
    # 29.02 -> 28.02 w latach nieprzestępnych
    return (
        today.year > last_day.year
        and today.month == last_day.month
        and today.day == clamped_day(last_day.day, today.year, last_day.month)
    )


DUE_CHECKS = {
    IntervalType.DAILY: _daily_due,
    IntervalType.WEEKLY: _weekly_due,
    IntervalType.MONTHLY: _monthly_due,
    IntervalType.QUARTERLY: _quarterly_due,
    IntervalType.YEARLY: _yearly_due,
}


def period_index(anchor, moment, interval) -> int:
    """
    Liczba pełnych okresów, które upłynęły od `anchor` do `moment`.
    Granica k-tego okresu to anchor + k * krok (liczone zawsze od kotwicy,
    więc przycinanie dnia nie kumuluje się).
    """
    step = interval_step(interval)
    today, start = _calendar_dates(moment, anchor)
    if today <= start:
        return 0

    if isinstance(step, timedelta):
        return (today - start).days // step.days

    step_months = step.years * 12 + step.months
    index = months_between(start, today) // step_months
    while index > 0 and start + step * index > today:
        index -= 1
    return index


def is_due(now, interval, last_period_start, catch_up: bool = False) -> bool:
    """
    Czy należy utworzyć nową instancję okresu?

    Bez poprzedniej instancji zawsze True. Domyślnie dopasowuje pola kalendarza
    (dzień tygodnia / dzień miesiąca) względem startu ostatniej instancji, więc
    pominięty dzień czeka na kolejny pasujący termin. Tydzień wymaga też
    pełnych 7 dni (upływ czasu, nie daty) od startu ostatniej instancji.
    Z `catch_up=True` wystarczy, że minął co najmniej jeden pełny okres.
    Nieznany interwał daje False i ostrzeżenie w logu, bez wyjątku.
    """
    if last_period_start is None:
        return True

    interval_type = IntervalType.lookup(interval)
    if interval_type is None:
        logger.warning("Unknown interval type %r, treating as not due", interval)
        return False

    if catch_up:
        return period_index(last_period_start, now, interval_type) >= 1

    return DUE_CHECKS[interval_type](now, last_period_start)
