from apps.goals.domain.services.recurrence import calculate_end_date
from apps.goals.domain.services.due_check import is_due, period_index
from apps.goals.domain.services.status import classify_status, progress_label, progress_percent
from apps.goals.domain.services.scheduler import PeriodScheduler, SchedulerRunReport

__all__ = [
    'calculate_end_date',
    'is_due',
    'period_index',
    'classify_status',
    'progress_label',
    'progress_percent',
    'PeriodScheduler',
    'SchedulerRunReport',
]
