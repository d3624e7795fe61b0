# apps/goals/domain/services/scheduler.py
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from django.utils import timezone

from apps.goals.domain.entities import GoalDefinitionEntity, PeriodInstanceEntity
from apps.goals.domain.errors import DuplicatePeriod, SchedulerRunFailure
from apps.goals.domain.services.due_check import is_due
from apps.goals.domain.services.recurrence import calculate_end_date
from apps.goals.ports.repositories import IGoalRepository

logger = logging.getLogger(__name__)


@dataclass
class SchedulerRunReport:
    now: datetime
    evaluated: int = 0
    created: List[PeriodInstanceEntity] = field(default_factory=list)
    skipped: List[int] = field(default_factory=list)  # ID definicji z duplikatem na dziś
    failures: List[SchedulerRunFailure] = field(default_factory=list)
    finished_at: Optional[datetime] = None

    @property
    def created_count(self) -> int:
        return len(self.created)

    @property
    def ok(self) -> bool:
        return not self.failures


def build_period(definition: GoalDefinitionEntity, start: datetime) -> PeriodInstanceEntity:
    """Nowa instancja okresu dla definicji, zaczynająca się w `start`."""
    return PeriodInstanceEntity(
        id=None,
        definition_id=definition.id,
        start_date=start,
        end_date=calculate_end_date(start, definition.interval_type),
        target=definition.base_target,
        completed_amount=0,
    )


class PeriodScheduler:
    """
    Jeden przebieg: dla każdej aktywnej definicji sprawdza, czy należy się nowy
    okres, i zapisuje go. Błąd jednej definicji jest logowany i nie przerywa
    reszty partii. Nie trzyma stanu między przebiegami.
    """

    def __init__(self, repository: IGoalRepository, catch_up: bool = False):
        self.repository = repository
        self.catch_up = catch_up

    def run(self, now: Optional[datetime] = None) -> SchedulerRunReport:
        now = now or timezone.localtime()
        report = SchedulerRunReport(now=now)
        logger.info("Starting goal period scheduler run at %s", now.isoformat())

        try:
            definitions = self.repository.list_active_definitions()
        except Exception as e:
            # Bez listy definicji nie ma czego przetwarzać; wyzwalacz nie może się wywrócić
            logger.exception("Could not list active goal definitions")
            report.failures.append(SchedulerRunFailure.from_exception(None, e))
            report.finished_at = timezone.now()
            return report

        for definition in definitions:
            report.evaluated += 1
            try:
                instance = self.process_definition(definition, now)
            except DuplicatePeriod:
                logger.info("Period for definition %s already exists for %s, skipping",
                            definition.id, now.date())
                report.skipped.append(definition.id)
                continue
            except Exception as e:
                logger.exception("Scheduler failed for goal definition %s", definition.id)
                report.failures.append(SchedulerRunFailure.from_exception(definition.id, e))
                continue

            if instance is not None:
                logger.info("Created period %s for goal definition %s (%s - %s)",
                            instance.id, definition.id, instance.start_date, instance.end_date)
                report.created.append(instance)

        report.finished_at = timezone.now()
        logger.info(
            "Goal period scheduler run completed: %d evaluated, %d created, %d skipped, %d failed",
            report.evaluated, report.created_count, len(report.skipped), len(report.failures)
        )
        return report

    def process_definition(self, definition: GoalDefinitionEntity, now: datetime) -> Optional[PeriodInstanceEntity]:
        latest = self.repository.get_latest_instance(definition.id)
        last_start = latest.start_date if latest else None

        if not is_due(now, definition.interval_type, last_start, catch_up=self.catch_up):
            return None

        return self.repository.insert_instance(build_period(definition, now))
