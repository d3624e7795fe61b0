# apps/goals/application/use_cases.py
import logging
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import List, Optional

from django.conf import settings
from django.utils import timezone

from apps.goals.domain.entities import (
    DefinitionWithLatest,
    GoalDefinitionEntity,
    IntervalType,
    PeriodInstanceEntity,
    PeriodStatus,
)
from apps.goals.domain.errors import InvalidInput, NotFound
from apps.goals.domain.services.recurrence import calculate_end_date
from apps.goals.domain.services.scheduler import PeriodScheduler, SchedulerRunReport, build_period
from apps.goals.domain.services.status import classify_status, validate_amount
from apps.goals.ports.repositories import IGoalRepository, IOwnerDirectory

logger = logging.getLogger(__name__)

DEFINITION_FIELDS = {'owner_id', 'name', 'description', 'base_target', 'interval_type', 'is_active'}
INSTANCE_FIELDS = {'definition_id', 'start_date', 'end_date', 'target', 'completed_amount'}


@dataclass
class CreateGoalDefinitionInput:
    owner_id: int
    name: str
    interval_type: str
    description: str = ""
    base_target: Optional[float] = None
    is_active: bool = True


def parse_interval(value) -> IntervalType:
    interval_type = IntervalType.parse(value)
    if interval_type is None:
        raise InvalidInput(f"Invalid interval type: {value!r}")
    return interval_type


def clean_name(value) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidInput("name must be a non-empty string")
    return value.strip()


def check_period_bounds(start_date, end_date):
    if start_date is None or end_date is None:
        raise InvalidInput("start_date and end_date are required")
    if end_date <= start_date:
        raise InvalidInput("end_date must be after start_date")


def scheduler_catch_up_default() -> bool:
    return bool(getattr(settings, 'GOAL_SCHEDULER', {}).get('CATCH_UP', False))


class GoalService:
    """Operacje na definicjach celów i ich okresach (wywoływane przez API/CLI)."""

    def __init__(self, repository: IGoalRepository, owner_directory: Optional[IOwnerDirectory] = None,
                 catch_up: Optional[bool] = None):
        self.repository = repository
        self.owner_directory = owner_directory
        self.catch_up = scheduler_catch_up_default() if catch_up is None else catch_up

    # --- Definicje ---

    def create_definition(self, input_dto: CreateGoalDefinitionInput,
                          now: Optional[datetime] = None) -> GoalDefinitionEntity:
        name = clean_name(input_dto.name)
        if input_dto.owner_id is None:
            raise InvalidInput("Missing required field: owner_id")
        if not input_dto.interval_type:
            raise InvalidInput("Missing required field: interval_type")

        interval_type = parse_interval(input_dto.interval_type)
        base_target = 0 if input_dto.base_target is None else validate_amount(input_dto.base_target, 'base_target')
        self._check_owner(input_dto.owner_id)

        definition = self.repository.save_definition(GoalDefinitionEntity(
            id=None,
            owner_id=input_dto.owner_id,
            name=name,
            description=input_dto.description or "",
            interval_type=interval_type,
            base_target=base_target,
            is_active=input_dto.is_active,
        ))

        # Pierwszy okres zaczyna się w chwili utworzenia definicji.
        # Błąd tutaj nie cofa definicji - scheduler utworzy okres przy następnym przebiegu.
        start = now or timezone.localtime()
        try:
            instance = self.repository.insert_instance(build_period(definition, start))
            logger.info("Created goal definition %s with first period %s", definition.id, instance.id)
        except Exception:
            logger.exception("Could not create first period for goal definition %s", definition.id)

        return definition

    def list_definitions(self, owner_id: Optional[int] = None, is_active: Optional[bool] = None,
                         interval_type=None, name: Optional[str] = None) -> List[GoalDefinitionEntity]:
        filters = {
            'owner_id': owner_id,
            'is_active': is_active,
            'interval_type': parse_interval(interval_type).value if interval_type else None,
            'name': name or None,
        }
        return self.repository.list_definitions(filters)

    def list_definitions_with_latest_instance(self, **filters) -> List[DefinitionWithLatest]:
        return [
            DefinitionWithLatest(definition=d, latest_instance=self.repository.get_latest_instance(d.id))
            for d in self.list_definitions(**filters)
        ]

    def get_definition(self, definition_id: int) -> GoalDefinitionEntity:
        definition = self.repository.get_definition(definition_id)
        if not definition:
            raise NotFound(f"Goal definition {definition_id} not found")
        return definition

    def update_definition(self, definition_id: int, **changes) -> GoalDefinitionEntity:
        unknown = set(changes) - DEFINITION_FIELDS
        if unknown:
            raise InvalidInput(f"Unknown fields: {', '.join(sorted(unknown))}")

        definition = self.get_definition(definition_id)

        if 'name' in changes:
            changes['name'] = clean_name(changes['name'])
        if 'interval_type' in changes:
            changes['interval_type'] = parse_interval(changes['interval_type'])
        if 'base_target' in changes:
            changes['base_target'] = validate_amount(changes['base_target'], 'base_target')
        if 'owner_id' in changes:
            self._check_owner(changes['owner_id'])
        if 'description' in changes:
            changes['description'] = changes['description'] or ""
        if 'is_active' in changes:
            changes['is_active'] = bool(changes['is_active'])

        return self.repository.save_definition(replace(definition, **changes))

    def delete_definition(self, definition_id: int) -> None:
        if not self.repository.delete_definition(definition_id):
            raise NotFound(f"Goal definition {definition_id} not found")
        logger.info("Deleted goal definition %s with its periods", definition_id)

    # --- Instancje ---

    def create_instance(self, definition_id: int, start_date: Optional[datetime] = None,
                        end_date: Optional[datetime] = None, target: Optional[float] = None,
                        completed_amount: float = 0) -> PeriodInstanceEntity:
        """Ręczne utworzenie okresu. Domyślnie start = teraz, koniec z kalendarza, cel z definicji."""
        definition = self.get_definition(definition_id)
        start_date = start_date or timezone.localtime()
        end_date = end_date or calculate_end_date(start_date, definition.interval_type)
        check_period_bounds(start_date, end_date)

        instance = PeriodInstanceEntity(
            id=None,
            definition_id=definition.id,
            start_date=start_date,
            end_date=end_date,
            target=definition.base_target if target is None else validate_amount(target, 'target'),
            completed_amount=validate_amount(completed_amount),
        )
        return self.repository.insert_instance(instance)

    def list_instances_for_definition(self, definition_id: int) -> List[PeriodInstanceEntity]:
        self.get_definition(definition_id)
        return self.repository.list_instances(definition_id)

    def get_instance(self, instance_id: int) -> PeriodInstanceEntity:
        instance = self.repository.get_instance(instance_id)
        if not instance:
            raise NotFound(f"Period instance {instance_id} not found")
        return instance

    def update_instance(self, instance_id: int, **changes) -> PeriodInstanceEntity:
        """Pełna aktualizacja okresu (panel administratora)."""
        unknown = set(changes) - INSTANCE_FIELDS
        if unknown:
            raise InvalidInput(f"Unknown fields: {', '.join(sorted(unknown))}")

        instance = self.get_instance(instance_id)

        if 'definition_id' in changes:
            self.get_definition(changes['definition_id'])
        if 'target' in changes:
            changes['target'] = validate_amount(changes['target'], 'target')
        if 'completed_amount' in changes:
            changes['completed_amount'] = validate_amount(changes['completed_amount'])

        updated = replace(instance, **changes)
        check_period_bounds(updated.start_date, updated.end_date)

        saved = self.repository.save_instance(updated)
        if saved is None:
            raise NotFound(f"Period instance {instance_id} not found")
        return saved

    def update_instance_progress(self, instance_id: int, completed_amount) -> PeriodInstanceEntity:
        amount = validate_amount(completed_amount)
        instance = self.repository.update_instance_progress(instance_id, amount)
        if instance is None:
            raise NotFound(f"Period instance {instance_id} not found")
        return instance

    def delete_instance(self, instance_id: int) -> None:
        if not self.repository.delete_instance(instance_id):
            raise NotFound(f"Period instance {instance_id} not found")

    # --- Raporty ---

    def get_owner_performance(self, owner_id: int, start: datetime, end: datetime) -> List[PeriodInstanceEntity]:
        """Okresy właściciela, które zaczęły się nie wcześniej niż `start` i skończyły do `end`."""
        if start is None or end is None:
            raise InvalidInput("start and end are required")
        return self.repository.list_owner_instances(owner_id, start_from=start, end_until=end)

    def get_today_instances(self, owner_id: int, now: Optional[datetime] = None) -> List[PeriodInstanceEntity]:
        now = now or timezone.localtime()
        midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
        return self.repository.list_owner_instances(
            owner_id, start_from=midnight, start_before=midnight + timedelta(days=1)
        )

    @staticmethod
    def classify_status(completed, target) -> PeriodStatus:
        return classify_status(completed, target)

    # --- Scheduler ---

    def run_scheduler_once(self, now: Optional[datetime] = None) -> SchedulerRunReport:
        return PeriodScheduler(self.repository, catch_up=self.catch_up).run(now)

    def _check_owner(self, owner_id):
        if self.owner_directory is not None and not self.owner_directory.exists(owner_id):
            raise NotFound(f"Owner {owner_id} not found")
