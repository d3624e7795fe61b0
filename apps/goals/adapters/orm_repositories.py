# apps/goals/adapters/orm_repositories.py
from typing import List, Optional
from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from apps.goals.domain.entities import GoalDefinitionEntity, IntervalType, PeriodInstanceEntity
from apps.goals.domain.errors import DuplicatePeriod, InvalidInput
from apps.goals.filters import GoalDefinitionFilter
from apps.goals.models import GoalDefinition as GoalDefinitionModel
from apps.goals.models import PeriodInstance as PeriodInstanceModel
from apps.goals.models import calendar_day
from apps.goals.ports.repositories import IGoalRepository, IOwnerDirectory


class DjangoGoalRepository(IGoalRepository):
    def to_definition_entity(self, model: GoalDefinitionModel) -> GoalDefinitionEntity:
        """Konwertuje Model Django -> Czystą Encję."""
        return GoalDefinitionEntity(
            id=model.id,
            owner_id=model.owner_id,
            name=model.name,
            description=model.description,
            # Wartość spoza listy (baza nie pilnuje choices) przechodzi dalej jako str
            interval_type=IntervalType.lookup(model.interval_type) or model.interval_type,
            base_target=model.base_target,
            is_active=model.is_active,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def to_instance_entity(self, model: PeriodInstanceModel) -> PeriodInstanceEntity:
        return PeriodInstanceEntity(
            id=model.id,
            definition_id=model.definition_id,
            start_date=model.start_date,
            end_date=model.end_date,
            target=model.target,
            completed_amount=model.completed_amount,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    # --- Definicje ---

    def get_definition(self, definition_id: int) -> Optional[GoalDefinitionEntity]:
        try:
            return self.to_definition_entity(GoalDefinitionModel.objects.get(id=definition_id))
        except GoalDefinitionModel.DoesNotExist:
            return None

    def save_definition(self, definition: GoalDefinitionEntity) -> GoalDefinitionEntity:
        data = {
            'owner_id': definition.owner_id,
            'name': definition.name,
            'description': definition.description,
            'interval_type': IntervalType(definition.interval_type).value,
            'base_target': definition.base_target,
            'is_active': definition.is_active,
        }

        if definition.id:
            obj = GoalDefinitionModel.objects.get(id=definition.id)
            for key, value in data.items():
                setattr(obj, key, value)
            obj.save()  # save() zamiast update(), żeby auto_now odświeżył updated_at
        else:
            obj = GoalDefinitionModel.objects.create(**data)

        return self.to_definition_entity(obj)

    def list_definitions(self, filters: Optional[dict] = None) -> List[GoalDefinitionEntity]:
        qs = GoalDefinitionModel.objects.all()
        data = {k: v for k, v in (filters or {}).items() if v is not None}
        if data:
            f = GoalDefinitionFilter(data, queryset=qs)
            if not f.is_valid():
                raise InvalidInput(f"Invalid filters: {dict(f.errors)}")
            qs = f.qs
        return [self.to_definition_entity(d) for d in qs]

    def list_active_definitions(self) -> List[GoalDefinitionEntity]:
        qs = GoalDefinitionModel.objects.filter(is_active=True).order_by('id')
        return [self.to_definition_entity(d) for d in qs]

    def delete_definition(self, definition_id: int) -> bool:
        with transaction.atomic():
            self.delete_instances_for_definition(definition_id)
            deleted, _ = GoalDefinitionModel.objects.filter(id=definition_id).delete()
        return deleted > 0

    # --- Instancje ---

    def get_instance(self, instance_id: int) -> Optional[PeriodInstanceEntity]:
        try:
            return self.to_instance_entity(PeriodInstanceModel.objects.get(id=instance_id))
        except PeriodInstanceModel.DoesNotExist:
            return None

    def get_latest_instance(self, definition_id: int) -> Optional[PeriodInstanceEntity]:
        latest = PeriodInstanceModel.objects.filter(definition_id=definition_id) \
            .order_by('-start_date', '-id').first()
        return self.to_instance_entity(latest) if latest else None

    def list_instances(self, definition_id: int) -> List[PeriodInstanceEntity]:
        qs = PeriodInstanceModel.objects.filter(definition_id=definition_id).order_by('-start_date', '-id')
        return [self.to_instance_entity(i) for i in qs]

    def insert_instance(self, instance: PeriodInstanceEntity) -> PeriodInstanceEntity:
        try:
            with transaction.atomic():
                obj = PeriodInstanceModel.objects.create(
                    definition_id=instance.definition_id,
                    start_date=instance.start_date,
                    end_date=instance.end_date,
                    target=instance.target,
                    completed_amount=instance.completed_amount,
                )
        except IntegrityError:
            self._raise_if_duplicate(instance)
            raise
        return self.to_instance_entity(obj)

    def save_instance(self, instance: PeriodInstanceEntity) -> Optional[PeriodInstanceEntity]:
        try:
            obj = PeriodInstanceModel.objects.get(id=instance.id)
        except PeriodInstanceModel.DoesNotExist:
            return None

        obj.definition_id = instance.definition_id
        obj.start_date = instance.start_date
        obj.end_date = instance.end_date
        obj.target = instance.target
        obj.completed_amount = instance.completed_amount
        try:
            with transaction.atomic():
                obj.save()
        except IntegrityError:
            self._raise_if_duplicate(instance)
            raise
        return self.to_instance_entity(obj)

    def _raise_if_duplicate(self, instance: PeriodInstanceEntity):
        """DuplicatePeriod tylko gdy naprawdę istnieje okres tej definicji na ten dzień."""
        day = calendar_day(instance.start_date)
        clash = PeriodInstanceModel.objects.filter(definition_id=instance.definition_id, start_day=day)
        if instance.id:
            clash = clash.exclude(id=instance.id)
        if clash.exists():
            raise DuplicatePeriod(instance.definition_id, day)

    def update_instance_progress(self, instance_id: int, completed_amount: float) -> Optional[PeriodInstanceEntity]:
        try:
            obj = PeriodInstanceModel.objects.get(id=instance_id)
        except PeriodInstanceModel.DoesNotExist:
            return None
        obj.completed_amount = completed_amount
        obj.save(update_fields=['completed_amount', 'start_day', 'updated_at'])
        return self.to_instance_entity(obj)

    def delete_instance(self, instance_id: int) -> bool:
        deleted, _ = PeriodInstanceModel.objects.filter(id=instance_id).delete()
        return deleted > 0

    def delete_instances_for_definition(self, definition_id: int) -> int:
        deleted, _ = PeriodInstanceModel.objects.filter(definition_id=definition_id).delete()
        return deleted

    def list_owner_instances(self, owner_id, start_from=None, start_before=None, end_until=None):
        qs = PeriodInstanceModel.objects.filter(definition__owner_id=owner_id)
        if start_from is not None:
            qs = qs.filter(start_date__gte=start_from)
        if start_before is not None:
            qs = qs.filter(start_date__lt=start_before)
        if end_until is not None:
            qs = qs.filter(end_date__lte=end_until)
        return [self.to_instance_entity(i) for i in qs.order_by('-start_date', '-id')]


class DjangoOwnerDirectory(IOwnerDirectory):
    def exists(self, owner_id: int) -> bool:
        return get_user_model().objects.filter(pk=owner_id).exists()
