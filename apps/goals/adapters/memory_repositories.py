# apps/goals/adapters/memory_repositories.py
from dataclasses import replace
from itertools import count
from typing import Dict, List, Optional
from django.utils import timezone
from apps.goals.domain.entities import GoalDefinitionEntity, IntervalType, PeriodInstanceEntity
from apps.goals.domain.errors import DuplicatePeriod
from apps.goals.models import calendar_day
from apps.goals.ports.repositories import IGoalRepository, IOwnerDirectory


class InMemoryGoalRepository(IGoalRepository):
    """Repozytorium w pamięci (testy, próbne przebiegi bez bazy)."""

    def __init__(self):
        self.definitions: Dict[int, GoalDefinitionEntity] = {}
        self.instances: Dict[int, PeriodInstanceEntity] = {}
        self._definition_ids = count(1)
        self._instance_ids = count(1)

    def get_definition(self, definition_id):
        definition = self.definitions.get(definition_id)
        return replace(definition) if definition else None

    def save_definition(self, definition):
        now = timezone.now()
        if definition.id:
            stored = replace(definition, updated_at=now, created_at=self.definitions[definition.id].created_at)
        else:
            stored = replace(definition, id=next(self._definition_ids), created_at=now, updated_at=now)
        self.definitions[stored.id] = stored
        return replace(stored)

    def list_definitions(self, filters=None):
        filters = {k: v for k, v in (filters or {}).items() if v is not None}
        result = []
        for d in sorted(self.definitions.values(), key=lambda d: d.created_at, reverse=True):
            if 'owner_id' in filters and d.owner_id != filters['owner_id']:
                continue
            if 'is_active' in filters and d.is_active != filters['is_active']:
                continue
            if 'interval_type' in filters and d.interval_type != IntervalType.parse(filters['interval_type']):
                continue
            if 'name' in filters and filters['name'].lower() not in d.name.lower():
                continue
            result.append(replace(d))
        return result

    def list_active_definitions(self):
        return [replace(d) for _, d in sorted(self.definitions.items()) if d.is_active]

    def delete_definition(self, definition_id):
        self.delete_instances_for_definition(definition_id)
        return self.definitions.pop(definition_id, None) is not None

    def get_instance(self, instance_id):
        instance = self.instances.get(instance_id)
        return replace(instance) if instance else None

    def get_latest_instance(self, definition_id):
        instances = self.list_instances(definition_id)
        return instances[0] if instances else None

    def list_instances(self, definition_id):
        own = [i for i in self.instances.values() if i.definition_id == definition_id]
        return [replace(i) for i in sorted(own, key=lambda i: (i.start_date, i.id), reverse=True)]

    def _check_unique(self, instance: PeriodInstanceEntity):
        day = calendar_day(instance.start_date)
        for other in self.instances.values():
            if other.id != instance.id and other.definition_id == instance.definition_id \
                    and calendar_day(other.start_date) == day:
                raise DuplicatePeriod(instance.definition_id, day)

    def insert_instance(self, instance):
        self._check_unique(instance)
        now = timezone.now()
        stored = replace(instance, id=next(self._instance_ids), created_at=now, updated_at=now)
        self.instances[stored.id] = stored
        return replace(stored)

    def save_instance(self, instance):
        if instance.id not in self.instances:
            return None
        self._check_unique(instance)
        stored = replace(instance, created_at=self.instances[instance.id].created_at, updated_at=timezone.now())
        self.instances[stored.id] = stored
        return replace(stored)

    def update_instance_progress(self, instance_id, completed_amount):
        instance = self.instances.get(instance_id)
        if instance is None:
            return None
        instance.completed_amount = completed_amount
        instance.updated_at = timezone.now()
        return replace(instance)

    def delete_instance(self, instance_id):
        return self.instances.pop(instance_id, None) is not None

    def delete_instances_for_definition(self, definition_id):
        ids = [i.id for i in self.instances.values() if i.definition_id == definition_id]
        for instance_id in ids:
            del self.instances[instance_id]
        return len(ids)

    def list_owner_instances(self, owner_id, start_from=None, start_before=None, end_until=None):
        owned = {d.id for d in self.definitions.values() if d.owner_id == owner_id}
        result = []
        for i in self.instances.values():
            if i.definition_id not in owned:
                continue
            if start_from is not None and i.start_date < start_from:
                continue
            if start_before is not None and i.start_date >= start_before:
                continue
            if end_until is not None and i.end_date > end_until:
                continue
            result.append(replace(i))
        return sorted(result, key=lambda i: (i.start_date, i.id), reverse=True)


class StaticOwnerDirectory(IOwnerDirectory):
    def __init__(self, owner_ids=()):
        self.owner_ids = set(owner_ids)

    def exists(self, owner_id):
        return owner_id in self.owner_ids
