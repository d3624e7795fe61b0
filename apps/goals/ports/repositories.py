# apps/goals/ports/repositories.py
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from apps.goals.domain.entities import GoalDefinitionEntity, PeriodInstanceEntity


class IGoalRepository(ABC):
    # --- Definicje ---

    @abstractmethod
    def get_definition(self, definition_id: int) -> Optional[GoalDefinitionEntity]:
        pass

    @abstractmethod
    def save_definition(self, definition: GoalDefinitionEntity) -> GoalDefinitionEntity:
        """Tworzy lub aktualizuje definicję i zwraca encję z ID i znacznikami czasu."""
        pass

    @abstractmethod
    def list_definitions(self, filters: Optional[dict] = None) -> List[GoalDefinitionEntity]:
        """Filtry: owner_id, is_active, interval_type, name (fragment nazwy)."""
        pass

    @abstractmethod
    def list_active_definitions(self) -> List[GoalDefinitionEntity]:
        pass

    @abstractmethod
    def delete_definition(self, definition_id: int) -> bool:
        """Usuwa definicję razem z instancjami. False, jeśli nie istniała."""
        pass

    # --- Instancje ---

    @abstractmethod
    def get_instance(self, instance_id: int) -> Optional[PeriodInstanceEntity]:
        pass

    @abstractmethod
    def get_latest_instance(self, definition_id: int) -> Optional[PeriodInstanceEntity]:
        """Najnowsza instancja wg start_date."""
        pass

    @abstractmethod
    def list_instances(self, definition_id: int) -> List[PeriodInstanceEntity]:
        """Instancje definicji, od najnowszej."""
        pass

    @abstractmethod
    def insert_instance(self, instance: PeriodInstanceEntity) -> PeriodInstanceEntity:
        """Pojedynczy, atomowy insert. DuplicatePeriod przy kolizji (definicja, dzień startu)."""
        pass

    @abstractmethod
    def save_instance(self, instance: PeriodInstanceEntity) -> Optional[PeriodInstanceEntity]:
        """Pełna aktualizacja istniejącej instancji. None, jeśli nie istnieje."""
        pass

    @abstractmethod
    def update_instance_progress(self, instance_id: int, completed_amount: float) -> Optional[PeriodInstanceEntity]:
        pass

    @abstractmethod
    def delete_instance(self, instance_id: int) -> bool:
        pass

    @abstractmethod
    def delete_instances_for_definition(self, definition_id: int) -> int:
        """Zwraca liczbę usuniętych instancji."""
        pass

    @abstractmethod
    def list_owner_instances(self, owner_id: int, start_from: Optional[datetime] = None,
                             start_before: Optional[datetime] = None,
                             end_until: Optional[datetime] = None) -> List[PeriodInstanceEntity]:
        """Instancje wszystkich definicji właściciela z opcjonalnym zakresem dat."""
        pass


class IOwnerDirectory(ABC):
    @abstractmethod
    def exists(self, owner_id: int) -> bool:
        pass
