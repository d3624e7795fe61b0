"""
Wspólne fixtures dla testów celów.

Testy domeny i serwisu na repozytorium w pamięci nie dotykają bazy;
testy adaptera ORM i komendy używają markera django_db.
"""
from datetime import datetime

import pytest
from django.utils import timezone

from apps.goals.adapters.memory_repositories import InMemoryGoalRepository, StaticOwnerDirectory
from apps.goals.adapters.orm_repositories import DjangoGoalRepository, DjangoOwnerDirectory
from apps.goals.application.use_cases import GoalService

OWNER_ID = 1


@pytest.fixture
def at():
    """Zwraca fabrykę momentów w strefie czasowej projektu (domyślnie 00:01, jak cron)."""
    def make(year, month, day, hour=0, minute=1):
        return timezone.make_aware(datetime(year, month, day, hour, minute))
    return make


@pytest.fixture
def memory_repo():
    return InMemoryGoalRepository()


@pytest.fixture
def service(memory_repo):
    return GoalService(memory_repo, StaticOwnerDirectory({OWNER_ID}), catch_up=False)


@pytest.fixture
def owner(django_user_model):
    return django_user_model.objects.create_user(username='kasia', password='secret')


@pytest.fixture
def orm_repo():
    return DjangoGoalRepository()


@pytest.fixture
def orm_service(orm_repo):
    return GoalService(orm_repo, DjangoOwnerDirectory(), catch_up=False)
