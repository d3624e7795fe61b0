from dataclasses import replace

import pytest
from django.contrib import admin
from django.db import IntegrityError

from apps.goals.adapters.orm_repositories import DjangoOwnerDirectory
from apps.goals.application.use_cases import CreateGoalDefinitionInput
from apps.goals.domain.errors import DuplicatePeriod, InvalidInput, NotFound
from apps.goals.domain.services.scheduler import PeriodScheduler, build_period
from apps.goals.models import GoalDefinition, PeriodInstance

pytestmark = pytest.mark.django_db


def create(orm_service, owner, at, **overrides):
    now = overrides.pop('now', at(2024, 1, 31))
    data = dict(owner_id=owner.id, name='Sprzedaż', interval_type='monthly', base_target=50)
    data.update(overrides)
    return orm_service.create_definition(CreateGoalDefinitionInput(**data), now=now)


def test_create_definition_persists_first_period(orm_service, owner, at):
    definition = create(orm_service, owner, at)

    row = PeriodInstance.objects.get(definition_id=definition.id)
    assert row.start_date == at(2024, 1, 31)
    assert row.end_date == at(2024, 2, 29)
    assert row.start_day.isoformat() == '2024-01-31'
    assert (row.target, row.completed_amount) == (50, 0)


def test_unknown_owner_is_rejected(orm_service, at):
    with pytest.raises(NotFound):
        orm_service.create_definition(CreateGoalDefinitionInput(owner_id=999, name='X', interval_type='daily'))
    assert GoalDefinition.objects.count() == 0


def test_owner_directory(owner):
    directory = DjangoOwnerDirectory()
    assert directory.exists(owner.id)
    assert not directory.exists(owner.id + 100)


def test_scheduler_end_to_end(orm_service, orm_repo, owner, at):
    definition = create(orm_service, owner, at)

    assert orm_service.run_scheduler_once(at(2024, 2, 29)).created_count == 1
    assert orm_service.run_scheduler_once(at(2024, 3, 15)).created_count == 0

    latest = orm_repo.get_latest_instance(definition.id)
    assert latest.start_date == at(2024, 2, 29)
    assert latest.end_date == at(2024, 3, 29)


def test_one_period_per_definition_per_day(orm_repo, orm_service, owner, at):
    definition = create(orm_service, owner, at)

    with pytest.raises(DuplicatePeriod):
        orm_repo.insert_instance(build_period(definition, at(2024, 1, 31, 18, 0)))
    assert PeriodInstance.objects.filter(definition_id=definition.id).count() == 1


def test_other_integrity_errors_are_not_reported_as_duplicates(orm_repo, orm_service, owner, at):
    definition = create(orm_service, owner, at)
    period = replace(build_period(definition, at(2024, 2, 29)), target=None)

    with pytest.raises(IntegrityError):
        orm_repo.insert_instance(period)
    assert PeriodInstance.objects.filter(definition_id=definition.id).count() == 1


def test_unknown_stored_interval_does_not_stop_the_batch(orm_service, owner, at, caplog):
    broken = create(orm_service, owner, at, name='Zepsuty')
    healthy = create(orm_service, owner, at, name='Zdrowy')
    GoalDefinition.objects.filter(id=broken.id).update(interval_type='hourly')

    report = orm_service.run_scheduler_once(at(2024, 2, 29))

    assert report.evaluated == 2
    assert [i.definition_id for i in report.created] == [healthy.id]
    assert report.failures == []
    assert "Unknown interval type 'hourly'" in caplog.text


def test_unknown_stored_interval_without_periods_fails_alone(orm_repo, owner, at):
    broken = GoalDefinition.objects.create(owner=owner, name='Zepsuty', interval_type='hourly', base_target=1)
    healthy = GoalDefinition.objects.create(owner=owner, name='Zdrowy', interval_type='daily', base_target=1)

    report = PeriodScheduler(orm_repo).run(at(2024, 3, 4))

    [failure] = report.failures
    assert failure.definition_id == broken.id
    assert failure.error_type == 'InvalidInterval'
    assert [i.definition_id for i in report.created] == [healthy.id]


def test_latest_period_is_chosen_by_start_date(orm_repo, orm_service, owner, at):
    definition = create(orm_service, owner, at, interval_type='daily')
    later = orm_repo.insert_instance(build_period(definition, at(2024, 3, 1)))
    orm_repo.insert_instance(build_period(definition, at(2024, 2, 15)))

    assert orm_repo.get_latest_instance(definition.id).id == later.id


def test_list_definitions_uses_filters(orm_service, owner, django_user_model, at):
    other = django_user_model.objects.create_user(username='tomek', password='secret')
    sales = create(orm_service, owner, at, name='Sprzedaż miesięczna')
    calls = create(orm_service, owner, at, name='Telefony', interval_type='daily')
    create(orm_service, other, at, name='Cudzy cel')
    orm_service.update_definition(calls.id, is_active=False)

    assert {d.id for d in orm_service.list_definitions(owner_id=owner.id)} == {sales.id, calls.id}
    assert [d.id for d in orm_service.list_definitions(owner_id=owner.id, is_active=True)] == [sales.id]
    assert [d.id for d in orm_service.list_definitions(interval_type='daily')] == [calls.id]
    assert [d.id for d in orm_service.list_definitions(name='MIESI')] == [sales.id]


def test_invalid_filter_value(orm_repo):
    with pytest.raises(InvalidInput):
        orm_repo.list_definitions({'interval_type': 'hourly'})


def test_delete_definition_cascades(orm_service, owner, at):
    definition = create(orm_service, owner, at)
    orm_service.run_scheduler_once(at(2024, 2, 29))

    orm_service.delete_definition(definition.id)

    assert not GoalDefinition.objects.filter(id=definition.id).exists()
    assert PeriodInstance.objects.count() == 0


def test_progress_and_full_update_are_persisted(orm_service, owner, at):
    definition = create(orm_service, owner, at)
    [period] = orm_service.list_instances_for_definition(definition.id)

    orm_service.update_instance_progress(period.id, 12.5)
    orm_service.update_instance(period.id, target=60, end_date=at(2024, 2, 20))

    row = PeriodInstance.objects.get(id=period.id)
    assert (row.completed_amount, row.target) == (12.5, 60)
    assert row.end_date == at(2024, 2, 20)


def test_delete_single_period(orm_service, owner, at):
    definition = create(orm_service, owner, at)
    [period] = orm_service.list_instances_for_definition(definition.id)

    orm_service.delete_instance(period.id)

    assert PeriodInstance.objects.count() == 0
    assert GoalDefinition.objects.filter(id=definition.id).exists()


def test_owner_instances_window(orm_service, owner, at):
    definition = create(orm_service, owner, at, interval_type='weekly', now=at(2024, 3, 4))
    orm_service.create_instance(definition.id, start_date=at(2024, 3, 25))

    periods = orm_service.get_owner_performance(owner.id, at(2024, 3, 1), at(2024, 3, 20))
    assert [p.start_date for p in periods] == [at(2024, 3, 4)]

    today = orm_service.get_today_instances(owner.id, now=at(2024, 3, 25, 10, 0))
    assert [p.start_date for p in today] == [at(2024, 3, 25)]


def test_models_are_registered_in_admin():
    assert admin.site.is_registered(GoalDefinition)
    assert admin.site.is_registered(PeriodInstance)
