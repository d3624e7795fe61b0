import logging
from datetime import timedelta
from io import StringIO

import pytest
from django.core.management import CommandError, call_command
from django.utils import timezone

from apps.goals.application.use_cases import CreateGoalDefinitionInput
from apps.goals.management.commands import run_goal_scheduler
from apps.goals.models import PeriodInstance

pytestmark = pytest.mark.django_db


def run(*args):
    out, err = StringIO(), StringIO()
    call_command('run_goal_scheduler', *args, stdout=out, stderr=err)
    return out.getvalue(), err.getvalue()


@pytest.fixture
def monthly_goal(orm_service, owner, at):
    return orm_service.create_definition(CreateGoalDefinitionInput(
        owner_id=owner.id, name='Sprzedaż', interval_type='monthly', base_target=50,
    ), now=at(2024, 1, 31))


def test_creates_due_periods(monthly_goal):
    out, err = run('--now', '2024-02-29T00:01:00')

    assert 'Utworzono 1 nowych okresów' in out
    assert f'cel #{monthly_goal.id}: 2024-02-29 -> 2024-03-29' in out
    assert err == ''
    assert PeriodInstance.objects.filter(definition_id=monthly_goal.id).count() == 2


def test_nothing_due(monthly_goal):
    out, _ = run('--now', '2024-03-15T00:01:00')

    assert 'Utworzono 0 nowych okresów' in out
    assert PeriodInstance.objects.count() == 1


def test_catch_up_flag(monthly_goal):
    out, _ = run('--now', '2024-03-02T00:01:00', '--catch-up')

    assert 'Utworzono 1 nowych okresów' in out


def test_invalid_now():
    with pytest.raises(CommandError):
        run('--now', 'wczoraj')


def test_forever_cannot_be_combined_with_now():
    with pytest.raises(CommandError):
        run('--forever', '--now', '2024-02-29T00:01:00')


class TestForever:
    @pytest.fixture
    def sleeps(self, monkeypatch):
        """Zapisuje opóźnienia; przy drugim czekaniu przerywa pętlę jak Ctrl+C."""
        calls = []

        def fake_sleep(seconds):
            calls.append(seconds)
            if len(calls) == 2:
                raise KeyboardInterrupt

        monkeypatch.setattr(run_goal_scheduler.time, 'sleep', fake_sleep)
        return calls

    def test_runs_one_batch_per_cron_tick(self, settings, sleeps, orm_service, owner, caplog):
        settings.GOAL_SCHEDULER = {'CRON': '30 2 * * *', 'CATCH_UP': False}
        caplog.set_level(logging.INFO, logger='apps.goals')
        definition = orm_service.create_definition(CreateGoalDefinitionInput(
            owner_id=owner.id, name='Telefony', interval_type='daily', base_target=5,
        ), now=timezone.localtime() - timedelta(days=1))

        out, _ = run('--forever')

        assert len(sleeps) == 2
        assert 0 < sleeps[0] <= 24 * 3600
        assert 'T02:30:00' in caplog.text
        assert out.count('Utworzono') == 1
        assert 'Utworzono 1 nowych okresów' in out
        assert 'zatrzymany' in out
        assert PeriodInstance.objects.filter(definition_id=definition.id).count() == 2

    def test_invalid_cron_expression(self, settings):
        settings.GOAL_SCHEDULER = {'CRON': 'co noc', 'CATCH_UP': False}
        with pytest.raises(CommandError):
            run('--forever')
