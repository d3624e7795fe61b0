import logging
import time
from datetime import datetime

from croniter import croniter
from dateutil.parser import isoparse
from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from apps.goals.adapters.orm_repositories import DjangoGoalRepository
from apps.goals.application.use_cases import GoalService

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = 'Tworzy nowe okresy dla aktywnych celów cyklicznych'

    def add_arguments(self, parser):
        parser.add_argument('--now', help="Moment przebiegu w ISO 8601 (domyślnie: teraz)")
        parser.add_argument('--catch-up', action='store_true',
                            help="Twórz okres przy pierwszym przebiegu po granicy okresu, "
                                 "a nie tylko w pasującym dniu")
        parser.add_argument('--forever', action='store_true',
                            help="Działaj w pętli wg GOAL_SCHEDULER['CRON'] zamiast jednego przebiegu")

    def handle(self, *args, **options):
        catch_up = True if options['catch_up'] else None
        service = GoalService(DjangoGoalRepository(), catch_up=catch_up)

        if options['forever']:
            if options['now']:
                raise CommandError("--now cannot be combined with --forever")
            self._run_forever(service)
            return

        self._run_once(service, self._parse_now(options['now']))

    def _parse_now(self, value):
        if not value:
            return None
        try:
            moment = isoparse(value)
        except ValueError as e:
            raise CommandError(f"Invalid --now value {value!r}: {e}")
        if timezone.is_naive(moment):
            moment = timezone.make_aware(moment)
        return timezone.localtime(moment)

    def _run_once(self, service, now=None):
        report = service.run_scheduler_once(now)

        self.stdout.write(self.style.SUCCESS(
            f'Utworzono {report.created_count} nowych okresów (sprawdzono {report.evaluated} celów).'
        ))
        for instance in report.created:
            self.stdout.write(
                f"- cel #{instance.definition_id}: "
                f"{timezone.localtime(instance.start_date):%Y-%m-%d} -> {timezone.localtime(instance.end_date):%Y-%m-%d}"
            )
        for definition_id in report.skipped:
            self.stdout.write(f"- cel #{definition_id}: okres na dziś już istnieje")
        for failure in report.failures:
            self.stderr.write(self.style.ERROR(
                f"- cel #{failure.definition_id}: {failure.error_type}: {failure.message}"
            ))
        return report

    def _run_forever(self, service):
        cron = settings.GOAL_SCHEDULER['CRON']
        if not croniter.is_valid(cron):
            raise CommandError(f"Invalid GOAL_SCHEDULER['CRON'] expression: {cron!r}")

        self.stdout.write(f"Scheduler celów uruchomiony ({cron}). Ctrl+C kończy pracę.")
        schedule = croniter(cron, timezone.localtime())
        try:
            while True:
                next_run = schedule.get_next(datetime)
                delay = (next_run - timezone.localtime()).total_seconds()
                logger.info("Next goal scheduler run at %s", next_run.isoformat())
                if delay > 0:
                    time.sleep(delay)
                self._run_once(service)
        except KeyboardInterrupt:
            self.stdout.write("Scheduler celów zatrzymany.")
