"""
Management command to import GPS samples from a JSON lines file.
Each line is one sample as sent by the app or broadcast on the live topic:
{"surveyorId": "SUR001", "latitude": 19.07, "longitude": 72.87, "timestamp": "2025-01-26T10:30:00Z"}
"""
import json

from django.core.management.base import BaseCommand, CommandError

from apps.tracking.services import get_services
from apps.tracking.services.ingestion import GpsSample


class Command(BaseCommand):
    help = 'Import GPS samples from a JSON lines file through the ingestion pipeline'

    def add_arguments(self, parser):
        parser.add_argument('logfile', type=str, help='Path to the JSON lines file')
        parser.add_argument(
            '--final',
            action='store_true',
            help='Store every sample, skipping duplicate suppression',
        )

    def handle(self, *args, **options):
        logfile = options['logfile']

        try:
            with open(logfile, 'r') as f:
                self.process_logfile(f, options['final'])
        except FileNotFoundError:
            raise CommandError(f'Log file not found: {logfile}')

    def process_logfile(self, logfile, final):
        """Replay every line through the pipeline"""
        ingestion = get_services().ingestion

        imported = 0
        skipped = 0
        errors = 0

        for line_num, line in enumerate(logfile, 1):
            line = line.strip()
            if not line:
                continue

            try:
                payload = json.loads(line)
            except ValueError as e:
                self.stdout.write(self.style.WARNING(f'Line {line_num}: invalid JSON ({e})'))
                errors += 1
                continue

            if not isinstance(payload, dict):
                self.stdout.write(self.style.WARNING(f'Line {line_num}: expected a JSON object'))
                errors += 1
                continue

            sample = GpsSample.from_payload(payload)
            try:
                if final:
                    result = ingestion.ingest_final(sample)
                else:
                    result = ingestion.ingest(sample)
            except Exception as e:
                self.stdout.write(
                    self.style.WARNING(f'Line {line_num} (surveyor {sample.surveyor_id}): {e}')
                )
                errors += 1
                continue

            if result.stored:
                imported += 1
            elif result.accepted:
                skipped += 1
            else:
                self.stdout.write(
                    self.style.WARNING(f'Line {line_num} (surveyor {sample.surveyor_id}): {result.reason}')
                )
                errors += 1

        self.stdout.write(
            self.style.SUCCESS(
                f'Import complete: {imported} imported, {skipped} skipped, '
                f'{errors} errors'
            )
        )
