import json

from django.core.management.base import BaseCommand, CommandError

from apps.exchange.application.tasks import seed_exchange_rates


class Command(BaseCommand):
    help = 'Load exchange rates from a JSON file (or the built-in reference set)'

    def add_arguments(self, parser):
        parser.add_argument(
            '--file',
            dest='file_path',
            type=str,
            help='JSON file with a list of {"from_currency", "to_currency", "rate", "source"} entries'
        )
        parser.add_argument(
            '--sync',
            action='store_true',
            help='Execute synchronously instead of using Celery task queue'
        )

    def handle(self, **options):
        file_path = options.get('file_path')
        sync_mode = options['sync']

        rates = None
        if file_path:
            rates = self._read_rates(file_path)
            self.stdout.write(
                self.style.SUCCESS(f'Loading {len(rates)} rates from {file_path}...')
            )
        else:
            self.stdout.write(self.style.SUCCESS('Loading reference exchange rates...'))

        if sync_mode:
            self.stdout.write('Running in synchronous mode...')
            result = seed_exchange_rates(rates)

            if result['success']:
                self.stdout.write(
                    self.style.SUCCESS(
                        f"Successfully loaded {result['rates_loaded']} rates"
                    )
                )
                if result.get('errors'):
                    self.stdout.write(
                        self.style.WARNING(
                            f"Errors: {len(result['errors'])}"
                        )
                    )
                    for error in result['errors']:
                        self.stdout.write(f'  - {error}')
            else:
                raise CommandError(f"Failed: {result.get('message') or '; '.join(result.get('errors', []))}")
        else:
            self.stdout.write('Dispatching Celery task...')
            task = seed_exchange_rates.delay(rates)

            self.stdout.write(
                self.style.SUCCESS(
                    f'Task dispatched with ID: {task.id}'
                )
            )
            self.stdout.write(
                'Use "celery -A core inspect active" to check task status'
            )

    @staticmethod
    def _read_rates(file_path):
        try:
            with open(file_path, encoding='utf-8') as handle:
                # Keep rates as strings so they stay exact and JSON-serializable for Celery
                rates = json.load(handle, parse_float=str)
        except OSError as e:
            raise CommandError(f'Cannot read {file_path}: {e}')
        except json.JSONDecodeError as e:
            raise CommandError(f'Invalid JSON in {file_path}: {e}')

        if not isinstance(rates, list):
            raise CommandError('Rates file must contain a JSON list')
        return rates
