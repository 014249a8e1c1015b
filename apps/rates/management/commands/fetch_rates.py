from datetime import date
from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from apps.rates.infrastructure.providers.registry import get_rate_resolver


def parse_date(value: str, option: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise CommandError(f'Invalid {option} date "{value}". Use YYYY-MM-DD')


class Command(BaseCommand):
    help = 'Resolve official USD/ARS rates for a date or a date range'

    def add_arguments(self, parser):
        parser.add_argument(
            '--from',
            dest='source_currency',
            type=str,
            default='USD',
            help='Source currency code (default: USD)'
        )
        parser.add_argument(
            '--to',
            dest='exchanged_currency',
            type=str,
            default='ARS',
            help='Target currency code (default: ARS)'
        )
        parser.add_argument(
            '--date',
            dest='valuation_date',
            type=str,
            help='Single date in YYYY-MM-DD format (default: today)'
        )
        parser.add_argument(
            '--start',
            dest='start_date',
            type=str,
            help='Range start date in YYYY-MM-DD format'
        )
        parser.add_argument(
            '--end',
            dest='end_date',
            type=str,
            help='Range end date in YYYY-MM-DD format'
        )

    def handle(self, **options):
        source_currency = options['source_currency'].upper()
        exchanged_currency = options['exchanged_currency'].upper()
        start_str = options.get('start_date')
        end_str = options.get('end_date')

        if bool(start_str) != bool(end_str):
            raise CommandError('--start and --end must be given together')

        resolver = get_rate_resolver()

        if start_str:
            response = resolver.fetch_exchange_rates(
                source_currency,
                exchanged_currency,
                parse_date(start_str, '--start'),
                parse_date(end_str, '--end'),
            )
            rates = response.data if response.success else []
        else:
            valuation_date = (
                parse_date(options['valuation_date'], '--date')
                if options.get('valuation_date')
                else timezone.localdate()
            )
            response = resolver.fetch_exchange_rate(
                source_currency,
                exchanged_currency,
                valuation_date,
            )
            rates = [response.data] if response.success else []

        if not response.success:
            raise CommandError(f"Failed: {response.error.message}")

        for rate in rates:
            self.stdout.write(
                f"{rate.valuation_date.isoformat()} "
                f"{rate.source_currency}/{rate.exchanged_currency} "
                f"{rate.rate_value}"
            )

        self.stdout.write(self.style.SUCCESS(f"Resolved {len(rates)} rate(s)"))
