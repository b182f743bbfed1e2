# wallets/management/commands/reconcile_wallets.py
import logging

from django.core.management.base import BaseCommand, CommandError

from wallets.models import Wallet
from wallets.services import reconcile

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Check every wallet against the sum of its GameHistory profits"

    def add_arguments(self, parser):
        parser.add_argument(
            '--user-id',
            type=int,
            help='Reconcile a single user only'
        )

    def handle(self, *args, **options):
        qs = Wallet.objects.order_by("user_id")
        if options.get("user_id"):
            qs = qs.filter(user_id=options["user_id"])
            self.stdout.write(f"Filtering by user ID: {options['user_id']}")

        checked = 0
        drifted = 0
        for user_id in qs.values_list("user_id", flat=True):
            report = reconcile(user_id)
            checked += 1
            if report.ok:
                continue

            drifted += 1
            logger.error(f"Ledger drift for user {user_id}: {report}")
            self.stdout.write(
                self.style.ERROR(
                    f"  User {user_id:5d} | cash {report.balance} (ledger {report.expected_balance}) | "
                    f"tokens {report.tokens} (ledger {report.expected_tokens})"
                )
            )

        self.stdout.write('=' * 70)
        if drifted:
            raise CommandError(f"{drifted} of {checked} wallet(s) do not reconcile")

        self.stdout.write(self.style.SUCCESS(f"All {checked} wallet(s) reconcile"))
