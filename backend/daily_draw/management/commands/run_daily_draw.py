# daily_draw/management/commands/run_daily_draw.py
import logging
from datetime import timedelta

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from daily_draw.redis_lock import RedisDrawLock
from daily_draw.services import parse_date_key, select_winner
from wallets.exceptions import AlreadySettled, NotFound, SettlementError

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Select the daily draw winner for a day (yesterday by default)"

    def add_arguments(self, parser):
        parser.add_argument(
            "--date",
            type=str,
            help="Day-key to draw, YYYY-MM-DD (default: yesterday)",
        )
        parser.add_argument(
            "--no-lock",
            action="store_true",
            help="Skip the Redis single-scheduler lock",
        )

    def handle(self, *args, **options):
        if options.get("date"):
            date_key = parse_date_key(options["date"])
        else:
            date_key = timezone.localdate() - timedelta(days=1)

        use_lock = not options["no_lock"] and bool(settings.REDIS_URL)
        lock = None
        if use_lock:
            lock = RedisDrawLock(f"daily_draw:{date_key.isoformat()}", settings.DAILY_DRAW_LOCK_TTL)
            if not lock.acquire():
                self.stdout.write(
                    self.style.WARNING(f"[DRAW:{date_key}] Another scheduler holds the lock. Exiting.")
                )
                return

        try:
            result = select_winner(date_key)
        except AlreadySettled:
            self.stdout.write(self.style.WARNING(f"[DRAW:{date_key}] Already settled, nothing to do."))
            return
        except NotFound:
            self.stdout.write(self.style.WARNING(f"[DRAW:{date_key}] No entries."))
            return
        except SettlementError as e:
            logger.error(f"Daily draw {date_key} failed: {e}")
            raise CommandError(str(e))
        finally:
            if lock is not None:
                lock.release()

        self.stdout.write(
            self.style.SUCCESS(
                f"[DRAW:{date_key}] User {result.winner_id} won {result.payout} tokens "
                f"({result.participants} participants)"
            )
        )
