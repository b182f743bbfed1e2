# lootboxes/management/commands/seed_lootboxes.py
from django.core.management.base import BaseCommand
from django.db import transaction

from lootboxes.defaults import DEFAULT_LOOTBOXES, DEFAULT_STOCKS
from lootboxes.models import LootBox, LootBoxItem
from portfolio.models import Stock


class Command(BaseCommand):
    help = 'Create or update the default stocks and lootbox catalog (safe to re-run)'

    @transaction.atomic
    def handle(self, *args, **kwargs):
        stocks = {}
        for symbol, config in DEFAULT_STOCKS.items():
            stocks[symbol], _ = Stock.objects.update_or_create(symbol=symbol, defaults=config)

        for name, config in DEFAULT_LOOTBOXES.items():
            lootbox, created = LootBox.objects.update_or_create(
                name=name,
                defaults={"price": config["price"], "is_active": True},
            )
            for symbol, weight in config["contents"].items():
                LootBoxItem.objects.update_or_create(
                    lootbox=lootbox,
                    stock=stocks[symbol],
                    defaults={"weight": weight},
                )
            verb = "Created" if created else "Updated"
            self.stdout.write(f"  {verb} {name}: {config['price']} ({len(config['contents'])} stocks)")

        self.stdout.write(self.style.SUCCESS(
            f'Seeded {len(DEFAULT_STOCKS)} stocks and {len(DEFAULT_LOOTBOXES)} lootboxes'
        ))
