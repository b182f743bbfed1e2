import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Wallet",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("balance", models.DecimalField(decimal_places=2, default=0, max_digits=18)),
                ("token_balance", models.PositiveIntegerField(default=0)),
                ("locked_tokens", models.PositiveIntegerField(default=0)),
                ("opening_balance", models.DecimalField(decimal_places=2, default=0, max_digits=18)),
                ("opening_tokens", models.PositiveIntegerField(default=0)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "user",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="wallet",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("balance__gte", 0)),
                        name="wallet_balance_non_negative",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="GameHistory",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "game_type",
                    models.CharField(
                        choices=[
                            ("ROULETTE", "Roulette"),
                            ("DAILY_DRAW", "Daily draw"),
                            ("LOOTBOX_PURCHASE", "Lootbox purchase"),
                            ("LOOTBOX_OPEN", "Lootbox open"),
                        ],
                        max_length=32,
                    ),
                ),
                (
                    "currency",
                    models.CharField(choices=[("CASH", "Cash"), ("TOKEN", "Token")], default="CASH", max_length=8),
                ),
                ("outcome", models.CharField(choices=[("WIN", "Win"), ("LOSE", "Lose")], max_length=4)),
                ("multiplier", models.DecimalField(decimal_places=8, max_digits=18)),
                ("profit", models.DecimalField(decimal_places=2, max_digits=18)),
                ("bet_amount", models.DecimalField(decimal_places=2, max_digits=18)),
                ("reference", models.CharField(max_length=96, unique=True)),
                ("meta", models.JSONField(blank=True, default=dict)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="game_history",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["user", "created_at"], name="wallets_gam_user_id_6b1f3e_idx"),
                    models.Index(fields=["user", "currency"], name="wallets_gam_user_id_a94c52_idx"),
                ],
            },
        ),
    ]
