from django.contrib import admin
from .models import GameHistory, Wallet

@admin.register(Wallet)
class WalletAdmin(admin.ModelAdmin):
    list_display = ("user", "balance", "token_balance", "locked_tokens", "updated_at")
    search_fields = ("user__email", "user__username")
    readonly_fields = ("opening_balance", "opening_tokens", "updated_at")

@admin.register(GameHistory)
class GameHistoryAdmin(admin.ModelAdmin):
    list_display = ("user", "game_type", "currency", "outcome", "multiplier", "profit", "bet_amount", "created_at")
    list_filter = ("game_type", "currency", "outcome")
    search_fields = ("user__email", "reference")

    # Ledger rows are append-only
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
