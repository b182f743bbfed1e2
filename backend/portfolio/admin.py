from django.contrib import admin
from .models import Holding, Stock

@admin.register(Stock)
class StockAdmin(admin.ModelAdmin):
    list_display = ("symbol", "name", "price", "updated_at")
    search_fields = ("symbol", "name")

@admin.register(Holding)
class HoldingAdmin(admin.ModelAdmin):
    list_display = ("user", "stock", "quantity", "updated_at")
    search_fields = ("user__email", "stock__symbol")
