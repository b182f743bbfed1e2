from django.contrib import admin
from .models import LootBox, LootBoxItem, UserLootBox


class LootBoxItemInline(admin.TabularInline):
    model = LootBoxItem
    extra = 1


@admin.register(LootBox)
class LootBoxAdmin(admin.ModelAdmin):
    list_display = ("name", "price", "is_active", "created_at")
    list_filter = ("is_active",)
    inlines = [LootBoxItemInline]


@admin.register(UserLootBox)
class UserLootBoxAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "lootbox", "purchased_at", "opened_at", "granted_stock")
    list_filter = ("lootbox",)
    readonly_fields = ("user", "lootbox", "purchased_at", "opened_at", "granted_stock")
