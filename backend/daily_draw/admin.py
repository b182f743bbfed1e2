from django.contrib import admin
from .models import DailyDraw, DailyDrawEntry


class DailyDrawEntryInline(admin.TabularInline):
    model = DailyDrawEntry
    extra = 0
    readonly_fields = ("user", "tokens", "created_at", "updated_at")
    can_delete = False


@admin.register(DailyDraw)
class DailyDrawAdmin(admin.ModelAdmin):
    list_display = ("date_key", "status", "winner", "payout", "participants", "closed_at")
    list_filter = ("status",)
    readonly_fields = ("status", "winner", "payout", "participants", "closed_at", "created_at")
    inlines = [DailyDrawEntryInline]
