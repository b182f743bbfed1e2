from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import User


@admin.register(User)
class TradingUserAdmin(UserAdmin):
    list_display = ("username", "email", "display_name", "is_staff", "date_joined")
    fieldsets = UserAdmin.fieldsets + (("Profile", {"fields": ("display_name",)}),)
