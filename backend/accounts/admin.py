from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ("username", "get_full_name", "role", "national_id",
                    "phone_number", "is_active")
    list_filter = ("role", "is_active", "is_staff")
    search_fields = ("username", "email", "national_id", "phone_number",
                     "first_name", "last_name")
    ordering = ("username",)
    readonly_fields = ("last_login", "date_joined")
    fieldsets = BaseUserAdmin.fieldsets + (
        ("Complaint system", {"fields": ("role", "national_id", "phone_number")}),
    )
    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ("Complaint system", {"fields": ("role", "email", "national_id",
                                         "phone_number", "first_name", "last_name")}),
    )
