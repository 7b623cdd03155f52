from django.contrib import admin

from core.admin import GroupScopedAdmin

from .models import StaffMember


@admin.register(StaffMember)
class StaffMemberAdmin(GroupScopedAdmin):
    list_display = ("last_name", "first_name", "patro_group", "function", "phone_display", "show_contact")
    list_filter = ("patro_group", "function", "show_contact")
    search_fields = ("last_name", "first_name", "phone", "email")
    list_editable = ("show_contact",)
