from django.contrib import admin

from core.admin import GroupScopedAdmin

from .models import Guardian, Member, Registration


class RegistrationInline(admin.TabularInline):
    model = Registration
    extra = 0
    fields = ("year", "is_paid", "amount", "photo_consent", "created_at")
    readonly_fields = ("created_at",)
    show_change_link = True


@admin.register(Guardian)
class GuardianAdmin(admin.ModelAdmin):
    list_display = ("last_name", "first_name", "relationship", "phone_display", "email")
    search_fields = ("last_name", "first_name", "phone", "email")


@admin.register(Member)
class MemberAdmin(GroupScopedAdmin):
    list_display = ("last_name", "first_name", "birth_date", "patro_group", "section", "primary_guardian")
    list_filter = ("patro_group", "section")
    search_fields = ("last_name", "first_name", "primary_guardian__phone", "secondary_guardian__phone")
    list_select_related = ("primary_guardian",)
    raw_id_fields = ("primary_guardian", "secondary_guardian")
    inlines = [RegistrationInline]


@admin.register(Registration)
class RegistrationAdmin(GroupScopedAdmin):
    group_field = "member__patro_group"

    list_display = ("member", "year", "is_paid", "amount", "created_at")
    list_filter = ("year", "is_paid", "member__patro_group")
    search_fields = ("member__last_name", "member__first_name")
    list_select_related = ("member",)
    raw_id_fields = ("member",)
    readonly_fields = ("created_at", "updated_at")
