# core/admin.py
from __future__ import annotations

from django.contrib import admin

from .access import AccessPolicy
from .models import GroupSettings, PatroGroup, UserProfile


class GroupScopedAdmin(admin.ModelAdmin):
    """
    Mixin: limite l'admin aux groupes visibles de l'utilisateur.
    ADMIN / superuser voient tout.

    group_field: chemin ORM vers le groupe (ex: "patro_group", "member__patro_group").
    """

    group_field = "patro_group"

    def _access(self, request) -> AccessPolicy:
        return AccessPolicy.for_user(request.user)

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return self._access(request).scope(qs, self.group_field)

    def save_model(self, request, obj, form, change):
        access = self._access(request)
        if not access.is_admin and access.group and self.group_field == "patro_group":
            obj.patro_group = access.group
        super().save_model(request, obj, form, change)

    def formfield_for_choice_field(self, db_field, request, **kwargs):
        access = self._access(request)
        if db_field.name == "patro_group" and not access.is_admin:
            kwargs["choices"] = [(g, label) for g, label in PatroGroup.choices if g in access.visible_groups]
        return super().formfield_for_choice_field(db_field, request, **kwargs)


@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    list_display = ("user", "role", "patro_group")
    list_filter = ("role", "patro_group")
    search_fields = (
        "user__username",
        "user__email",
        "user__first_name",
        "user__last_name",
    )
    autocomplete_fields = ("user",)
    list_select_related = ("user",)


@admin.register(GroupSettings)
class GroupSettingsAdmin(GroupScopedAdmin):
    list_display = ("patro_group", "registration_fee", "contact_email", "beneficiary", "updated_at")
    readonly_fields = ("updated_at",)
