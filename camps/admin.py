from django.contrib import admin

from core.admin import GroupScopedAdmin

from .models import Camp, CampRegistration


class CampRegistrationInline(admin.TabularInline):
    model = CampRegistration
    extra = 0
    fields = ("member", "is_paid", "paid_amount", "medical_info_updated", "created_at")
    readonly_fields = ("created_at",)
    raw_id_fields = ("member",)


@admin.register(Camp)
class CampAdmin(GroupScopedAdmin):
    list_display = ("name", "patro_group", "start_date", "end_date", "price", "max_participants", "is_public")
    list_filter = ("patro_group", "is_public")
    search_fields = ("name", "location")
    filter_horizontal = ("animators",)
    readonly_fields = ("created_by", "created_at", "updated_at")
    inlines = [CampRegistrationInline]

    def save_model(self, request, obj, form, change):
        if not change and obj.created_by_id is None:
            obj.created_by = request.user
        super().save_model(request, obj, form, change)


@admin.register(CampRegistration)
class CampRegistrationAdmin(GroupScopedAdmin):
    group_field = "camp__patro_group"

    list_display = ("member", "camp", "is_paid", "paid_amount", "medical_info_updated", "created_at")
    list_filter = ("camp", "is_paid")
    search_fields = ("member__last_name", "member__first_name", "camp__name")
    list_select_related = ("member", "camp")
    raw_id_fields = ("member", "camp")
