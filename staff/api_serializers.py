from rest_framework import serializers

from core.models import PatroGroup
from core.phones import format_phone

from .models import StaffMember


class StaffMemberSerializer(serializers.ModelSerializer):
    patro_group = serializers.ChoiceField(choices=PatroGroup.choices)
    phone = serializers.CharField(min_length=9, max_length=30)
    phone_display = serializers.SerializerMethodField()

    class Meta:
        model = StaffMember
        fields = [
            "id",
            "last_name",
            "first_name",
            "phone",
            "phone_display",
            "email",
            "patro_group",
            "function",
            "show_contact",
        ]

    def get_phone_display(self, obj):
        return format_phone(obj.phone)


class PublicStaffContactSerializer(serializers.ModelSerializer):
    phone_display = serializers.SerializerMethodField()
    function_label = serializers.CharField(source="get_function_display", read_only=True)

    class Meta:
        model = StaffMember
        fields = ["first_name", "last_name", "patro_group", "function", "function_label", "phone_display", "email"]

    def get_phone_display(self, obj):
        return format_phone(obj.phone)
