# core/api_serializers.py
from rest_framework import serializers

from .models import GroupSettings, PatroGroup


class GroupSettingsSerializer(serializers.ModelSerializer):
    patro_group = serializers.ChoiceField(choices=PatroGroup.choices)

    class Meta:
        model = GroupSettings
        fields = [
            "patro_group",
            "registration_fee",
            "contact_email",
            "address",
            "schedule",
            "iban",
            "bic",
            "beneficiary",
            "updated_at",
        ]
        read_only_fields = ["updated_at"]
        # upsert par groupe : la contrainte unique est gérée dans la vue
        validators = []


class PublicGroupSettingsSerializer(serializers.ModelSerializer):
    class Meta:
        model = GroupSettings
        fields = ["patro_group", "registration_fee", "contact_email", "address", "schedule"]
