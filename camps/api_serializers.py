# camps/api_serializers.py
from __future__ import annotations

from django.contrib.auth import get_user_model
from rest_framework import serializers

from core.classification import section_group
from core.models import PatroGroup, Section
from members.api_serializers import MedicalInfoSerializer

from .models import Camp, CampRegistration

User = get_user_model()


class AnimatorSerializer(serializers.ModelSerializer):
    name = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ["id", "name"]

    def get_name(self, obj):
        return obj.get_full_name() or obj.username


class CampSerializer(serializers.ModelSerializer):
    patro_group = serializers.ChoiceField(choices=PatroGroup.choices)
    sections = serializers.ListField(
        child=serializers.ChoiceField(choices=Section.choices),
        allow_empty=False,
    )
    start_time = serializers.TimeField()
    end_time = serializers.TimeField()
    iban = serializers.CharField(max_length=40)
    beneficiary = serializers.CharField(max_length=140)
    price = serializers.DecimalField(max_digits=8, decimal_places=2, min_value=0)
    max_participants = serializers.IntegerField(min_value=1, required=False, allow_null=True)

    animator_ids = serializers.PrimaryKeyRelatedField(
        source="animators",
        queryset=User.objects.all(),
        many=True,
        required=False,
        write_only=True,
    )
    animators = AnimatorSerializer(many=True, read_only=True)
    created_by = serializers.SerializerMethodField()
    registrations_count = serializers.SerializerMethodField()
    section_labels = serializers.ListField(child=serializers.CharField(), read_only=True)
    is_upcoming = serializers.BooleanField(read_only=True)

    class Meta:
        model = Camp
        fields = [
            "id",
            "name",
            "description",
            "location",
            "start_date",
            "end_date",
            "start_time",
            "end_time",
            "price",
            "max_participants",
            "sections",
            "patro_group",
            "iban",
            "bic",
            "beneficiary",
            "is_public",
            "animator_ids",
            "animators",
            "created_by",
            "registrations_count",
            "section_labels",
            "is_upcoming",
        ]

    def get_created_by(self, obj):
        user = obj.created_by
        if user is None:
            return None
        return user.get_full_name() or user.username

    def get_registrations_count(self, obj):
        count = getattr(obj, "registrations_count", None)
        if count is None:
            count = obj.registrations.count()
        return count

    def validate(self, attrs):
        start = attrs.get("start_date", getattr(self.instance, "start_date", None))
        end = attrs.get("end_date", getattr(self.instance, "end_date", None))
        if start and end and end < start:
            raise serializers.ValidationError({"end_date": "La date de fin doit suivre la date de début"})

        group = attrs.get("patro_group", getattr(self.instance, "patro_group", None))
        sections = attrs.get("sections")
        if sections is not None:
            foreign = [s for s in sections if section_group(s) != group]
            if foreign:
                raise serializers.ValidationError({"sections": f"Sections hors du groupe {group} : {', '.join(foreign)}"})
            # ordre stable, sans doublons
            attrs["sections"] = list(dict.fromkeys(sections))
        return attrs


class CampRegistrationRequestSerializer(serializers.Serializer):
    camp_id = serializers.IntegerField()
    member_id = serializers.IntegerField()
    medical_info_changed = serializers.BooleanField(required=False, default=False)
    medical_info = MedicalInfoSerializer(required=False)
    remarks = serializers.CharField(required=False, allow_blank=True, default="")

    def validate(self, attrs):
        if attrs.get("medical_info_changed") and not attrs.get("medical_info"):
            raise serializers.ValidationError({"medical_info": "Fiche médicale requise si elle a changé"})
        if not attrs.get("medical_info_changed"):
            attrs.pop("medical_info", None)
        return attrs


class CampRegistrationSerializer(serializers.ModelSerializer):
    member_id = serializers.IntegerField(source="member.id", read_only=True)
    first_name = serializers.CharField(source="member.first_name", read_only=True)
    last_name = serializers.CharField(source="member.last_name", read_only=True)

    class Meta:
        model = CampRegistration
        fields = [
            "id",
            "member_id",
            "first_name",
            "last_name",
            "medical_info_updated",
            "remarks",
            "is_paid",
            "paid_amount",
            "created_at",
        ]
