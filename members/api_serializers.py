# members/api_serializers.py
from __future__ import annotations

from django.utils import timezone
from rest_framework import serializers

from core.classification import MIN_SECTION_AGE, current_school_year, school_age
from core.models import PatroGroup
from core.phones import format_phone

from .medical import SWIM_CHOICES
from .models import Guardian, Member, Registration


def _required_text(min_length: int, message: str):
    return serializers.CharField(
        min_length=min_length,
        trim_whitespace=True,
        error_messages={"min_length": message, "blank": message, "required": message},
    )


class MedicalInfoSerializer(serializers.Serializer):
    """Champs plats de la fiche médicale (inscription annuelle ou mise à jour pour un camp)."""

    doctor_name = _required_text(2, "Nom du médecin requis")
    doctor_phone = _required_text(9, "Numéro du médecin requis")

    can_participate = serializers.BooleanField()
    participation_restrictions = serializers.CharField(required=False, allow_blank=True, default="")

    can_swim = serializers.ChoiceField(choices=SWIM_CHOICES)

    important_medical_info = serializers.CharField(required=False, allow_blank=True, default="")
    medical_history = serializers.CharField(required=False, allow_blank=True, default="")

    tetanus_vaccine = serializers.BooleanField()

    has_allergies = serializers.BooleanField()
    allergy_list = serializers.CharField(required=False, allow_blank=True, default="")
    allergy_consequences = serializers.CharField(required=False, allow_blank=True, default="")

    has_diet = serializers.BooleanField()
    diet_details = serializers.CharField(required=False, allow_blank=True, default="")

    takes_medication = serializers.BooleanField()
    medication_details = serializers.CharField(required=False, allow_blank=True, default="")
    medication_autonomous = serializers.BooleanField(required=False, default=False)

    other_info = serializers.CharField(required=False, allow_blank=True, default="")


class RegistrationRequestSerializer(MedicalInfoSerializer):
    """Inscription complète d'un enfant (formulaire public)."""

    # Enfant
    child_first_name = _required_text(2, "Le prénom doit contenir au moins 2 caractères")
    child_last_name = _required_text(2, "Le nom doit contenir au moins 2 caractères")
    child_birth_date = serializers.DateField()
    patro_group = serializers.ChoiceField(choices=PatroGroup.choices)

    # Adresse
    address = _required_text(5, "Adresse incomplète")
    city = _required_text(2, "Ville requise")
    postal_code = _required_text(4, "Code postal invalide")

    # 1er responsable
    parent1_first_name = _required_text(2, "Prénom requis")
    parent1_last_name = _required_text(2, "Nom requis")
    parent1_relationship = _required_text(1, "Lien de parenté requis")
    parent1_phone = _required_text(9, "Numéro de téléphone invalide")
    parent1_email = serializers.EmailField(error_messages={"invalid": "Email invalide"})

    # 2e responsable
    parent2_first_name = _required_text(2, "Prénom requis")
    parent2_last_name = _required_text(2, "Nom requis")
    parent2_relationship = _required_text(1, "Lien de parenté requis")
    parent2_phone = _required_text(9, "Numéro de téléphone invalide")

    secondary_email = serializers.EmailField(required=False, allow_blank=True, default="")

    # Droit à l'image
    photo_consent = serializers.ChoiceField(choices=Registration.PHOTO_CONSENT_CHOICES)
    photo_usage = serializers.BooleanField(required=False, default=False)
    photo_archive = serializers.BooleanField(required=False, default=False)

    weight = serializers.DecimalField(max_digits=5, decimal_places=1, min_value=0)

    emergency_medical_consent = serializers.BooleanField()

    def validate_child_birth_date(self, value):
        today = timezone.localdate()
        if value > today:
            raise serializers.ValidationError("La date de naissance ne peut pas être dans le futur")
        if school_age(value, today) < MIN_SECTION_AGE:
            raise serializers.ValidationError(
                f"L'enfant doit avoir au moins {MIN_SECTION_AGE} ans (année scolaire {current_school_year(today)})"
            )
        return value

    def validate_emergency_medical_consent(self, value):
        if value is not True:
            raise serializers.ValidationError("Vous devez accepter l'autorisation médicale d'urgence")
        return value


class GuardianSerializer(serializers.ModelSerializer):
    phone_display = serializers.SerializerMethodField()

    class Meta:
        model = Guardian
        fields = ["id", "first_name", "last_name", "relationship", "phone", "phone_display", "email"]

    def get_phone_display(self, obj):
        return format_phone(obj.phone)


class MemberLookupSerializer(serializers.ModelSerializer):
    """Identité seule (recherche publique par date de naissance)."""

    class Meta:
        model = Member
        fields = ["id", "first_name", "last_name", "birth_date", "patro_group", "section"]


class MemberSerializer(serializers.ModelSerializer):
    primary_guardian = GuardianSerializer(read_only=True)
    secondary_guardian = GuardianSerializer(read_only=True)
    school_age = serializers.SerializerMethodField()
    section_label = serializers.SerializerMethodField()
    is_staff = serializers.SerializerMethodField()

    class Meta:
        model = Member
        fields = [
            "id",
            "first_name",
            "last_name",
            "birth_date",
            "patro_group",
            "section",
            "section_label",
            "is_staff",
            "school_age",
            "address",
            "city",
            "postal_code",
            "secondary_email",
            "primary_guardian",
            "secondary_guardian",
        ]

    def get_school_age(self, obj):
        return obj.school_age(self.context.get("on_date"))

    def get_section_label(self, obj):
        return obj.display_section(self.context.get("on_date"))

    def get_is_staff(self, obj):
        return obj.placement(self.context.get("on_date")).is_staff


class RegistrationSerializer(serializers.ModelSerializer):
    member = MemberSerializer(read_only=True)

    class Meta:
        model = Registration
        fields = [
            "id",
            "year",
            "member",
            "medical_info",
            "weight",
            "photo_consent",
            "photo_usage",
            "photo_archive",
            "emergency_medical_consent",
            "is_paid",
            "amount",
            "created_at",
        ]
