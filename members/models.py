from decimal import Decimal

from django.db import models

from core.classification import (
    current_school_year,
    display_section,
    is_staff_age,
    place_member,
    school_age,
)
from core.models import PatroGroup, Section
from core.phones import format_phone, normalize_phone


class Guardian(models.Model):
    """Responsable (parent). La clé d'unicité est le téléphone normalisé."""

    first_name = models.CharField("prénom", max_length=100)
    last_name = models.CharField("nom", max_length=100)
    relationship = models.CharField("lien de parenté", max_length=50)
    phone = models.CharField(
        "téléphone",
        max_length=20,
        unique=True,
        help_text="Format canonique : 32XXXXXXXXX",
    )
    email = models.EmailField("email", blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "responsable"
        verbose_name_plural = "responsables"
        ordering = ("last_name", "first_name")

    def __str__(self):
        return f"{self.first_name} {self.last_name}"

    def save(self, *args, **kwargs):
        # ✅ toujours stocker la clé canonique (évite les doublons de responsables)
        self.phone = normalize_phone(self.phone)
        super().save(*args, **kwargs)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def phone_display(self) -> str:
        return format_phone(self.phone)


class Member(models.Model):
    first_name = models.CharField("prénom", max_length=100)
    last_name = models.CharField("nom", max_length=100)
    birth_date = models.DateField("date de naissance")
    patro_group = models.CharField("groupe", max_length=10, choices=PatroGroup.choices)
    section = models.CharField(
        "section",
        max_length=20,
        choices=Section.choices,
        null=True,
        blank=True,
    )
    address = models.CharField("adresse", max_length=250)
    city = models.CharField("ville", max_length=100)
    postal_code = models.CharField("code postal", max_length=10)
    secondary_email = models.EmailField("email secondaire", blank=True, null=True)
    primary_guardian = models.ForeignKey(
        Guardian,
        on_delete=models.PROTECT,
        related_name="primary_members",
        verbose_name="1er responsable",
    )
    secondary_guardian = models.ForeignKey(
        Guardian,
        on_delete=models.SET_NULL,
        related_name="secondary_members",
        verbose_name="2e responsable",
        null=True,
        blank=True,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "membre"
        verbose_name_plural = "membres"
        ordering = ("last_name", "first_name")
        indexes = [
            models.Index(fields=["last_name", "first_name", "birth_date"], name="member_identity_idx"),
            models.Index(fields=["patro_group", "section"], name="member_group_section_idx"),
        ]

    def __str__(self):
        return f"{self.first_name} {self.last_name}"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def school_age(self, on_date=None) -> int:
        return school_age(self.birth_date, on_date)

    def is_staff_age(self, on_date=None) -> bool:
        return is_staff_age(self.birth_date, on_date)

    def placement(self, on_date=None):
        return place_member(self.birth_date, self.patro_group, on_date)

    def display_section(self, on_date=None) -> str:
        return display_section(self.birth_date, self.section, on_date)

    def registration_for(self, year: str | None = None):
        year = year or current_school_year()
        return self.registrations.filter(year=year).first()


class Registration(models.Model):
    PHOTO_CONSENT_CHOICES = [
        ("full", "Photos autorisées"),
        ("background", "Uniquement en arrière-plan"),
        ("none", "Aucune photo"),
    ]

    member = models.ForeignKey(
        Member,
        on_delete=models.CASCADE,
        related_name="registrations",
        verbose_name="membre",
    )
    year = models.CharField("année scolaire", max_length=9, help_text="Ex: 2024-2025")
    medical_info = models.JSONField("fiche médicale", default=dict, blank=True)
    weight = models.DecimalField("poids (kg)", max_digits=5, decimal_places=1, null=True, blank=True)
    photo_consent = models.CharField(
        "droit à l'image",
        max_length=20,
        choices=PHOTO_CONSENT_CHOICES,
        default="none",
    )
    photo_usage = models.BooleanField("usage communication", default=False)
    photo_archive = models.BooleanField("archives", default=False)
    emergency_medical_consent = models.BooleanField("autorisation médicale d'urgence", default=False)
    is_paid = models.BooleanField("payé", default=False)
    amount = models.DecimalField("montant (€)", max_digits=8, decimal_places=2, default=Decimal("45.00"))
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "inscription"
        verbose_name_plural = "inscriptions"
        ordering = ("-year", "member__last_name")
        constraints = [
            models.UniqueConstraint(
                fields=["member", "year"],
                name="uniq_member_year",
            )
        ]

    def __str__(self) -> str:
        return f"{self.member} ({self.year})"

    @property
    def patro_group(self) -> str:
        return self.member.patro_group
