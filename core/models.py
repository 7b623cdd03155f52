from decimal import Decimal

from django.conf import settings
from django.contrib.auth.models import User
from django.db import models


class PatroGroup(models.TextChoices):
    GARCONS = "GARCONS", "Garçons"
    FILLES = "FILLES", "Filles"


class Section(models.TextChoices):
    POUSSINS_G = "POUSSINS_G", "Poussins (Garçons)"
    BENJAMINS = "BENJAMINS", "Benjamins"
    CHEVALIERS = "CHEVALIERS", "Chevaliers"
    CONQUERANTS = "CONQUERANTS", "Conquérants"
    BROTHERS = "BROTHERS", "Brothers"
    POUSSINS_F = "POUSSINS_F", "Poussins (Filles)"
    BENJAMINES = "BENJAMINES", "Benjamines"
    ETINCELLES = "ETINCELLES", "Étincelles"
    ALPINES = "ALPINES", "Alpines"
    GRANDES = "GRANDES", "Grandes"


class Role(models.TextChoices):
    ADMIN = "ADMIN", "Administrateur"
    PRESIDENT = "PRESIDENT", "Président"
    ANIMATEUR = "ANIMATEUR", "Animateur"


class StaffFunction(models.TextChoices):
    ANIMATEUR = "ANIMATEUR", "Animateur"
    PRESIDENT = "PRESIDENT", "Président"
    VICE_PRESIDENT = "VICE_PRESIDENT", "Vice-Président"
    CO_PRESIDENT = "CO_PRESIDENT", "Co-Président"


class UserProfile(models.Model):
    user = models.OneToOneField(
        User,
        on_delete=models.CASCADE,
        related_name="profile",
        verbose_name="utilisateur",
    )
    role = models.CharField(
        "rôle",
        max_length=20,
        choices=Role.choices,
        default=Role.ANIMATEUR,
    )
    patro_group = models.CharField(
        "groupe",
        max_length=10,
        choices=PatroGroup.choices,
        null=True,
        blank=True,
        help_text="Vide pour un administrateur (accès aux deux groupes).",
    )

    class Meta:
        verbose_name = "profil utilisateur"
        verbose_name_plural = "profils utilisateurs"

    def __str__(self):
        group = self.get_patro_group_display() if self.patro_group else "Tous les groupes"
        return f"{self.user.username} - {self.get_role_display()} ({group})"


class GroupSettings(models.Model):
    """Paramètres d'un groupe (une ligne par groupe)."""

    patro_group = models.CharField(
        "groupe",
        max_length=10,
        choices=PatroGroup.choices,
        unique=True,
    )
    registration_fee = models.DecimalField(
        "cotisation annuelle (€)",
        max_digits=8,
        decimal_places=2,
        default=Decimal("45.00"),
    )
    contact_email = models.EmailField("email de contact", blank=True)
    address = models.CharField("adresse", max_length=250, blank=True)
    schedule = models.CharField("horaires", max_length=250, blank=True)
    iban = models.CharField("IBAN", max_length=40, blank=True)
    bic = models.CharField("BIC", max_length=11, blank=True)
    beneficiary = models.CharField("bénéficiaire", max_length=140, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "paramètres du groupe"
        verbose_name_plural = "paramètres des groupes"
        ordering = ("patro_group",)

    def __str__(self) -> str:
        return f"Paramètres {self.get_patro_group_display()}"

    @classmethod
    def fee_for(cls, patro_group: str) -> Decimal:
        row = cls.objects.filter(patro_group=patro_group).only("registration_fee").first()
        if row is not None:
            return row.registration_fee
        return Decimal(getattr(settings, "PATRO_DEFAULT_REGISTRATION_FEE", 45))
