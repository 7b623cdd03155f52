from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone

from core.classification import current_school_year, section_label
from core.models import PatroGroup


class Camp(models.Model):
    name = models.CharField("nom", max_length=200)
    description = models.TextField("description", blank=True)
    location = models.CharField("lieu", max_length=200)
    start_date = models.DateField("date de début")
    end_date = models.DateField("date de fin")
    start_time = models.TimeField("heure de début", null=True, blank=True)
    end_time = models.TimeField("heure de fin", null=True, blank=True)
    price = models.DecimalField("prix (€)", max_digits=8, decimal_places=2, default=Decimal("0.00"))
    max_participants = models.PositiveIntegerField(
        "places",
        null=True,
        blank=True,
        help_text="Vide = pas de limite.",
    )
    sections = models.JSONField(
        "sections concernées",
        default=list,
        blank=True,
        help_text="Liste de sections ; vide = toutes les sections du groupe.",
    )
    patro_group = models.CharField("groupe", max_length=10, choices=PatroGroup.choices)
    animators = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        related_name="supervised_camps",
        blank=True,
        verbose_name="animateurs",
    )

    # Paiement (virement SEPA)
    iban = models.CharField("IBAN", max_length=40, blank=True)
    bic = models.CharField("BIC", max_length=11, blank=True)
    beneficiary = models.CharField("bénéficiaire", max_length=140, blank=True)

    is_public = models.BooleanField("inscriptions ouvertes", default=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="created_camps",
        null=True,
        blank=True,
        verbose_name="créé par",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "camp"
        verbose_name_plural = "camps"
        ordering = ("start_date", "name")
        indexes = [
            models.Index(fields=["patro_group", "start_date"], name="camp_group_start_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.get_patro_group_display()})"

    @property
    def is_upcoming(self) -> bool:
        return self.end_date >= timezone.localdate()

    @property
    def section_labels(self) -> list[str]:
        return [section_label(s) for s in (self.sections or [])]

    @property
    def payment_reference(self) -> str:
        return f"Camp {self.name}"

    def accepts_section(self, section: str | None) -> bool:
        if not self.sections:
            return True
        return section in self.sections

    def places_left(self, registered: int | None = None) -> int | None:
        if self.max_participants is None:
            return None
        if registered is None:
            registered = self.registrations.count()
        return max(self.max_participants - registered, 0)


class CampRegistration(models.Model):
    camp = models.ForeignKey(
        Camp,
        on_delete=models.CASCADE,
        related_name="registrations",
        verbose_name="camp",
    )
    member = models.ForeignKey(
        "members.Member",
        on_delete=models.CASCADE,
        related_name="camp_registrations",
        verbose_name="membre",
    )
    medical_info_updated = models.BooleanField("fiche médicale mise à jour", default=False)
    medical_info = models.JSONField("fiche médicale (camp)", null=True, blank=True)
    remarks = models.TextField("remarques", blank=True)
    is_paid = models.BooleanField("payé", default=False)
    paid_amount = models.DecimalField("montant (€)", max_digits=8, decimal_places=2, default=Decimal("0.00"))
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "inscription au camp"
        verbose_name_plural = "inscriptions aux camps"
        ordering = ("camp", "member__last_name", "member__first_name")
        constraints = [
            models.UniqueConstraint(
                fields=["camp", "member"],
                name="uniq_camp_member",
            )
        ]

    def __str__(self) -> str:
        return f"{self.member} → {self.camp.name}"

    @property
    def patro_group(self) -> str:
        return self.camp.patro_group

    def effective_medical_info(self) -> dict:
        """Fiche mise à jour pour le camp, sinon celle de l'inscription annuelle."""
        if self.medical_info_updated and self.medical_info:
            return self.medical_info
        registration = self.member.registration_for(current_school_year(self.camp.start_date))
        if registration is None:
            registration = self.member.registrations.order_by("-year").first()
        return registration.medical_info if registration else {}
