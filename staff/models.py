from django.db import models

from core.models import PatroGroup, StaffFunction
from core.phones import format_phone, normalize_phone


class StaffMemberQuerySet(models.QuerySet):
    def public(self):
        return self.filter(show_contact=True)


class StaffMember(models.Model):
    """Fiche contact d'un animateur (roster), indépendante des comptes utilisateurs."""

    last_name = models.CharField("nom", max_length=100)
    first_name = models.CharField("prénom", max_length=100)
    phone = models.CharField("téléphone", max_length=20)
    email = models.EmailField("email", blank=True)
    patro_group = models.CharField("groupe", max_length=10, choices=PatroGroup.choices)
    function = models.CharField(
        "fonction",
        max_length=20,
        choices=StaffFunction.choices,
        default=StaffFunction.ANIMATEUR,
    )
    show_contact = models.BooleanField(
        "afficher le contact",
        default=False,
        help_text="Affiché sur la page d'accueil publique.",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = StaffMemberQuerySet.as_manager()

    class Meta:
        verbose_name = "animateur"
        verbose_name_plural = "animateurs"
        ordering = ("patro_group", "last_name", "first_name")

    def __str__(self) -> str:
        return f"{self.first_name} {self.last_name} ({self.get_function_display()})"

    def save(self, *args, **kwargs):
        self.phone = normalize_phone(self.phone)
        super().save(*args, **kwargs)

    @property
    def phone_display(self) -> str:
        return format_phone(self.phone)
