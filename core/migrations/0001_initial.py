from decimal import Decimal

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="GroupSettings",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "patro_group",
                    models.CharField(
                        choices=[("GARCONS", "Garçons"), ("FILLES", "Filles")],
                        max_length=10,
                        unique=True,
                        verbose_name="groupe",
                    ),
                ),
                (
                    "registration_fee",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("45.00"),
                        max_digits=8,
                        verbose_name="cotisation annuelle (€)",
                    ),
                ),
                ("contact_email", models.EmailField(blank=True, max_length=254, verbose_name="email de contact")),
                ("address", models.CharField(blank=True, max_length=250, verbose_name="adresse")),
                ("schedule", models.CharField(blank=True, max_length=250, verbose_name="horaires")),
                ("iban", models.CharField(blank=True, max_length=40, verbose_name="IBAN")),
                ("bic", models.CharField(blank=True, max_length=11, verbose_name="BIC")),
                ("beneficiary", models.CharField(blank=True, max_length=140, verbose_name="bénéficiaire")),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "paramètres du groupe",
                "verbose_name_plural": "paramètres des groupes",
                "ordering": ("patro_group",),
            },
        ),
        migrations.CreateModel(
            name="UserProfile",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "role",
                    models.CharField(
                        choices=[
                            ("ADMIN", "Administrateur"),
                            ("PRESIDENT", "Président"),
                            ("ANIMATEUR", "Animateur"),
                        ],
                        default="ANIMATEUR",
                        max_length=20,
                        verbose_name="rôle",
                    ),
                ),
                (
                    "patro_group",
                    models.CharField(
                        blank=True,
                        choices=[("GARCONS", "Garçons"), ("FILLES", "Filles")],
                        help_text="Vide pour un administrateur (accès aux deux groupes).",
                        max_length=10,
                        null=True,
                        verbose_name="groupe",
                    ),
                ),
                (
                    "user",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="profile",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="utilisateur",
                    ),
                ),
            ],
            options={
                "verbose_name": "profil utilisateur",
                "verbose_name_plural": "profils utilisateurs",
            },
        ),
    ]
