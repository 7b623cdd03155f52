from decimal import Decimal

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("members", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Camp",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200, verbose_name="nom")),
                ("description", models.TextField(blank=True, verbose_name="description")),
                ("location", models.CharField(max_length=200, verbose_name="lieu")),
                ("start_date", models.DateField(verbose_name="date de début")),
                ("end_date", models.DateField(verbose_name="date de fin")),
                ("start_time", models.TimeField(blank=True, null=True, verbose_name="heure de début")),
                ("end_time", models.TimeField(blank=True, null=True, verbose_name="heure de fin")),
                (
                    "price",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=8, verbose_name="prix (€)"),
                ),
                (
                    "max_participants",
                    models.PositiveIntegerField(blank=True, help_text="Vide = pas de limite.", null=True, verbose_name="places"),
                ),
                (
                    "sections",
                    models.JSONField(
                        blank=True,
                        default=list,
                        help_text="Liste de sections ; vide = toutes les sections du groupe.",
                        verbose_name="sections concernées",
                    ),
                ),
                (
                    "patro_group",
                    models.CharField(choices=[("GARCONS", "Garçons"), ("FILLES", "Filles")], max_length=10, verbose_name="groupe"),
                ),
                ("iban", models.CharField(blank=True, max_length=40, verbose_name="IBAN")),
                ("bic", models.CharField(blank=True, max_length=11, verbose_name="BIC")),
                ("beneficiary", models.CharField(blank=True, max_length=140, verbose_name="bénéficiaire")),
                ("is_public", models.BooleanField(default=True, verbose_name="inscriptions ouvertes")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "animators",
                    models.ManyToManyField(
                        blank=True,
                        related_name="supervised_camps",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="animateurs",
                    ),
                ),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="created_camps",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="créé par",
                    ),
                ),
            ],
            options={
                "verbose_name": "camp",
                "verbose_name_plural": "camps",
                "ordering": ("start_date", "name"),
                "indexes": [
                    models.Index(fields=["patro_group", "start_date"], name="camp_group_start_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="CampRegistration",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("medical_info_updated", models.BooleanField(default=False, verbose_name="fiche médicale mise à jour")),
                ("medical_info", models.JSONField(blank=True, null=True, verbose_name="fiche médicale (camp)")),
                ("remarks", models.TextField(blank=True, verbose_name="remarques")),
                ("is_paid", models.BooleanField(default=False, verbose_name="payé")),
                (
                    "paid_amount",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=8, verbose_name="montant (€)"),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "camp",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="registrations",
                        to="camps.camp",
                        verbose_name="camp",
                    ),
                ),
                (
                    "member",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="camp_registrations",
                        to="members.member",
                        verbose_name="membre",
                    ),
                ),
            ],
            options={
                "verbose_name": "inscription au camp",
                "verbose_name_plural": "inscriptions aux camps",
                "ordering": ("camp", "member__last_name", "member__first_name"),
                "constraints": [
                    models.UniqueConstraint(fields=("camp", "member"), name="uniq_camp_member"),
                ],
            },
        ),
    ]
