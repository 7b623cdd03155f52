from decimal import Decimal

from django.db import migrations, models
import django.db.models.deletion


GROUP_CHOICES = [("GARCONS", "Garçons"), ("FILLES", "Filles")]

SECTION_CHOICES = [
    ("POUSSINS_G", "Poussins (Garçons)"),
    ("BENJAMINS", "Benjamins"),
    ("CHEVALIERS", "Chevaliers"),
    ("CONQUERANTS", "Conquérants"),
    ("BROTHERS", "Brothers"),
    ("POUSSINS_F", "Poussins (Filles)"),
    ("BENJAMINES", "Benjamines"),
    ("ETINCELLES", "Étincelles"),
    ("ALPINES", "Alpines"),
    ("GRANDES", "Grandes"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Guardian",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("first_name", models.CharField(max_length=100, verbose_name="prénom")),
                ("last_name", models.CharField(max_length=100, verbose_name="nom")),
                ("relationship", models.CharField(max_length=50, verbose_name="lien de parenté")),
                (
                    "phone",
                    models.CharField(
                        help_text="Format canonique : 32XXXXXXXXX",
                        max_length=20,
                        unique=True,
                        verbose_name="téléphone",
                    ),
                ),
                ("email", models.EmailField(blank=True, max_length=254, verbose_name="email")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "responsable",
                "verbose_name_plural": "responsables",
                "ordering": ("last_name", "first_name"),
            },
        ),
        migrations.CreateModel(
            name="Member",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("first_name", models.CharField(max_length=100, verbose_name="prénom")),
                ("last_name", models.CharField(max_length=100, verbose_name="nom")),
                ("birth_date", models.DateField(verbose_name="date de naissance")),
                ("patro_group", models.CharField(choices=GROUP_CHOICES, max_length=10, verbose_name="groupe")),
                (
                    "section",
                    models.CharField(blank=True, choices=SECTION_CHOICES, max_length=20, null=True, verbose_name="section"),
                ),
                ("address", models.CharField(max_length=250, verbose_name="adresse")),
                ("city", models.CharField(max_length=100, verbose_name="ville")),
                ("postal_code", models.CharField(max_length=10, verbose_name="code postal")),
                (
                    "secondary_email",
                    models.EmailField(blank=True, max_length=254, null=True, verbose_name="email secondaire"),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "primary_guardian",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="primary_members",
                        to="members.guardian",
                        verbose_name="1er responsable",
                    ),
                ),
                (
                    "secondary_guardian",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="secondary_members",
                        to="members.guardian",
                        verbose_name="2e responsable",
                    ),
                ),
            ],
            options={
                "verbose_name": "membre",
                "verbose_name_plural": "membres",
                "ordering": ("last_name", "first_name"),
                "indexes": [
                    models.Index(fields=["last_name", "first_name", "birth_date"], name="member_identity_idx"),
                    models.Index(fields=["patro_group", "section"], name="member_group_section_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Registration",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("year", models.CharField(help_text="Ex: 2024-2025", max_length=9, verbose_name="année scolaire")),
                ("medical_info", models.JSONField(blank=True, default=dict, verbose_name="fiche médicale")),
                (
                    "weight",
                    models.DecimalField(blank=True, decimal_places=1, max_digits=5, null=True, verbose_name="poids (kg)"),
                ),
                (
                    "photo_consent",
                    models.CharField(
                        choices=[
                            ("full", "Photos autorisées"),
                            ("background", "Uniquement en arrière-plan"),
                            ("none", "Aucune photo"),
                        ],
                        default="none",
                        max_length=20,
                        verbose_name="droit à l'image",
                    ),
                ),
                ("photo_usage", models.BooleanField(default=False, verbose_name="usage communication")),
                ("photo_archive", models.BooleanField(default=False, verbose_name="archives")),
                (
                    "emergency_medical_consent",
                    models.BooleanField(default=False, verbose_name="autorisation médicale d'urgence"),
                ),
                ("is_paid", models.BooleanField(default=False, verbose_name="payé")),
                (
                    "amount",
                    models.DecimalField(decimal_places=2, default=Decimal("45.00"), max_digits=8, verbose_name="montant (€)"),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "member",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="registrations",
                        to="members.member",
                        verbose_name="membre",
                    ),
                ),
            ],
            options={
                "verbose_name": "inscription",
                "verbose_name_plural": "inscriptions",
                "ordering": ("-year", "member__last_name"),
                "constraints": [
                    models.UniqueConstraint(fields=("member", "year"), name="uniq_member_year"),
                ],
            },
        ),
    ]
