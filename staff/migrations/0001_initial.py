from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="StaffMember",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("last_name", models.CharField(max_length=100, verbose_name="nom")),
                ("first_name", models.CharField(max_length=100, verbose_name="prénom")),
                ("phone", models.CharField(max_length=20, verbose_name="téléphone")),
                ("email", models.EmailField(blank=True, max_length=254, verbose_name="email")),
                (
                    "patro_group",
                    models.CharField(choices=[("GARCONS", "Garçons"), ("FILLES", "Filles")], max_length=10, verbose_name="groupe"),
                ),
                (
                    "function",
                    models.CharField(
                        choices=[
                            ("ANIMATEUR", "Animateur"),
                            ("PRESIDENT", "Président"),
                            ("VICE_PRESIDENT", "Vice-Président"),
                            ("CO_PRESIDENT", "Co-Président"),
                        ],
                        default="ANIMATEUR",
                        max_length=20,
                        verbose_name="fonction",
                    ),
                ),
                (
                    "show_contact",
                    models.BooleanField(
                        default=False,
                        help_text="Affiché sur la page d'accueil publique.",
                        verbose_name="afficher le contact",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "animateur",
                "verbose_name_plural": "animateurs",
                "ordering": ("patro_group", "last_name", "first_name"),
            },
        ),
    ]
