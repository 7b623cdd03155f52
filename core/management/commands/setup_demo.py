from datetime import date, time, timedelta
from decimal import Decimal

from django.contrib.auth.models import User
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from camps.models import Camp
from core.classification import school_year_start, sections_for_group
from core.models import GroupSettings, PatroGroup, Role, StaffFunction, UserProfile
from members.api_serializers import RegistrationRequestSerializer
from members.models import Member
from members.services import AlreadyRegistered, register_member
from staff.models import StaffMember

DEMO_PASSWORD = "demo_password_123"

DEMO_USERS = [
    ("demo_admin", Role.ADMIN, None),
    ("demo_president_g", Role.PRESIDENT, PatroGroup.GARCONS),
    ("demo_president_f", Role.PRESIDENT, PatroGroup.FILLES),
    ("demo_animateur_g", Role.ANIMATEUR, PatroGroup.GARCONS),
    ("demo_animateur_f", Role.ANIMATEUR, PatroGroup.FILLES),
]

DEMO_ROSTER = [
    ("Lambert", "Julien", "0477 10 20 30", PatroGroup.GARCONS, StaffFunction.PRESIDENT, True),
    ("Dubois", "Thomas", "0478 11 22 33", PatroGroup.GARCONS, StaffFunction.ANIMATEUR, False),
    ("Lemaire", "Camille", "0479 44 55 66", PatroGroup.FILLES, StaffFunction.PRESIDENT, True),
    ("Renard", "Chloé", "0476 77 88 99", PatroGroup.FILLES, StaffFunction.VICE_PRESIDENT, True),
]

# (prénom, nom, âge scolaire, groupe, téléphone du parent)
DEMO_CHILDREN = [
    ("Noah", "Lambert", 5, PatroGroup.GARCONS, "0470 01 02 03"),
    ("Louis", "Martin", 10, PatroGroup.GARCONS, "0470 04 05 06"),
    ("Arthur", "Peeters", 16, PatroGroup.GARCONS, "0470 07 08 09"),
    ("Emma", "Leroy", 7, PatroGroup.FILLES, "0471 01 02 03"),
    ("Olivia", "Martin", 13, PatroGroup.FILLES, "0470 04 05 06"),
    ("Léa", "Dupont", 19, PatroGroup.FILLES, "0471 04 05 06"),
]


class Command(BaseCommand):
    help = "Crée (ou recrée) un jeu de données de démonstration"

    def add_arguments(self, parser):
        parser.add_argument("--reset", action="store_true", help="Supprime d'abord les données de démo")

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write("Starting demo setup...")

        if options["reset"]:
            self.stdout.write("Cleaning up old demo data...")
            User.objects.filter(username__startswith="demo_").delete()
            Camp.objects.filter(name__startswith="Camp démo").delete()
            Member.objects.filter(
                first_name__in=[c[0] for c in DEMO_CHILDREN],
                last_name__in=[c[1] for c in DEMO_CHILDREN],
            ).delete()

        self._settings()
        users = self._users()
        self._roster()
        self._children()
        self._camps(users)

        self.stdout.write(self.style.SUCCESS("Demo setup complete."))
        self.stdout.write(f"Comptes : {', '.join(u for u, _r, _g in DEMO_USERS)} / mot de passe : {DEMO_PASSWORD}")

    def _settings(self):
        for group, label in PatroGroup.choices:
            GroupSettings.objects.update_or_create(
                patro_group=group,
                defaults={
                    "registration_fee": Decimal("45.00"),
                    "contact_email": f"{group.lower()}@patro.example",
                    "address": "Rue du Patro 1, 5000 Namur",
                    "schedule": "Dimanche de 14h à 17h30",
                    "iban": "BE68 5390 0754 7034",
                    "bic": "GKCCBEBB",
                    "beneficiary": f"Patro {label}",
                },
            )

    def _users(self) -> dict[str, User]:
        self.stdout.write("Creating users...")
        users = {}
        for username, role, group in DEMO_USERS:
            user, created = User.objects.get_or_create(username=username)
            if created:
                user.set_password(DEMO_PASSWORD)
                user.save(update_fields=["password"])
            UserProfile.objects.update_or_create(user=user, defaults={"role": role, "patro_group": group})
            users[username] = user
        return users

    def _roster(self):
        self.stdout.write("Creating staff roster...")
        for last_name, first_name, phone, group, function, show in DEMO_ROSTER:
            StaffMember.objects.update_or_create(
                last_name=last_name,
                first_name=first_name,
                patro_group=group,
                defaults={
                    "phone": phone,
                    "email": f"{first_name.lower()}.{last_name.lower()}@patro.example",
                    "function": function,
                    "show_contact": show,
                },
            )

    def _children(self):
        self.stdout.write("Registering children...")
        start = school_year_start()
        for first_name, last_name, age, group, phone in DEMO_CHILDREN:
            serializer = RegistrationRequestSerializer(
                data={
                    "patro_group": group,
                    "child_first_name": first_name,
                    "child_last_name": last_name,
                    "child_birth_date": date(start - age, 4, 12).isoformat(),
                    "address": "Rue des Écoles 12",
                    "city": "Namur",
                    "postal_code": "5000",
                    "parent1_first_name": "Marie",
                    "parent1_last_name": last_name,
                    "parent1_relationship": "Mère",
                    "parent1_phone": phone,
                    "parent1_email": f"parents.{last_name.lower()}@example.com",
                    "parent2_first_name": "Pierre",
                    "parent2_last_name": last_name,
                    "parent2_relationship": "Père",
                    "parent2_phone": "+32 499 00 00 00",
                    "photo_consent": "full",
                    "weight": "30.0",
                    "emergency_medical_consent": True,
                    "doctor_name": "Dr Janssens",
                    "doctor_phone": "081 22 33 44",
                    "can_participate": True,
                    "can_swim": "yes",
                    "tetanus_vaccine": True,
                    "has_allergies": first_name in ("Louis", "Emma"),
                    "allergy_list": "Arachides" if first_name in ("Louis", "Emma") else "",
                    "has_diet": first_name == "Olivia",
                    "diet_details": "Végétarien" if first_name == "Olivia" else "",
                    "takes_medication": False,
                },
            )
            if not serializer.is_valid():
                self.stdout.write(self.style.WARNING(f"Skipped {first_name} {last_name}: {serializer.errors}"))
                continue
            try:
                register_member(serializer.validated_data)
            except AlreadyRegistered:
                self.stdout.write(f"{first_name} {last_name} already registered")

    def _camps(self, users):
        self.stdout.write("Creating camps...")
        today = timezone.localdate()
        for group, label in PatroGroup.choices:
            start = today + timedelta(days=45)
            camp, _ = Camp.objects.update_or_create(
                name=f"Camp démo {label}",
                defaults={
                    "description": "Une semaine sous tente dans les Ardennes.",
                    "location": "Bouillon",
                    "start_date": start,
                    "end_date": start + timedelta(days=7),
                    "start_time": time(9, 0),
                    "end_time": time(16, 0),
                    "price": Decimal("150.00"),
                    "max_participants": 40,
                    "sections": sections_for_group(group),
                    "patro_group": group,
                    "iban": "BE68 5390 0754 7034",
                    "bic": "GKCCBEBB",
                    "beneficiary": f"Patro {label}",
                    "is_public": True,
                    "created_by": users["demo_admin"],
                },
            )
            prefix = "demo_animateur_g" if group == PatroGroup.GARCONS else "demo_animateur_f"
            camp.animators.set([users[prefix]])
