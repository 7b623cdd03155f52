from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from typing import Any

from django.contrib.auth.models import User
from django.utils import timezone

from core.classification import classify_section, current_school_year, school_year_start, sections_for_group
from core.models import UserProfile


def birth_date_for_age(age: int, month: int = 3, day: int = 15, on_date: date | None = None) -> date:
    """Date de naissance donnant exactement cet âge scolaire aujourd'hui (ou à on_date)."""
    return date(school_year_start(on_date) - age, month, day)


def make_user(username: str, role: str | None = None, group: str | None = None, **extra) -> User:
    """Utilisateur + profil. role=None : pas de profil."""
    user = User.objects.create_user(username=username, password="pass12345", **extra)
    if role is not None:
        UserProfile.objects.create(user=user, role=role, patro_group=group)
    return user


def make_guardian(phone: str = "0477123456", **fields):
    from members.models import Guardian

    defaults = {
        "first_name": "Marie",
        "last_name": "Dupont",
        "relationship": "Mère",
        "email": "marie@example.com",
    }
    defaults.update(fields)
    return Guardian.objects.create(phone=phone, **defaults)


def make_member(group: str = "GARCONS", age: int = 10, guardian=None, **fields):
    from members.models import Member

    birth_date = fields.pop("birth_date", None) or birth_date_for_age(age)
    defaults = {
        "first_name": "Lucas",
        "last_name": "Dupont",
        "address": "Rue de la Station 12",
        "city": "Namur",
        "postal_code": "5000",
    }
    defaults.update(fields)
    return Member.objects.create(
        birth_date=birth_date,
        patro_group=group,
        section=classify_section(birth_date, group),
        primary_guardian=guardian or make_guardian(),
        **defaults,
    )


def medical_info(**overrides) -> dict[str, Any]:
    info = {
        "doctor_name": "Dr Martin",
        "doctor_phone": "081223344",
        "can_participate": True,
        "participation_restrictions": "",
        "can_swim": "yes",
        "important_medical_info": "",
        "medical_history": "",
        "tetanus_vaccine": True,
        "allergies": {"has_allergies": False, "allergy_list": "", "allergy_consequences": ""},
        "diet": {"has_diet": False, "diet_details": ""},
        "medications": {"takes_medication": False, "medication_details": "", "is_autonomous": False},
        "other_info": "",
    }
    info.update(overrides)
    return info


def make_registration(member, year: str | None = None, **fields):
    from members.models import Registration

    fields.setdefault("medical_info", medical_info())
    return Registration.objects.create(member=member, year=year or current_school_year(), **fields)


def medical_payload(**overrides) -> dict[str, Any]:
    """Champs plats d'une fiche médicale valide (formulaire)."""
    payload = {
        "doctor_name": "Dr Martin",
        "doctor_phone": "081 22 33 44",
        "can_participate": True,
        "participation_restrictions": "",
        "can_swim": "yes",
        "important_medical_info": "",
        "medical_history": "",
        "tetanus_vaccine": True,
        "has_allergies": False,
        "allergy_list": "",
        "allergy_consequences": "",
        "has_diet": False,
        "diet_details": "",
        "takes_medication": False,
        "medication_details": "",
        "medication_autonomous": False,
        "other_info": "",
    }
    payload.update(overrides)
    return payload


def registration_payload(**overrides) -> dict[str, Any]:
    """Corps valide pour POST /api/registrations/."""
    payload = {
        "child_first_name": "Lucas",
        "child_last_name": "Dupont",
        "child_birth_date": birth_date_for_age(10).isoformat(),
        "patro_group": "GARCONS",
        "address": "Rue de la Station 12",
        "city": "Namur",
        "postal_code": "5000",
        "parent1_first_name": "Marie",
        "parent1_last_name": "Dupont",
        "parent1_relationship": "Mère",
        "parent1_phone": "0477 12 34 56",
        "parent1_email": "marie@example.com",
        "parent2_first_name": "Paul",
        "parent2_last_name": "Dupont",
        "parent2_relationship": "Père",
        "parent2_phone": "+32 478 65 43 21",
        "secondary_email": "",
        "photo_consent": "full",
        "photo_usage": True,
        "photo_archive": False,
        "weight": "32.5",
        "emergency_medical_consent": True,
    }
    payload.update(medical_payload())
    payload.update(overrides)
    return payload


def make_camp(group: str = "GARCONS", sections=None, **fields):
    from camps.models import Camp

    start = timezone.localdate() + timedelta(days=30)
    defaults = {
        "name": "Camp d'été",
        "location": "Bouillon",
        "start_date": start,
        "end_date": start + timedelta(days=7),
        "price": Decimal("120.00"),
        "iban": "BE68 5390 0754 7034",
        "bic": "GKCCBEBB",
        "beneficiary": "Patro Saint-Joseph",
        "is_public": True,
    }
    defaults.update(fields)
    if sections is None:
        sections = sections_for_group(group)
    return Camp.objects.create(patro_group=group, sections=list(sections), **defaults)
