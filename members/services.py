# members/services.py
from __future__ import annotations

import logging
from datetime import date
from typing import Any

from django.db import IntegrityError, transaction
from django.db.models import Q

from core.classification import classify_section, current_school_year
from core.models import GroupSettings
from core.phones import normalize_phone

from .medical import build_medical_info
from .models import Guardian, Member, Registration

logger = logging.getLogger(__name__)


class AlreadyRegistered(Exception):
    status_code = 400

    def __init__(self, member: Member, year: str):
        self.member = member
        self.year = year
        super().__init__("Cet enfant est déjà inscrit pour cette année")


def _get_or_create_guardian(
    phone: str,
    *,
    first_name: str,
    last_name: str,
    relationship: str,
    email: str,
    refresh_email: bool,
) -> Guardian:
    """Responsable retrouvé par téléphone canonique, créé sinon."""
    key = normalize_phone(phone)
    guardian = Guardian.objects.filter(phone=key).first()

    if guardian is None:
        return Guardian.objects.create(
            first_name=first_name,
            last_name=last_name,
            relationship=relationship,
            email=email,
            phone=key,
        )

    if refresh_email and email and guardian.email != email:
        guardian.email = email
        guardian.save(update_fields=["email", "updated_at"])
    return guardian


def find_existing_member(first_name: str, last_name: str, birth_date: date, guardians: list[Guardian]):
    guardian_ids = [g.id for g in guardians]
    return (
        Member.objects.filter(
            first_name=first_name,
            last_name=last_name,
            birth_date=birth_date,
        )
        .filter(Q(primary_guardian_id__in=guardian_ids) | Q(secondary_guardian_id__in=guardian_ids))
        .order_by("id")
        .first()
    )


@transaction.atomic
def register_member(data: dict[str, Any], on_date: date | None = None) -> Registration:
    """
    Inscription annuelle d'un enfant (données déjà validées).

    1) responsables retrouvés / créés par téléphone normalisé
       - le 1er voit son email mis à jour
       - un 2e nouveau reçoit l'email du 1er
    2) enfant retrouvé (nom + prénom + naissance + un des responsables) et
       adresse rafraîchie, ou créé avec sa section
    3) une seule inscription par année scolaire (AlreadyRegistered)
    """
    parent1 = _get_or_create_guardian(
        data["parent1_phone"],
        first_name=data["parent1_first_name"],
        last_name=data["parent1_last_name"],
        relationship=data["parent1_relationship"],
        email=data["parent1_email"],
        refresh_email=True,
    )
    parent2 = _get_or_create_guardian(
        data["parent2_phone"],
        first_name=data["parent2_first_name"],
        last_name=data["parent2_last_name"],
        relationship=data["parent2_relationship"],
        email=data["parent1_email"],
        refresh_email=False,
    )

    secondary_email = data.get("secondary_email") or None

    member = find_existing_member(
        data["child_first_name"],
        data["child_last_name"],
        data["child_birth_date"],
        [parent1, parent2],
    )
    if member is not None:
        member.address = data["address"]
        member.city = data["city"]
        member.postal_code = data["postal_code"]
        member.secondary_email = secondary_email
        member.save(update_fields=["address", "city", "postal_code", "secondary_email", "updated_at"])
    else:
        member = Member.objects.create(
            first_name=data["child_first_name"],
            last_name=data["child_last_name"],
            birth_date=data["child_birth_date"],
            patro_group=data["patro_group"],
            section=classify_section(data["child_birth_date"], data["patro_group"], on_date),
            address=data["address"],
            city=data["city"],
            postal_code=data["postal_code"],
            secondary_email=secondary_email,
            primary_guardian=parent1,
            secondary_guardian=parent2,
        )

    year = current_school_year(on_date)
    if Registration.objects.filter(member=member, year=year).exists():
        raise AlreadyRegistered(member, year)

    try:
        # savepoint : la contrainte unique reste la garantie en cas de double envoi
        with transaction.atomic():
            registration = Registration.objects.create(
                member=member,
                year=year,
                medical_info=build_medical_info(data),
                weight=data.get("weight"),
                photo_consent=data["photo_consent"],
                photo_usage=bool(data.get("photo_usage")),
                photo_archive=bool(data.get("photo_archive")),
                emergency_medical_consent=bool(data.get("emergency_medical_consent")),
                is_paid=False,
                amount=GroupSettings.fee_for(member.patro_group),
            )
    except IntegrityError:
        raise AlreadyRegistered(member, year)

    logger.info("Registered member_id=%s for %s (section=%s)", member.pk, year, member.section)
    return registration
