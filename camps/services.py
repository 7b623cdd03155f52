# camps/services.py
from __future__ import annotations

import logging
from datetime import date

from django.db import IntegrityError, transaction

from core.classification import classify_section
from members.medical import build_medical_info
from members.models import Member
from members.recaps import build_recaps

from .models import Camp, CampRegistration

logger = logging.getLogger(__name__)


class CampRegistrationError(Exception):
    status_code = 400
    message = "Inscription impossible"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)


class CampNotFound(CampRegistrationError):
    status_code = 404
    message = "Camp non trouvé"


class CampNotPublic(CampRegistrationError):
    status_code = 403
    message = "Les inscriptions à ce camp ne sont pas ouvertes"


class CampFull(CampRegistrationError):
    status_code = 400
    message = "Le camp est complet"


class MemberNotFound(CampRegistrationError):
    status_code = 404
    message = "Enfant non trouvé"


class GroupMismatch(CampRegistrationError):
    status_code = 403
    message = "Cet enfant n'appartient pas au groupe de ce camp"


class SectionNotEligible(CampRegistrationError):
    status_code = 403
    message = "Ce camp n'est pas ouvert à la section de cet enfant"


class AlreadyInCamp(CampRegistrationError):
    status_code = 400
    message = "Cet enfant est déjà inscrit à ce camp"


def register_for_camp(
    camp_id: int,
    member_id: int,
    *,
    medical_data: dict | None = None,
    remarks: str = "",
    on_date: date | None = None,
) -> CampRegistration:
    """
    Inscription d'un membre à un camp.

    Le camp est verrouillé (select_for_update) pendant le contrôle des places :
    deux inscriptions simultanées ne peuvent pas dépasser max_participants.
    Ordre des contrôles : camp, ouverture, places, enfant, groupe, section, doublon.
    """
    with transaction.atomic():
        camp = Camp.objects.select_for_update().filter(pk=camp_id).first()
        if camp is None:
            raise CampNotFound()
        if not camp.is_public:
            raise CampNotPublic()

        if camp.max_participants is not None:
            registered = CampRegistration.objects.filter(camp=camp).count()
            if registered >= camp.max_participants:
                raise CampFull()

        member = Member.objects.filter(pk=member_id).first()
        if member is None:
            raise MemberNotFound()
        if member.patro_group != camp.patro_group:
            raise GroupMismatch()

        section = classify_section(member.birth_date, member.patro_group, on_date)
        if not camp.accepts_section(section):
            raise SectionNotEligible()

        if CampRegistration.objects.filter(camp=camp, member=member).exists():
            raise AlreadyInCamp()

        try:
            with transaction.atomic():
                registration = CampRegistration.objects.create(
                    camp=camp,
                    member=member,
                    medical_info_updated=medical_data is not None,
                    medical_info=build_medical_info(medical_data) if medical_data is not None else None,
                    remarks=remarks or "",
                    is_paid=False,
                    paid_amount=camp.price,
                )
        except IntegrityError:
            raise AlreadyInCamp()

    logger.info("Camp registration camp_id=%s member_id=%s", camp.pk, member.pk)
    return registration


def camp_participants(camp):
    return (
        CampRegistration.objects.filter(camp=camp)
        .select_related("camp", "member", "member__primary_guardian")
        .order_by("member__last_name", "member__first_name")
    )


def camp_recap_lists(camp, on_date: date | None = None) -> dict[str, list[dict]]:
    """Récaps des participants ; fiche du camp si mise à jour, sinon fiche annuelle."""
    return build_recaps(((r.member, r.effective_medical_info()) for r in camp_participants(camp)), on_date)
