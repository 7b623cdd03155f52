# members/recaps.py
"""
Récapitulatifs médicaux (allergies / régimes / médicaments).

Utilisés par l'API du dashboard, les récaps de camp et les PDF.
Chaque ligne reprend : membre, âge scolaire, section affichée,
1er responsable et son téléphone formaté.
"""
from __future__ import annotations

from datetime import date
from typing import Iterable

from core.classification import STAFF_AGE, current_school_year, display_section, school_age, school_year_start
from core.phones import format_phone

from .medical import allergies_of, diet_of, medications_of
from .models import Member, Registration

RECAP_KINDS = ("allergies", "diets", "medications")


def filter_by_audience(queryset, *, section: str | None = None, staff: bool = False, on_date: date | None = None, prefix: str = "member__"):
    """
    staff=True  : uniquement les 18 ans et plus (âge scolaire)
    section     : les membres de cette section (combinable avec staff)
    sinon       : uniquement les enfants (moins de 18 ans)
    """
    cutoff_year = school_year_start(on_date) - STAFF_AGE
    if section:
        queryset = queryset.filter(**{f"{prefix}section": section})
    if staff:
        return queryset.filter(**{f"{prefix}birth_date__year__lte": cutoff_year})
    if section:
        return queryset
    return queryset.filter(**{f"{prefix}birth_date__year__gt": cutoff_year})


def current_registrations(on_date: date | None = None):
    return Registration.objects.filter(year=current_school_year(on_date)).select_related(
        "member",
        "member__primary_guardian",
    )


def _base_row(member: Member, on_date: date | None) -> dict:
    guardian = member.primary_guardian
    return {
        "member_id": member.pk,
        "first_name": member.first_name,
        "last_name": member.last_name,
        "age": school_age(member.birth_date, on_date),
        "section": display_section(member.birth_date, member.section, on_date),
        "guardian_name": guardian.full_name if guardian else "",
        "guardian_phone": format_phone(guardian.phone) if guardian else "",
    }


def build_recaps(entries: Iterable[tuple[Member, dict]], on_date: date | None = None) -> dict[str, list[dict]]:
    """entries : (membre, fiche médicale) -> {"allergies": [...], "diets": [...], "medications": [...]}"""
    recaps: dict[str, list[dict]] = {kind: [] for kind in RECAP_KINDS}

    for member, info in entries:
        allergies = allergies_of(info)
        if allergies:
            row = _base_row(member, on_date)
            row["details"] = allergies.get("allergy_list", "")
            row["consequences"] = allergies.get("allergy_consequences", "")
            recaps["allergies"].append(row)

        diet = diet_of(info)
        if diet:
            row = _base_row(member, on_date)
            row["details"] = diet.get("diet_details", "")
            recaps["diets"].append(row)

        medications = medications_of(info)
        if medications:
            row = _base_row(member, on_date)
            row["details"] = medications.get("medication_details", "")
            row["is_autonomous"] = bool(medications.get("is_autonomous"))
            recaps["medications"].append(row)

    for rows in recaps.values():
        rows.sort(key=lambda r: (r["last_name"].lower(), r["first_name"].lower()))
    return recaps


def registration_recaps(registrations, on_date: date | None = None) -> dict[str, list[dict]]:
    return build_recaps(((r.member, r.medical_info) for r in registrations), on_date)
