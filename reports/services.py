# reports/services.py
"""
Sélection des fiches médicales et construction du contexte des PDF.

Types de lots :
  single  : une fiche (member_id)
  all     : toutes les fiches de l'année (enfants + animateurs)
  section : une section
  staff   : les animateurs (18 ans et plus) ; "animateurs" accepté comme alias
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from core.classification import current_school_year, display_section, school_age
from core.phones import format_phone
from members.medical import swim_label
from members.recaps import current_registrations, filter_by_audience

SHEET_TYPES = ("single", "all", "section", "staff")
TYPE_ALIASES = {"animateurs": "staff"}


class SheetRequestError(Exception):
    status_code = 400


class SheetNotFound(SheetRequestError):
    status_code = 404


class SheetForbidden(SheetRequestError):
    status_code = 403


@dataclass(frozen=True)
class SheetRequest:
    kind: str
    member_id: int | None = None
    section: str | None = None

    @classmethod
    def parse(cls, params) -> "SheetRequest":
        kind = (params.get("type") or "").strip().lower()
        kind = TYPE_ALIASES.get(kind, kind)
        if kind not in SHEET_TYPES:
            raise SheetRequestError("Type de fiche invalide")

        member_id = None
        if kind == "single":
            raw = (params.get("member_id") or "").strip()
            if not raw.isdigit():
                raise SheetRequestError("member_id requis")
            member_id = int(raw)

        section = (params.get("section") or "").strip() or None
        if kind == "section" and not section:
            raise SheetRequestError("Section requise")
        return cls(kind=kind, member_id=member_id, section=section)


def select_registrations(access, req: SheetRequest, on_date: date | None = None) -> list:
    qs = current_registrations(on_date).select_related("member__secondary_guardian")

    if req.kind == "single":
        registration = qs.filter(member_id=req.member_id).first()
        if registration is None:
            raise SheetNotFound("Enfant non trouvé")
        if not access.can_view(registration):
            raise SheetForbidden("Non autorisé")
        return [registration]

    qs = access.scope(qs, field="member__patro_group")
    if req.kind == "staff":
        qs = filter_by_audience(qs, staff=True, on_date=on_date)
    elif req.kind == "section":
        qs = qs.filter(member__section=req.section)

    registrations = list(qs.order_by("member__last_name", "member__first_name"))
    if not registrations:
        raise SheetNotFound("Aucune fiche trouvée")
    return registrations


def _guardian(guardian) -> dict | None:
    if guardian is None:
        return None
    return {
        "name": guardian.full_name,
        "relationship": guardian.relationship,
        "phone": format_phone(guardian.phone),
        "email": guardian.email,
    }


def sheet_context(registration, on_date: date | None = None) -> dict:
    member = registration.member
    info = registration.medical_info or {}
    return {
        "member": member,
        "registration": registration,
        "info": info,
        "age": school_age(member.birth_date, on_date),
        "section_label": display_section(member.birth_date, member.section, on_date),
        "swim_label": swim_label(info.get("can_swim")),
        "parent1": _guardian(member.primary_guardian),
        "parent2": _guardian(member.secondary_guardian),
    }


def sheet_filename(member) -> str:
    return f"fiche-{member.last_name}-{member.first_name}.pdf"


def batch_filename(req: SheetRequest, ext: str, on_date: date | None = None) -> str:
    year = current_school_year(on_date)
    if req.kind == "staff":
        return f"fiches-animateurs-{year}.{ext}"
    if req.kind == "section":
        return f"fiches-{req.section}-{year}.{ext}"
    return f"fiches-toutes-{year}.{ext}"
