from __future__ import annotations

import logging

from django.http import HttpResponse, JsonResponse
from django.utils.http import content_disposition_header
from django.views.decorators.http import require_GET

from camps.models import Camp
from camps.services import camp_recap_lists
from core.classification import current_school_year, section_label
from core.middleware import get_access
from dashboard.decorators import staff_required
from members.recaps import RECAP_KINDS, current_registrations, filter_by_audience, registration_recaps

from .pdf import PdfRenderError, render_pdf, zip_files
from .services import (
    SheetRequest,
    SheetRequestError,
    batch_filename,
    select_registrations,
    sheet_context,
    sheet_filename,
)

logger = logging.getLogger(__name__)

RECAP_TITLES = {
    "allergies": "Allergies",
    "diets": "Régimes alimentaires",
    "medications": "Médicaments",
}


def _attachment(content: bytes, filename: str, content_type: str) -> HttpResponse:
    response = HttpResponse(content, content_type=content_type)
    response["Content-Disposition"] = content_disposition_header(True, filename)
    response["Content-Length"] = str(len(content))
    return response


def _flag(request, name: str) -> bool:
    return (request.GET.get(name) or "").strip().lower() in ("1", "true", "yes", "on")


@require_GET
@staff_required
def medical_sheets(request):
    """
    Fiches médicales de l'année en cours.
    mode=combined : un seul PDF ; mode=individual : ZIP d'un PDF par membre.
    """
    access = get_access(request)
    mode = (request.GET.get("mode") or "combined").strip().lower()
    if mode not in ("combined", "individual"):
        return JsonResponse({"error": "Mode invalide"}, status=400)

    try:
        req = SheetRequest.parse(request.GET)
        registrations = select_registrations(access, req)
    except SheetRequestError as e:
        return JsonResponse({"error": str(e)}, status=e.status_code)

    year = current_school_year()
    sheets = [sheet_context(r) for r in registrations]

    try:
        if mode == "individual":
            files = [
                (
                    sheet_filename(sheet["member"]),
                    render_pdf("reports/medical_sheets.html", {"sheets": [sheet], "year": year}, request),
                )
                for sheet in sheets
            ]
            return _attachment(zip_files(files), batch_filename(req, "zip"), "application/zip")

        content = render_pdf("reports/medical_sheets.html", {"sheets": sheets, "year": year}, request)
    except PdfRenderError:
        logger.exception("Medical sheet rendering failed type=%s", req.kind)
        return JsonResponse({"error": "Erreur lors de la génération du PDF"}, status=500)

    if req.kind == "single":
        filename = sheet_filename(sheets[0]["member"])
    else:
        filename = batch_filename(req, "pdf")
    return _attachment(content, filename, "application/pdf")


@require_GET
@staff_required
def recaps(request):
    """Récapitulatif PDF : type=members (section / staff) ou type=camp (camp_id)."""
    access = get_access(request)
    kind = (request.GET.get("type") or "members").strip().lower()
    recap = (request.GET.get("recap") or "all").strip().lower()
    if recap != "all" and recap not in RECAP_KINDS:
        return JsonResponse({"error": "Type de récapitulatif invalide"}, status=400)

    if kind == "camp":
        raw = (request.GET.get("camp_id") or "").strip()
        camp = Camp.objects.filter(pk=int(raw)).first() if raw.isdigit() else None
        if camp is None:
            return JsonResponse({"error": "Camp non trouvé"}, status=404)
        if not access.can_view(camp):
            return JsonResponse({"error": "Non autorisé"}, status=403)
        lists = camp_recap_lists(camp)
        subtitle = f"Camp {camp.name}"
    elif kind == "members":
        section = (request.GET.get("section") or "").strip() or None
        staff = _flag(request, "staff")
        qs = access.scope(current_registrations(), field="member__patro_group")
        lists = registration_recaps(filter_by_audience(qs, section=section, staff=staff))
        if staff:
            subtitle = "Animateurs"
        elif section:
            subtitle = section_label(section)
        else:
            subtitle = "Enfants"
    else:
        return JsonResponse({"error": "Type invalide"}, status=400)

    kinds = RECAP_KINDS if recap == "all" else (recap,)
    blocks = [{"kind": k, "title": RECAP_TITLES[k], "rows": lists[k]} for k in kinds]

    try:
        content = render_pdf(
            "reports/recaps.html",
            {"blocks": blocks, "subtitle": subtitle, "year": current_school_year()},
            request,
        )
    except PdfRenderError:
        logger.exception("Recap rendering failed type=%s recap=%s", kind, recap)
        return JsonResponse({"error": "Erreur lors de la génération du PDF"}, status=500)

    return _attachment(content, f"recaps-{recap}.pdf", "application/pdf")
