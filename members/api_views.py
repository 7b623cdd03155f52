# members/api_views.py
import logging
from datetime import date

from django.shortcuts import get_object_or_404
from rest_framework.decorators import api_view, permission_classes, authentication_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from core.classification import calendar_age, current_school_year
from core.middleware import get_access
from core.phones import normalize_phone

from .api_serializers import (
    MemberLookupSerializer,
    MemberSerializer,
    RegistrationRequestSerializer,
    RegistrationSerializer,
)
from .models import Member, Registration
from .recaps import current_registrations, filter_by_audience, registration_recaps
from .services import AlreadyRegistered, register_member

logger = logging.getLogger(__name__)


def _flag(request, name: str) -> bool:
    return (request.query_params.get(name) or "").strip().lower() in ("1", "true", "yes", "on")


# =========================
# Public (formulaires parents)
# =========================

@api_view(["POST"])
@authentication_classes([])
@permission_classes([AllowAny])
def registration_create(request):
    serializer = RegistrationRequestSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({"error": "Données invalides", "details": serializer.errors}, status=400)

    try:
        registration = register_member(serializer.validated_data)
    except AlreadyRegistered as e:
        return Response({"error": str(e)}, status=e.status_code)
    except Exception:
        logger.exception("Registration failed")
        return Response({"error": "Erreur serveur"}, status=500)

    member = registration.member
    return Response(
        {
            "success": True,
            "registration_id": registration.pk,
            "member_id": member.pk,
            "year": registration.year,
            "section": member.section,
            "section_label": member.display_section(),
            "amount": str(registration.amount),
        },
        status=201,
    )


@api_view(["GET"])
@authentication_classes([])
@permission_classes([AllowAny])
def children_search(request):
    raw = (request.query_params.get("phone") or "").strip()
    if not raw:
        return Response({"error": "Numéro de téléphone requis"}, status=400)

    key = normalize_phone(raw)
    qs = (
        Member.objects.filter(primary_guardian__phone=key)
        | Member.objects.filter(secondary_guardian__phone=key)
    ).distinct().order_by("last_name", "first_name")

    if not qs.exists():
        return Response({"error": "Aucun enfant trouvé pour ce numéro"}, status=404)

    return Response({"items": MemberLookupSerializer(qs, many=True).data}, status=200)


@api_view(["GET"])
@authentication_classes([])
@permission_classes([AllowAny])
def children_search_by_birth(request):
    raw = (request.query_params.get("birth_date") or "").strip()
    if not raw:
        return Response({"error": "Date de naissance requise"}, status=400)
    try:
        birth_date = date.fromisoformat(raw)
    except ValueError:
        return Response({"error": "Date de naissance invalide (AAAA-MM-JJ)"}, status=400)

    qs = Member.objects.filter(birth_date=birth_date).order_by("last_name", "first_name")
    if not qs.exists():
        return Response({"error": "Aucun enfant trouvé"}, status=404)

    return Response({"items": MemberLookupSerializer(qs, many=True).data}, status=200)


# =========================
# Dashboard
# =========================

@api_view(["GET"])
@permission_classes([IsAuthenticated])
def member_list(request):
    access = get_access(request)
    section = (request.query_params.get("section") or "").strip() or None

    qs = access.scope(current_registrations(), field="member__patro_group")
    if section or "staff" in request.query_params:
        qs = filter_by_audience(qs, section=section, staff=_flag(request, "staff"))
    qs = qs.order_by("member__last_name", "member__first_name")

    return Response(
        {
            "year": current_school_year(),
            "count": qs.count(),
            "items": RegistrationSerializer(qs, many=True).data,
        },
        status=200,
    )


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def member_detail(request, pk: int):
    member = get_object_or_404(
        Member.objects.select_related("primary_guardian", "secondary_guardian"),
        pk=pk,
    )
    if not get_access(request).can_view(member):
        return Response({"error": "Accès refusé"}, status=403)

    registration = member.registration_for(current_school_year())
    data = MemberSerializer(member).data
    data["calendar_age"] = calendar_age(member.birth_date)
    data["registration"] = (
        {
            "id": registration.pk,
            "year": registration.year,
            "medical_info": registration.medical_info,
            "weight": str(registration.weight) if registration.weight is not None else None,
            "photo_consent": registration.photo_consent,
            "is_paid": registration.is_paid,
            "amount": str(registration.amount),
        }
        if registration
        else None
    )
    return Response(data, status=200)


@api_view(["POST"])
@permission_classes([IsAuthenticated])
def registration_payment(request, pk: int):
    registration = get_object_or_404(Registration.objects.select_related("member"), pk=pk)
    if not get_access(request).can_edit(registration):
        return Response({"error": "Accès refusé"}, status=403)

    is_paid = request.data.get("is_paid")
    if not isinstance(is_paid, bool):
        return Response({"error": "is_paid doit être un booléen"}, status=400)

    registration.is_paid = is_paid
    registration.save(update_fields=["is_paid", "updated_at"])
    logger.info("Registration %s payment set to %s by user=%s", registration.pk, is_paid, request.user.pk)
    return Response({"id": registration.pk, "is_paid": registration.is_paid}, status=200)


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def recaps(request):
    access = get_access(request)
    section = (request.query_params.get("section") or "").strip() or None

    qs = access.scope(current_registrations(), field="member__patro_group")
    qs = filter_by_audience(qs, section=section, staff=_flag(request, "staff"))

    return Response({"year": current_school_year(), **registration_recaps(qs)}, status=200)
