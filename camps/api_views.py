# camps/api_views.py
import logging

from django.db import transaction
from django.db.models import Count
from rest_framework.decorators import api_view, permission_classes, authentication_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from core.middleware import get_access

from .api_serializers import (
    CampRegistrationRequestSerializer,
    CampRegistrationSerializer,
    CampSerializer,
)
from .models import Camp
from .services import CampRegistrationError, camp_recap_lists, register_for_camp

logger = logging.getLogger(__name__)


def _camps_queryset():
    return (
        Camp.objects.select_related("created_by")
        .prefetch_related("animators")
        .annotate(registrations_count=Count("registrations"))
    )


@api_view(["GET", "POST"])
@permission_classes([IsAuthenticated])
def camp_list(request):
    access = get_access(request)

    if request.method == "GET":
        qs = access.scope(_camps_queryset())
        group = (request.query_params.get("patro_group") or "").strip()
        if group:
            qs = qs.filter(patro_group=group)
        qs = qs.order_by("-start_date")
        return Response({"items": CampSerializer(qs, many=True).data}, status=200)

    serializer = CampSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({"error": "Tous les champs obligatoires doivent être remplis", "details": serializer.errors}, status=400)

    group = serializer.validated_data["patro_group"]
    if not access.can_edit_group(group):
        return Response({"error": "Vous ne pouvez créer un camp que pour votre groupe"}, status=403)

    try:
        with transaction.atomic():
            camp = serializer.save(created_by=request.user)
    except Exception:
        logger.exception("Camp creation failed")
        return Response({"error": "Erreur lors de la création du camp"}, status=500)

    logger.info("Camp %s created for %s by user=%s", camp.pk, group, request.user.pk)
    return Response(CampSerializer(camp).data, status=201)


@api_view(["GET", "PUT", "DELETE"])
@permission_classes([IsAuthenticated])
def camp_detail(request, pk: int):
    access = get_access(request)
    camp = _camps_queryset().filter(pk=pk).first()
    if camp is None:
        return Response({"error": "Camp non trouvé"}, status=404)

    if request.method == "GET":
        if not access.can_view(camp):
            return Response({"error": "Accès refusé"}, status=403)
        data = CampSerializer(camp).data
        registrations = camp.registrations.select_related("member").order_by("member__last_name", "member__first_name")
        data["registrations"] = CampRegistrationSerializer(registrations, many=True).data
        return Response(data, status=200)

    if not access.can_edit(camp):
        return Response({"error": "Vous ne pouvez modifier que les camps de votre groupe"}, status=403)

    if request.method == "DELETE":
        camp_id = camp.pk
        camp.delete()
        logger.info("Camp %s deleted by user=%s", camp_id, request.user.pk)
        return Response(status=204)

    serializer = CampSerializer(camp, data=request.data)
    if not serializer.is_valid():
        return Response({"error": "Données invalides", "details": serializer.errors}, status=400)
    if not access.can_edit_group(serializer.validated_data["patro_group"]):
        return Response({"error": "Vous ne pouvez modifier que les camps de votre groupe"}, status=403)

    with transaction.atomic():
        camp = serializer.save()
    return Response(CampSerializer(_camps_queryset().get(pk=camp.pk)).data, status=200)


@api_view(["POST"])
@authentication_classes([])
@permission_classes([AllowAny])
def camp_registration_create(request):
    serializer = CampRegistrationRequestSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({"error": "Données invalides", "details": serializer.errors}, status=400)

    data = serializer.validated_data
    try:
        registration = register_for_camp(
            data["camp_id"],
            data["member_id"],
            medical_data=data.get("medical_info"),
            remarks=data.get("remarks", ""),
        )
    except CampRegistrationError as e:
        return Response({"error": str(e)}, status=e.status_code)
    except Exception:
        logger.exception("Camp registration failed camp_id=%s", data.get("camp_id"))
        return Response({"error": "Erreur lors de l'inscription"}, status=500)

    return Response(
        {
            "success": True,
            "registration_id": registration.pk,
            "camp_id": registration.camp_id,
            "amount": str(registration.paid_amount),
            "confirmation_url": f"/camps/{registration.camp_id}/confirmation/",
        },
        status=201,
    )


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def camp_recaps(request, pk: int):
    camp = Camp.objects.filter(pk=pk).first()
    if camp is None:
        return Response({"error": "Camp non trouvé"}, status=404)
    if not get_access(request).can_view(camp):
        return Response({"error": "Accès refusé"}, status=403)

    return Response(
        {
            "camp": {"id": camp.pk, "name": camp.name, "patro_group": camp.patro_group},
            **camp_recap_lists(camp),
        },
        status=200,
    )
