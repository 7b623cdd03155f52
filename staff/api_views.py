import logging

from django.db import transaction
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from core.middleware import get_access

from .api_serializers import PublicStaffContactSerializer, StaffMemberSerializer
from .models import StaffMember

logger = logging.getLogger(__name__)

FORBIDDEN_ROLE = "Seuls les présidents et administrateurs gèrent les animateurs"
FORBIDDEN_GROUP = "Vous ne pouvez gérer que les animateurs de votre groupe"


@api_view(["GET", "POST"])
@permission_classes([IsAuthenticated])
def staff_list(request):
    access = get_access(request)

    if request.method == "GET":
        qs = access.scope(StaffMember.objects.all()).order_by("patro_group", "function", "last_name")
        return Response({"items": StaffMemberSerializer(qs, many=True).data}, status=200)

    if not access.can_manage_roster:
        return Response({"error": FORBIDDEN_ROLE}, status=403)

    serializer = StaffMemberSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({"error": "Données invalides", "details": serializer.errors}, status=400)

    if not access.can_manage_group(serializer.validated_data["patro_group"]):
        return Response({"error": FORBIDDEN_GROUP}, status=403)

    try:
        with transaction.atomic():
            staff = serializer.save()
    except Exception:
        logger.exception("Failed to create staff member")
        return Response({"error": "Erreur serveur"}, status=500)

    return Response(StaffMemberSerializer(staff).data, status=201)


@api_view(["PUT", "DELETE"])
@permission_classes([IsAuthenticated])
def staff_detail(request, pk: int):
    access = get_access(request)
    if not access.can_manage_roster:
        return Response({"error": FORBIDDEN_ROLE}, status=403)

    staff = StaffMember.objects.filter(pk=pk).first()
    if staff is None:
        return Response({"error": "Animateur non trouvé"}, status=404)
    if not access.can_manage_group(staff.patro_group):
        return Response({"error": FORBIDDEN_GROUP}, status=403)

    if request.method == "DELETE":
        staff.delete()
        return Response(status=204)

    serializer = StaffMemberSerializer(staff, data=request.data)
    if not serializer.is_valid():
        return Response({"error": "Données invalides", "details": serializer.errors}, status=400)
    # pas de transfert vers un groupe non géré
    if not access.can_manage_group(serializer.validated_data["patro_group"]):
        return Response({"error": FORBIDDEN_GROUP}, status=403)

    staff = serializer.save()
    return Response(StaffMemberSerializer(staff).data, status=200)


@api_view(["GET"])
@authentication_classes([])
@permission_classes([AllowAny])
def public_contacts(request):
    """Contacts affichés sur le site public (show_contact=True), par groupe."""
    qs = StaffMember.objects.public().order_by("patro_group", "function", "last_name")
    group = (request.query_params.get("patro_group") or "").strip().upper()
    if group:
        qs = qs.filter(patro_group=group)
    return Response({"items": PublicStaffContactSerializer(qs, many=True).data}, status=200)
