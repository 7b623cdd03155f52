# core/api_views.py
import logging

from django.db import transaction
from rest_framework.decorators import api_view, permission_classes, authentication_classes
from rest_framework.permissions import AllowAny, IsAuthenticatedOrReadOnly
from rest_framework.response import Response

from .api_serializers import GroupSettingsSerializer, PublicGroupSettingsSerializer
from .middleware import get_access
from .models import GroupSettings

logger = logging.getLogger(__name__)


@api_view(["GET"])
@authentication_classes([])
@permission_classes([AllowAny])
def ping(request):
    return Response({"status": "ok"}, status=200)


@api_view(["GET", "PUT"])
@permission_classes([IsAuthenticatedOrReadOnly])
def group_settings(request):
    """
    GET : paramètres publics des deux groupes (contact, adresse, horaires, cotisation).
    PUT : crée ou met à jour les paramètres d'un groupe.
          ADMIN : les deux groupes ; PRESIDENT : uniquement son groupe.
    """
    if request.method == "GET":
        qs = GroupSettings.objects.order_by("patro_group")
        return Response({"items": PublicGroupSettingsSerializer(qs, many=True).data}, status=200)

    serializer = GroupSettingsSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({"error": "Données invalides", "details": serializer.errors}, status=400)

    group = serializer.validated_data["patro_group"]
    if not get_access(request).can_manage_group(group):
        return Response({"error": "Vous ne pouvez gérer que les paramètres de votre groupe"}, status=403)

    try:
        with transaction.atomic():
            data = dict(serializer.validated_data)
            data.pop("patro_group", None)
            obj, _created = GroupSettings.objects.update_or_create(patro_group=group, defaults=data)
    except Exception:
        logger.exception("Failed to save settings for group=%s", group)
        return Response({"error": "Erreur serveur"}, status=500)

    return Response(GroupSettingsSerializer(obj).data, status=200)
