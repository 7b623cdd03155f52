from __future__ import annotations

from core.middleware import get_access
from core.models import PatroGroup


def access_context(request):
    """Global template context: rôle et groupes visibles de l'utilisateur connecté."""

    user = getattr(request, "user", None)
    if not user or not getattr(user, "is_authenticated", False):
        return {}

    access = get_access(request)
    return {
        "access": access,
        "visible_group_choices": [(g, label) for g, label in PatroGroup.choices if g in access.visible_groups],
    }
