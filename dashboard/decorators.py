from __future__ import annotations

from functools import wraps
from typing import Any, Callable

from django.contrib.auth.decorators import login_required
from django.core.exceptions import PermissionDenied

from core.middleware import get_access


def staff_required(view_func: Callable[..., Any]):
    """
    Pages du dashboard :
    - superuser / ADMIN
    - ou tout utilisateur avec un profil (PRESIDENT / ANIMATEUR)

    Un compte sans profil est authentifié mais n'a accès à rien : 403.
    """
    @login_required(login_url="dashboard:login")
    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        if get_access(request).role is None:
            raise PermissionDenied("Votre compte n'est lié à aucun rôle.")
        return view_func(request, *args, **kwargs)

    return _wrapped
