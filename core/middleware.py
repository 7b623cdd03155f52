# core/middleware.py
from __future__ import annotations

from django.utils.functional import SimpleLazyObject

from core.access import AccessPolicy


# ==========================================================
# Access policy (rôle + groupe), une fois par requête
# ==========================================================
class AccessPolicyMiddleware:
    """
    Injecte request.access (core.access.AccessPolicy).

    ✅ Calcul paresseux : aucune requête SQL tant que la vue ne l'utilise pas.
    ❌ Pas de redirect / refus ici : les vues décident.

    Doit être placé après AuthenticationMiddleware.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.access = SimpleLazyObject(lambda: AccessPolicy.for_user(getattr(request, "user", None)))
        return self.get_response(request)


def get_access(request) -> AccessPolicy:
    """
    Politique d'accès de la requête (Django ou DRF).

    DRF peut authentifier un autre utilisateur que la session (BasicAuthentication) :
    dans ce cas la politique est recalculée pour request.user.
    """
    user = getattr(request, "user", None)
    access = getattr(request, "access", None)
    if access is not None and access.user_id == getattr(user, "pk", None):
        return access

    access = AccessPolicy.for_user(user)
    request.access = access
    return access


# ==========================================================
# Security Headers
# ==========================================================
class SecurityHeadersMiddleware:
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        response = self.get_response(request)
        response["X-Content-Type-Options"] = "nosniff"
        response["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response
