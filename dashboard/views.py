from __future__ import annotations

import logging

from django.conf import settings as dj_settings
from django.contrib import messages
from django.contrib.auth import authenticate, login, logout
from django.db.models import Count, Q
from django.shortcuts import redirect, render
from django.urls import reverse
from django.utils import timezone
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.http import require_POST

from camps.models import Camp
from core.classification import current_school_year
from core.middleware import get_access
from core.models import PatroGroup
from members.models import Registration
from staff.models import StaffMember

from .decorators import staff_required

logger = logging.getLogger(__name__)


def _safe_next_url(request, default_name: str = "dashboard:index") -> str:
    nxt = (request.GET.get("next") or request.POST.get("next") or "").strip()
    if not nxt:
        return reverse(default_name)
    allowed_hosts = {request.get_host()}
    try:
        allowed_hosts |= set(dj_settings.ALLOWED_HOSTS or [])
    except Exception:
        pass
    if url_has_allowed_host_and_scheme(nxt, allowed_hosts=allowed_hosts, require_https=request.is_secure()):
        return nxt
    return reverse(default_name)


def login_view(request):
    if request.user.is_authenticated:
        return redirect("dashboard:index")

    if request.method == "POST":
        u = (request.POST.get("username") or "").strip()
        p = request.POST.get("password") or ""
        user = authenticate(request, username=u, password=p)
        if user:
            login(request, user)
            logger.info("Dashboard login user=%s", user.pk)
            return redirect(_safe_next_url(request))

        messages.error(request, "Identifiants incorrects.")

    return render(request, "dashboard/login.html")


@require_POST
def logout_view(request):
    logout(request)
    return redirect("dashboard:login")


def dashboard_stats(access, on_date=None) -> dict:
    """Compteurs de l'accueil, limités aux groupes visibles."""
    year = current_school_year(on_date)
    today = on_date or timezone.localdate()

    registrations = access.scope(Registration.objects.filter(year=year), field="member__patro_group")
    per_group = {
        row["member__patro_group"]: row
        for row in registrations.order_by().values("member__patro_group").annotate(
            total=Count("id"),
            paid=Count("id", filter=Q(is_paid=True)),
        )
    }

    groups = []
    for value, label in PatroGroup.choices:
        if value not in access.visible_groups:
            continue
        row = per_group.get(value, {})
        groups.append(
            {
                "value": value,
                "label": label,
                "registrations": row.get("total", 0),
                "paid": row.get("paid", 0),
            }
        )

    upcoming = (
        access.scope(Camp.objects.filter(end_date__gte=today))
        .annotate(registrations_count=Count("registrations"))
        .order_by("start_date")
    )

    return {
        "year": year,
        "registrations": sum(g["registrations"] for g in groups),
        "unpaid": sum(g["registrations"] - g["paid"] for g in groups),
        "groups": groups,
        "upcoming_camps": list(upcoming[:5]),
        "upcoming_camps_count": upcoming.count(),
        "staff_count": access.scope(StaffMember.objects.all()).count(),
    }


@staff_required
def index(request):
    stats = dashboard_stats(get_access(request))
    return render(request, "dashboard/index.html", {"stats": stats})
