# website/views.py
from __future__ import annotations

from django.http import HttpResponse
from django.shortcuts import get_object_or_404, render
from django.utils import timezone

from camps.models import Camp
from camps.payment import camp_payment
from core.classification import section_age_range, section_label, sections_for_group
from core.models import GroupSettings, PatroGroup
from staff.models import StaffMember


def health(request):
    return HttpResponse("Patro is running.")


def home(request):
    """Accueil public : sections, contacts affichés, infos pratiques et camps ouverts, par groupe."""
    today = timezone.localdate()
    settings_by_group = {s.patro_group: s for s in GroupSettings.objects.all()}
    contacts = StaffMember.objects.public().order_by("function", "last_name")
    camps = (
        Camp.objects.filter(is_public=True, end_date__gte=today)
        .order_by("start_date")
    )

    groups = []
    for value, label in PatroGroup.choices:
        groups.append(
            {
                "value": value,
                "label": label,
                "settings": settings_by_group.get(value),
                "sections": [
                    {"label": section_label(s), "ages": section_age_range(s)} for s in sections_for_group(value)
                ],
                "contacts": [c for c in contacts if c.patro_group == value],
                "camps": [c for c in camps if c.patro_group == value],
            }
        )

    return render(request, "website/home.html", {"groups": groups})


def camp_confirmation(request, pk: int):
    camp = get_object_or_404(Camp, pk=pk)
    return render(
        request,
        "website/camp_confirmation.html",
        {"camp": camp, "payment": camp_payment(camp)},
    )
