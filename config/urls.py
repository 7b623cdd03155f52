# config/urls.py
from django.contrib import admin
from django.urls import path, include


urlpatterns = [
    path("admin/", admin.site.urls),

    # Site public (accueil, camps, confirmation de paiement)
    path("", include(("website.urls", "website"), namespace="website")),

    # Tableau de bord
    path("dashboard/", include(("dashboard.urls", "dashboard"), namespace="dashboard")),

    # PDF (fiches médicales, récapitulatifs)
    path("reports/", include(("reports.urls", "reports"), namespace="reports")),

    # API
    path("api/", include(("members.api_urls", "members_api"), namespace="members_api")),
    path("api/", include(("camps.api_urls", "camps_api"), namespace="camps_api")),
    path("api/", include(("staff.api_urls", "staff_api"), namespace="staff_api")),
    path("api/", include(("core.api_urls", "core_api"), namespace="core_api")),
]
