from django.urls import path
from . import views

app_name = "website"

urlpatterns = [
    path("", views.home, name="home"),

    # Confirmation d'inscription à un camp (montant, IBAN, QR code de paiement)
    path("camps/<int:pk>/confirmation/", views.camp_confirmation, name="camp_confirmation"),

    # Health check
    path("health/", views.health, name="health"),
]
