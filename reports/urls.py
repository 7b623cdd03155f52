from django.urls import path

from . import views

app_name = "reports"

urlpatterns = [
    path("medical-sheets/", views.medical_sheets, name="medical_sheets"),
    path("recaps/", views.recaps, name="recaps"),
]
