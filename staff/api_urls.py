from django.urls import path

from . import api_views

app_name = "staff_api"

urlpatterns = [
    path("animateurs/", api_views.staff_list, name="staff_list"),
    path("animateurs/<int:pk>/", api_views.staff_detail, name="staff_detail"),
    path("contacts/", api_views.public_contacts, name="public_contacts"),
]
