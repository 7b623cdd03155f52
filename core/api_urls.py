# core/api_urls.py
from django.urls import path

from . import api_views

app_name = "core_api"

urlpatterns = [
    path("ping/", api_views.ping, name="ping"),
    path("settings/", api_views.group_settings, name="settings"),
]
