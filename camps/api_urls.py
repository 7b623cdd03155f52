from django.urls import path

from . import api_views

app_name = "camps_api"

urlpatterns = [
    path("camps/", api_views.camp_list, name="camp_list"),
    path("camps/<int:pk>/", api_views.camp_detail, name="camp_detail"),
    path("camps/<int:pk>/recaps/", api_views.camp_recaps, name="camp_recaps"),
    path("camp-registrations/", api_views.camp_registration_create, name="camp_registration_create"),
]
