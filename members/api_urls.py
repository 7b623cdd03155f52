from django.urls import path

from . import api_views

app_name = "members_api"

urlpatterns = [
    path("registrations/", api_views.registration_create, name="registration_create"),
    path("registrations/<int:pk>/payment/", api_views.registration_payment, name="registration_payment"),
    path("children/search/", api_views.children_search, name="children_search"),
    path("children/search-by-birth/", api_views.children_search_by_birth, name="children_search_by_birth"),
    path("members/", api_views.member_list, name="member_list"),
    path("members/<int:pk>/", api_views.member_detail, name="member_detail"),
    path("recaps/", api_views.recaps, name="recaps"),
]
