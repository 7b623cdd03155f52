from django.apps import AppConfig


class CampsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "camps"
    verbose_name = "Camps"
