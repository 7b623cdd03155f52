import logging

from django.apps import AppConfig
from django.conf import settings

logger = logging.getLogger(__name__)


class CoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core"
    verbose_name = "Patro"

    def ready(self) -> None:
        """
        Vérifie la configuration au démarrage.

        La cotisation par défaut sert quand un groupe n'a pas encore de
        GroupSettings : on prévient si elle n'est pas exploitable.
        """
        fee = getattr(settings, "PATRO_DEFAULT_REGISTRATION_FEE", None)
        if fee is None or fee < 0:
            logger.warning(
                "PATRO_DEFAULT_REGISTRATION_FEE is not set or negative (%r); registrations will fail to price.",
                fee,
            )
