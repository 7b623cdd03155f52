from __future__ import annotations

import logging

from django.conf import settings


class PublicLookupNoiseFilter(logging.Filter):
    """Suppress noisy django.request warnings for the public child lookups.

    The camp sign-up form searches children by phone or birth date; a miss is
    an expected 404 and would otherwise clutter logs on every typo.
    """

    _NOISY_PREFIXES = (
        "Not Found:",
        "Bad Request:",
    )

    def _lookup_paths(self) -> tuple[str, ...]:
        try:
            return tuple(getattr(settings, "PATRO_PUBLIC_LOOKUP_PATHS", ()))
        except Exception:
            return ()

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        try:
            if record.name != "django.request":
                return True

            msg = record.getMessage() or ""
            if not msg.startswith(self._NOISY_PREFIXES):
                return True

            # Typical format: "Not Found: /api/children/search/"
            if any(path in msg for path in self._lookup_paths()):
                return False

            return True
        except Exception:
            # Never break logging.
            return True
