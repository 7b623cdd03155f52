# core/phones.py
from __future__ import annotations

import re

COUNTRY_CODE = "32"
TRUNK_PREFIX = "0"

# Tout sauf les chiffres et le "+" initial (espaces, tirets, points, slashes, parenthèses…)
_FORMATTING_RE = re.compile(r"[^\d+]")
_NON_DIGIT_RE = re.compile(r"\D")
# "+32 (0)477 …" : le 0 entre parenthèses est le préfixe national, à ignorer
_TRUNK_MARKER_RE = re.compile(r"\(\s*0\s*\)")


def normalize_phone(raw: str | None) -> str:
    """
    Clé canonique d'un numéro belge : 32XXXXXXXX(X).

    Sert de clé d'unicité pour les responsables : deux écritures du même
    numéro doivent donner la même clé. Idempotent ; une entrée non reconnue
    est renvoyée telle quelle (chiffres seulement).
    """
    cleaned = _FORMATTING_RE.sub("", _TRUNK_MARKER_RE.sub("", raw or ""))

    if cleaned.startswith("+"):
        cleaned = cleaned[1:]
    cleaned = cleaned.replace("+", "")

    if cleaned.startswith("00"):
        cleaned = cleaned[2:]

    if cleaned.startswith(COUNTRY_CODE):
        return cleaned

    if cleaned.startswith(TRUNK_PREFIX):
        return COUNTRY_CODE + cleaned[1:]

    # mobile sans le 0 (ex: 477123456)
    if cleaned.startswith("4") and len(cleaned) == 9:
        return COUNTRY_CODE + cleaned

    return cleaned


def format_phone(value: str | None) -> str:
    """+32 477 12 34 56 / 0477 12 34 56 ; sinon la valeur d'origine."""
    raw = value or ""
    digits = _NON_DIGIT_RE.sub("", raw)

    if digits.startswith(COUNTRY_CODE):
        parts = [digits[2:5], digits[5:7], digits[7:9], digits[9:]]
        return " ".join(["+32"] + [p for p in parts if p])

    if digits.startswith(TRUNK_PREFIX):
        parts = [digits[0:4], digits[4:6], digits[6:8], digits[8:]]
        return " ".join(p for p in parts if p)

    return raw
