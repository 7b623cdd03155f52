# members/medical.py
"""
Fiche médicale : document JSON stocké sur Registration.medical_info
(et sur CampRegistration.medical_info quand la fiche est mise à jour pour un camp).

{
  "doctor_name", "doctor_phone", "can_participate", "participation_restrictions",
  "can_swim" (yes/no/alittle), "important_medical_info", "medical_history",
  "tetanus_vaccine",
  "allergies":   {"has_allergies", "allergy_list", "allergy_consequences"},
  "diet":        {"has_diet", "diet_details"},
  "medications": {"takes_medication", "medication_details", "is_autonomous"},
  "other_info"
}
"""
from __future__ import annotations

from typing import Any

SWIM_CHOICES = [
    ("yes", "Oui"),
    ("no", "Non"),
    ("alittle", "Un peu"),
]


def _text(data: dict, key: str) -> str:
    return (data.get(key) or "").strip()


def build_medical_info(data: dict[str, Any]) -> dict[str, Any]:
    """Construit le document à partir des champs plats validés du formulaire."""
    return {
        "doctor_name": _text(data, "doctor_name"),
        "doctor_phone": _text(data, "doctor_phone"),
        "can_participate": bool(data.get("can_participate")),
        "participation_restrictions": _text(data, "participation_restrictions"),
        "can_swim": data.get("can_swim") or "no",
        "important_medical_info": _text(data, "important_medical_info"),
        "medical_history": _text(data, "medical_history"),
        "tetanus_vaccine": bool(data.get("tetanus_vaccine")),
        "allergies": {
            "has_allergies": bool(data.get("has_allergies")),
            "allergy_list": _text(data, "allergy_list"),
            "allergy_consequences": _text(data, "allergy_consequences"),
        },
        "diet": {
            "has_diet": bool(data.get("has_diet")),
            "diet_details": _text(data, "diet_details"),
        },
        "medications": {
            "takes_medication": bool(data.get("takes_medication")),
            "medication_details": _text(data, "medication_details"),
            "is_autonomous": bool(data.get("medication_autonomous")),
        },
        "other_info": _text(data, "other_info"),
    }


def _section(info: dict | None, key: str) -> dict:
    if not isinstance(info, dict):
        return {}
    value = info.get(key)
    return value if isinstance(value, dict) else {}


def allergies_of(info: dict | None) -> dict | None:
    block = _section(info, "allergies")
    return block if block.get("has_allergies") else None


def diet_of(info: dict | None) -> dict | None:
    block = _section(info, "diet")
    return block if block.get("has_diet") else None


def medications_of(info: dict | None) -> dict | None:
    block = _section(info, "medications")
    return block if block.get("takes_medication") else None


def swim_label(value: str | None) -> str:
    return dict(SWIM_CHOICES).get(value or "", "Non précisé")
