# core/classification.py
"""
Âge "année scolaire" et classement des membres par section.

Toutes les fonctions reçoivent la date de référence (on_date) en paramètre.
None = aujourd'hui dans le fuseau configuré (timezone.localdate()).
Aucune fonction ne lève d'erreur : une date de naissance dans le futur donne
un âge négatif, et donc "pas de section".
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from django.utils import timezone

from core.models import PatroGroup, Section

SCHOOL_YEAR_START_MONTH = 9
MIN_SECTION_AGE = 4
STAFF_AGE = 18

STAFF_LABEL = "Animateur"
UNASSIGNED_LABEL = "Section non définie"

# Bandes [min, max) sur l'âge scolaire, de la plus jeune à la plus âgée
SECTION_BANDS: dict[str, tuple[tuple[int, int, str], ...]] = {
    PatroGroup.GARCONS: (
        (4, 6, Section.POUSSINS_G),
        (6, 9, Section.BENJAMINS),
        (9, 12, Section.CHEVALIERS),
        (12, 15, Section.CONQUERANTS),
        (15, 18, Section.BROTHERS),
    ),
    PatroGroup.FILLES: (
        (4, 6, Section.POUSSINS_F),
        (6, 9, Section.BENJAMINES),
        (9, 12, Section.ETINCELLES),
        (12, 15, Section.ALPINES),
        (15, 18, Section.GRANDES),
    ),
}

SECTION_AGE_RANGES = {
    Section.POUSSINS_G: "4-6 ans",
    Section.BENJAMINS: "6-9 ans",
    Section.CHEVALIERS: "9-12 ans",
    Section.CONQUERANTS: "12-15 ans",
    Section.BROTHERS: "15-17 ans",
    Section.POUSSINS_F: "4-6 ans",
    Section.BENJAMINES: "6-9 ans",
    Section.ETINCELLES: "9-12 ans",
    Section.ALPINES: "12-15 ans",
    Section.GRANDES: "15-17 ans",
}


def _today(on_date: date | None) -> date:
    return on_date or timezone.localdate()


def school_year_start(on_date: date | None = None) -> int:
    """Septembre–décembre : année civile en cours ; janvier–août : l'année précédente."""
    today = _today(on_date)
    if today.month >= SCHOOL_YEAR_START_MONTH:
        return today.year
    return today.year - 1


def school_age(birth_date: date, on_date: date | None = None) -> int:
    return school_year_start(on_date) - birth_date.year


def calendar_age(birth_date: date, on_date: date | None = None) -> int:
    today = _today(on_date)
    age = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age


def current_school_year(on_date: date | None = None) -> str:
    """Ex: "2024-2025" (clé annuelle des inscriptions)."""
    start = school_year_start(on_date)
    return f"{start}-{start + 1}"


def is_staff_age(birth_date: date, on_date: date | None = None) -> bool:
    return school_age(birth_date, on_date) >= STAFF_AGE


def sections_for_group(group: str) -> list[str]:
    return [section for _lo, _hi, section in SECTION_BANDS.get(group, ())]


def section_group(section: str | None) -> str | None:
    for group, bands in SECTION_BANDS.items():
        if any(s == section for _lo, _hi, s in bands):
            return group
    return None


def section_label(section: str | None) -> str:
    if not section:
        return UNASSIGNED_LABEL
    try:
        return Section(section).label
    except ValueError:
        return UNASSIGNED_LABEL


def section_age_range(section: str) -> str:
    return SECTION_AGE_RANGES.get(section, "")


def _band_for_age(age: int, group: str) -> str | None:
    for lo, hi, section in SECTION_BANDS.get(group, ()):
        if lo <= age < hi:
            return section
    return None


@dataclass(frozen=True)
class Placement:
    """
    Représentation canonique du classement d'un membre :
    - kind="section"    : enfant dans une bande d'âge (section renseignée)
    - kind="staff"      : 18 ans et plus (animateur)
    - kind="unassigned" : trop jeune (moins de 4 ans scolaires)

    legacy_section garde l'ancien comportement : un animateur est rangé
    dans la section la plus âgée de son groupe.
    """

    kind: str
    age: int
    group: str
    section: str | None = None

    @property
    def is_staff(self) -> bool:
        return self.kind == "staff"

    @property
    def legacy_section(self) -> str | None:
        if self.kind == "staff":
            bands = SECTION_BANDS.get(self.group, ())
            return bands[-1][2] if bands else None
        return self.section

    @property
    def display_label(self) -> str:
        if self.kind == "staff":
            return STAFF_LABEL
        return section_label(self.section)


def place_member(birth_date: date, group: str, on_date: date | None = None) -> Placement:
    age = school_age(birth_date, on_date)
    if age >= STAFF_AGE:
        return Placement(kind="staff", age=age, group=group)
    section = _band_for_age(age, group)
    if section is None:
        return Placement(kind="unassigned", age=age, group=group)
    return Placement(kind="section", age=age, group=group, section=section)


def classify_section(birth_date: date, group: str, on_date: date | None = None) -> str | None:
    """Section stockée sur le membre (None si trop jeune, section la plus âgée si 18+)."""
    return place_member(birth_date, group, on_date).legacy_section


def display_section(birth_date: date, section: str | None, on_date: date | None = None) -> str:
    """Libellé affiché : "Animateur" pour les 18+, sinon le libellé de la section stockée."""
    if is_staff_age(birth_date, on_date):
        return STAFF_LABEL
    return section_label(section)
