# core/access.py
"""
Qui peut voir / modifier quoi.

Règle unique :
- ADMIN voit et modifie les deux groupes (quel que soit son propre groupe).
- Tout autre rôle ne voit que son groupe ; sans groupe, il ne voit rien.
- Modifier = voir (pas de restriction d'écriture plus fine).
- Roster des animateurs et paramètres : ADMIN ou PRESIDENT du groupe.

AccessPolicy est construit une fois par requête (core.middleware) et
interrogé à chaque point d'entrée au lieu de recomparer les groupes partout.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from core.models import PatroGroup, Role, UserProfile

ALL_GROUPS = frozenset({PatroGroup.GARCONS.value, PatroGroup.FILLES.value})
ROSTER_ROLES = frozenset({Role.ADMIN.value, Role.PRESIDENT.value})


def visible_groups(role: str | None, group: str | None) -> frozenset[str]:
    if role == Role.ADMIN:
        return ALL_GROUPS
    if group:
        return frozenset({group})
    return frozenset()


def can_view_group(role: str | None, group: str | None, target: str | None) -> bool:
    return target in visible_groups(role, group)


def can_edit_group(role: str | None, group: str | None, target: str | None) -> bool:
    return can_view_group(role, group, target)


def resource_group(resource: Any) -> str | None:
    """Groupe d'une ressource : champ patro_group, sinon member.patro_group."""
    if resource is None:
        return None
    if isinstance(resource, str):
        return resource
    group = getattr(resource, "patro_group", None)
    if group:
        return group
    member = getattr(resource, "member", None)
    if member is not None:
        return getattr(member, "patro_group", None)
    return None


@dataclass(frozen=True)
class AccessPolicy:
    role: str | None = None
    group: str | None = None
    is_authenticated: bool = False
    user_id: int | None = None

    @classmethod
    def anonymous(cls) -> "AccessPolicy":
        return cls()

    @classmethod
    def for_user(cls, user) -> "AccessPolicy":
        if user is None or not getattr(user, "is_authenticated", False):
            return cls.anonymous()

        if getattr(user, "is_superuser", False):
            return cls(role=Role.ADMIN, group=None, is_authenticated=True, user_id=user.pk)

        profile = UserProfile.objects.filter(user=user).only("role", "patro_group").first()
        if profile is None:
            return cls(role=None, group=None, is_authenticated=True, user_id=user.pk)
        return cls(
            role=profile.role,
            group=profile.patro_group or None,
            is_authenticated=True,
            user_id=user.pk,
        )

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_president(self) -> bool:
        return self.role == Role.PRESIDENT

    @property
    def visible_groups(self) -> frozenset[str]:
        return visible_groups(self.role, self.group)

    def can_view_group(self, target: str | None) -> bool:
        return can_view_group(self.role, self.group, target)

    def can_edit_group(self, target: str | None) -> bool:
        return can_edit_group(self.role, self.group, target)

    def can_view(self, resource: Any) -> bool:
        return self.can_view_group(resource_group(resource))

    def can_edit(self, resource: Any) -> bool:
        return self.can_edit_group(resource_group(resource))

    @property
    def can_manage_roster(self) -> bool:
        return self.role in ROSTER_ROLES

    def can_manage_group(self, target: str | None) -> bool:
        """Roster / paramètres : ADMIN, ou PRESIDENT de ce groupe."""
        return self.can_manage_roster and self.can_edit_group(target)

    def scope(self, queryset, field: str = "patro_group"):
        groups = self.visible_groups
        if not groups:
            return queryset.none()
        return queryset.filter(**{f"{field}__in": sorted(groups)})
