from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Permissions:
    can_access_admin: bool = False
    can_manage_members: bool = False
    can_manage_visitors: bool = False
    can_access_kids_checkin: bool = False
    can_access_profile: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


NO_PERMISSIONS = Permissions()

_PERMISSIONS_BY_ROLE = {
    Role.ADMIN: Permissions(
        can_access_admin=True,
        can_manage_members=True,
        can_manage_visitors=True,
        can_access_kids_checkin=True,
        can_access_profile=True,
    ),
    Role.LEADER: Permissions(
        can_manage_members=True,
        can_manage_visitors=True,
        can_access_kids_checkin=True,
        can_access_profile=True,
    ),
    Role.TEACHER: Permissions(can_access_kids_checkin=True, can_access_profile=True),
    Role.MEMBER: Permissions(can_access_profile=True),
    Role.TRAINEE: Permissions(can_access_profile=True),
}

_LABELS = {
    Role.ADMIN: {"pt": "Administrador", "en": "Administrator"},
    Role.LEADER: {"pt": "Líder", "en": "Leader"},
    Role.TEACHER: {"pt": "Professor(a)", "en": "Teacher"},
    Role.MEMBER: {"pt": "Membro", "en": "Member"},
    Role.TRAINEE: {"pt": "Em treinamento", "en": "Trainee"},
}


def role_to_permissions(role: Optional[Role]) -> Permissions:
    """Pure mapping; unknown or missing role gets no permission at all."""
    return _PERMISSIONS_BY_ROLE.get(Role.parse(role), NO_PERMISSIONS)


def role_label(role: Optional[Role], locale: str = "pt") -> str:
    labels = _LABELS.get(Role.parse(role))
    if labels is None:
        return "Sem função" if locale == "pt" else "No role"
    return labels.get(locale, labels["en"])
