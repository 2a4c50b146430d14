from enum import Enum
from typing import Any


class GroupType(str, Enum):
    NORMAL = "normal"
    PRIVATE = "private"


class MemberRole(str, Enum):
    """Role stored on a group_members row"""
    OWNER = "owner"
    DEV = "dev"
    GUEST = "guest"

    @classmethod
    def normalize(cls, value: Any) -> "MemberRole":
        """Map any input onto a member role; anything unrecognised becomes dev"""
        for role in cls:
            if value == role.value:
                return role
        return cls.DEV


class GroupRole(str, Enum):
    """Role of the caller with respect to one group"""
    ADMIN = "admin"  # global admin, regardless of membership
    OWNER = "owner"
    DEV = "dev"
    GUEST = "guest"
    MEMBER = "member"  # signed-in user with no membership in the group


ROLE_LABELS = {
    MemberRole.OWNER: "Owner",
    MemberRole.DEV: "Developer",
    MemberRole.GUEST: "Guest",
}

# Roles allowed to perform each kind of action on a group
ACTION_ROLES = {
    "danger": {GroupRole.ADMIN, GroupRole.OWNER},
    "edit": {GroupRole.ADMIN, GroupRole.OWNER, GroupRole.DEV},
    "view": {GroupRole.ADMIN, GroupRole.OWNER, GroupRole.DEV, GroupRole.GUEST},
}
