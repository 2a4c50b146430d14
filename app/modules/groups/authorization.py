"""
Group-scoped authorization for the current caller.

The caller's role in a group is resolved in this order:
global admin, group creator, member row role, otherwise plain ``member``.
"""

from typing import Optional
import logging

from app.modules.auth.schemas import CurrentUser
from app.modules.groups.roles import ACTION_ROLES, GroupRole
from app.modules.groups.schemas import GroupResponse
from app.modules.groups.service import GroupService

logger = logging.getLogger(__name__)


class GroupAuthorizer:
    def __init__(self, current_user: CurrentUser, group_service: GroupService):
        self.current_user = current_user
        self.group_service = group_service

    def get_role(self, group_id: str, group: Optional[GroupResponse] = None) -> GroupRole:
        """Role of the caller in the group. Pass an already loaded group to skip the lookup."""
        if self.current_user.is_admin:
            return GroupRole.ADMIN

        if group is None:
            group = self.group_service.get_group_by_id(group_id)

        if group.uid == self.current_user.uid:
            return GroupRole.OWNER

        member = next((m for m in group.members if m.uid == self.current_user.uid), None)
        if member is not None and member.role:
            if member.role == GroupRole.OWNER.value:
                return GroupRole.OWNER
            if member.role == GroupRole.DEV.value:
                return GroupRole.DEV
            return GroupRole.GUEST

        return GroupRole.MEMBER

    def check(self, group_id: str, action: str) -> bool:
        """True if the caller may perform action (danger | edit | view) on the group"""
        role = self.get_role(group_id)
        allowed = role in ACTION_ROLES.get(action, set())
        if not allowed:
            logger.info(f"User {self.current_user.uid} denied '{action}' on group {group_id} (role: {role.value})")
        return allowed
