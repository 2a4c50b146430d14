"""
Group controller: request-facing group operations.

Each public coroutine validates its input, checks authorization, calls the
stores and writes an audit entry. Results and ``ApiError`` failures are both
turned into the ``{"data", "errcode", "errmsg"}`` envelope by ``@envelope``.

Every collaborator is passed in by the caller (see ``routes.get_group_controller``)
so tests can substitute in-memory stores.
"""

import time
from typing import Any, Dict, List, Optional
import logging

from app.config import settings
from app.core.exceptions import AuthError, ConflictError, NotFoundError, ValidationError
from app.core.responses import envelope, field_select
from app.modules.auth.schemas import CurrentUser
from app.modules.groups.authorization import GroupAuthorizer
from app.modules.groups.roles import ROLE_LABELS, GroupRole, GroupType, MemberRole
from app.modules.groups.schemas import GroupMember
from app.modules.groups.service import GroupService
from app.modules.interfaces.service import InterfaceCaseService, InterfaceColService, InterfaceService
from app.modules.logs.service import LogService
from app.modules.projects.service import ProjectService
from app.modules.users.service import UserService

logger = logging.getLogger(__name__)

ADD_RESULT_FIELDS = ["_id", "group_name", "group_desc", "uid", "members", "type"]


def _user_link(uid: str, username: str) -> str:
    return f'<a href="/user/profile/{uid}">{username}</a>'


def _group_link(group_id: str, group_name: str) -> str:
    return f'<a href="/group/{group_id}">{group_name}</a>'


class GroupController:
    def __init__(
        self,
        current_user: CurrentUser,
        group_service: GroupService,
        user_service: UserService,
        project_service: ProjectService,
        interface_service: InterfaceService,
        interface_case_service: InterfaceCaseService,
        interface_col_service: InterfaceColService,
        authorizer: GroupAuthorizer,
        log_service: LogService,
        private_group_label: str = settings.private_group_label,
        private_group_prefix: str = settings.private_group_prefix,
    ):
        self.current_user = current_user
        self.group_service = group_service
        self.user_service = user_service
        self.project_service = project_service
        self.interface_service = interface_service
        self.interface_case_service = interface_case_service
        self.interface_col_service = interface_col_service
        self.authorizer = authorizer
        self.log_service = log_service
        self.private_group_label = private_group_label
        self.private_group_prefix = private_group_prefix

    def _save_log(self, content: str, group_id: str) -> None:
        self.log_service.save_log(
            content=content,
            type="group",
            uid=self.current_user.uid,
            username=self.current_user.username,
            typeid=group_id,
        )

    @property
    def _actor_link(self) -> str:
        return _user_link(self.current_user.uid, self.current_user.username)

    async def get_userdata(self, uid: str, role: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """Member snapshot for uid with the given group role, or None if the user does not exist.

        ``_role`` carries the user's global role so callers can filter admins out.
        """
        role = role or MemberRole.DEV.value
        user = self.user_service.find_by_id(uid)
        if user is None:
            return None
        return {
            "_role": user.role,
            "role": role,
            "uid": user.id,
            "username": user.username,
            "email": user.email,
        }

    @envelope
    async def get(self, id: Optional[str]) -> Dict[str, Any]:
        if not id:
            raise ValidationError("group id is required")

        group = self.group_service.get_group_by_id(id)
        result = group.model_dump(by_alias=True)
        result["role"] = self.authorizer.get_role(id, group).value
        if group.type == GroupType.PRIVATE.value:
            result["group_name"] = self.private_group_label
        return result

    @envelope
    async def add(
        self,
        group_name: Optional[str],
        group_desc: Optional[str] = None,
        owner_uids: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        if not self.current_user.is_admin:
            raise AuthError("permission denied")

        if not group_name:
            raise ValidationError("group name is required")

        owners = []
        for uid in dict.fromkeys(owner_uids or []):
            userdata = await self.get_userdata(uid, MemberRole.OWNER.value)
            if userdata:
                owners.append(GroupMember(**userdata))

        # Not atomic: two concurrent creates with the same name can both pass
        if self.group_service.check_repeat(group_name) > 0:
            raise ConflictError("group name already exists")

        now = int(time.time())
        group = self.group_service.create_group({
            "group_name": group_name,
            "group_desc": group_desc,
            "uid": self.current_user.uid,
            "type": GroupType.NORMAL.value,
            "add_time": now,
            "up_time": now,
        }, members=owners)

        result = field_select(group.model_dump(by_alias=True), ADD_RESULT_FIELDS)
        self._save_log(
            f"{self._actor_link} added group {_group_link(group.id, group_name)}",
            group.id,
        )
        logger.info(f"Group {group.id} '{group_name}' created by {self.current_user.uid}")
        return result

    @envelope
    async def add_member(
        self,
        id: Optional[str],
        member_uids: Optional[List[str]],
        role: Optional[str] = None,
    ) -> Dict[str, Any]:
        if not member_uids:
            raise ValidationError("member uids are required")
        if not id:
            raise ValidationError("group id is required")

        member_role = MemberRole.normalize(role)
        add_members = []
        exist_members = []
        no_members = []
        for uid in dict.fromkeys(member_uids):
            check = self.group_service.check_member_repeat(id, uid)
            userdata = await self.get_userdata(uid, member_role.value)
            global_role = userdata.pop("_role") if userdata else None
            if check > 0:
                exist_members.append(userdata)
            elif userdata is None:
                no_members.append(uid)
            elif global_role != "admin":
                add_members.append(userdata)

        result = self.group_service.add_members(id, [GroupMember(**m) for m in add_members])

        if add_members:
            members = ", ".join(_user_link(m["uid"], m["username"]) for m in add_members)
            self._save_log(
                f"{self._actor_link} added group members {members} as {ROLE_LABELS[member_role]}",
                id,
            )

        return {
            "result": result,
            "add_members": add_members,
            "exist_members": exist_members,
            "no_members": no_members,
        }

    async def _require_member_and_danger(self, id: Optional[str], member_uid: Optional[str]) -> None:
        if not member_uid:
            raise ValidationError("member uid is required")
        if not id:
            raise ValidationError("group id is required")
        if self.group_service.check_member_repeat(id, member_uid) == 0:
            raise NotFoundError("group member does not exist")
        if not self.authorizer.check(id, "danger"):
            raise AuthError("permission denied", errcode=405)

    async def _member_username(self, member_uid: str) -> str:
        userdata = await self.get_userdata(member_uid)
        return userdata["username"] if userdata else member_uid

    @envelope
    async def change_member_role(
        self,
        id: Optional[str],
        member_uid: Optional[str],
        role: Optional[str],
    ) -> Dict[str, int]:
        await self._require_member_and_danger(id, member_uid)

        member_role = MemberRole.normalize(role)
        result = self.group_service.change_member_role(id, member_uid, member_role.value)

        username = await self._member_username(member_uid)
        self._save_log(
            f'{self._actor_link} changed the role of group member {_user_link(member_uid, username)} '
            f'to "{ROLE_LABELS[member_role]}"',
            id,
        )
        return result

    @envelope
    async def get_member_list(self, id: Optional[str]) -> List[Dict[str, Any]]:
        if not id:
            raise ValidationError("group id is required")

        group = self.group_service.get_group_by_id(id)
        return [member.model_dump() for member in group.members]

    @envelope
    async def del_member(self, id: Optional[str], member_uid: Optional[str]) -> Dict[str, int]:
        await self._require_member_and_danger(id, member_uid)

        result = self.group_service.del_member(id, member_uid)

        username = await self._member_username(member_uid)
        self._save_log(
            f"{self._actor_link} removed group member {_user_link(member_uid, username)}",
            id,
        )
        return result

    @envelope
    async def list(self) -> List[Dict[str, Any]]:
        uid = self.current_user.uid
        groups = self.group_service.list_groups()

        private_group = self.group_service.get_by_private_uid(uid)
        if private_group is None:
            now = int(time.time())
            private_group = self.group_service.create_group({
                "group_name": f"{self.private_group_prefix}{uid}",
                "uid": uid,
                "type": GroupType.PRIVATE.value,
                "add_time": now,
                "up_time": now,
            })
            logger.info(f"Created private group {private_group.id} for user {uid}")

        privileged = []
        visible = []
        for group in groups:
            item = group.model_dump(by_alias=True)
            role = self.authorizer.get_role(group.id)
            item["role"] = role.value
            if role != GroupRole.MEMBER:
                privileged.append(item)
            elif self.project_service.count_with_public(group.id) > 0:
                visible.append(item)
            elif self.project_service.count_with_auth(group.id, uid) > 0:
                visible.append(item)

        private_item = private_group.model_dump(by_alias=True)
        private_item["group_name"] = self.private_group_label
        private_item["role"] = GroupRole.OWNER.value
        return [private_item] + privileged + visible

    @envelope
    async def delete(self, id: Optional[str]) -> Dict[str, int]:
        if not self.current_user.is_admin:
            raise AuthError("permission denied")
        if not id:
            raise ValidationError("id is required", errcode=402)

        # Children of every project are removed before the projects themselves;
        # a failure stops the request before the group row is touched.
        projects = self.project_service.list_by_group(id)
        for project in projects:
            self.interface_service.del_by_project_id(project.id)
            self.interface_case_service.del_by_project_id(project.id)
            self.interface_col_service.del_by_project_id(project.id)
        if projects:
            self.project_service.del_by_group_id(id)

        result = self.group_service.delete_group(id)
        logger.info(f"Group {id} deleted by {self.current_user.uid} ({len(projects)} project(s))")
        return result

    @envelope
    async def up(
        self,
        id: Optional[str],
        group_name: Optional[str],
        group_desc: Optional[str] = None,
    ) -> Dict[str, int]:
        if not id:
            raise ValidationError("id is required", errcode=402)
        if not self.authorizer.check(id, "danger"):
            raise AuthError("permission denied", errcode=405)
        if not group_name:
            raise ValidationError("group name is required", errcode=402)

        result = self.group_service.update_group(id, {"group_name": group_name, "group_desc": group_desc})
        self._save_log(
            f"{self._actor_link} updated group {_group_link(id, group_name)}",
            id,
        )
        return result
