import time
from supabase import Client
from app.core.exceptions import ApiError, NotFoundError, PersistenceError
from app.modules.groups.roles import GroupType
from app.modules.groups.schemas import GroupMember, GroupResponse
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


class GroupService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create_group(self, group_data: Dict[str, Any], members: Optional[List[GroupMember]] = None) -> GroupResponse:
        """Create a group row and its initial member rows"""
        members = members or []
        try:
            result = self.supabase.table("groups").insert({
                "group_name": group_data["group_name"],
                "group_desc": group_data.get("group_desc"),
                "uid": group_data["uid"],
                "type": group_data.get("type", GroupType.NORMAL.value),
                "add_time": group_data.get("add_time"),
                "up_time": group_data.get("up_time"),
            }).execute()

            if not result.data:
                raise PersistenceError("Failed to create group")

            group = result.data[0]
            if members:
                try:
                    self.supabase.table("group_members").insert([
                        {**member.model_dump(), "group_id": group["id"]} for member in members
                    ]).execute()
                except Exception as e:
                    logger.error(f"Error adding members to new group {group['id']}: {e}")
                    self._discard_group(group["id"])
                    raise PersistenceError(str(e))

            return GroupResponse(**group, members=members)
        except ApiError:
            raise
        except Exception as e:
            raise PersistenceError(str(e))

    def get_group_by_id(self, group_id: str) -> GroupResponse:
        """Get group by ID, members included"""
        try:
            result = self.supabase.table("groups")\
                .select("*")\
                .eq("id", group_id)\
                .maybe_single()\
                .execute()

            if not result or not result.data:
                raise NotFoundError("Group not found")

            return GroupResponse(**result.data, members=self.get_members(group_id))
        except ApiError:
            raise
        except Exception as e:
            raise PersistenceError(str(e))

    def get_members(self, group_id: str) -> List[GroupMember]:
        """Members of a group in the order they were added"""
        try:
            result = self.supabase.table("group_members")\
                .select("uid, role, username, email")\
                .eq("group_id", group_id)\
                .order("created_at")\
                .execute()

            return [GroupMember(**member) for member in (result.data or [])]
        except Exception as e:
            raise PersistenceError(str(e))

    def get_by_private_uid(self, uid: str) -> Optional[GroupResponse]:
        """The private group owned by uid, if it has been created"""
        try:
            result = self.supabase.table("groups")\
                .select("*")\
                .eq("uid", uid)\
                .eq("type", GroupType.PRIVATE.value)\
                .limit(1)\
                .execute()

            if not result.data:
                return None
            return GroupResponse(**result.data[0])
        except Exception as e:
            raise PersistenceError(str(e))

    def list_groups(self) -> List[GroupResponse]:
        """All shared (non-private) groups in creation order, without members"""
        try:
            result = self.supabase.table("groups")\
                .select("*")\
                .neq("type", GroupType.PRIVATE.value)\
                .order("add_time")\
                .execute()

            return [GroupResponse(**group) for group in (result.data or [])]
        except Exception as e:
            raise PersistenceError(str(e))

    def check_repeat(self, group_name: str) -> int:
        """Number of groups already using group_name"""
        try:
            result = self.supabase.table("groups")\
                .select("id")\
                .eq("group_name", group_name)\
                .execute()

            return len(result.data) if result.data else 0
        except Exception as e:
            raise PersistenceError(str(e))

    def check_member_repeat(self, group_id: str, uid: str) -> int:
        """Number of membership rows for uid in the group (0 or 1)"""
        try:
            result = self.supabase.table("group_members")\
                .select("id")\
                .eq("group_id", group_id)\
                .eq("uid", uid)\
                .execute()

            return len(result.data) if result.data else 0
        except Exception as e:
            raise PersistenceError(str(e))

    def add_members(self, group_id: str, members: List[GroupMember]) -> Dict[str, int]:
        """Append members to the group"""
        if not members:
            return {"modified_count": 0}
        try:
            result = self.supabase.table("group_members").insert([
                {**member.model_dump(), "group_id": group_id} for member in members
            ]).execute()
            self._touch(group_id)

            return {"modified_count": len(result.data) if result.data else 0}
        except Exception as e:
            raise PersistenceError(str(e))

    def change_member_role(self, group_id: str, uid: str, role: str) -> Dict[str, int]:
        """Set the role of one member"""
        try:
            result = self.supabase.table("group_members")\
                .update({"role": role})\
                .eq("group_id", group_id)\
                .eq("uid", uid)\
                .execute()
            self._touch(group_id)

            return {"modified_count": len(result.data) if result.data else 0}
        except Exception as e:
            raise PersistenceError(str(e))

    def del_member(self, group_id: str, uid: str) -> Dict[str, int]:
        """Remove a member from the group"""
        try:
            result = self.supabase.table("group_members")\
                .delete()\
                .eq("group_id", group_id)\
                .eq("uid", uid)\
                .execute()
            self._touch(group_id)

            return {"modified_count": len(result.data) if result.data else 0}
        except Exception as e:
            raise PersistenceError(str(e))

    def update_group(self, group_id: str, group_data: Dict[str, Any]) -> Dict[str, int]:
        """Update group name and description"""
        try:
            result = self.supabase.table("groups")\
                .update({
                    "group_name": group_data["group_name"],
                    "group_desc": group_data.get("group_desc"),
                    "up_time": int(time.time()),
                })\
                .eq("id", group_id)\
                .execute()

            if not result.data:
                raise NotFoundError("Group not found")

            return {"modified_count": len(result.data)}
        except ApiError:
            raise
        except Exception as e:
            raise PersistenceError(str(e))

    def delete_group(self, group_id: str) -> Dict[str, int]:
        """Delete group and its member rows"""
        try:
            # Delete group members first
            self.supabase.table("group_members")\
                .delete()\
                .eq("group_id", group_id)\
                .execute()

            result = self.supabase.table("groups")\
                .delete()\
                .eq("id", group_id)\
                .execute()

            return {"deleted_count": len(result.data) if result.data else 0}
        except Exception as e:
            raise PersistenceError(str(e))

    def _touch(self, group_id: str) -> None:
        """Bump up_time after a membership change. The change itself already succeeded, so a failure is only logged."""
        try:
            self.supabase.table("groups")\
                .update({"up_time": int(time.time())})\
                .eq("id", group_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error updating up_time of group {group_id}: {e}")

    def _discard_group(self, group_id: str) -> None:
        """Remove a group row whose member rows could not be written"""
        try:
            self.supabase.table("groups")\
                .delete()\
                .eq("id", group_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error removing partially created group {group_id}: {e}")
