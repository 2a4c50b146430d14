from supabase import Client
from app.core.exceptions import PersistenceError
from app.modules.projects.schemas import ProjectResponse
from typing import List
import logging

logger = logging.getLogger(__name__)


class ProjectService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_by_group(self, group_id: str) -> List[ProjectResponse]:
        """List every project of a group, regardless of visibility"""
        try:
            result = self.supabase.table("projects")\
                .select("*")\
                .eq("group_id", group_id)\
                .execute()
            return [ProjectResponse(**project) for project in (result.data or [])]
        except Exception as e:
            raise PersistenceError(str(e))

    def count_with_public(self, group_id: str) -> int:
        """Number of public projects in a group"""
        try:
            result = self.supabase.table("projects")\
                .select("id")\
                .eq("group_id", group_id)\
                .eq("project_type", "public")\
                .execute()
            return len(result.data) if result.data else 0
        except Exception as e:
            raise PersistenceError(str(e))

    def count_with_auth(self, group_id: str, uid: str) -> int:
        """Number of projects in a group whose member list includes uid"""
        try:
            projects_result = self.supabase.table("projects")\
                .select("id")\
                .eq("group_id", group_id)\
                .execute()
            if not projects_result.data:
                return 0
            project_ids = [p["id"] for p in projects_result.data]

            member_result = self.supabase.table("project_members")\
                .select("project_id")\
                .eq("uid", uid)\
                .in_("project_id", project_ids)\
                .execute()
            return len({m["project_id"] for m in member_result.data}) if member_result.data else 0
        except Exception as e:
            raise PersistenceError(str(e))

    def del_by_group_id(self, group_id: str) -> int:
        """Delete all projects of a group (and their member rows); returns deleted project count"""
        try:
            projects_result = self.supabase.table("projects")\
                .select("id")\
                .eq("group_id", group_id)\
                .execute()
            project_ids = [p["id"] for p in (projects_result.data or [])]
            if project_ids:
                self.supabase.table("project_members")\
                    .delete()\
                    .in_("project_id", project_ids)\
                    .execute()

            result = self.supabase.table("projects")\
                .delete()\
                .eq("group_id", group_id)\
                .execute()
            deleted = len(result.data) if result.data else 0
            logger.info(f"Deleted {deleted} project(s) of group {group_id}")
            return deleted
        except Exception as e:
            raise PersistenceError(str(e))
