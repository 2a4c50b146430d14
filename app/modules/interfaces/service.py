from supabase import Client
from app.core.exceptions import PersistenceError
import logging

logger = logging.getLogger(__name__)


class ProjectScopedService:
    """Rows that belong to a single project and are removed with it"""

    table: str = ""

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def del_by_project_id(self, project_id: str) -> int:
        try:
            result = self.supabase.table(self.table)\
                .delete()\
                .eq("project_id", project_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error deleting {self.table} of project {project_id}: {e}")
            raise PersistenceError(str(e))

        deleted = len(result.data) if result.data else 0
        logger.debug(f"Deleted {deleted} row(s) from {self.table} for project {project_id}")
        return deleted


class InterfaceService(ProjectScopedService):
    table = "interfaces"


class InterfaceCaseService(ProjectScopedService):
    table = "interface_cases"


class InterfaceColService(ProjectScopedService):
    table = "interface_cols"
