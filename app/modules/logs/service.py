import time
from supabase import Client
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class LogService:
    """Audit log sink for user-visible activity entries"""

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def save_log(self, content: str, type: str, uid: str, username: str, typeid: Optional[str]) -> None:
        """Persist an activity entry. A failed write is logged and does not fail the request."""
        entry = {
            "content": content,
            "type": type,
            "uid": uid,
            "username": username,
            "typeid": typeid,
            "add_time": int(time.time()),
        }
        logger.info(f"Audit [{type}:{typeid}] {username}: {content}")
        try:
            self.supabase.table("logs").insert(entry).execute()
        except Exception as e:
            logger.error(f"Error saving audit log for {type} {typeid}: {e}")
