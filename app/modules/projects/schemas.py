from pydantic import BaseModel
from typing import Optional


class ProjectResponse(BaseModel):
    id: str
    name: Optional[str] = None
    group_id: str
    project_type: str = "private"
    uid: Optional[str] = None
    add_time: Optional[int] = None
    up_time: Optional[int] = None

    class Config:
        from_attributes = True
