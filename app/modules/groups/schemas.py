from pydantic import BaseModel, Field
from typing import Optional, List


class GroupMember(BaseModel):
    uid: str
    role: str = "dev"
    username: Optional[str] = None
    email: Optional[str] = None

    class Config:
        from_attributes = True


class GroupResponse(BaseModel):
    id: str = Field(alias="_id")
    group_name: str
    group_desc: Optional[str] = None
    uid: str
    type: str = "normal"
    add_time: Optional[int] = None
    up_time: Optional[int] = None
    members: List[GroupMember] = []

    class Config:
        from_attributes = True
        populate_by_name = True


# Request bodies keep every field optional so a missing field is reported
# through the response envelope rather than as a 422.

class GroupAddRequest(BaseModel):
    group_name: Optional[str] = None
    group_desc: Optional[str] = None
    owner_uids: Optional[List[str]] = None

    class Config:
        str_strip_whitespace = True
        coerce_numbers_to_str = True


class GroupMemberAddRequest(BaseModel):
    id: Optional[str] = None
    member_uids: Optional[List[str]] = None
    role: Optional[str] = None

    class Config:
        coerce_numbers_to_str = True


class GroupMemberRoleRequest(BaseModel):
    id: Optional[str] = None
    member_uid: Optional[str] = None
    role: Optional[str] = None

    class Config:
        coerce_numbers_to_str = True


class GroupMemberDelRequest(BaseModel):
    id: Optional[str] = None
    member_uid: Optional[str] = None

    class Config:
        coerce_numbers_to_str = True


class GroupDelRequest(BaseModel):
    id: Optional[str] = None

    class Config:
        coerce_numbers_to_str = True


class GroupUpRequest(BaseModel):
    id: Optional[str] = None
    group_name: Optional[str] = None
    group_desc: Optional[str] = None

    class Config:
        str_strip_whitespace = True
        coerce_numbers_to_str = True
