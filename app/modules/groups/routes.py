from fastapi import APIRouter, Depends
from app.core.dependencies import get_current_user, get_user_service
from app.core.responses import Envelope
from app.database.supabase_client import get_supabase, get_service_supabase
from app.modules.auth.schemas import CurrentUser
from app.modules.groups.authorization import GroupAuthorizer
from app.modules.groups.controller import GroupController
from app.modules.groups.schemas import (
    GroupAddRequest, GroupMemberAddRequest, GroupMemberRoleRequest,
    GroupMemberDelRequest, GroupDelRequest, GroupUpRequest
)
from app.modules.groups.service import GroupService
from app.modules.interfaces.service import InterfaceService, InterfaceCaseService, InterfaceColService
from app.modules.logs.service import LogService
from app.modules.projects.service import ProjectService
from app.modules.users.service import UserService
from supabase import Client
from typing import Optional

router = APIRouter(prefix="/group", tags=["group"])


def get_group_service(supabase: Client = Depends(get_supabase)) -> GroupService:
    return GroupService(supabase)


def get_project_service(supabase: Client = Depends(get_service_supabase)) -> ProjectService:
    return ProjectService(supabase)


def get_log_service(supabase: Client = Depends(get_supabase)) -> LogService:
    return LogService(supabase)


def get_group_controller(
    current_user: CurrentUser = Depends(get_current_user),
    group_service: GroupService = Depends(get_group_service),
    user_service: UserService = Depends(get_user_service),
    project_service: ProjectService = Depends(get_project_service),
    log_service: LogService = Depends(get_log_service),
    service_supabase: Client = Depends(get_service_supabase)
) -> GroupController:
    return GroupController(
        current_user=current_user,
        group_service=group_service,
        user_service=user_service,
        project_service=project_service,
        interface_service=InterfaceService(service_supabase),
        interface_case_service=InterfaceCaseService(service_supabase),
        interface_col_service=InterfaceColService(service_supabase),
        authorizer=GroupAuthorizer(current_user, group_service),
        log_service=log_service,
    )


@router.get("/get", response_model=Envelope)
async def get_group(
    id: Optional[str] = None,
    controller: GroupController = Depends(get_group_controller)
):
    """Get group by ID with the caller's role in it"""
    return await controller.get(id)


@router.post("/add", response_model=Envelope)
async def add_group(
    body: GroupAddRequest,
    controller: GroupController = Depends(get_group_controller)
):
    """Create a group (global admin only)"""
    return await controller.add(body.group_name, body.group_desc, body.owner_uids)


@router.post("/add_member", response_model=Envelope)
async def add_member(
    body: GroupMemberAddRequest,
    controller: GroupController = Depends(get_group_controller)
):
    """Add members to a group with one role (owner, dev or guest)"""
    return await controller.add_member(body.id, body.member_uids, body.role)


@router.post("/change_member_role", response_model=Envelope)
async def change_member_role(
    body: GroupMemberRoleRequest,
    controller: GroupController = Depends(get_group_controller)
):
    """Change a member's role (group owner or admin)"""
    return await controller.change_member_role(body.id, body.member_uid, body.role)


@router.get("/get_member_list", response_model=Envelope)
async def get_member_list(
    id: Optional[str] = None,
    controller: GroupController = Depends(get_group_controller)
):
    """List all members of a group"""
    return await controller.get_member_list(id)


@router.post("/del_member", response_model=Envelope)
async def del_member(
    body: GroupMemberDelRequest,
    controller: GroupController = Depends(get_group_controller)
):
    """Remove a member from a group (group owner or admin)"""
    return await controller.del_member(body.id, body.member_uid)


@router.get("/list", response_model=Envelope)
async def list_groups(
    controller: GroupController = Depends(get_group_controller)
):
    """List groups visible to the caller, private group first"""
    return await controller.list()


@router.post("/del", response_model=Envelope)
async def delete_group(
    body: GroupDelRequest,
    controller: GroupController = Depends(get_group_controller)
):
    """Delete a group with all its projects and their interfaces (global admin only)"""
    return await controller.delete(body.id)


@router.post("/up", response_model=Envelope)
async def update_group(
    body: GroupUpRequest,
    controller: GroupController = Depends(get_group_controller)
):
    """Update group name and description (group owner or admin)"""
    return await controller.up(body.id, body.group_name, body.group_desc)
