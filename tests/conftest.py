"""Shared fixtures: in-memory stand-ins for the Supabase-backed stores."""

import itertools
import types
from typing import Dict, List, Optional
from unittest.mock import MagicMock

import pytest

from app.core.exceptions import NotFoundError
from app.modules.auth.schemas import CurrentUser
from app.modules.groups.authorization import GroupAuthorizer
from app.modules.groups.controller import GroupController
from app.modules.groups.schemas import GroupMember, GroupResponse
from app.modules.projects.schemas import ProjectResponse
from app.modules.users.schemas import UserResponse

PRIVATE_LABEL = "Personal Space"


class FakeGroupService:
    def __init__(self):
        self.groups: Dict[str, dict] = {}
        self.members: Dict[str, List[GroupMember]] = {}
        self._ids = itertools.count(1)

    def seed(self, id, group_name, uid, type="normal", members=None, group_desc=None):
        self.groups[id] = {
            "id": id,
            "group_name": group_name,
            "group_desc": group_desc,
            "uid": uid,
            "type": type,
            "add_time": 1,
            "up_time": 1,
        }
        self.members[id] = [GroupMember(**m) for m in (members or [])]
        return id

    def create_group(self, group_data, members=None):
        group_id = f"new-{next(self._ids)}"
        row = {
            "id": group_id,
            "group_name": group_data["group_name"],
            "group_desc": group_data.get("group_desc"),
            "uid": group_data["uid"],
            "type": group_data.get("type", "normal"),
            "add_time": group_data.get("add_time"),
            "up_time": group_data.get("up_time"),
        }
        self.groups[group_id] = row
        self.members[group_id] = list(members or [])
        return GroupResponse(**row, members=self.members[group_id])

    def get_group_by_id(self, group_id):
        if group_id not in self.groups:
            raise NotFoundError("Group not found")
        return GroupResponse(**self.groups[group_id], members=self.members[group_id])

    def get_members(self, group_id):
        return list(self.members.get(group_id, []))

    def get_by_private_uid(self, uid) -> Optional[GroupResponse]:
        for row in self.groups.values():
            if row["uid"] == uid and row["type"] == "private":
                return GroupResponse(**row)
        return None

    def list_groups(self):
        return [GroupResponse(**row) for row in self.groups.values() if row["type"] != "private"]

    def check_repeat(self, group_name):
        return len([row for row in self.groups.values() if row["group_name"] == group_name])

    def check_member_repeat(self, group_id, uid):
        return len([m for m in self.members.get(group_id, []) if m.uid == uid])

    def add_members(self, group_id, members):
        self.members.setdefault(group_id, []).extend(members)
        return {"modified_count": len(members)}

    def change_member_role(self, group_id, uid, role):
        count = 0
        for member in self.members.get(group_id, []):
            if member.uid == uid:
                member.role = role
                count += 1
        return {"modified_count": count}

    def del_member(self, group_id, uid):
        before = self.members.get(group_id, [])
        self.members[group_id] = [m for m in before if m.uid != uid]
        return {"modified_count": len(before) - len(self.members[group_id])}

    def update_group(self, group_id, group_data):
        if group_id not in self.groups:
            raise NotFoundError("Group not found")
        self.groups[group_id]["group_name"] = group_data["group_name"]
        self.groups[group_id]["group_desc"] = group_data.get("group_desc")
        return {"modified_count": 1}

    def delete_group(self, group_id):
        existed = self.groups.pop(group_id, None) is not None
        self.members.pop(group_id, None)
        return {"deleted_count": 1 if existed else 0}


class FakeUserService:
    def __init__(self):
        self.users: Dict[str, UserResponse] = {}

    def seed(self, id, username, role="member"):
        self.users[id] = UserResponse(id=id, username=username, email=f"{username}@example.com", role=role)

    def find_by_id(self, user_id):
        return self.users.get(user_id)


class FakeProjectService:
    def __init__(self):
        self.projects: List[ProjectResponse] = []
        self.acl: Dict[str, set] = {}

    def seed(self, id, group_id, project_type="private", members=()):
        self.projects.append(ProjectResponse(id=id, group_id=group_id, project_type=project_type))
        self.acl[id] = set(members)

    def list_by_group(self, group_id):
        return [p for p in self.projects if p.group_id == group_id]

    def count_with_public(self, group_id):
        return len([p for p in self.list_by_group(group_id) if p.project_type == "public"])

    def count_with_auth(self, group_id, uid):
        return len([p for p in self.list_by_group(group_id) if uid in self.acl.get(p.id, set())])

    def del_by_group_id(self, group_id):
        before = len(self.projects)
        self.projects = [p for p in self.projects if p.group_id != group_id]
        return before - len(self.projects)


class FakeProjectScopedService:
    def __init__(self):
        self.rows: List[dict] = []

    def seed(self, project_id, count=1):
        for _ in range(count):
            self.rows.append({"project_id": project_id})

    def del_by_project_id(self, project_id):
        before = len(self.rows)
        self.rows = [r for r in self.rows if r["project_id"] != project_id]
        return before - len(self.rows)


class FakeLogService:
    def __init__(self):
        self.entries: List[dict] = []

    def save_log(self, content, type, uid, username, typeid):
        self.entries.append({
            "content": content,
            "type": type,
            "uid": uid,
            "username": username,
            "typeid": typeid,
        })


@pytest.fixture
def stores():
    """Fresh set of in-memory stores with a few users"""
    s = types.SimpleNamespace(
        groups=FakeGroupService(),
        users=FakeUserService(),
        projects=FakeProjectService(),
        interfaces=FakeProjectScopedService(),
        cases=FakeProjectScopedService(),
        cols=FakeProjectScopedService(),
        logs=FakeLogService(),
    )
    s.users.seed("admin", "root", role="admin")
    s.users.seed("alice", "alice")
    s.users.seed("bob", "bob")
    s.users.seed("carol", "carol")
    return s


@pytest.fixture
def make_user():
    def _factory(uid="alice", username=None, role="member") -> CurrentUser:
        return CurrentUser(uid=uid, username=username or uid, email=f"{uid}@example.com", role=role)

    return _factory


@pytest.fixture
def make_controller(stores, make_user):
    """Build a GroupController for a caller over the shared stores.

    Usage:
        controller = make_controller("alice")
        controller = make_controller("admin", role="admin")
    """

    def _factory(uid="alice", role="member", authorizer=None) -> GroupController:
        profile = stores.users.find_by_id(uid)
        current_user = make_user(uid=uid, username=profile.username if profile else uid, role=role)
        return GroupController(
            current_user=current_user,
            group_service=stores.groups,
            user_service=stores.users,
            project_service=stores.projects,
            interface_service=stores.interfaces,
            interface_case_service=stores.cases,
            interface_col_service=stores.cols,
            authorizer=authorizer or GroupAuthorizer(current_user, stores.groups),
            log_service=stores.logs,
            private_group_label=PRIVATE_LABEL,
            private_group_prefix="User-",
        )

    return _factory


def make_query(data=None, error=None):
    """Chainable stand-in for a Supabase query builder.

    Every builder method returns the same mock; ``execute()`` returns an
    object whose ``data`` is the given rows, or raises ``error``.
    """
    query = MagicMock()
    for name in ("select", "eq", "neq", "in_", "order", "limit", "maybe_single", "insert", "update", "delete"):
        getattr(query, name).return_value = query
    if error is not None:
        query.execute.side_effect = error
    else:
        query.execute.return_value = MagicMock(data=data)
    return query


@pytest.fixture
def supabase_with():
    """Supabase client mock whose every table query returns the given rows"""

    def _factory(data=None, error=None):
        supabase = MagicMock()
        query = make_query(data=data, error=error)
        supabase.table.return_value = query
        return supabase, query

    return _factory
