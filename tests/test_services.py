from types import SimpleNamespace

from unittest.mock import MagicMock

import pytest

from app.core.exceptions import NotFoundError, PersistenceError
from app.modules.groups.schemas import GroupMember
from app.modules.groups.service import GroupService
from app.modules.interfaces.service import InterfaceCaseService, InterfaceColService, InterfaceService
from app.modules.logs.service import LogService
from app.modules.projects.service import ProjectService
from app.modules.users.service import UserService

from tests.conftest import make_query

GROUP_ROW = {
    "id": "g1",
    "group_name": "Backend",
    "group_desc": None,
    "uid": "alice",
    "type": "normal",
    "add_time": 10,
    "up_time": 10,
    "created_at": "2024-01-01T00:00:00Z",
}


def test_check_repeat_counts_rows(supabase_with):
    supabase, query = supabase_with([{"id": "g1"}, {"id": "g2"}])

    assert GroupService(supabase).check_repeat("Backend") == 2
    supabase.table.assert_called_with("groups")
    query.eq.assert_called_with("group_name", "Backend")


def test_check_member_repeat_empty(supabase_with):
    supabase, _ = supabase_with([])
    assert GroupService(supabase).check_member_repeat("g1", "bob") == 0


def test_get_group_by_id_not_found(supabase_with):
    supabase, _ = supabase_with(None)
    with pytest.raises(NotFoundError):
        GroupService(supabase).get_group_by_id("g1")


def test_get_group_by_id_loads_members(supabase_with):
    supabase, query = supabase_with(None)
    query.execute.side_effect = [
        SimpleNamespace(data=GROUP_ROW),
        SimpleNamespace(data=[{"uid": "bob", "role": "dev", "username": "bob", "email": None}]),
    ]

    group = GroupService(supabase).get_group_by_id("g1")

    assert group.id == "g1"
    assert group.model_dump(by_alias=True)["_id"] == "g1"
    assert [m.uid for m in group.members] == ["bob"]


def test_store_errors_become_persistence_errors(supabase_with):
    supabase, _ = supabase_with(error=RuntimeError("connection refused"))

    with pytest.raises(PersistenceError) as exc_info:
        GroupService(supabase).list_groups()
    assert exc_info.value.errcode == 402
    assert exc_info.value.errmsg == "connection refused"


def test_create_group_inserts_members(supabase_with):
    supabase, query = supabase_with([GROUP_ROW])
    owner = GroupMember(uid="bob", role="owner", username="bob", email="bob@example.com")

    group = GroupService(supabase).create_group(
        {"group_name": "Backend", "uid": "alice", "add_time": 10, "up_time": 10},
        members=[owner],
    )

    assert group.members == [owner]
    inserted_members = query.insert.call_args_list[1].args[0]
    assert inserted_members == [{
        "uid": "bob", "role": "owner", "username": "bob", "email": "bob@example.com", "group_id": "g1",
    }]


def test_add_members_noop_when_empty(supabase_with):
    supabase, _ = supabase_with([])
    assert GroupService(supabase).add_members("g1", []) == {"modified_count": 0}
    supabase.table.assert_not_called()


def test_update_group_missing(supabase_with):
    supabase, _ = supabase_with([])
    with pytest.raises(NotFoundError):
        GroupService(supabase).update_group("g1", {"group_name": "x"})


def test_project_count_with_auth(supabase_with):
    supabase, query = supabase_with(None)
    query.execute.side_effect = [
        SimpleNamespace(data=[{"id": "p1"}, {"id": "p2"}]),
        SimpleNamespace(data=[{"project_id": "p2"}]),
    ]

    assert ProjectService(supabase).count_with_auth("g1", "alice") == 1
    query.in_.assert_called_with("project_id", ["p1", "p2"])


def test_project_count_with_auth_no_projects(supabase_with):
    supabase, query = supabase_with([])
    assert ProjectService(supabase).count_with_auth("g1", "alice") == 0
    assert query.execute.call_count == 1


@pytest.mark.parametrize("service_cls,table", [
    (InterfaceService, "interfaces"),
    (InterfaceCaseService, "interface_cases"),
    (InterfaceColService, "interface_cols"),
])
def test_del_by_project_id(supabase_with, service_cls, table):
    supabase, query = supabase_with([{"id": "a"}, {"id": "b"}])

    assert service_cls(supabase).del_by_project_id("p1") == 2
    supabase.table.assert_called_with(table)
    query.eq.assert_called_with("project_id", "p1")


def test_find_user_missing(supabase_with):
    supabase, _ = supabase_with(None)
    assert UserService(supabase).find_by_id("ghost") is None


def test_find_user(supabase_with):
    supabase, _ = supabase_with({"id": "bob", "username": "bob", "email": "bob@example.com", "role": "admin"})
    user = UserService(supabase).find_by_id("bob")
    assert user.username == "bob"
    assert user.role == "admin"


def test_save_log_failure_does_not_raise(supabase_with):
    supabase, query = supabase_with(error=RuntimeError("insert failed"))

    LogService(supabase).save_log("content", "group", "alice", "alice", "g1")

    entry = query.insert.call_args.args[0]
    assert entry["typeid"] == "g1"
    assert entry["type"] == "group"
    assert isinstance(entry["add_time"], int)


def test_create_group_removes_row_when_members_fail():
    supabase = MagicMock()
    groups_query = make_query([GROUP_ROW])
    members_query = make_query(error=RuntimeError("duplicate key value violates unique constraint"))
    supabase.table.side_effect = lambda name: members_query if name == "group_members" else groups_query
    owner = GroupMember(uid="bob", role="owner", username="bob")

    with pytest.raises(PersistenceError) as exc_info:
        GroupService(supabase).create_group({"group_name": "Backend", "uid": "alice"}, members=[owner])

    assert "duplicate key" in exc_info.value.errmsg
    groups_query.delete.assert_called_once()
    groups_query.eq.assert_called_with("id", "g1")


def test_add_members_survives_up_time_failure():
    supabase = MagicMock()
    members_query = make_query([{"id": "m1"}])
    groups_query = make_query(error=RuntimeError("timeout"))
    supabase.table.side_effect = lambda name: members_query if name == "group_members" else groups_query

    result = GroupService(supabase).add_members("g1", [GroupMember(uid="bob")])

    assert result == {"modified_count": 1}
    groups_query.update.assert_called_once()


def test_find_user_with_invalid_row(supabase_with):
    supabase, _ = supabase_with({"id": "bob", "username": None, "role": "member"})

    with pytest.raises(PersistenceError):
        UserService(supabase).find_by_id("bob")
