"""Project creation and the membership lifecycle."""

from __future__ import annotations

import uuid

import pytest
from _helpers import add_project, add_user, identity

from taskflow_service.errors import BadRequest, Conflict, Forbidden, NotFound
from taskflow_service.models import ProjectRole, SystemRole, TaskPriority, TaskStatus


@pytest.mark.asyncio
async def test_creator_becomes_sole_owner(store, project_service):
    alice = await add_user(store, "alice@example.com")
    project = await project_service.create_project(identity(alice), "Apollo", "Moon")

    members = await project_service.list_members(identity(alice), project.id)
    assert [(m.user_id, m.role) for m in members] == [(alice.id, ProjectRole.OWNER)]
    assert await store.count_owners(project.id) == 1


@pytest.mark.asyncio
async def test_blank_project_name_rejected(store, project_service):
    alice = await add_user(store, "alice@example.com")
    with pytest.raises(BadRequest):
        await project_service.create_project(identity(alice), "   ")
    assert await store.list_projects() == []


@pytest.mark.asyncio
async def test_project_with_unknown_owner_is_not_created(store):
    with pytest.raises(NotFound):
        await store.create_project_with_owner("Orphan", "", uuid.uuid4())
    assert await store.list_projects() == []


@pytest.mark.asyncio
async def test_invite_unknown_email_creates_nothing(store, project_service):
    alice = await add_user(store, "alice@example.com")
    project = await project_service.create_project(identity(alice), "Apollo")

    with pytest.raises(NotFound):
        await project_service.invite_member(
            identity(alice), project.id, "ghost@example.com", "Member"
        )

    assert len(await store.list_members(project.id)) == 1
    with pytest.raises(NotFound):
        await store.get_user_by_email("ghost@example.com")


@pytest.mark.asyncio
async def test_cannot_invite_as_owner(store, project_service):
    alice = await add_user(store, "alice@example.com")
    bob = await add_user(store, "bob@example.com")
    project = await project_service.create_project(identity(alice), "Apollo")

    with pytest.raises(BadRequest) as excinfo:
        await project_service.invite_member(identity(alice), project.id, bob.email, "PO")
    assert excinfo.value.message == "Invalid role. Must be PM, Member, or Viewer"


@pytest.mark.asyncio
async def test_reinviting_a_member_is_a_conflict(store, project_service):
    alice = await add_user(store, "alice@example.com")
    bob = await add_user(store, "bob@example.com")
    project = await project_service.create_project(identity(alice), "Apollo")
    await project_service.invite_member(identity(alice), project.id, bob.email, "Viewer")

    with pytest.raises(Conflict):
        await project_service.invite_member(identity(alice), project.id, bob.email, "PM")
    assert (await store.get_membership(project.id, bob.id)).role is ProjectRole.VIEWER


@pytest.mark.asyncio
async def test_member_lifecycle_scenario(store, project_service, task_service, admin_service):
    alice = await add_user(store, "alice@example.com")
    bob = await add_user(store, "bob@example.com")
    carol = await add_user(store, "carol@example.com")
    root = await add_user(store, "root@example.com", system_role=SystemRole.ADMIN)

    project = await project_service.create_project(identity(alice), "Apollo")
    await project_service.invite_member(identity(alice), project.id, bob.email, "Member")
    assert (await store.get_membership(project.id, bob.id)).role is ProjectRole.MEMBER

    with pytest.raises(Forbidden) as excinfo:
        await project_service.update_project(identity(bob), project.id, "Hijacked", "")
    assert excinfo.value.message == "Only PO or PM can update project"

    await project_service.update_member_role(identity(alice), project.id, bob.id, "PM")
    await project_service.invite_member(identity(bob), project.id, carol.email, "Viewer")

    await task_service.create_task(
        identity(bob),
        "Bob's task",
        status=TaskStatus.TODO,
        priority=TaskPriority.HIGH,
        project_id=project.id,
    )
    await admin_service.delete_user(identity(root), bob.id)

    with pytest.raises(NotFound):
        await store.get_membership(project.id, bob.id)
    assert await store.list_tasks_for_user(bob.id) == []
    remaining = {m.user_id: m.role for m in await store.list_members(project.id)}
    assert remaining == {alice.id: ProjectRole.OWNER, carol.id: ProjectRole.VIEWER}


@pytest.mark.asyncio
async def test_manager_cannot_change_roles(store, project_service):
    owner = await add_user(store, "owner@example.com")
    manager = await add_user(store, "manager@example.com")
    member = await add_user(store, "member@example.com")
    project = await add_project(
        store, owner, {manager: ProjectRole.MANAGER, member: ProjectRole.MEMBER}
    )

    with pytest.raises(Forbidden) as excinfo:
        await project_service.update_member_role(identity(manager), project.id, member.id, "PM")
    assert excinfo.value.message == "Only PO can update member roles"


@pytest.mark.asyncio
async def test_manager_can_remove_members(store, project_service):
    owner = await add_user(store, "owner@example.com")
    manager = await add_user(store, "manager@example.com")
    member = await add_user(store, "member@example.com")
    project = await add_project(
        store, owner, {manager: ProjectRole.MANAGER, member: ProjectRole.MEMBER}
    )

    await project_service.remove_member(identity(manager), project.id, member.id)
    assert await store.list_projects_for_user(member.id) == []


@pytest.mark.asyncio
async def test_member_cannot_invite(store, project_service):
    owner = await add_user(store, "owner@example.com")
    member = await add_user(store, "member@example.com")
    other = await add_user(store, "other@example.com")
    project = await add_project(store, owner, {member: ProjectRole.MEMBER})

    with pytest.raises(Forbidden) as excinfo:
        await project_service.invite_member(identity(member), project.id, other.email, "Viewer")
    assert excinfo.value.message == "Only PO or PM can invite members"


@pytest.mark.asyncio
async def test_role_change_for_non_member_reports_not_found(store, project_service):
    owner = await add_user(store, "owner@example.com")
    outsider = await add_user(store, "outsider@example.com")
    project = await add_project(store, owner)

    with pytest.raises(NotFound):
        await project_service.update_member_role(identity(owner), project.id, outsider.id, "PM")
    with pytest.raises(NotFound):
        await project_service.remove_member(identity(owner), project.id, outsider.id)
    assert not await store.update_membership_role(project.id, outsider.id, ProjectRole.MANAGER)


@pytest.mark.asyncio
async def test_invalid_role_value_rejected(store, project_service):
    owner = await add_user(store, "owner@example.com")
    member = await add_user(store, "member@example.com")
    project = await add_project(store, owner, {member: ProjectRole.MEMBER})

    with pytest.raises(BadRequest):
        await project_service.update_member_role(identity(owner), project.id, member.id, "Boss")


@pytest.mark.asyncio
async def test_last_owner_cannot_leave_or_step_down(store, project_service):
    owner = await add_user(store, "owner@example.com")
    project = await add_project(store, owner)

    with pytest.raises(BadRequest):
        await project_service.update_member_role(identity(owner), project.id, owner.id, "PM")
    with pytest.raises(BadRequest):
        await project_service.remove_member(identity(owner), project.id, owner.id)
    assert await store.count_owners(project.id) == 1


@pytest.mark.asyncio
async def test_role_update_cannot_grant_owner(store, project_service):
    owner = await add_user(store, "owner@example.com")
    viewer = await add_user(store, "viewer@example.com")
    project = await add_project(store, owner, {viewer: ProjectRole.VIEWER})

    with pytest.raises(BadRequest) as excinfo:
        await project_service.update_member_role(identity(owner), project.id, viewer.id, "PO")
    assert excinfo.value.message == "Invalid role. Must be PM, Member, or Viewer"

    assert (await store.get_membership(project.id, viewer.id)).role is ProjectRole.VIEWER
    assert await store.count_owners(project.id) == 1


@pytest.mark.asyncio
async def test_owner_can_step_down_when_another_owner_exists(store, project_service):
    owner = await add_user(store, "owner@example.com")
    second = await add_user(store, "second@example.com")
    # A second PO can only come from data written directly to the store.
    project = await add_project(store, owner, {second: ProjectRole.OWNER})

    await project_service.update_member_role(identity(owner), project.id, owner.id, "Viewer")

    assert (await store.get_membership(project.id, owner.id)).role is ProjectRole.VIEWER
    assert await store.count_owners(project.id) == 1


@pytest.mark.asyncio
async def test_only_owner_deletes_project(store, project_service, task_service):
    owner = await add_user(store, "owner@example.com")
    manager = await add_user(store, "manager@example.com")
    project = await add_project(store, owner, {manager: ProjectRole.MANAGER})
    task = await task_service.create_task(identity(manager), "Plan", project_id=project.id)

    with pytest.raises(Forbidden) as excinfo:
        await project_service.delete_project(identity(manager), project.id)
    assert excinfo.value.message == "Only PO can delete project"

    await project_service.delete_project(identity(owner), project.id)
    with pytest.raises(NotFound):
        await store.get_project(project.id)
    with pytest.raises(NotFound):
        await store.get_task(task.id)
    assert await store.list_members(project.id) == []


@pytest.mark.asyncio
async def test_project_listing_is_scoped_to_membership(store, project_service):
    alice = await add_user(store, "alice@example.com")
    bob = await add_user(store, "bob@example.com")
    root = await add_user(store, "root@example.com", system_role=SystemRole.ADMIN)
    apollo = await project_service.create_project(identity(alice), "Apollo")
    gemini = await project_service.create_project(identity(bob), "Gemini")

    assert [p.id for p in await project_service.list_projects(identity(alice))] == [apollo.id]
    assert {p.id for p in await project_service.list_projects(identity(root))} == {
        apollo.id,
        gemini.id,
    }


@pytest.mark.asyncio
async def test_get_missing_project_is_not_found(store, project_service):
    alice = await add_user(store, "alice@example.com")
    with pytest.raises(NotFound):
        await project_service.get_project(identity(alice), uuid.uuid4())


@pytest.mark.asyncio
async def test_outsider_is_forbidden_on_existing_project(store, project_service, task_service):
    owner = await add_user(store, "owner@example.com")
    outsider = await add_user(store, "outsider@example.com")
    project = await add_project(store, owner)

    with pytest.raises(Forbidden):
        await project_service.get_project(identity(outsider), project.id)
    with pytest.raises(Forbidden):
        await task_service.list_project_tasks(identity(outsider), project.id)
    with pytest.raises(NotFound):
        await task_service.list_project_tasks(identity(outsider), uuid.uuid4())
