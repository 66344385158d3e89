"""Task operations.

Project RBAC and task ownership are separate systems: a task is read and
changed only by the user who created it, whatever project role anyone
else holds. These tests pin that behaviour down.
"""

from __future__ import annotations

import uuid
from datetime import date

import pytest
from _helpers import add_project, add_user, identity

from taskflow_service.errors import BadRequest, Forbidden, NotFound
from taskflow_service.models import ProjectRole, SystemRole, TaskPriority, TaskStatus


@pytest.mark.asyncio
async def test_project_owner_cannot_touch_members_task(store, task_service):
    carol = await add_user(store, "carol@example.com")  # project Owner
    alice = await add_user(store, "alice@example.com")
    bob = await add_user(store, "bob@example.com")
    project = await add_project(
        store, carol, {alice: ProjectRole.MEMBER, bob: ProjectRole.MEMBER}
    )
    task = await task_service.create_task(
        identity(alice), "Draft budget", project_id=project.id, assigned_to=bob.id
    )

    with pytest.raises(Forbidden):
        await task_service.delete_task(identity(carol), task.id)
    with pytest.raises(Forbidden):
        await task_service.update_task(
            identity(carol), task.id, "Closed", "", TaskStatus.DONE, TaskPriority.LOW
        )
    with pytest.raises(Forbidden):
        await task_service.get_task(identity(carol), task.id)
    # The assignee gets no extra rights either.
    with pytest.raises(Forbidden):
        await task_service.delete_task(identity(bob), task.id)

    await task_service.delete_task(identity(alice), task.id)
    with pytest.raises(NotFound):
        await store.get_task(task.id)


@pytest.mark.asyncio
async def test_system_admin_cannot_touch_others_task(store, task_service):
    alice = await add_user(store, "alice@example.com")
    root = await add_user(store, "root@example.com", system_role=SystemRole.ADMIN)
    task = await task_service.create_task(identity(alice), "Personal errand")

    with pytest.raises(Forbidden):
        await task_service.delete_task(identity(root), task.id)


@pytest.mark.asyncio
async def test_creator_updates_task(store, task_service):
    alice = await add_user(store, "alice@example.com")
    task = await task_service.create_task(identity(alice), "Write tests")

    updated = await task_service.update_task(
        identity(alice),
        task.id,
        title="Write more tests",
        description="cover edge cases",
        status=TaskStatus.IN_PROGRESS,
        priority=TaskPriority.HIGH,
        due_date=date(2030, 1, 31),
    )
    assert updated.title == "Write more tests"
    assert updated.status is TaskStatus.IN_PROGRESS
    assert updated.due_date == date(2030, 1, 31)
    assert (await task_service.get_task(identity(alice), task.id)).priority is TaskPriority.HIGH


@pytest.mark.asyncio
async def test_missing_task_is_not_found(store, task_service):
    alice = await add_user(store, "alice@example.com")
    with pytest.raises(NotFound):
        await task_service.get_task(identity(alice), uuid.uuid4())
    with pytest.raises(NotFound):
        await task_service.delete_task(identity(alice), uuid.uuid4())


@pytest.mark.asyncio
async def test_blank_title_rejected(store, task_service):
    alice = await add_user(store, "alice@example.com")
    with pytest.raises(BadRequest) as excinfo:
        await task_service.create_task(identity(alice), "  ")
    assert excinfo.value.message == "Title is required"


@pytest.mark.asyncio
async def test_project_task_requires_membership(store, task_service):
    owner = await add_user(store, "owner@example.com")
    outsider = await add_user(store, "outsider@example.com")
    project = await add_project(store, owner)

    with pytest.raises(Forbidden):
        await task_service.create_task(identity(outsider), "Sneak in", project_id=project.id)
    with pytest.raises(Forbidden):
        await task_service.list_project_tasks(identity(outsider), project.id)


@pytest.mark.asyncio
async def test_viewer_may_create_project_task(store, task_service):
    owner = await add_user(store, "owner@example.com")
    viewer = await add_user(store, "viewer@example.com")
    project = await add_project(store, owner, {viewer: ProjectRole.VIEWER})

    task = await task_service.create_task(identity(viewer), "Notes", project_id=project.id)
    assert task.project_id == project.id


@pytest.mark.asyncio
async def test_task_in_missing_project_is_not_found(store, task_service):
    alice = await add_user(store, "alice@example.com")
    with pytest.raises(NotFound):
        await task_service.create_task(identity(alice), "Lost", project_id=uuid.uuid4())


@pytest.mark.asyncio
async def test_assignee_must_be_project_member(store, task_service):
    owner = await add_user(store, "owner@example.com")
    outsider = await add_user(store, "outsider@example.com")
    project = await add_project(store, owner)

    with pytest.raises(BadRequest) as excinfo:
        await task_service.create_task(
            identity(owner), "Delegate", project_id=project.id, assigned_to=outsider.id
        )
    assert excinfo.value.message == "Assignee must be a member of the project"


@pytest.mark.asyncio
async def test_personal_task_cannot_be_assigned(store, task_service):
    alice = await add_user(store, "alice@example.com")
    bob = await add_user(store, "bob@example.com")
    with pytest.raises(BadRequest) as excinfo:
        await task_service.create_task(identity(alice), "Mine", assigned_to=bob.id)
    assert excinfo.value.message == "Only project tasks can be assigned"


@pytest.mark.asyncio
async def test_project_tasks_carry_assignee_details(store, task_service):
    owner = await add_user(store, "owner@example.com", name="Olive")
    bob = await add_user(store, "bob@example.com", name="Bob")
    project = await add_project(store, owner, {bob: ProjectRole.MEMBER})
    await task_service.create_task(
        identity(owner), "Review", project_id=project.id, assigned_to=bob.id
    )
    await task_service.create_task(identity(owner), "Unassigned", project_id=project.id)
    await task_service.create_task(identity(owner), "Elsewhere")

    tasks = {t.title: t for t in await task_service.list_project_tasks(identity(bob), project.id)}
    assert set(tasks) == {"Review", "Unassigned"}
    assert tasks["Review"].assignee_name == "Bob"
    assert tasks["Review"].assignee_email == "bob@example.com"
    assert tasks["Unassigned"].assignee_name is None


@pytest.mark.asyncio
async def test_list_tasks_returns_only_own(store, task_service):
    alice = await add_user(store, "alice@example.com")
    bob = await add_user(store, "bob@example.com")
    await task_service.create_task(identity(alice), "A1")
    await task_service.create_task(identity(bob), "B1")

    assert [t.title for t in await task_service.list_tasks(identity(alice))] == ["A1"]
