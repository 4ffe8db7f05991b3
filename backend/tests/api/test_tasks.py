"""Tests for task endpoints."""
from datetime import UTC, datetime, timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from core.result_cache import InMemoryResultCache
from models.enums import Role, TaskStatus
from models.project import Project, SubProject
from models.task import Task
from models.user import User


@pytest.fixture
def add_task(db_session: AsyncSession, project: Project, subproject: SubProject):  # noqa: ANN201
    """Insert a task directly."""

    async def _add_task(creator: User, **fields: object) -> Task:
        fields.setdefault("title", "Pour slab")
        task = Task(
            project_id=project.id,
            subproject_id=subproject.id,
            creator_id=creator.id,
            **fields,
        )
        db_session.add(task)
        await db_session.flush()
        return task

    return _add_task


class TestTaskListAuth:
    """Authentication and visibility on the list endpoint."""

    async def test_list_tasks_without_cookie_returns_401(self, client: AsyncClient) -> None:
        """No session cookie means 401 and no data."""
        response = await client.get("/tasks/")

        assert response.status_code == 401
        assert response.json()["detail"]["error"] == "unauthorized"

    async def test_list_tasks_with_tampered_cookie_returns_401(self, client: AsyncClient) -> None:
        """A cookie that fails verification is treated as missing."""
        response = await client.get("/tasks/", headers={"Cookie": "token=not.a.jwt"})

        assert response.status_code == 401

    async def test_user_sees_only_own_tasks(
        self,
        user_client: AsyncClient,
        admin_user: User,
        regular_user: User,
        add_task,  # noqa: ANN001
    ) -> None:
        """USER lists contain only tasks the caller created."""
        mine = await add_task(regular_user, title="Mine")
        await add_task(admin_user, title="Not mine")

        response = await user_client.get("/tasks/")

        assert response.status_code == 200
        data = response.json()
        assert [t["id"] for t in data["tasks"]] == [mine.id]
        assert data["total"] == 1

    async def test_user_created_by_someone_else_is_empty(
        self,
        user_client: AsyncClient,
        admin_user: User,
        add_task,  # noqa: ANN001
    ) -> None:
        """createdBy cannot be used to read another user's tasks."""
        await add_task(admin_user)

        response = await user_client.get("/tasks/", params={"createdBy": admin_user.id})

        assert response.status_code == 200
        assert response.json()["total"] == 0

    async def test_admin_sees_all_tasks(
        self,
        admin_client: AsyncClient,
        admin_user: User,
        regular_user: User,
        add_task,  # noqa: ANN001
    ) -> None:
        """ADMIN lists span every creator."""
        await add_task(admin_user)
        await add_task(regular_user)

        response = await admin_client.get("/tasks/")

        assert response.json()["total"] == 2


class TestTaskListFilters:
    """Query parameter handling."""

    async def test_delayed_view(
        self, admin_client: AsyncClient, admin_user: User, add_task,  # noqa: ANN001
    ) -> None:
        """DELAYED returns only overdue, not-done tasks."""
        now = datetime.now(UTC)
        overdue = await add_task(admin_user, due_date=now - timedelta(days=2))
        await add_task(admin_user, due_date=now + timedelta(days=2))
        await add_task(admin_user, status=TaskStatus.DONE, due_date=now - timedelta(days=2))

        response = await admin_client.get("/tasks/", params={"viewCategory": "DELAYED"})

        assert [t["id"] for t in response.json()["tasks"]] == [overdue.id]

    async def test_completed_view_ignores_exclude_completed(
        self, admin_client: AsyncClient, admin_user: User, add_task,  # noqa: ANN001
    ) -> None:
        """COMPLETED returns DONE tasks even with excludeCompleted=true."""
        done = await add_task(admin_user, status=TaskStatus.DONE)
        await add_task(admin_user, status=TaskStatus.PENDING)

        response = await admin_client.get(
            "/tasks/", params={"viewCategory": "COMPLETED", "excludeCompleted": "true"},
        )

        tasks = response.json()["tasks"]
        assert [t["id"] for t in tasks] == [done.id]
        assert all(t["status"] == "DONE" for t in tasks)

    async def test_exclude_completed_false_includes_done(
        self, admin_client: AsyncClient, admin_user: User, add_task,  # noqa: ANN001
    ) -> None:
        """excludeCompleted=false shows every status."""
        await add_task(admin_user, status=TaskStatus.DONE)
        await add_task(admin_user, status=TaskStatus.PENDING)

        response = await admin_client.get("/tasks/", params={"excludeCompleted": "false"})

        assert response.json()["total"] == 2

    async def test_malformed_assigned_to_is_ignored(
        self, admin_client: AsyncClient, admin_user: User, add_task,  # noqa: ANN001
    ) -> None:
        """assignedTo=abc behaves as though the filter were absent."""
        await add_task(admin_user)

        filtered = await admin_client.get("/tasks/", params={"assignedTo": "abc"})
        unfiltered = await admin_client.get("/tasks/")

        assert filtered.status_code == 200
        assert filtered.json()["total"] == unfiltered.json()["total"] == 1

    @pytest.mark.parametrize(
        "params",
        [
            {"assignedTo": "99999999999"},
            {"createdBy": "-99999999999"},
            {"project": "3000000000"},
        ],
    )
    async def test_out_of_range_ids_are_ignored(
        self,
        admin_client: AsyncClient,
        admin_user: User,
        add_task,  # noqa: ANN001
        params: dict[str, str],
    ) -> None:
        """Ids too large for an INTEGER column are dropped, not sent to storage."""
        await add_task(admin_user)

        filtered = await admin_client.get("/tasks/", params=params)
        unfiltered = await admin_client.get("/tasks/")

        assert filtered.status_code == 200
        assert filtered.json()["total"] == unfiltered.json()["total"] == 1

    async def test_huge_page_number_returns_empty_page(
        self, admin_client: AsyncClient, admin_user: User, add_task,  # noqa: ANN001
    ) -> None:
        """Page numbers past any representable offset are clamped."""
        await add_task(admin_user)

        response = await admin_client.get("/tasks/", params={"page": "10000000000000000000"})

        assert response.status_code == 200
        assert response.json()["tasks"] == []
        assert response.json()["total"] == 1

    async def test_unknown_status_returns_400(self, admin_client: AsyncClient) -> None:
        """Enum filters are strict."""
        response = await admin_client.get("/tasks/", params={"status": "FINISHED"})

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "invalid_input"

    async def test_date_filter_includes_whole_day(
        self, admin_client: AsyncClient, admin_user: User, add_task,  # noqa: ANN001
    ) -> None:
        """date=YYYY-MM-DD includes tasks due late that day."""
        included = await add_task(admin_user, due_date=datetime(2025, 1, 10, 22, 0, tzinfo=UTC))
        await add_task(admin_user, due_date=datetime(2025, 1, 12, tzinfo=UTC))

        response = await admin_client.get("/tasks/", params={"date": "2025-01-10"})

        assert [t["id"] for t in response.json()["tasks"]] == [included.id]

    async def test_date_filter_with_offset_uses_utc_day(
        self, admin_client: AsyncClient, admin_user: User, add_task,  # noqa: ANN001
    ) -> None:
        """An offset datetime selects the UTC day containing that instant."""
        same_instant = await add_task(
            admin_user, due_date=datetime(2025, 1, 11, 4, 30, tzinfo=UTC),
        )

        response = await admin_client.get(
            "/tasks/", params={"date": "2025-01-10T23:30:00-05:00"},
        )

        assert [t["id"] for t in response.json()["tasks"]] == [same_instant.id]

    async def test_paging(
        self, admin_client: AsyncClient, admin_user: User, add_task,  # noqa: ANN001
    ) -> None:
        """25 matches, page 3 of 10: 5 tasks and 3 pages."""
        base = datetime.now(UTC) + timedelta(days=1)
        for i in range(25):
            await add_task(admin_user, title=f"Task {i:02d}", due_date=base + timedelta(hours=i))

        response = await admin_client.get("/tasks/", params={"page": 3, "limit": 10})

        data = response.json()
        assert len(data["tasks"]) == 5
        assert data["total"] == 25
        assert data["total_pages"] == 3
        assert data["page"] == 3
        assert data["limit"] == 10

    async def test_page_size_is_capped(self, admin_client: AsyncClient) -> None:
        """Huge limits are clamped to the configured maximum."""
        response = await admin_client.get("/tasks/", params={"limit": 100_000})

        assert response.json()["limit"] == 100


class TestTaskListCache:
    """Result caching on the list endpoint."""

    async def test_repeat_query_is_cached(
        self, admin_client: AsyncClient, admin_user: User, add_task,  # noqa: ANN001
    ) -> None:
        """The second identical request is served from the cache."""
        await add_task(admin_user)

        first = await admin_client.get("/tasks/")
        second = await admin_client.get("/tasks/")

        assert first.json()["cached"] is False
        assert second.json()["cached"] is True
        assert second.json()["tasks"] == first.json()["tasks"]

    async def test_create_invalidates_cache(
        self,
        admin_client: AsyncClient,
        project: Project,
        subproject: SubProject,
    ) -> None:
        """Creating a task through the API clears cached lists."""
        await admin_client.get("/tasks/")

        created = await admin_client.post(
            "/tasks/",
            json={"title": "New", "project_id": project.id, "subproject_id": subproject.id},
        )
        after = await admin_client.get("/tasks/")

        assert created.status_code == 201
        assert after.json()["cached"] is False
        assert after.json()["total"] == 1


class TestTaskCrud:
    """Create, read, and update."""

    async def test_create_task_round_trips_due_date(
        self,
        user_client: AsyncClient,
        regular_user: User,
        project: Project,
        subproject: SubProject,
    ) -> None:
        """A due date without a timezone is stored and returned as UTC."""
        response = await user_client.post(
            "/tasks/",
            json={
                "title": "Inspect rebar",
                "due_date": "2025-01-10",
                "priority": "HIGH",
                "project_id": project.id,
                "subproject_id": subproject.id,
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["creator_id"] == regular_user.id
        assert data["priority"] == "HIGH"
        assert data["status"] == "PENDING"
        assert datetime.fromisoformat(data["due_date"]) == datetime(2025, 1, 10, tzinfo=UTC)
        assert data["project_title"] == project.title
        assert data["subproject_name"] == subproject.name

        fetched = await user_client.get(f"/tasks/{data['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["due_date"] == data["due_date"]

    async def test_create_task_missing_title_returns_400(
        self, user_client: AsyncClient, project: Project, subproject: SubProject,
    ) -> None:
        """Missing required fields are invalid input."""
        response = await user_client.post(
            "/tasks/",
            json={"project_id": project.id, "subproject_id": subproject.id},
        )

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "invalid_input"

    async def test_create_task_unknown_project_returns_404(
        self, user_client: AsyncClient, subproject: SubProject,
    ) -> None:
        """Referencing a missing project is not_found."""
        response = await user_client.post(
            "/tasks/",
            json={"title": "x", "project_id": 999_999, "subproject_id": subproject.id},
        )

        assert response.status_code == 404
        assert response.json()["detail"] == {"error": "not_found", "message": "Project not found"}

    async def test_get_other_users_task_returns_404(
        self, user_client: AsyncClient, admin_user: User, add_task,  # noqa: ANN001
    ) -> None:
        """Tasks outside the caller's visibility look like they don't exist."""
        task = await add_task(admin_user)

        response = await user_client.get(f"/tasks/{task.id}")

        assert response.status_code == 404

    async def test_update_task(
        self, user_client: AsyncClient, regular_user: User, add_task,  # noqa: ANN001
    ) -> None:
        """PUT changes only the fields sent."""
        task = await add_task(regular_user, title="Original")

        response = await user_client.put(f"/tasks/{task.id}", json={"status": "IN_PROGRESS"})

        assert response.status_code == 200
        assert response.json()["status"] == "IN_PROGRESS"
        assert response.json()["title"] == "Original"

    async def test_update_missing_task_returns_404(self, admin_client: AsyncClient) -> None:
        """Unknown task ids are not_found."""
        response = await admin_client.put("/tasks/doesnotexist", json={"status": "DONE"})

        assert response.status_code == 404

    async def test_admin_can_update_any_task(
        self,
        admin_client: AsyncClient,
        make_user,  # noqa: ANN001
        add_task,  # noqa: ANN001
    ) -> None:
        """ADMIN is not limited to their own tasks."""
        owner = await make_user(Role.USER)
        task = await add_task(owner)

        response = await admin_client.put(f"/tasks/{task.id}", json={"is_urgent": True})

        assert response.status_code == 200
        assert response.json()["is_urgent"] is True

    async def test_created_task_is_found_by_its_due_date(
        self,
        user_client: AsyncClient,
        project: Project,
        subproject: SubProject,
    ) -> None:
        """A task created with due_date=D is listed by date=D."""
        created = await user_client.post(
            "/tasks/",
            json={
                "title": "Pour columns",
                "due_date": "2025-01-10",
                "project_id": project.id,
                "subproject_id": subproject.id,
            },
        )
        assert created.status_code == 201

        response = await user_client.get("/tasks/", params={"date": "2025-01-10"})

        assert response.status_code == 200
        assert [t["id"] for t in response.json()["tasks"]] == [created.json()["id"]]

    async def test_delete_task(
        self, user_client: AsyncClient, regular_user: User, add_task,  # noqa: ANN001
    ) -> None:
        """The creator can delete a task; it is then gone."""
        task = await add_task(regular_user)

        response = await user_client.delete(f"/tasks/{task.id}")

        assert response.status_code == 204
        assert (await user_client.get(f"/tasks/{task.id}")).status_code == 404

    async def test_delete_other_users_task_returns_404(
        self, user_client: AsyncClient, admin_user: User, add_task,  # noqa: ANN001
    ) -> None:
        """USER cannot delete a task they did not create."""
        task = await add_task(admin_user)

        response = await user_client.delete(f"/tasks/{task.id}")

        assert response.status_code == 404


class TestTaskWriteInvalidation:
    """Cached lists are cleared only after a write is committed."""

    @pytest.fixture
    def write_events(
        self,
        monkeypatch: pytest.MonkeyPatch,
        db_session: AsyncSession,
        result_cache: InMemoryResultCache,
    ) -> list[str]:
        events: list[str] = []
        commit = db_session.commit
        clear = result_cache.clear

        async def recording_commit() -> None:
            events.append("commit")
            await commit()

        async def recording_clear() -> None:
            events.append("clear")
            await clear()

        monkeypatch.setattr(db_session, "commit", recording_commit)
        monkeypatch.setattr(result_cache, "clear", recording_clear)
        return events

    async def test_create_commits_before_clearing(
        self,
        admin_client: AsyncClient,
        project: Project,
        subproject: SubProject,
        write_events: list[str],
    ) -> None:
        """POST /tasks/ commits, then clears the cache."""
        response = await admin_client.post(
            "/tasks/",
            json={"title": "New", "project_id": project.id, "subproject_id": subproject.id},
        )

        assert response.status_code == 201
        assert write_events == ["commit", "clear"]

    async def test_update_commits_before_clearing(
        self,
        admin_client: AsyncClient,
        admin_user: User,
        add_task,  # noqa: ANN001
        write_events: list[str],
    ) -> None:
        """PUT /tasks/{id} commits, then clears the cache."""
        task = await add_task(admin_user)

        response = await admin_client.put(f"/tasks/{task.id}", json={"status": "DONE"})

        assert response.status_code == 200
        assert write_events == ["commit", "clear"]

    async def test_delete_commits_before_clearing(
        self,
        admin_client: AsyncClient,
        admin_user: User,
        add_task,  # noqa: ANN001
        write_events: list[str],
    ) -> None:
        """DELETE /tasks/{id} commits, then clears the cache."""
        task = await add_task(admin_user)

        response = await admin_client.delete(f"/tasks/{task.id}")

        assert response.status_code == 204
        assert write_events == ["commit", "clear"]
