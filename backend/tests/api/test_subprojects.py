"""Tests for subproject endpoints."""
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from models.project import Project, SubProject


async def test_list_subprojects_requires_session(client: AsyncClient) -> None:
    """Subprojects are not public."""
    response = await client.get("/subprojects/", params={"projectId": 1})

    assert response.status_code == 401


async def test_list_subprojects_for_project(
    user_client: AsyncClient,
    db_session: AsyncSession,
    admin_user,  # noqa: ANN001
    project: Project,
    subproject: SubProject,
) -> None:
    """Only the given project's subprojects are listed, newest first."""
    newer = SubProject(name="Framing", project_id=project.id)
    other_project = Project(title="Elsewhere", user_id=admin_user.id)
    db_session.add_all([newer, other_project])
    await db_session.flush()
    db_session.add(SubProject(name="Roof", project_id=other_project.id))
    await db_session.flush()

    response = await user_client.get("/subprojects/", params={"projectId": project.id})

    assert response.status_code == 200
    data = response.json()
    assert [s["id"] for s in data["subprojects"]] == [newer.id, subproject.id]
    assert data["total"] == 2


async def test_list_subprojects_without_project_is_empty(
    user_client: AsyncClient, subproject: SubProject,  # noqa: ARG001
) -> None:
    """No projectId, or a malformed one, lists nothing."""
    missing = await user_client.get("/subprojects/")
    malformed = await user_client.get("/subprojects/", params={"projectId": "abc"})

    assert missing.json() == {"subprojects": [], "total": 0}
    assert malformed.json() == {"subprojects": [], "total": 0}


async def test_admin_creates_subproject(admin_client: AsyncClient, project: Project) -> None:
    """ADMIN can add a subproject; it then shows up in the list."""
    response = await admin_client.post(
        "/subprojects/", json={"name": " Basement ", "project_id": project.id},
    )

    assert response.status_code == 201
    assert response.json()["name"] == "Basement"
    assert response.json()["project_id"] == project.id

    listed = await admin_client.get("/subprojects/", params={"projectId": project.id})
    assert [s["name"] for s in listed.json()["subprojects"]] == ["Basement"]


async def test_user_cannot_create_subproject(user_client: AsyncClient, project: Project) -> None:
    """The role gate is exact: USER gets 403."""
    response = await user_client.post(
        "/subprojects/", json={"name": "Basement", "project_id": project.id},
    )

    assert response.status_code == 403


async def test_create_subproject_unknown_project_returns_404(admin_client: AsyncClient) -> None:
    """The parent project must exist."""
    response = await admin_client.post(
        "/subprojects/", json={"name": "Basement", "project_id": 999_999},
    )

    assert response.status_code == 404
    assert response.json()["detail"]["message"] == "Project not found"
