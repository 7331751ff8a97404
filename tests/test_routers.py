"""Tests for the HTTP routes."""
import pytest
import pytest_asyncio
from fastapi import Depends
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from main import app
from routers.export import get_export_service
from routers.services.export_service import ExportService
from storage.database import get_session
from storage.repositories import EntryRepository


@pytest_asyncio.fixture
async def client(session_factory, file_sink, share_sink):
    """HTTP client against the app with the test database and export dirs."""

    async def override_get_session():
        async with session_factory() as db_session:
            try:
                yield db_session
                await db_session.commit()
            except Exception:
                await db_session.rollback()
                raise

    def override_get_export_service(db_session: AsyncSession = Depends(get_session)):
        return ExportService(db_session, file_sink=file_sink, share_sink=share_sink)

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_export_service] = override_get_export_service

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http_client:
        yield http_client

    app.dependency_overrides.clear()


async def create_tag(client, display_name, description=None):
    response = await client.post("/day-tags", json={"display_name": display_name, "description": description})
    assert response.status_code == 200
    return response.json()["data"]


class TestBasicRoutes:
    """Tests for root and health check."""

    @pytest.mark.asyncio
    async def test_root(self, client):
        response = await client.get("/")

        assert response.status_code == 200
        assert "version" in response.json()

    @pytest.mark.asyncio
    async def test_health_checks_database(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["checks"]["database"] == "ok"


class TestDayTagRoutes:
    """Tests for /day-tags."""

    @pytest.mark.asyncio
    async def test_create_is_idempotent(self, client):
        first = await create_tag(client, "Travel", "long flight")
        second = await create_tag(client, "travel ", "ignored")

        assert second["id"] == first["id"]
        assert second["description"] == "long flight"

        listing = (await client.get("/day-tags")).json()
        assert listing["total"] == 1

    @pytest.mark.asyncio
    async def test_invalid_name_returns_422(self, client):
        response = await client.post("/day-tags", json={"display_name": "<script>"})

        assert response.status_code == 422
        assert response.json()["detail"].startswith("TagValidationError")

    @pytest.mark.asyncio
    async def test_attach_detach_round(self, client):
        tag = await create_tag(client, "Travel")

        attached = await client.put(f"/day-tags/{tag['id']}/dates/2024-01-01")
        again = await client.put(f"/day-tags/{tag['id']}/dates/2024-01-01")

        assert attached.json()["changed"] is True
        assert again.json()["changed"] is False
        assert again.json()["data"]["usage_count"] == 1

        tags_for_date = (await client.get("/day-tags/dates/2024-01-01")).json()
        assert [item["display_name"] for item in tags_for_date["data"]] == ["Travel"]

        dates = (await client.get(f"/day-tags/{tag['id']}/dates")).json()
        assert dates["data"] == ["2024-01-01"]

        detached = await client.delete(f"/day-tags/{tag['id']}/dates/2024-01-01")
        assert detached.json()["changed"] is True
        assert detached.json()["data"]["usage_count"] == 0

    @pytest.mark.asyncio
    async def test_unknown_tag_returns_404(self, client):
        response = await client.put("/day-tags/999/dates/2024-01-01")

        assert response.status_code == 404
        assert response.json()["detail"].startswith("NotFoundError")

    @pytest.mark.asyncio
    async def test_update_description_and_delete(self, client):
        tag = await create_tag(client, "Travel", "long flight")

        updated = await client.patch(f"/day-tags/{tag['id']}/description", json={"description": None})
        assert updated.status_code == 200
        assert updated.json()["data"]["description"] is None

        assert (await client.delete(f"/day-tags/{tag['id']}")).status_code == 200
        assert (await client.delete(f"/day-tags/{tag['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_calendar_month(self, client):
        tag = await create_tag(client, "Travel")
        await client.put(f"/day-tags/{tag['id']}/dates/2024-02-10")
        await client.put(f"/day-tags/{tag['id']}/dates/2024-03-01")

        response = await client.get("/day-tags/calendar/2024/2")

        assert response.json()["data"] == {"2024-02-10": ["Travel"]}

    @pytest.mark.asyncio
    async def test_reconcile_without_drift(self, client):
        tag = await create_tag(client, "Travel")
        await client.put(f"/day-tags/{tag['id']}/dates/2024-01-01")

        response = await client.post("/day-tags/reconcile")

        assert response.status_code == 200
        assert response.json()["corrected"] == {}

    @pytest.mark.asyncio
    async def test_entries_by_tags(self, client, session_factory):
        async with session_factory() as db_session:
            entry_repo = EntryRepository(db_session)
            await entry_repo.create_note_entry("2024-01-01", "08:00", "A", tags=["spicy"])
            await entry_repo.create_bowel_movement_entry("2024-01-02", "09:30", 4, 2)
            await db_session.commit()
        travel = await create_tag(client, "Travel")
        stress = await create_tag(client, "Stress")
        await client.put(f"/day-tags/{travel['id']}/dates/2024-01-01")
        await client.put(f"/day-tags/{travel['id']}/dates/2024-01-02")
        await client.put(f"/day-tags/{stress['id']}/dates/2024-01-02")

        any_body = (await client.post("/day-tags/entries", json={
            "tag_filter": {"tags": ["Travel"]},
            "start_date": "2024-01-01",
            "end_date": "2024-01-31",
        })).json()
        all_body = (await client.post("/day-tags/entries", json={
            "tag_filter": {"tags": ["Travel", "Stress"], "match_mode": "all"},
            "start_date": "2024-01-01",
            "end_date": "2024-01-31",
        })).json()

        assert any_body["total"] == 2
        assert any_body["data"][0]["content"] == "A"
        assert any_body["data"][0]["note_tags"] == "spicy"
        assert all_body["total"] == 1
        assert all_body["data"][0]["consistency"] == 4
        assert [tag["display_name"] for tag in all_body["data"][0]["day_tags"]] == ["Travel", "Stress"]

    @pytest.mark.asyncio
    async def test_entries_by_unknown_tag_returns_404(self, client):
        response = await client.post("/day-tags/entries", json={
            "tag_filter": {"tags": ["Holiday"]},
            "start_date": "2024-01-01",
            "end_date": "2024-01-31",
        })

        assert response.status_code == 404
        assert response.json()["detail"].startswith("NotFoundError")


class TestExportRoutes:
    """Tests for /export."""

    @pytest_asyncio.fixture
    async def seeded(self, session_factory):
        async with session_factory() as db_session:
            entry_repo = EntryRepository(db_session)
            await entry_repo.create_note_entry("2024-01-01", "08:00", "A")
            await entry_repo.create_bowel_movement_entry("2024-01-05", "09:30", 4, 2)
            await db_session.commit()

    @pytest.mark.asyncio
    async def test_export(self, client, seeded):
        response = await client.post(
            "/export",
            json={"start_date": "2024-01-01", "end_date": "2024-01-05", "format": "csv", "include_notes": True}
        )

        body = response.json()
        assert response.status_code == 200
        assert body["success"] is True
        assert body["entries_count"] == 2

    @pytest.mark.asyncio
    async def test_inverted_range_is_a_failed_result(self, client, file_sink):
        response = await client.post("/export", json={"start_date": "2024-02-01", "end_date": "2024-01-01"})

        body = response.json()
        assert response.status_code == 200
        assert body["success"] is False
        assert body["error"].startswith("InvalidRange")
        assert file_sink.writes == []

    @pytest.mark.asyncio
    async def test_preview(self, client, seeded, file_sink):
        response = await client.post(
            "/export/preview",
            json={"options": {"start_date": "2024-01-01", "end_date": "2024-01-05"}, "limit": 1}
        )

        assert response.status_code == 200
        assert len(response.json()["data"].splitlines()) == 2
        assert file_sink.writes == []

    @pytest.mark.asyncio
    async def test_export_day_tags_and_share(self, client, share_dir):
        tag = await create_tag(client, "Travel")
        await client.put(f"/day-tags/{tag['id']}/dates/2024-01-01")

        exported = (await client.post("/export/day-tags", params={"format": "txt"})).json()
        assert exported["success"] is True
        assert exported["file_path"].endswith("crohns-tracker-export-day-tags.txt")

        shared = (await client.post("/export/share", json={"file_path": exported["file_path"]})).json()
        assert shared["success"] is True
        assert (share_dir / "crohns-tracker-export-day-tags.txt").exists()
