"""
Test job posting endpoints.
"""
from datetime import date, timedelta
from unittest.mock import AsyncMock, MagicMock

from httpx import AsyncClient

from jobboard.core.exceptions import BackingStoreError
from jobboard.services.job_post_service import JobPostService
from tests.conftest import OWNER_ID, make_job_post


class TestListJobPosts:
    """Test the public listing endpoint."""

    async def test_list_public(self, async_client: AsyncClient, api_v1_prefix: str, five_job_posts):
        response = await async_client.get(f"{api_v1_prefix}/jobs/?page=1&limit=2")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert len(data["data"]) == 2
        assert data["pagination"] == {
            "page": 1,
            "limit": 2,
            "total_items": 5,
            "total_pages": 3,
            "has_next_page": True,
            "has_previous_page": False,
        }

    async def test_list_clamps_pagination(self, async_client: AsyncClient, api_v1_prefix: str, five_job_posts):
        response = await async_client.get(f"{api_v1_prefix}/jobs/?page=0&limit=500")

        assert response.status_code == 200
        pagination = response.json()["pagination"]
        assert pagination["page"] == 1
        assert pagination["limit"] == 50

    async def test_list_huge_page(self, async_client: AsyncClient, api_v1_prefix: str, five_job_posts):
        response = await async_client.get(
            f"{api_v1_prefix}/jobs/?page=100000000000000000000&limit=10"
        )

        assert response.status_code == 200
        data = response.json()
        assert data["data"] == []
        assert data["pagination"]["total_items"] == 5
        assert data["pagination"]["has_next_page"] is False

    async def test_list_with_filters(self, async_client: AsyncClient, api_v1_prefix: str, service: JobPostService):
        await service.create_job_post(OWNER_ID, make_job_post(1, type="Contract"))
        await service.create_job_post(OWNER_ID, make_job_post(2))

        response = await async_client.get(
            f"{api_v1_prefix}/jobs/", params={"type": "Contract", "company": ""}
        )

        assert response.status_code == 200
        data = response.json()
        assert [item["type"] for item in data["data"]] == ["Contract"]

    async def test_invalid_filter_value(self, async_client: AsyncClient, api_v1_prefix: str):
        response = await async_client.get(f"{api_v1_prefix}/jobs/?type=Internship")
        assert response.status_code == 422

    async def test_store_failure_returns_typed_empty_body(self, app, async_client: AsyncClient, api_v1_prefix: str, cache):
        crud = MagicMock()
        crud.get_page = AsyncMock(side_effect=BackingStoreError("Failed to fetch job postings"))
        crud.count = AsyncMock(side_effect=BackingStoreError("Failed to count job postings"))
        app.state.job_post_service = JobPostService(crud, cache)

        response = await async_client.get(f"{api_v1_prefix}/jobs/?page=3&limit=5")

        assert response.status_code == 503
        data = response.json()
        assert data["success"] is False
        assert data["data"] == []
        assert data["errors"]
        assert data["pagination"]["page"] == 3
        assert data["pagination"]["limit"] == 5
        assert data["pagination"]["total_items"] == 0

    async def test_list_mine_requires_auth(self, async_client: AsyncClient, api_v1_prefix: str):
        response = await async_client.get(f"{api_v1_prefix}/jobs/mine")
        assert response.status_code == 401

    async def test_list_mine_rejects_bad_token(self, async_client: AsyncClient, api_v1_prefix: str):
        response = await async_client.get(
            f"{api_v1_prefix}/jobs/mine", headers={"Authorization": "Bearer forged"}
        )
        assert response.status_code == 401

    async def test_list_mine(self, async_client: AsyncClient, api_v1_prefix: str, auth_headers, other_auth_headers, five_job_posts):
        response = await async_client.get(
            f"{api_v1_prefix}/jobs/mine?status=Inactive", headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["pagination"]["total_items"] == 0

        response = await async_client.get(f"{api_v1_prefix}/jobs/mine", headers=auth_headers)
        assert response.json()["pagination"]["total_items"] == 5

        response = await async_client.get(
            f"{api_v1_prefix}/jobs/mine", headers=other_auth_headers
        )
        assert response.json()["pagination"]["total_items"] == 0


class TestJobPostEndpoints:
    """Test single posting endpoints."""

    async def test_create(self, async_client: AsyncClient, api_v1_prefix: str, auth_headers, test_job_post_data):
        response = await async_client.post(
            f"{api_v1_prefix}/jobs/", json=test_job_post_data, headers=auth_headers
        )

        assert response.status_code == 201
        data = response.json()
        assert data["success"] is True
        assert data["data"]["title"] == test_job_post_data["title"]
        assert data["data"]["status"] == "Active"
        assert data["data"]["user_id"] == OWNER_ID

    async def test_create_requires_auth(self, async_client: AsyncClient, api_v1_prefix: str, test_job_post_data):
        response = await async_client.post(f"{api_v1_prefix}/jobs/", json=test_job_post_data)
        assert response.status_code == 401

    async def test_create_invalid(self, async_client: AsyncClient, api_v1_prefix: str, auth_headers, test_job_post_data):
        payload = {
            **test_job_post_data,
            "start_date": (date.today() - timedelta(days=3)).isoformat(),
        }
        response = await async_client.post(
            f"{api_v1_prefix}/jobs/", json=payload, headers=auth_headers
        )

        assert response.status_code == 422
        assert response.json()["method"] == "POST"

    async def test_create_then_list(self, async_client: AsyncClient, api_v1_prefix: str, auth_headers, test_job_post_data, five_job_posts):
        await async_client.get(f"{api_v1_prefix}/jobs/")
        await async_client.post(
            f"{api_v1_prefix}/jobs/", json=test_job_post_data, headers=auth_headers
        )

        response = await async_client.get(f"{api_v1_prefix}/jobs/")
        data = response.json()
        assert data["pagination"]["total_items"] == 6
        assert data["data"][0]["title"] == test_job_post_data["title"]

    async def test_read(self, async_client: AsyncClient, api_v1_prefix: str, five_job_posts):
        target = five_job_posts[0]
        response = await async_client.get(f"{api_v1_prefix}/jobs/{target.id}")

        assert response.status_code == 200
        assert response.json()["data"]["id"] == target.id

    async def test_read_missing(self, async_client: AsyncClient, api_v1_prefix: str):
        response = await async_client.get(f"{api_v1_prefix}/jobs/unknown-id")
        assert response.status_code == 404

    async def test_update(self, async_client: AsyncClient, api_v1_prefix: str, auth_headers, five_job_posts):
        target = five_job_posts[0]
        response = await async_client.put(
            f"{api_v1_prefix}/jobs/{target.id}",
            json={"title": "Lead Engineer"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["data"]["title"] == "Lead Engineer"

        response = await async_client.get(f"{api_v1_prefix}/jobs/{target.id}")
        assert response.json()["data"]["title"] == "Lead Engineer"

    async def test_update_not_owner(self, async_client: AsyncClient, api_v1_prefix: str, other_auth_headers, five_job_posts):
        response = await async_client.put(
            f"{api_v1_prefix}/jobs/{five_job_posts[0].id}",
            json={"title": "Lead Engineer"},
            headers=other_auth_headers,
        )
        assert response.status_code == 404

    async def test_update_bad_dates(self, async_client: AsyncClient, api_v1_prefix: str, auth_headers, five_job_posts):
        target = five_job_posts[0]
        response = await async_client.put(
            f"{api_v1_prefix}/jobs/{target.id}",
            json={"end_date": target.start_date.isoformat()},
            headers=auth_headers,
        )

        assert response.status_code == 422
        assert response.json()["detail"] == "End date must be after start date"

    async def test_toggle_status(self, async_client: AsyncClient, api_v1_prefix: str, auth_headers, five_job_posts):
        target = five_job_posts[0]
        response = await async_client.patch(
            f"{api_v1_prefix}/jobs/{target.id}/toggle-status", headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "Inactive"

        response = await async_client.get(f"{api_v1_prefix}/jobs/")
        assert response.json()["pagination"]["total_items"] == 4

    async def test_delete(self, async_client: AsyncClient, api_v1_prefix: str, auth_headers, five_job_posts):
        target = five_job_posts[0]
        response = await async_client.delete(
            f"{api_v1_prefix}/jobs/{target.id}", headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json()["success"] is True

        response = await async_client.get(f"{api_v1_prefix}/jobs/{target.id}")
        assert response.status_code == 404

    async def test_write_store_failure_is_503(self, app, async_client: AsyncClient, api_v1_prefix: str, auth_headers, cache, test_job_post_data):
        crud = MagicMock()
        crud.create = AsyncMock(side_effect=BackingStoreError("Failed to create job posting"))
        app.state.job_post_service = JobPostService(crud, cache)

        response = await async_client.post(
            f"{api_v1_prefix}/jobs/", json=test_job_post_data, headers=auth_headers
        )

        assert response.status_code == 503
        assert response.json()["errors"] == ["Failed to create job posting"]


class TestHealth:
    async def test_health(self, async_client: AsyncClient):
        response = await async_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "connected"
        assert data["cache"] == "connected"
        assert data["environment"] == "testing"

    async def test_health_reports_cache_down(self, async_client: AsyncClient, redis_server):
        redis_server.connected = False

        response = await async_client.get("/health")

        assert response.status_code == 200
        assert response.json()["cache"] == "disconnected"
