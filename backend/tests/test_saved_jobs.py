"""
Tests for saved (bookmarked) jobs.
"""
import uuid

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from jobboard.errors import AuthorizationError, NotFoundError
from jobboard.models import SavedJob
from jobboard.services import saved_jobs
from tests.conftest import auth_headers


@pytest.mark.asyncio
async def test_save_job(async_client: AsyncClient, seeker, job):
    response = await async_client.post(
        "/api/saved-jobs", headers=auth_headers(seeker), json={"job_id": str(job.id)}
    )

    assert response.status_code == 201
    data = response.json()
    assert data["job"]["id"] == str(job.id)
    assert data["job"]["company"]["name"] == "Acme"
    assert data["saved_at"]


@pytest.mark.asyncio
async def test_saving_twice_returns_same_bookmark(async_client: AsyncClient, db, seeker, job):
    headers = auth_headers(seeker)
    first = await async_client.post("/api/saved-jobs", headers=headers, json={"job_id": str(job.id)})
    second = await async_client.post("/api/saved-jobs", headers=headers, json={"job_id": str(job.id)})

    assert second.status_code == 201
    assert second.json()["id"] == first.json()["id"]

    count = (await db.execute(select(func.count(SavedJob.id)))).scalar_one()
    assert count == 1


@pytest.mark.asyncio
async def test_save_unknown_job_is_404(async_client: AsyncClient, seeker):
    response = await async_client.post(
        "/api/saved-jobs", headers=auth_headers(seeker), json={"job_id": str(uuid.uuid4())}
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_list_and_unsave(async_client: AsyncClient, seeker, job):
    headers = auth_headers(seeker)
    await async_client.post("/api/saved-jobs", headers=headers, json={"job_id": str(job.id)})

    listed = await async_client.get("/api/saved-jobs", headers=headers)
    assert [item["job"]["title"] for item in listed.json()] == ["Backend Engineer"]

    removed = await async_client.delete(f"/api/saved-jobs/{job.id}", headers=headers)
    assert removed.status_code == 200
    assert removed.json()["message"] == "Job removed from saved jobs"

    listed = await async_client.get("/api/saved-jobs", headers=headers)
    assert listed.json() == []


@pytest.mark.asyncio
async def test_unsave_missing_bookmark_is_404(async_client: AsyncClient, seeker, job):
    response = await async_client.delete(f"/api/saved-jobs/{job.id}", headers=auth_headers(seeker))

    assert response.status_code == 404
    assert response.json()["detail"] == "Saved job not found"


@pytest.mark.asyncio
async def test_poster_cannot_save(db, poster, job):
    with pytest.raises(AuthorizationError):
        await saved_jobs.save_job(db, poster.id, job.id)


@pytest.mark.asyncio
async def test_save_job_deleted_mid_insert_is_not_found(db, seeker, job, monkeypatch):
    user_id, job_id = seeker.id, job.id

    async def refuse_insert():
        raise IntegrityError("INSERT INTO saved_jobs", {}, Exception("FOREIGN KEY constraint failed"))

    monkeypatch.setattr(db, "commit", refuse_insert)

    with pytest.raises(NotFoundError, match="Job not found"):
        await saved_jobs.save_job(db, user_id, job_id)

    monkeypatch.undo()
    assert await db.scalar(select(func.count()).select_from(SavedJob)) == 0
