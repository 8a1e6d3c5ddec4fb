"""
Tests for job post CRUD, skill linking and the public job search.

Validates:
- Skill references by id or name, case-insensitive reuse, malformed entries dropped
- Supplied skills replace the whole set on update
- Delete removes links, applications and bookmarks with the post
- Only the owner can change a post (others get 404)
- Search filters and pagination
"""
import re
import uuid

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select

from jobboard.errors import NotFoundError
from jobboard.models import (
    Application,
    JobCategory,
    JobPost,
    JobPosterProfile,
    JobSkill,
    JobType,
    SavedJob,
    Skill,
    WorkMode,
)
from jobboard.services import job_posts
from jobboard.services.skills import skill_slug
from jobboard.services.slugs import job_post_slug, slugify
from tests.conftest import auth_headers, make_job, make_poster


def job_payload(company_id, **overrides) -> dict:
    payload = {
        "title": "Data Engineer",
        "description": "Build pipelines",
        "requirements": "SQL, Python",
        "job_type": "FULL_TIME",
        "work_mode": "HYBRID",
        "experience_level": "SENIOR_LEVEL",
        "company_id": str(company_id),
        "location": "Lisbon",
        "salary_min": 50000,
        "salary_max": 70000,
    }
    payload.update(overrides)
    return payload


# =============================================================================
# Slugs
# =============================================================================

def test_slugify():
    assert slugify("Senior Python Dev (Remote)!") == "senior-python-dev-remote"
    assert slugify("--a   b--") == "a-b"


def test_job_post_slug_appends_millis():
    assert job_post_slug("Data Engineer", now_ms=1700000000000) == "data-engineer-1700000000000"
    assert re.fullmatch(r"job-\d+", job_post_slug("!!!"))


def test_skill_slug_keeps_c_family_apart():
    assert len({skill_slug("C"), skill_slug("C++"), skill_slug("C#")}) == 3


# =============================================================================
# Create
# =============================================================================

@pytest.mark.asyncio
async def test_create_job_resolves_skills(async_client: AsyncClient, db, poster, company):
    existing = Skill(name="PostgreSQL", slug="postgresql")
    db.add(existing)
    await db.commit()

    response = await async_client.post(
        "/api/jobs",
        headers=auth_headers(poster),
        json=job_payload(company.id, skills=[
            {"skill_id": "Python", "is_required": True},
            "python",
            {"skill_id": str(existing.id)},
            {"skill_id": ""},
            42,
        ], categories=["Data", "data"]),
    )

    assert response.status_code == 201
    data = response.json()
    assert data["slug"].startswith("data-engineer-")
    assert data["company"]["slug"] == "acme"
    assert data["poster"]["full_name"] == "Pat Poster"
    assert data["application_count"] == 0
    assert {s["name"]: s["is_required"] for s in data["skills"]} == {
        "Python": True,
        "PostgreSQL": False,
    }
    assert [c["slug"] for c in data["categories"]] == ["data"]

    skills = (await db.execute(select(func.count(Skill.id)))).scalar_one()
    assert skills == 2


@pytest.mark.asyncio
async def test_create_job_missing_fields_is_400(async_client: AsyncClient, poster, company):
    payload = job_payload(company.id)
    del payload["description"]

    response = await async_client.post("/api/jobs", headers=auth_headers(poster), json=payload)

    assert response.status_code == 400
    assert response.json()["detail"] == "Missing or invalid fields"


@pytest.mark.asyncio
async def test_create_job_inverted_salary_is_400(async_client: AsyncClient, poster, company):
    response = await async_client.post(
        "/api/jobs",
        headers=auth_headers(poster),
        json=job_payload(company.id, salary_min=90000, salary_max=10000),
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_create_job_unknown_company_is_404(async_client: AsyncClient, poster):
    response = await async_client.post(
        "/api/jobs",
        headers=auth_headers(poster),
        json=job_payload("00000000-0000-0000-0000-000000000000"),
    )

    assert response.status_code == 404
    assert response.json()["detail"] == "Company not found"


@pytest.mark.asyncio
async def test_create_job_without_permission_is_403(async_client: AsyncClient, db, poster, company):
    profile = (await db.execute(
        select(JobPosterProfile).where(JobPosterProfile.user_id == poster.id)
    )).scalar_one()
    profile.can_post_jobs = False
    await db.commit()

    response = await async_client.post("/api/jobs", headers=auth_headers(poster), json=job_payload(company.id))

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_seeker_cannot_create_job(async_client: AsyncClient, seeker, company):
    response = await async_client.post("/api/jobs", headers=auth_headers(seeker), json=job_payload(company.id))

    assert response.status_code == 403


# =============================================================================
# Update / close
# =============================================================================

@pytest.mark.asyncio
async def test_update_replaces_skill_set(async_client: AsyncClient, db, poster, company):
    headers = auth_headers(poster)
    created = await async_client.post(
        "/api/jobs", headers=headers, json=job_payload(company.id, skills=["Python", "SQL"])
    )
    job_id = created.json()["id"]

    response = await async_client.put(
        f"/api/jobs/{job_id}",
        headers=headers,
        json={"title": "Staff Data Engineer", "skills": [{"skill_id": "python", "is_required": True}, "Rust"]},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Staff Data Engineer"
    assert data["slug"] == created.json()["slug"]
    assert data["description"] == "Build pipelines"
    assert {s["name"]: s["is_required"] for s in data["skills"]} == {"Python": True, "Rust": False}


@pytest.mark.asyncio
async def test_update_without_skills_keeps_them(async_client: AsyncClient, db, poster, company):
    headers = auth_headers(poster)
    created = await async_client.post(
        "/api/jobs", headers=headers, json=job_payload(company.id, skills=["Python"])
    )
    job_id = created.json()["id"]

    response = await async_client.put(f"/api/jobs/{job_id}", headers=headers, json={"location": "Porto"})

    assert response.status_code == 200
    assert response.json()["location"] == "Porto"
    assert [s["name"] for s in response.json()["skills"]] == ["Python"]


@pytest.mark.asyncio
async def test_update_cannot_clear_title(async_client: AsyncClient, poster, job):
    response = await async_client.put(
        f"/api/jobs/{job.id}", headers=auth_headers(poster), json={"title": None}
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_other_poster_update_is_404(async_client: AsyncClient, db, job):
    other = await make_poster(db, email="other@example.com", company_name="Other", company_slug="other")

    response = await async_client.put(
        f"/api/jobs/{job.id}", headers=auth_headers(other), json={"title": "Hijacked"}
    )

    assert response.status_code == 404
    assert response.json()["detail"] == "Job not found or unauthorized"


@pytest.mark.asyncio
async def test_close_job_via_my_jobs(async_client: AsyncClient, poster, job):
    response = await async_client.patch(
        "/api/jobs/my-jobs",
        headers=auth_headers(poster),
        json={"job_id": str(job.id), "is_active": False},
    )

    assert response.status_code == 200
    assert response.json()["is_active"] is False

    listing = await async_client.get("/api/jobs")
    assert listing.json()["jobs"] == []


# =============================================================================
# Delete
# =============================================================================

@pytest.mark.asyncio
async def test_delete_removes_everything_referencing_the_job(async_client: AsyncClient, db, poster, seeker, company):
    headers = auth_headers(poster)
    created = await async_client.post(
        "/api/jobs", headers=headers, json=job_payload(company.id, skills=["Python"], categories=["Data"])
    )
    job_id = created.json()["id"]

    applied = await async_client.post("/api/applications", headers=auth_headers(seeker), json={"job_id": job_id})
    saved = await async_client.post("/api/saved-jobs", headers=auth_headers(seeker), json={"job_id": job_id})
    assert applied.status_code == 201
    assert saved.status_code == 201

    response = await async_client.delete(f"/api/jobs/{job_id}", headers=headers)

    assert response.status_code == 200
    assert response.json()["message"] == "Job deleted successfully"

    for model in (JobPost, JobSkill, JobCategory, Application, SavedJob):
        count = (await db.execute(select(func.count()).select_from(model))).scalar_one()
        assert count == 0, model.__tablename__

    missing = await async_client.get(f"/api/jobs/{job_id}")
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_other_poster_delete_leaves_job_intact(async_client: AsyncClient, db, job):
    other = await make_poster(db, email="other@example.com", company_name="Other", company_slug="other")

    response = await async_client.delete(f"/api/jobs/{job.id}", headers=auth_headers(other))

    assert response.status_code == 404
    remaining = (await db.execute(select(JobPost.id).where(JobPost.id == job.id))).scalar_one_or_none()
    assert remaining == job.id


@pytest.mark.asyncio
async def test_delete_service_reports_not_found(db, poster):
    with pytest.raises(NotFoundError):
        await job_posts.delete_job_post(db, uuid.uuid4(), poster.id)


# =============================================================================
# Browse
# =============================================================================

@pytest.mark.asyncio
async def test_get_job_detail(async_client: AsyncClient, job):
    response = await async_client.get(f"/api/jobs/{job.id}")

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == str(job.id)
    assert data["location"] == "Berlin"


@pytest.mark.asyncio
async def test_list_filters(async_client: AsyncClient, db, poster, company, job):
    await make_job(
        db, poster, company.id, title="Frontend Developer", location="Paris",
        job_type=JobType.PART_TIME, work_mode=WorkMode.ON_SITE, salary_min=40000,
    )
    await make_job(db, poster, company.id, title="Closed Backend Role", location="Berlin", is_active=False)

    async def titles(**params):
        response = await async_client.get("/api/jobs", params=params)
        assert response.status_code == 200
        return sorted(item["title"] for item in response.json()["jobs"])

    assert await titles() == ["Backend Engineer", "Frontend Developer"]
    assert await titles(search="frontend") == ["Frontend Developer"]
    assert await titles(search="acme") == ["Backend Engineer", "Frontend Developer"]
    assert await titles(location="berlin") == ["Backend Engineer"]
    assert await titles(job_type="PART_TIME") == ["Frontend Developer"]
    assert await titles(work_mode="REMOTE") == ["Backend Engineer"]
    assert await titles(salary_min=50000) == ["Backend Engineer"]
    assert await titles(salary_max=50000) == ["Frontend Developer"]


@pytest.mark.asyncio
async def test_list_pagination(async_client: AsyncClient, db, poster, company):
    for index in range(3):
        await make_job(db, poster, company.id, title=f"Role {index}")

    first = (await async_client.get("/api/jobs", params={"page": 1, "limit": 2})).json()
    second = (await async_client.get("/api/jobs", params={"page": 2, "limit": 2})).json()

    assert len(first["jobs"]) == 2
    assert len(second["jobs"]) == 1
    assert first["pagination"] == {
        "page": 1, "limit": 2, "total_count": 3, "total_pages": 2, "has_next": True, "has_prev": False,
    }
    assert second["pagination"]["has_prev"] is True
    assert second["pagination"]["has_next"] is False
    seen = {job["id"] for job in first["jobs"]} | {job["id"] for job in second["jobs"]}
    assert len(seen) == 3


@pytest.mark.asyncio
async def test_list_rejects_bad_enum(async_client: AsyncClient):
    response = await async_client.get("/api/jobs", params={"job_type": "SOMETIMES"})

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_my_jobs_stats(async_client: AsyncClient, db, poster, seeker, company, job):
    await make_job(db, poster, company.id, title="Featured Closed", is_active=False, is_featured=True)
    db.add(Application(job_post_id=job.id, applicant_id=seeker.id))
    await db.commit()

    response = await async_client.get("/api/jobs/my-jobs", headers=auth_headers(poster))

    assert response.status_code == 200
    data = response.json()
    assert len(data["jobs"]) == 2
    assert data["stats"] == {
        "total_jobs": 2,
        "active_jobs": 1,
        "total_applications": 1,
        "featured_jobs": 1,
    }
    counts = {item["title"]: item["application_count"] for item in data["jobs"]}
    assert counts == {"Backend Engineer": 1, "Featured Closed": 0}
