"""
Tests for the job seeker profile.

Validates:
- Label mapping for job types and education levels
- Saving writes user fields and profile fields together
- Supplied child lists replace the stored set, omitted lists are untouched
"""
from datetime import date

import pytest
from httpx import AsyncClient

from jobboard.errors import ValidationError
from jobboard.models import EducationLevel, JobType
from jobboard.services import profiles
from tests.conftest import auth_headers


# =============================================================================
# Mapping helpers
# =============================================================================

@pytest.mark.parametrize("label,expected", [
    ("Full Time", JobType.FULL_TIME),
    ("full-time", JobType.FULL_TIME),
    ("PART_TIME", JobType.PART_TIME),
    ("Internship", JobType.INTERNSHIP),
])
def test_map_job_type(label, expected):
    assert profiles.map_job_type(label) == expected


def test_map_job_type_rejects_unknown():
    with pytest.raises(ValidationError, match="Unknown job type"):
        profiles.map_job_type("Gig")


@pytest.mark.parametrize("degree,expected", [
    ("PhD in Physics", EducationLevel.DOCTORATE),
    ("M.Sc. Computer Science", EducationLevel.MASTER),
    ("MBA", EducationLevel.MASTER),
    ("B.Tech Mechanical", EducationLevel.BACHELOR),
    ("Bachelor of Arts", EducationLevel.BACHELOR),
    ("Associate Degree", EducationLevel.ASSOCIATE),
    ("High School Diploma", EducationLevel.HIGH_SCHOOL),
    ("Diploma in Design", EducationLevel.CERTIFICATE),
    # Whole words only: "Mathematics" must not match "ma"
    ("Mathematics Olympiad", EducationLevel.CERTIFICATE),
])
def test_map_education_level(degree, expected):
    assert profiles.map_education_level(degree) == expected


def test_parse_gpa():
    assert profiles.parse_gpa("3.7") == 3.7
    assert profiles.parse_gpa("A+") is None
    assert profiles.parse_gpa(None) is None


# =============================================================================
# Save / get
# =============================================================================

@pytest.mark.asyncio
async def test_save_profile(async_client: AsyncClient, seeker):
    response = await async_client.post("/api/job-seeker-profile", headers=auth_headers(seeker), json={
        "first_name": "Samantha",
        "city": "Austin",
        "state": "TX",
        "current_job_title": "Analyst",
        "job_type": ["Full Time", "contract", "full-time"],
        "linkedin": "https://linkedin.com/in/sam",
        "website": "https://sam.dev",
        "languages": [{"name": "English", "proficiency": "Native"}, {"name": "Spanish"}],
        "skills": [{"name": "Python", "level": "Expert"}, {"name": "python"}, {"name": "SQL"}],
        "education": [
            {"institution": "UT Austin", "degree": "B.Sc. Economics", "grade": "3.8",
             "start_date": "2015-09-01", "end_date": "2019-06-01"},
            {"institution": "", "degree": "Ignored"},
        ],
        "experience": [
            {"company": "Initech", "position": "Analyst", "start_date": "2019-07-01", "current": True},
        ],
        "internships": [{"company": "Globex", "position": "Data", "duration": "3 months"}],
    })

    assert response.status_code == 200, response.text
    data = response.json()
    assert data["user"]["first_name"] == "Samantha"
    assert data["user"]["location"] == "Austin, TX"
    assert data["user"]["website"] == "https://sam.dev"

    profile = data["profile"]
    assert profile["current_job_title"] == "Analyst"
    assert profile["preferred_job_types"] == ["FULL_TIME", "CONTRACT"]
    assert profile["linkedin_url"] == "https://linkedin.com/in/sam"
    assert profile["portfolio_url"] == "https://sam.dev"
    assert profile["languages_spoken"] == ["English (Native)", "Spanish"]
    assert {s["name"]: s["proficiency_level"] for s in profile["skills"]} == {"Python": "Expert", "SQL": None}

    assert len(profile["educations"]) == 1
    education = profile["educations"][0]
    assert education["level"] == "BACHELOR"
    assert education["gpa"] == 3.8

    titles = {row["job_title"] for row in profile["experiences"]}
    assert titles == {"Analyst", "Data (Intern)"}
    intern = next(row for row in profile["experiences"] if row["job_title"] == "Data (Intern)")
    assert "Duration: 3 months" in intern["description"]


@pytest.mark.asyncio
async def test_supplied_lists_replace_and_omitted_lists_stay(async_client: AsyncClient, seeker):
    headers = auth_headers(seeker)
    await async_client.post("/api/job-seeker-profile", headers=headers, json={
        "skills": [{"name": "Python"}, {"name": "SQL"}],
        "education": [{"institution": "MIT", "degree": "MS"}],
    })

    response = await async_client.post("/api/job-seeker-profile", headers=headers, json={
        "skills": [{"name": "Rust"}],
        "bio": "Now writing Rust",
    })

    assert response.status_code == 200
    data = response.json()
    assert [s["name"] for s in data["profile"]["skills"]] == ["Rust"]
    assert [e["institution"] for e in data["profile"]["educations"]] == ["MIT"]
    assert data["user"]["bio"] == "Now writing Rust"


@pytest.mark.asyncio
async def test_empty_list_clears_collection(async_client: AsyncClient, seeker):
    headers = auth_headers(seeker)
    await async_client.post("/api/job-seeker-profile", headers=headers, json={
        "experience": [{"company": "Initech", "position": "Analyst"}],
    })

    response = await async_client.post("/api/job-seeker-profile", headers=headers, json={"experience": []})

    assert response.json()["profile"]["experiences"] == []


@pytest.mark.asyncio
async def test_unknown_job_type_rejects_whole_save(async_client: AsyncClient, seeker):
    headers = auth_headers(seeker)

    response = await async_client.post("/api/job-seeker-profile", headers=headers, json={
        "bio": "Should not be written",
        "job_type": ["Gig"],
    })

    assert response.status_code == 400
    assert response.json()["detail"] == "Unknown job type: Gig"

    current = await async_client.get("/api/job-seeker-profile", headers=headers)
    assert current.json()["user"]["bio"] is None


@pytest.mark.asyncio
async def test_age_sets_birth_year(async_client: AsyncClient, seeker):
    response = await async_client.post(
        "/api/job-seeker-profile", headers=auth_headers(seeker), json={"age": 30}
    )

    assert response.json()["profile"]["date_of_birth"] == f"{date.today().year - 30}-01-01"


@pytest.mark.asyncio
async def test_get_profile(async_client: AsyncClient, seeker):
    response = await async_client.get("/api/job-seeker-profile", headers=auth_headers(seeker))

    assert response.status_code == 200
    data = response.json()
    assert data["user"]["email"] == "seeker@example.com"
    assert data["profile"]["skills"] == []
    assert data["profile"]["is_open_to_work"] is True


@pytest.mark.asyncio
async def test_poster_has_no_seeker_profile(async_client: AsyncClient, poster):
    response = await async_client.get("/api/job-seeker-profile", headers=auth_headers(poster))

    assert response.status_code == 403
