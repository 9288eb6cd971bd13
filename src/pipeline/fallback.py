"""Synthetic fallback jobs, used when real extraction fails.

Output has exactly the shape of extracted jobs so callers never branch on
where data came from. Pure: reads no cache or network state; all randomness
comes from the ``rng`` argument, so a seeded Random gives repeatable output.
"""

import random

from src.core.schemas import Job, Query
from src.platforms.linkedin.parser import SKILL_SETS

FALLBACK_URL = "https://www.linkedin.com/jobs"

JOB_TYPES: tuple[str, ...] = ("Full-time", "Part-time", "Contract", "Remote", "Internship")

DATE_POSTED_OPTIONS: tuple[str, ...] = (
    "1 day ago", "2 days ago", "3 days ago", "1 week ago", "Just now",
)

# Recency window -> allowed labels. Missing keys allow every label.
DATE_POSTED_WINDOWS: dict[str, tuple[str, ...]] = {
    "past24hours": ("Just now", "1 day ago"),
    "pastWeek": ("Just now", "1 day ago", "2 days ago", "3 days ago"),
}

COMPANIES: tuple[str, ...] = (
    "Tech Solutions Inc.",
    "Global Innovations",
    "Digital Enterprises",
    "Future Systems",
    "Smart Technologies",
    "Nexus Corporation",
    "Quantum Computing",
    "Cyber Security Ltd",
    "Cloud Platforms Inc",
    "Data Analytics Co",
)

LOCATIONS: tuple[str, ...] = (
    "Remote",
    "New York, NY",
    "San Francisco, CA",
    "Austin, TX",
    "Seattle, WA",
    "Boston, MA",
    "Chicago, IL",
    "Los Angeles, CA",
    "Denver, CO",
    "Atlanta, GA",
)

SALARIES: tuple[str, ...] = (
    "$80,000 - $100,000 a year",
    "$120,000 - $150,000 a year",
    "$60,000 - $80,000 a year",
    "$100,000 - $130,000 a year",
    "$90,000 - $110,000 a year",
)

SKILLS: tuple[tuple[str, ...], ...] = SKILL_SETS + (
    ("PHP", "Laravel", "MySQL", "Redis"),
    ("Ruby", "Rails", "PostgreSQL", "Heroku"),
    ("Swift", "iOS", "Objective-C", "Mobile Development"),
    ("Kotlin", "Android", "Firebase", "Mobile Development"),
    ("Rust", "WebAssembly", "Systems Programming", "Performance"),
)

ROLES: tuple[str, ...] = (
    "Specialist", "Engineer", "Developer", "Manager", "Analyst",
    "Consultant", "Architect", "Designer", "Lead", "Director",
    "Programmer", "Administrator", "Technician", "Coordinator", "Strategist",
)

SENIORITY_PREFIXES: tuple[str, ...] = ("Senior", "Junior", "Principal", "Associate", "")


def generate(query: Query, count: int, rng: random.Random | None = None) -> list[Job]:
    """Generate ``count`` synthetic jobs shaped by the query's filters."""
    rng = rng or random.Random()
    locations = _locations_for(query.location)
    job_types = _job_types_for(query.job_type)
    dates = DATE_POSTED_WINDOWS.get(query.date_posted, DATE_POSTED_OPTIONS)
    batch = f"{rng.getrandbits(32):08x}"

    jobs: list[Job] = []
    for i in range(count):
        skills = SKILLS[i % len(SKILLS)]
        company = COMPANIES[i % len(COMPANIES)]
        title = _job_title(query.keywords, i, rng)
        location = locations[i % len(locations)]
        job_type = job_types[i % len(job_types)]
        salary = SALARIES[i % len(SALARIES)] if i % 3 == 0 else None

        jobs.append(Job(
            id=f"mock-{i}-{batch}",
            title=title,
            company=company,
            location=location,
            job_type=job_type,
            date_posted=dates[i % len(dates)],
            description=_description(company, title, job_type, location, skills, salary),
            url=FALLBACK_URL,
            logo_url=f"/placeholder.svg?height=40&width=40&text={company[0]}",
            salary=salary,
            skills=list(skills),
        ))
    return jobs


def _job_title(keywords: str, index: int, rng: random.Random) -> str:
    prefix = rng.choice(SENIORITY_PREFIXES)
    role = ROLES[index % len(ROLES)]
    return f"{prefix} {keywords} {role}" if prefix else f"{keywords} {role}"


def _locations_for(requested: str) -> tuple[str, ...]:
    """Four of five slots reuse the requested location, one is Remote."""
    if requested:
        return (requested, requested, requested, "Remote", requested)
    return LOCATIONS


def _job_types_for(job_type: str) -> tuple[str, ...]:
    """Job types matching the filter; the full list if none match."""
    if job_type == "all":
        return JOB_TYPES
    wanted = job_type.lower()
    matching = tuple(t for t in JOB_TYPES if wanted in t.lower().replace("-", ""))
    return matching or JOB_TYPES


def _description(
    company: str,
    title: str,
    job_type: str,
    location: str,
    skills: tuple[str, ...],
    salary: str | None,
) -> str:
    where = (
        "that can be performed remotely" if location == "Remote"
        else f"located in {location}"
    )
    lines = [
        f"{company} is seeking a {title} to join our team.",
        f"This is a {job_type.lower()} position {where}.",
        "",
        f"The ideal candidate will have experience with {', '.join(skills)}.",
    ]
    if salary:
        lines += ["", f"This position offers a competitive salary range of {salary}."]
    lines += ["", "Apply now to join our innovative team!"]
    return "\n".join(lines)
