"""LinkedIn card parser — converts raw card snapshots into Job objects.

Design rules:
  - Every field lookup walks a fallback selector tuple; first non-empty wins.
  - A field that exhausts its selectors gets its placeholder, never "" or None.
  - Titles are split on '\\n' and the first line taken.
  - Raw records are truncated to the page size *before* parsing.
  - job_type and skills are heuristics, not extracted data.
"""

import logging
import random
import uuid
from collections.abc import Iterable, Mapping, Sequence
from typing import Any
from urllib.parse import urlparse, urlunparse

from src.core.schemas import (
    DEFAULT_JOB_TYPE,
    RECENTLY_POSTED,
    UNKNOWN_COMPANY,
    UNKNOWN_LOCATION,
    UNKNOWN_TITLE,
    Job,
    RawRecord,
)
from src.platforms.linkedin.selectors import FIELD_SELECTORS, Selector

logger = logging.getLogger(__name__)

LINKEDIN_BASE = "https://www.linkedin.com"
MISSING_URL = "#"
PLACEHOLDER_DESCRIPTION = (
    "This position requires expertise in various technologies. "
    "Click to view the full job description."
)

# Checked in order; first keyword found in the lower-cased title wins.
JOB_TYPE_KEYWORDS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("part-time", "part time"), "Part-time"),
    (("contract",), "Contract"),
    (("intern",), "Internship"),
    (("remote",), "Remote"),
)

SKILL_SETS: tuple[tuple[str, ...], ...] = (
    ("JavaScript", "React", "Node.js", "TypeScript"),
    ("Python", "Django", "Flask", "AWS"),
    ("Java", "Spring", "Hibernate", "Microservices"),
    ("C#", ".NET", "Azure", "SQL Server"),
    ("Go", "Docker", "Kubernetes", "CI/CD"),
)


def infer_job_type(title: str) -> str:
    """Guess a job type label from title keywords. Defaults to Full-time."""
    lowered = title.lower()
    for keywords, label in JOB_TYPE_KEYWORDS:
        if any(k in lowered for k in keywords):
            return label
    return DEFAULT_JOB_TYPE


def pick_skills(rng: random.Random) -> list[str]:
    """Presentation heuristic: a uniformly random predefined tag set.

    Nothing is read from the listing itself.
    """
    return list(SKILL_SETS[rng.randrange(len(SKILL_SETS))])


class LinkedInParser:
    """Parses raw LinkedIn card snapshots into Job objects."""

    def __init__(self, max_results: int = 25, rng: random.Random | None = None) -> None:
        self._max_results = max_results
        self._rng = rng or random.Random()

    def parse_cards(self, records: Sequence[RawRecord]) -> list[Job]:
        """Parse up to ``max_results`` records, in order, skipping any that blow up."""
        results: list[Job] = []
        seen_ids: set[str] = set()
        for record in records[: self._max_results]:
            try:
                job = self.parse_card(record, taken_ids=seen_ids)
            except Exception:
                logger.debug("Failed to parse card, skipping", exc_info=True)
                continue
            seen_ids.add(job.id)
            results.append(job)
        return results

    def parse_card(self, record: RawRecord, *, taken_ids: Iterable[str] = ()) -> Job:
        """Parse a single card snapshot. Always returns a fully populated Job."""
        if not isinstance(record, Mapping):
            msg = f"card snapshot must be a mapping, got {type(record).__name__}"
            raise TypeError(msg)
        title = self._first_line(self._resolve(record, "title")) or UNKNOWN_TITLE
        company = self._resolve(record, "company") or UNKNOWN_COMPANY
        location = self._resolve(record, "location") or UNKNOWN_LOCATION
        date_posted = self._resolve(record, "postedDate") or RECENTLY_POSTED
        href = self._resolve(record, "link")
        logo = self._resolve(record, "logo")
        salary = self._resolve(record, "salary")

        return Job(
            id=self._new_id(set(taken_ids)),
            title=title,
            company=company,
            location=location,
            job_type=infer_job_type(title),
            date_posted=date_posted,
            description=PLACEHOLDER_DESCRIPTION,
            url=self._clean_url(href) if href else MISSING_URL,
            logo_url=logo or None,
            salary=salary or None,
            skills=pick_skills(self._rng),
        )

    # --- Private helpers ---

    def _resolve(self, record: RawRecord, field: str) -> str:
        """Try the field's selectors in order, return first non-empty text or ""."""
        try:
            captured = record.get(field)
            if captured is None:
                return ""
            if isinstance(captured, str):
                return self._normalize(captured)
            for selector in FIELD_SELECTORS[field]:
                text = self._normalize(self._lookup(captured, selector))
                if text:
                    return text
        except Exception:
            logger.debug("Error resolving field '%s'", field, exc_info=True)
        return ""

    @staticmethod
    def _lookup(captured: Any, selector: Selector) -> Any:
        """Value captured for ``selector``, by ``Selector.key`` or bare css for text."""
        value = captured.get(selector.key)
        if value is None and selector.attr is None:
            value = captured.get(selector.css)
        return value

    @staticmethod
    def _normalize(value: Any) -> str:
        if not isinstance(value, str):
            return ""
        return value.strip()

    @staticmethod
    def _first_line(text: str) -> str:
        return text.split("\n")[0].strip()

    @staticmethod
    def _new_id(taken: set[str]) -> str:
        job_id = uuid.uuid4().hex[:13]
        while job_id in taken:
            job_id = uuid.uuid4().hex[:13]
        return job_id

    @staticmethod
    def _clean_url(href: str) -> str:
        """Strip tracking params and prepend domain if relative."""
        if href.startswith("/"):
            href = f"{LINKEDIN_BASE}{href}"
        parsed = urlparse(href)
        if not parsed.scheme or not parsed.netloc:
            return href
        # Keep only scheme, netloc, path — drop query and fragment
        return urlunparse((parsed.scheme, parsed.netloc, parsed.path, "", "", ""))
