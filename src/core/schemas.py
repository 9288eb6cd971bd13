"""Core data models for the job search scraper."""

import logging
from collections.abc import Mapping
from typing import Any, Literal, get_args

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from src.core.errors import InvalidQuery

logger = logging.getLogger(__name__)

JobTypeFilter = Literal[
    "all", "fulltime", "parttime", "contract", "temporary", "internship", "remote",
]
DatePostedFilter = Literal["anytime", "past24hours", "pastWeek", "pastMonth"]

# Lower-cased input -> canonical filter value. Anything else means "no filter".
_FILTER_VALUES: dict[str, dict[str, str]] = {
    "job_type": {v.lower(): v for v in get_args(JobTypeFilter)},
    "date_posted": {v.lower(): v for v in get_args(DatePostedFilter)},
}

# A loosely-typed bundle of per-field values captured from one result card.
# Keys are the FIELD_SELECTORS field names; values are either plain strings or
# a mapping of selector key -> captured text/attribute.
RawRecord = Mapping[str, Any]

# Placeholders for required Job fields that could not be extracted.
UNKNOWN_TITLE = "Unknown Position"
UNKNOWN_COMPANY = "Unknown Company"
UNKNOWN_LOCATION = "Unknown Location"
DEFAULT_JOB_TYPE = "Full-time"
RECENTLY_POSTED = "Recently posted"


def _escape_key(text: str) -> str:
    return text.replace("\\", "\\\\").replace("|", "\\|")


class Query(BaseModel):
    """Normalized search parameters. Frozen; identity is ``fingerprint``."""

    model_config = ConfigDict(frozen=True)

    keywords: str
    location: str = ""
    job_type: JobTypeFilter = "all"
    date_posted: DatePostedFilter = "anytime"
    page: int = Field(default=1, ge=1)

    @field_validator("keywords")
    @classmethod
    def keywords_not_empty(cls, v: str) -> str:
        if not v.strip():
            msg = "keywords must not be empty"
            raise ValueError(msg)
        return " ".join(v.split())

    @field_validator("location")
    @classmethod
    def location_stripped(cls, v: str) -> str:
        return " ".join(v.split())

    @field_validator("job_type", "date_posted", "page", mode="before")
    @classmethod
    def blank_means_default(cls, v: Any, info: Any) -> Any:
        default = cls.model_fields[info.field_name].default
        if v is None or (isinstance(v, str) and not v.strip()):
            return default
        if info.field_name == "page":
            return v
        value = _FILTER_VALUES[info.field_name].get(str(v).strip().lower())
        if value is None:
            logger.debug("Unknown %s filter %r, applying no filter", info.field_name, v)
            return default
        return value

    @property
    def fingerprint(self) -> str:
        """Cache key: the ordered query fields, case-insensitive where it doesn't matter.

        Free-text fields have ``\\`` and ``|`` escaped so no two queries share a key.
        """
        return "|".join((
            _escape_key(self.keywords.lower()),
            _escape_key(self.location.lower()),
            self.job_type,
            self.date_posted,
            str(self.page),
        ))

    @classmethod
    def build(cls, **params: Any) -> "Query":
        """Construct a Query from loose request parameters.

        Raises InvalidQuery instead of pydantic's ValidationError so callers
        only need to handle one client-error type.
        """
        if params.get("location") is None:
            params.pop("location", None)
        try:
            return cls.model_validate(params)
        except ValidationError as e:
            raise InvalidQuery(str(e)) from e


class Job(BaseModel):
    """One normalized job listing.

    Required fields are never empty: extraction and the fallback generator
    fill placeholders instead.
    """

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True,
    )

    id: str
    title: str = UNKNOWN_TITLE
    company: str = UNKNOWN_COMPANY
    location: str = UNKNOWN_LOCATION
    job_type: str = DEFAULT_JOB_TYPE
    date_posted: str = RECENTLY_POSTED
    description: str
    url: str
    logo_url: str | None = None
    salary: str | None = None
    skills: list[str] | None = None


class CacheEntry(BaseModel):
    """A cached result set. Read-only once stored."""

    model_config = ConfigDict(frozen=True)

    jobs: tuple[Job, ...]
    total_count: int = Field(ge=0)
    created_at: float


class ScrapeResult(BaseModel):
    """Orchestrator output. Every code path produces this same shape."""

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True,
    )

    jobs: list[Job] = Field(default_factory=list)
    total_count: int = Field(default=0, ge=0)
    is_from_cache: bool = False
    page: int = Field(default=1, ge=1)
    warning: str | None = None

    @model_validator(mode="after")
    def total_covers_jobs(self) -> "ScrapeResult":
        if self.total_count < len(self.jobs):
            msg = "total_count must be >= len(jobs)"
            raise ValueError(msg)
        return self

    def to_payload(self) -> dict[str, Any]:
        """Serialize as ``{jobs, totalCount, isFromCache, page, warning?}``."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
