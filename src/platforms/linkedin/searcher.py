"""LinkedIn URL builder and pagination helpers.

Pure functions — zero browser dependency.
"""

import logging
from urllib.parse import quote_plus, urlencode

from src.core.schemas import Query

logger = logging.getLogger(__name__)

SEARCH_BASE = "https://www.linkedin.com/jobs/search/"
RESULTS_PER_PAGE = 25

# --- Mapping dicts (URL concern) ---

JOB_TYPE_MAP: dict[str, str] = {
    "fulltime": "F",
    "parttime": "P",
    "contract": "C",
    "temporary": "T",
    "internship": "I",
    "remote": "R",
}

DATE_POSTED_MAP: dict[str, str] = {
    "past24hours": "r86400",
    "pastWeek": "r604800",
    "pastMonth": "r2592000",
}


def build_url(query: Query) -> str:
    """Build a LinkedIn jobs search URL from a normalized query.

    ``keywords`` is always sent, ``location`` only when non-empty. Job type
    and recency go through the mapping dicts; values missing from a dict
    (including "all" and "anytime") add no filter.
    """
    params: dict[str, str] = {"keywords": query.keywords}

    if query.location:
        params["location"] = query.location

    jt_code = _map_value(query.job_type, JOB_TYPE_MAP, "job_type")
    if jt_code:
        params["f_JT"] = jt_code

    tpr_code = _map_value(query.date_posted, DATE_POSTED_MAP, "date_posted")
    if tpr_code:
        params["f_TPR"] = tpr_code

    start = page_start(query.page)
    if start > 0:
        params["start"] = str(start)

    return f"{SEARCH_BASE}?{urlencode(params, quote_via=quote_plus)}"


def page_start(page: int) -> int:
    """Zero-based result offset for a one-based page number."""
    return max(page - 1, 0) * RESULTS_PER_PAGE


def _map_value(value: str, mapping: dict[str, str], field_name: str) -> str | None:
    """Map a query filter value to its LinkedIn URL code, or None for no filter."""
    code = mapping.get(value)
    if code is None:
        logger.debug("No %s filter for '%s'", field_name, value)
    return code
