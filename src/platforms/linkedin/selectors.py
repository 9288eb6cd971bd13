"""LinkedIn public job-search DOM selectors with fallbacks.

Ordered by how often each variant shows up on the guest search page.
Each field maps to a tuple so extraction iterates until a match is found.
"""

from typing import NamedTuple


class Selector(NamedTuple):
    """A CSS selector plus the attribute to read (None means text content)."""

    css: str
    attr: str | None = None

    @property
    def key(self) -> str:
        """Key under which the browser snapshot stores this selector's value."""
        return f"{self.css}@{self.attr}" if self.attr else self.css


# --- Result list / card containers ---
RESULTS_LIST_SELECTOR: str = ".jobs-search__results-list"

CARD_SELECTORS: tuple[str, ...] = (
    ".jobs-search__results-list > li",
    "ul.jobs-search__results-list li",
    "li[data-occludable-job-id]",
    "div.base-search-card",
)

# --- Per-field selectors, keyed by raw record vocabulary ---
TITLE_SELECTORS: tuple[Selector, ...] = (
    Selector(".base-search-card__title"),
    Selector("a.job-card-list__title"),
    Selector("h3"),
    Selector("a.base-card__full-link", "aria-label"),
)

COMPANY_SELECTORS: tuple[Selector, ...] = (
    Selector(".base-search-card__subtitle"),
    Selector("span.job-card-container__primary-description"),
    Selector(".artdeco-entity-lockup__subtitle"),
    Selector("h4"),
)

LOCATION_SELECTORS: tuple[Selector, ...] = (
    Selector(".job-search-card__location"),
    Selector("li.job-card-container__metadata-item"),
    Selector(".artdeco-entity-lockup__caption"),
)

LINK_SELECTORS: tuple[Selector, ...] = (
    Selector("a.base-card__full-link", "href"),
    Selector('a[href*="/jobs/view/"]', "href"),
    Selector("a", "href"),
)

LOGO_SELECTORS: tuple[Selector, ...] = (
    Selector("img.artdeco-entity-image", "src"),
    Selector("img.artdeco-entity-image", "data-delayed-url"),
    Selector("img", "src"),
)

POSTED_DATE_SELECTORS: tuple[Selector, ...] = (
    Selector("time.job-search-card__listdate"),
    Selector("time.job-search-card__listdate--new"),
    Selector("time"),
    Selector("time", "datetime"),
)

SALARY_SELECTORS: tuple[Selector, ...] = (
    Selector(".job-search-card__salary-info"),
    Selector(".job-card-container__salary-info"),
)

FIELD_SELECTORS: dict[str, tuple[Selector, ...]] = {
    "title": TITLE_SELECTORS,
    "company": COMPANY_SELECTORS,
    "location": LOCATION_SELECTORS,
    "link": LINK_SELECTORS,
    "logo": LOGO_SELECTORS,
    "postedDate": POSTED_DATE_SELECTORS,
    "salary": SALARY_SELECTORS,
}
