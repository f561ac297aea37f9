"""Heuristic entity extractors.

Every function here is stateless and independently testable. The text
helpers take plain strings; the facet builders take a ``DocumentView`` and
return the typed facet record. Nothing raises on missing data: absent
facts come back as empty strings or lists.
"""

import re
from collections import Counter

from company_analyzer.models.analysis import (
    AboutData,
    ContactData,
    HomeData,
    ListingItem,
    ProductsData,
    ServicesData,
    SocialMediaData,
    TeamMember,
)
from company_analyzer.services.analyzer.constants import (
    ABOUT_HEADING_SELECTOR,
    COMPANY_NAME_MAX_LENGTH,
    HERO_SELECTOR,
    HERO_TEXT_LIMIT,
    INDUSTRIES,
    LEADERSHIP_ROLES,
    LISTING_DESCRIPTION_LIMIT,
    MAX_EMAILS,
    MAX_HEADINGS,
    MAX_INDUSTRIES,
    MAX_KEYWORDS,
    MAX_LISTING_ITEMS,
    MAX_OFFICE_LOCATIONS,
    MAX_PHONES,
    MAX_PRODUCT_CATEGORIES,
    MAX_TEAM_MEMBERS,
    PRODUCT_CATEGORY_SELECTOR,
    PRODUCT_SELECTOR,
    SERVICE_SELECTOR,
    SNIPPET_MAX_LENGTH,
    SNIPPET_TRAILING_CHARS,
    SOCIAL_PLATFORMS,
    STOP_WORDS,
    TEAM_NAME_MAX_LENGTH,
)
from company_analyzer.services.analyzer.document import DocumentView
from company_analyzer.services.analyzer.summarizer import Summarizer

# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------
EMAIL_RE = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
PHONE_RE = re.compile(r"(?:\+?1[-.\s]?)?\(?[0-9]{3}\)?[-.\s]?[0-9]{3}[-.\s]?[0-9]{4}")
ADDRESS_RE = re.compile(
    r"\d+\s+[A-Za-z\s]+"
    r"(?:Street|St|Avenue|Ave|Road|Rd|Drive|Dr|Lane|Ln|Boulevard|Blvd)"
    r"[^,.]*,\s*[A-Za-z\s]+"
)
FOUNDING_YEAR_RE = re.compile(
    r"(?:founded|established|since)(?:\s+in)?\s*(\d{4})", re.IGNORECASE
)
MISSION_RE = re.compile(
    rf"(?:mission|vision|purpose|goal)[\s\S]{{0,{SNIPPET_TRAILING_CHARS}}}",
    re.IGNORECASE,
)
SUPPORT_RE = re.compile(
    rf"support[\s\S]{{0,{SNIPPET_TRAILING_CHARS}}}", re.IGNORECASE
)
KEYWORD_RE = re.compile(r"\b[a-z]{4,}\b")

# Only the role is case-insensitive; names must be capitalized.
_ROLE = r"\b(?i:" + "|".join(LEADERSHIP_ROLES) + r")\b"
_NAME = r"[A-Z][a-z]+ [A-Z][a-z]+"
NAME_ROLE_RE = re.compile(rf"({_NAME}),?\s*({_ROLE})")
ROLE_NAME_RE = re.compile(rf"({_ROLE})[\s:,-]*({_NAME})")


def _unique(items: list[str]) -> list[str]:
    """Deduplicate preserving first occurrence."""
    return list(dict.fromkeys(items))


# ---------------------------------------------------------------------------
# Text heuristics
# ---------------------------------------------------------------------------


def extract_emails(text: str) -> list[str]:
    return _unique(EMAIL_RE.findall(text))[:MAX_EMAILS]


def extract_phones(text: str) -> list[str]:
    return _unique([m.strip() for m in PHONE_RE.findall(text)])[:MAX_PHONES]


def extract_office_locations(text: str) -> list[str]:
    return _unique([m.strip() for m in ADDRESS_RE.findall(text)])[:MAX_OFFICE_LOCATIONS]


def extract_founding_year(text: str) -> str:
    match = FOUNDING_YEAR_RE.search(text)
    return match.group(1) if match else ""


def extract_mission_statement(text: str) -> str:
    match = MISSION_RE.search(text)
    return match.group(0)[:SNIPPET_MAX_LENGTH].strip() if match else ""


def extract_support_info(text: str) -> str:
    match = SUPPORT_RE.search(text)
    return match.group(0)[:SNIPPET_MAX_LENGTH].strip() if match else ""


def extract_leadership_team(text: str) -> list[TeamMember]:
    """Find "Name Name, ROLE" and "ROLE: Name Name" mentions."""
    team: list[TeamMember] = []

    for match in NAME_ROLE_RE.finditer(text):
        if len(team) >= MAX_TEAM_MEMBERS:
            return team
        name, role = match.group(1), match.group(2)
        if len(name) < TEAM_NAME_MAX_LENGTH:
            team.append(TeamMember(name=name.strip(), role=role.strip()))

    for match in ROLE_NAME_RE.finditer(text):
        if len(team) >= MAX_TEAM_MEMBERS:
            return team
        role, name = match.group(1), match.group(2)
        if len(name) < TEAM_NAME_MAX_LENGTH:
            team.append(TeamMember(name=name.strip(), role=role.strip()))

    return team


def extract_industries(text: str) -> list[str]:
    lower = text.lower()
    return [industry for industry in INDUSTRIES if industry in lower][:MAX_INDUSTRIES]


def extract_keywords(text: str) -> list[str]:
    """Top keywords by frequency; ties keep first-seen order."""
    words = [w for w in KEYWORD_RE.findall(text.lower()) if w not in STOP_WORDS]
    return [word for word, _ in Counter(words).most_common(MAX_KEYWORDS)]


# ---------------------------------------------------------------------------
# Document heuristics
# ---------------------------------------------------------------------------


def extract_social_links(view: DocumentView) -> SocialMediaData:
    """Scan anchors for social profiles; the last match per platform wins."""
    found: dict[str, str] = {}
    for href in view.links():
        for field, needles in SOCIAL_PLATFORMS:
            if any(needle in href for needle in needles):
                found[field] = href
    return SocialMediaData(**found)


def extract_listing(view: DocumentView, selector: str) -> list[ListingItem]:
    """Pair heading-like elements with their next sibling's text."""
    items: list[ListingItem] = []
    for element in view.select(selector)[:MAX_LISTING_ITEMS]:
        title = view.element_text(element)
        if not title:
            continue
        description = view.next_sibling_text(element)[:LISTING_DESCRIPTION_LIMIT]
        items.append(ListingItem(title=title, description=description))
    return items


def extract_company_name(view: DocumentView) -> str:
    """Shortest heading under the length limit (first one wins ties)."""
    candidates = [
        h for h in view.texts(ABOUT_HEADING_SELECTOR) if len(h) < COMPANY_NAME_MAX_LENGTH
    ]
    return min(candidates, key=len) if candidates else ""


# ---------------------------------------------------------------------------
# Facet builders
# ---------------------------------------------------------------------------


async def extract_home(view: DocumentView, summarizer: Summarizer) -> HomeData:
    title = view.title()
    content = view.analysis_text
    headings = view.texts("h1") + view.texts("h2")
    return HomeData(
        page_title=title,
        meta_description=view.meta("description"),
        main_headings=headings[:MAX_HEADINGS],
        hero_text=view.first_text(HERO_SELECTOR, HERO_TEXT_LIMIT),
        summary=await summarizer.summarize(content, "homepage", title),
        keywords=extract_keywords(content),
    )


async def extract_about(
    view: DocumentView, summarizer: Summarizer, title_hint: str = ""
) -> AboutData:
    content = view.analysis_text
    return AboutData(
        company_name=extract_company_name(view),
        founding_year=extract_founding_year(content),
        about_summary=await summarizer.summarize(content, "about", title_hint),
        mission_statement=extract_mission_statement(content),
        leadership_team=extract_leadership_team(content),
    )


async def extract_services(
    view: DocumentView, summarizer: Summarizer, title_hint: str = ""
) -> ServicesData:
    content = view.analysis_text
    return ServicesData(
        services_list=extract_listing(view, SERVICE_SELECTOR),
        services_summary=await summarizer.summarize(content, "services page", title_hint),
        industries_served=extract_industries(content),
    )


async def extract_products(
    view: DocumentView, summarizer: Summarizer, title_hint: str = ""
) -> ProductsData:
    content = view.analysis_text
    categories = _unique(view.texts(PRODUCT_CATEGORY_SELECTOR))
    return ProductsData(
        products_list=extract_listing(view, PRODUCT_SELECTOR),
        product_categories=categories[:MAX_PRODUCT_CATEGORIES],
        products_summary=await summarizer.summarize(content, "products page", title_hint),
    )


def extract_contact(view: DocumentView, page_url: str = "") -> ContactData:
    """Contact details from the full body text (not the analysis window)."""
    text = view.body_text()
    return ContactData(
        email_addresses=extract_emails(text),
        phone_numbers=extract_phones(text),
        office_locations=extract_office_locations(text),
        contact_form_url=page_url if page_url and view.has("form") else "",
        support_info=extract_support_info(text),
    )
