"""Analysis job and website data models."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator


class JobStatus(str, Enum):
    """Lifecycle states of an analysis job."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not JobStatus.PENDING


# =============================================================================
# Website facets
# =============================================================================


class HomeData(BaseModel):
    """Facts extracted from the homepage."""

    page_title: str = Field(default="", description="Contents of <title>")
    meta_description: str = Field(default="", description="meta[name=description]")
    main_headings: list[str] = Field(
        default_factory=list, description="H1s then H2s, capped at 10"
    )
    hero_text: str = Field(default="", description="Hero/banner snippet")
    summary: str = Field(default="", description="AI summary of the homepage")
    keywords: list[str] = Field(default_factory=list, description="Top 10 keywords")


class TeamMember(BaseModel):
    """Leadership team entry."""

    name: str
    role: str


class AboutData(BaseModel):
    """Facts extracted from an about page."""

    company_name: str = Field(default="", description="Short heading on the page")
    founding_year: str = Field(default="", description="Four-digit founding year")
    about_summary: str = Field(default="", description="AI summary of the page")
    mission_statement: str = Field(default="", description="Mission/vision snippet")
    leadership_team: list[TeamMember] = Field(default_factory=list)


class ListingItem(BaseModel):
    """A service or product offering."""

    title: str
    description: str = ""


class ServicesData(BaseModel):
    """Facts extracted from a services page."""

    services_list: list[ListingItem] = Field(default_factory=list)
    services_summary: str = ""
    industries_served: list[str] = Field(default_factory=list)


class ProductsData(BaseModel):
    """Facts extracted from a products page."""

    products_list: list[ListingItem] = Field(default_factory=list)
    product_categories: list[str] = Field(default_factory=list)
    products_summary: str = ""


class ContactData(BaseModel):
    """Facts extracted from a contact page."""

    email_addresses: list[str] = Field(default_factory=list)
    phone_numbers: list[str] = Field(default_factory=list)
    office_locations: list[str] = Field(default_factory=list)
    contact_form_url: str = Field(
        default="", description="Contact page URL when it hosts a form"
    )
    support_info: str = Field(default="", description="Support mention snippet")


class SocialMediaData(BaseModel):
    """At most one profile URL per platform."""

    linkedin_url: Optional[str] = None
    twitter_url: Optional[str] = None
    facebook_url: Optional[str] = None
    youtube_url: Optional[str] = None
    instagram_url: Optional[str] = None


class WebsiteData(BaseModel):
    """Sparse aggregate of website facets; any facet may be absent."""

    home: Optional[HomeData] = None
    about: Optional[AboutData] = None
    services: Optional[ServicesData] = None
    products: Optional[ProductsData] = None
    contact: Optional[ContactData] = None
    social_media: Optional[SocialMediaData] = None


# =============================================================================
# LinkedIn (always absent until a real provider exists)
# =============================================================================


class LinkedinHome(BaseModel):
    linkedin_name: str = ""
    tagline: str = ""
    follower_count: str = ""
    employee_count: str = ""
    cover_image_url: str = ""


class LinkedinAbout(BaseModel):
    description: str = ""
    specialties: list[str] = Field(default_factory=list)
    industry: str = ""
    company_size: str = ""
    headquarters: str = ""
    website: str = ""
    founded_year: str = ""
    type: str = ""


class LinkedinData(BaseModel):
    """Company page data from LinkedIn."""

    home: Optional[LinkedinHome] = None
    about: Optional[LinkedinAbout] = None


# =============================================================================
# Job
# =============================================================================


class AnalysisJob(BaseModel):
    """
    A single website analysis.

    Created ``pending``; moved exactly once to ``completed`` or ``failed``.
    """

    id: int = Field(..., description="Store-assigned job id")
    url: str = Field(..., description="URL as submitted")
    status: JobStatus = Field(default=JobStatus.PENDING)
    website_data: Optional[WebsiteData] = None
    linkedin_data: Optional[LinkedinData] = None
    error_message: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class AnalyzeRequest(BaseModel):
    """Request body for POST /api/analyze."""

    url: str = Field(..., description="Absolute http(s) URL of the company website")

    @field_validator("url")
    @classmethod
    def _absolute_url(cls, value: str) -> str:
        value = value.strip()
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("url must be an absolute http(s) URL")
        return value
