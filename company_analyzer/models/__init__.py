from company_analyzer.models.analysis import (
    AboutData,
    AnalysisJob,
    AnalyzeRequest,
    ContactData,
    HomeData,
    JobStatus,
    LinkedinAbout,
    LinkedinData,
    LinkedinHome,
    ListingItem,
    ProductsData,
    ServicesData,
    SocialMediaData,
    TeamMember,
    WebsiteData,
)

__all__ = [
    # Job
    "AnalysisJob",
    "AnalyzeRequest",
    "JobStatus",
    # Website facets
    "AboutData",
    "ContactData",
    "HomeData",
    "ListingItem",
    "ProductsData",
    "ServicesData",
    "SocialMediaData",
    "TeamMember",
    "WebsiteData",
    # LinkedIn
    "LinkedinAbout",
    "LinkedinData",
    "LinkedinHome",
]
