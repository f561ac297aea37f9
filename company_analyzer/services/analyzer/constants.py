"""Named constants for the analyzer package.

Centralizes all magic numbers so they can be tuned from one place.
"""

# ---------------------------------------------------------------------------
# Fetching
# ---------------------------------------------------------------------------
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
HOMEPAGE_TIMEOUT_SECONDS = 30
SUBPAGE_TIMEOUT_SECONDS = 15

# Probed in this order after the homepage
CANDIDATE_PATHS: tuple[str, ...] = (
    "/about",
    "/about-us",
    "/services",
    "/products",
    "/contact",
)

# ---------------------------------------------------------------------------
# Content windows (characters)
# ---------------------------------------------------------------------------
ANALYSIS_WINDOW = 2_000  # Body text considered for analysis
SUBSTANTIAL_CONTENT_THRESHOLD = 100  # Subpage must exceed this to be used
HERO_TEXT_LIMIT = 500
LISTING_DESCRIPTION_LIMIT = 200
SNIPPET_TRAILING_CHARS = 200  # Chars kept after a mission/support keyword
SNIPPET_MAX_LENGTH = 300
COMPANY_NAME_MAX_LENGTH = 50
TEAM_NAME_MAX_LENGTH = 50

# ---------------------------------------------------------------------------
# Result caps
# ---------------------------------------------------------------------------
MAX_HEADINGS = 10
MAX_KEYWORDS = 10
MAX_LISTING_ITEMS = 10
MAX_PRODUCT_CATEGORIES = 10
MAX_TEAM_MEMBERS = 5
MAX_INDUSTRIES = 5
MAX_EMAILS = 5
MAX_PHONES = 3
MAX_OFFICE_LOCATIONS = 3

# ---------------------------------------------------------------------------
# Selectors
# ---------------------------------------------------------------------------
HERO_SELECTOR = '.hero, .banner, .jumbotron, [class*="hero"], [class*="banner"]'
ABOUT_HEADING_SELECTOR = "h1, h2, h3"
SERVICE_SELECTOR = "h3, h4, .service, .service-item"
PRODUCT_SELECTOR = "h3, h4, .product, .product-item"
PRODUCT_CATEGORY_SELECTOR = ".category, .product-category"

# ---------------------------------------------------------------------------
# Vocabularies
# ---------------------------------------------------------------------------
STOP_WORDS = frozenset(
    {
        "this", "that", "with", "from", "they", "have", "been", "were",
        "said", "each", "which", "their", "will", "would", "there", "could",
    }
)

INDUSTRIES: tuple[str, ...] = (
    "healthcare",
    "finance",
    "technology",
    "education",
    "manufacturing",
    "retail",
    "automotive",
    "aerospace",
    "energy",
    "telecommunications",
)

LEADERSHIP_ROLES: tuple[str, ...] = (
    "CEO",
    "CTO",
    "CFO",
    "President",
    "Founder",
    "Director",
)

# (platform field, substrings that identify it)
SOCIAL_PLATFORMS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("linkedin_url", ("linkedin.com",)),
    ("twitter_url", ("twitter.com", "x.com")),
    ("facebook_url", ("facebook.com",)),
    ("youtube_url", ("youtube.com",)),
    ("instagram_url", ("instagram.com",)),
)

# ---------------------------------------------------------------------------
# Summaries
# ---------------------------------------------------------------------------
SUMMARY_INPUT_LIMIT = 1_500
SUMMARY_OUTPUT_LIMIT = 500
SUMMARY_MAX_TOKENS = 300

# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------
SHUTDOWN_GRACE_SECONDS = 30.0

# ---------------------------------------------------------------------------
# Polling client
# ---------------------------------------------------------------------------
POLL_INTERVAL_SECONDS = 2.0
