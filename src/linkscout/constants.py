# src/linkscout/constants.py
"""Centralized constants for linkscout.

This module contains magic numbers and lookup tables that are used across
multiple modules. For user-configurable values, see config.py and Config.
"""

# =============================================================================
# Search API Constants
# =============================================================================

# Google Custom Search returns at most this many items per request
SEARCH_PAGE_SIZE = 10

# Custom Search refuses start indexes above this value
SEARCH_MAX_START_INDEX = 100

# HTTP statuses treated as rate limiting by the search API
RATE_LIMIT_STATUS_CODES = (429, 403)

# Cap on keywords derived from scraped metadata
MAX_METADATA_KEYWORDS = 100

# Number of H2 headings per page used as search keywords
H2_KEYWORDS_PER_PAGE = 3

# =============================================================================
# HTTP Constants
# =============================================================================

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

BROWSER_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}

# =============================================================================
# Export Constants
# =============================================================================

# Delimiter used when flattening list values into a single CSV cell
CSV_LIST_DELIMITER = "||"

# Excel rejects sheet titles longer than this
EXCEL_MAX_SHEET_TITLE = 31

# =============================================================================
# URL Categorization
# =============================================================================

SOCIAL_MEDIA_DOMAINS = [
    "linkedin.com",
    "facebook.com",
    "twitter.com",
    "instagram.com",
    "pinterest.com",
    "reddit.com",
    "medium.com",
    "tumblr.com",
    "quora.com",
    "youtube.com",
    "tiktok.com",
    "snapchat.com",
    "threads.net",
    "flickr.com",
    "vimeo.com",
    "telegram.org",
    "whatsapp.com",
    "discord.com",
    "slack.com",
    "meetup.com",
]

CONTENT_PLATFORMS = [
    "wordpress.com",
    "blogger.com",
    "medium.com",
    "substack.com",
    "ghost.org",
    "wix.com",
    "squarespace.com",
    "weebly.com",
    "hubspot.com",
    "typepad.com",
]

CATEGORY_SOCIAL_MEDIA = "social_media"
CATEGORY_CONTENT_PLATFORM = "content_platform"
CATEGORY_OTHER = "other"
CATEGORY_ERROR = "error"

# =============================================================================
# Submission Opportunity Detection
# =============================================================================

# URL paths that usually lead to guest-post or contributor pages
SUBMISSION_URL_PATTERNS = [
    "/write-for-us",
    "/contribute",
    "/submission",
    "/submit",
    "/guest-post",
    "/write-with-us",
    "/contributors",
    "/guest-blogging",
    "/guest-contributor",
    "/authors",
    "/become-a-contributor",
    "/join-us",
    "/publish",
    "/guidelines",
]

SUBMISSION_KEYWORDS = [
    "write for us",
    "submit article",
    "guest post",
    "contribute",
    "become a contributor",
    "guest author",
    "submission guidelines",
    "content submission",
    "article submission",
    "become an author",
    "publish with us",
    "join our writers",
    "guest blogging",
    "submit your content",
    "write for",
    "author guidelines",
]

# Confidence points awarded per signal
SUBMISSION_URL_POINTS = 20
SUBMISSION_LINK_KEYWORD_POINTS = 15
SUBMISSION_BODY_KEYWORD_POINTS = 10
CONTACT_FORM_POINTS = 5
WORDPRESS_POINTS = 10

MAX_CONFIDENCE = 100

# Minimum confidence for a site to count as accepting submissions
ACCEPTS_SUBMISSIONS_THRESHOLD = 30

# Confidence bands used by organize_potential_sites
HIGH_POTENTIAL_THRESHOLD = 70
MEDIUM_POTENTIAL_THRESHOLD = 40
LOW_POTENTIAL_THRESHOLD = ACCEPTS_SUBMISSIONS_THRESHOLD
