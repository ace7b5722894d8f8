"""Constants for icon resolution"""

import re

# Characters allowed in a domain besides alphanumerics
ALLOWED_DOMAIN_CHARS: frozenset[str] = frozenset("_-.")

MAX_DOMAIN_LENGTH: int = 255

# On-disk cache layout: `<cache_dir>/<domain>.png` and `<cache_dir>/<domain>.png.miss`
ICON_FILE_SUFFIX: str = ".png"
MISS_MARKER_SUFFIX: str = ".miss"

ICON_CONTENT_TYPE: str = "image/x-icon"

FALLBACK_ICON_RESOURCE: str = "static/fallback-icon.png"

# Scraper filters applied to `<link>` tags
LINK_REL_PATTERN: re.Pattern = re.compile(r"icon$|apple.*icon")
LINK_HREF_PATTERN: re.Pattern = re.compile(
    r"(?i)\w+\.(jpg|jpeg|png|ico)(\?.*)?$|^data:image.*base64"
)

PARSER: str = "html.parser"

DATA_URI_PREFIX: str = "data:image"

# Only the HTML head matters, 512 KiB is plenty for it
MAX_PAGE_BYTES: int = 512 * 1024
MAX_ICON_BYTES: int = 5 * 1024 * 1024

MAX_REDIRECTS: int = 10

# Download policy
MAX_CANDIDATES: int = 5
# Smallest plausible PNG, in bytes
MIN_DATA_URI_BYTES: int = 67

# Priority of the synthesized `/favicon.ico` guess
DEFAULT_FAVICON_PRIORITY: int = 35
DEFAULT_FAVICON_PATH: str = "/favicon.ico"

# HTTP request configuration
REQUEST_HEADERS: dict[str, str] = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko)"
        " Chrome/58.0.3029.110 Safari/537.36 Edge/16.16299"
    ),
    "Accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,image/apng,*/*;q=0.8"
    ),
    "Accept-Language": "en-US,en;q=0.8",
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
}
