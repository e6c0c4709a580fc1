"""Constants for the search fetch layer.

Centralizes the search endpoint, fixed query values and HTTP limits.
"""

# Search endpoint
SEARCH_API_BASE_URL = "https://api.stackexchange.com/2.3/search"
SEARCH_SITE = "stackoverflow"
SEARCH_ORDER = "desc"
SEARCH_SORT = "activity"

# Fixed query values
PAGE_SIZE = 100
DATE_WINDOW_DAYS = 365
FIRST_PAGE = 1

# Query parameter names
PARAM_ORDER = "order"
PARAM_SORT = "sort"
PARAM_SITE = "site"
PARAM_INTITLE = "intitle"
PARAM_TAGGED = "tagged"
PARAM_PAGESIZE = "pagesize"
PARAM_FROMDATE = "fromdate"
PARAM_TODATE = "todate"
PARAM_PAGE = "page"

# HTTP Status Code Ranges
HTTP_STATUS_OK_MIN = 200
HTTP_STATUS_OK_MAX = 300

# Response Size Limits
DEFAULT_MAX_RESPONSE_SIZE_BYTES = 10 * 1024 * 1024  # 10 MB

# gzip magic header for bodies sent without Content-Encoding
GZIP_MAGIC = b"\x1f\x8b"

# Max chars of a body included in decode error context
ERROR_CONTEXT_MAX_LENGTH = 200
