"""API-related constants."""

API_PREFIX = "/api"

# HTTP Headers
CORRELATION_ID_HEADER = "X-Correlation-ID"
REQUEST_ID_HEADER = "X-Request-ID"
PAGINATION_HEADER = "X-Pagination"
MAX_USER_AGENT_LENGTH = 200

# Media types
JSON_MEDIA_TYPE = "application/json"
XML_MEDIA_TYPE = "application/xml"
JSON_MEDIA_TYPES = {"application/json", "text/json"}
XML_MEDIA_TYPES = {"application/xml", "text/xml"}
WILDCARD_MEDIA_TYPES = {"*/*", "application/*", "text/*"}
DEFAULT_FILE_MEDIA_TYPE = "application/octet-stream"

# Authorization policies
MUST_LIVE_IN_BERLIN = "MustLiveInBerlin"

# Generic message returned for unexpected failures
INTERNAL_ERROR_MESSAGE = "A problem happened while handling your request."
