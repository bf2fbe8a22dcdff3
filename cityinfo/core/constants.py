"""Core application constants."""

from datetime import timedelta

# Time constants
MILLISECONDS_PER_SECOND = 1000

# Security and redaction
REDACTED = "[REDACTED]"
DEFAULT_HSTS_MAX_AGE = 31536000  # 1 year in seconds

# Field limits shared by entities and transfer objects
NAME_MAX_LENGTH = 50
DESCRIPTION_MAX_LENGTH = 200

# City listing pagination
DEFAULT_PAGE_NUMBER = 1
DEFAULT_CITIES_PAGE_SIZE = 10
MAX_CITIES_PAGE_SIZE = 20

# Paging values accepted from clients (32-bit signed)
MAX_PAGING_VALUE = 2**31 - 1

# Identifiers accepted in request paths (32-bit signed)
MIN_ID = -(2**31)
MAX_ID = 2**31 - 1

# Issued bearer tokens
TOKEN_LIFETIME = timedelta(hours=1)
TOKEN_ALGORITHM = "HS256"
