"""Constants for the secure fetch client.

Centralizes header names, media types and policy tables so the
components share one definition.
"""

# Header names
HEADER_AUTHORIZATION = "Authorization"
HEADER_API_KEY = "API-Key"
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_COOKIE = "Cookie"
HEADER_SET_COOKIE = "Set-Cookie"
HEADER_USER_AGENT = "User-Agent"

# Authorization schemes (prefix includes the separating space)
SCHEME_BASIC = "Basic "
SCHEME_BEARER = "Bearer "

SECURE_URL_SCHEME = "https"

# Query parameters that must never carry credentials in the base URL
DEFAULT_SENSITIVE_QUERY_PARAMS: tuple[str, ...] = ("api_key", "apikey", "access_token")

# Cookie attributes required on authenticated cookies, checked in this order
REQUIRED_COOKIE_ATTRIBUTES: tuple[str, ...] = ("Secure", "HttpOnly", "SameSite")

DEFAULT_AUTH_COOKIE_NAME = "auth_token"

# Headers whose values must never appear in logs
SENSITIVE_HEADERS = frozenset(
    {
        "authorization",
        "cookie",
        "api-key",
        "x-api-key",
        "x-auth-token",
        "proxy-authorization",
        "set-cookie",
    }
)

# Headers that must not be stored in static configuration
FORBIDDEN_DEFAULT_HEADERS = frozenset({"authorization", "cookie", "api-key", "x-api-key"})

REDACTED_VALUE = "[REDACTED]"

# Request media types
MEDIA_TYPE_JSON = "application/json"
MEDIA_TYPE_TEXT_UTF8 = "text/plain;charset=UTF-8"
MEDIA_TYPE_FORM_URLENCODED_UTF8 = "application/x-www-form-urlencoded;charset=UTF-8"
MEDIA_TYPE_MULTIPART = "multipart/form-data"

# Response media type families, matched by substring containment
TEXT_MEDIA_TYPES: tuple[str, ...] = (
    "text/plain",
    "text/html",
    "text/csv",
    "text/markdown",
    "application/x-yaml",
    "text/yaml",
)

XML_MEDIA_TYPES: tuple[str, ...] = ("application/xml", "text/xml")

BLOB_MEDIA_TYPES: tuple[str, ...] = (
    # Documents
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "application/vnd.ms-powerpoint",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    # Images
    "image/png",
    "image/jpeg",
    "image/gif",
    "image/webp",
    "image/bmp",
    "image/svg+xml",
    # Audio
    "audio/mpeg",
    "audio/wav",
    "audio/ogg",
    "audio/aac",
    "audio/flac",
    "audio/webm",
    # Video
    "video/mp4",
    "video/webm",
    "video/ogg",
    "video/avi",
    "video/mpeg",
    "video/quicktime",
    # Archives
    "application/zip",
    "application/x-7z-compressed",
    "application/x-rar-compressed",
    "application/x-tar",
    "application/gzip",
    "application/rtf",
)

# HTTP status codes with special handling
HTTP_STATUS_NO_CONTENT = 204

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_USER_AGENT = "secure-fetch/1.0"
