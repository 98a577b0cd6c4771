"""
Constants for backend API
Centralizes status codes and document status strings for better maintainability
and to avoid typos in string comparisons
"""

# ============================================================
# HTTP Status Codes
# ============================================================

HTTP_OK = 200
HTTP_NO_CONTENT = 204
HTTP_BAD_REQUEST = 400
HTTP_METHOD_NOT_ALLOWED = 405
HTTP_PAYLOAD_TOO_LARGE = 413
HTTP_UNSUPPORTED_MEDIA_TYPE = 415
HTTP_INTERNAL_ERROR = 500
HTTP_BAD_GATEWAY = 502
HTTP_SERVICE_UNAVAILABLE = 503
HTTP_GATEWAY_TIMEOUT = 504

# ============================================================
# Summary document status
# ============================================================

STATUS_DONE = 'done'
STATUS_FAILED = 'failed'

# ============================================================
# Content types
# ============================================================

CONTENT_TYPE_HTML = 'text/html'
CONTENT_TYPE_PLAIN = 'text/plain'
ALLOWED_CONTENT_TYPES = (CONTENT_TYPE_HTML, CONTENT_TYPE_PLAIN)
