"""Content-Type header name and the media types used by the body helpers."""

CONTENT_TYPE = "Content-Type"

TYPE_PLAIN = "text/plain; charset=utf-8"
TYPE_HTML = "text/html; charset=utf-8"
TYPE_CSS = "text/css; charset=utf-8"
TYPE_JAVASCRIPT = "text/javascript; charset=utf-8"
TYPE_JSON = "application/json"
