"""Application-wide constants."""

import re

# ---------------------------------------------------------------------------
# Storage layout
# ---------------------------------------------------------------------------
USERS_ROOT = "users"
PUBLIC_OWNER_BUCKET = "public"
DEFAULT_CATEGORY = "General"
MEDIA_EXTENSIONS = (".mp4", ".webm")
TEXT_EXTENSION = ".txt"
UPLOAD_EXTENSION = "mp4"
MEDIA_CONTENT_TYPE = "video/mp4"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"
STORAGE_LIST_PAGE_SIZE = 1000

# ---------------------------------------------------------------------------
# Transcoding (fixed delivery profile)
# ---------------------------------------------------------------------------
TRANSCODE_OUTPUT_OPTIONS = (
    "-vcodec",
    "libx264",
    "-crf",
    "28",
    "-preset",
    "veryfast",
    "-acodec",
    "aac",
    "-b:a",
    "128k",
)
TRANSCODE_STDERR_TAIL_CHARS = 2000
COMPRESSED_SUFFIX = "_compressed.mp4"
UPLOAD_CHUNK_BYTES = 1024 * 1024

# ---------------------------------------------------------------------------
# Short links
# ---------------------------------------------------------------------------
SHORT_ID_ALPHABET = "abcdefghijklmnopqrstuvwxyz0123456789"
SHORT_ID_LENGTH = 6
SHORT_ID_MAX_ATTEMPTS = 5
SHORT_ID_RE = re.compile(r"^[a-z0-9]{1,32}$")
SHORT_LINKS_TABLE = "short_links"
LINK_KIND_REDIRECT = "redirect"
LINK_KIND_VIDEO = "video"

# ---------------------------------------------------------------------------
# Summarization
# ---------------------------------------------------------------------------
SUMMARY_SYSTEM_PROMPT = "Summarize this concisely."
OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
OPENROUTER_APP_NAME = "vdfy"

# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------
USERINFO_TIMEOUT_SECONDS = 10.0
HTTP_TIMEOUT_SECONDS = 30.0
