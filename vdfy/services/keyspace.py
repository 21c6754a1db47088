"""Owner/category to storage-key mapping.

Layout: ``users/<owner-bucket>/<category>/rec_<unixMillis>.<ext>`` with the
transcript stored beside the media under the same stem and a ``.txt`` extension.
"""

from __future__ import annotations

import re
import time
from urllib.parse import unquote

from vdfy.core.constants import (
    DEFAULT_CATEGORY,
    MEDIA_EXTENSIONS,
    PUBLIC_OWNER_BUCKET,
    TEXT_EXTENSION,
    USERS_ROOT,
)

_CATEGORY_DISALLOWED_RE = re.compile(r"[^a-zA-Z0-9а-яА-ЯёЁіІїЇєЄ\-_ ]")
_OWNER_SEPARATORS_RE = re.compile(r"[@.]")
_MEDIA_SUFFIX_RE = re.compile(r"\.(mp4|webm)$")


def sanitize_category(name: str | None) -> str:
    if not name:
        return DEFAULT_CATEGORY
    cleaned = _CATEGORY_DISALLOWED_RE.sub("", name).strip()
    return cleaned or DEFAULT_CATEGORY


def owner_bucket(identity: str | None) -> str:
    """Lowercase, with `@` and `.` replaced by `_`; anything that is not an email lands in `public`."""
    if not identity or "@" not in identity:
        return PUBLIC_OWNER_BUCKET
    return _OWNER_SEPARATORS_RE.sub("_", identity.strip().lower())


def owner_prefix(identity: str | None) -> str:
    return f"{USERS_ROOT}/{owner_bucket(identity)}/"


def key_prefix(identity: str | None, category: str | None) -> str:
    return f"{owner_prefix(identity)}{sanitize_category(category)}/"


def build_media_key(prefix: str, extension: str, *, now_ms: int | None = None) -> str:
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{prefix}rec_{now_ms}.{extension.lstrip('.')}"


def is_media_key(key: str) -> bool:
    return key.endswith(MEDIA_EXTENSIONS)


def text_key_for(media_key: str) -> str:
    return _MEDIA_SUFFIX_RE.sub(TEXT_EXTENSION, media_key)


def parse_category(key: str) -> str:
    parts = key.split("/")
    if len(parts) > 3:
        return unquote(parts[2])
    return DEFAULT_CATEGORY


def owns_key(identity: str | None, key: str) -> bool:
    """An identity without an email never owns anything, including `public` uploads."""
    if not identity or "@" not in identity:
        return False
    if ".." in key.split("/"):
        return False
    return key.startswith(owner_prefix(identity))


def public_url(base_url: str, key: str) -> str:
    return f"{base_url.rstrip('/')}/{key}"
