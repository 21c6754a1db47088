from __future__ import annotations

from urllib.parse import urlparse

from vdfy.core.config import Settings
from vdfy.core.constants import SHORT_ID_RE
from vdfy.core.errors import InvalidRequestError, NotFoundError


def validate_short_id(short_id: str) -> None:
    # Malformed ids can never exist, so they read as unknown rather than invalid.
    if not SHORT_ID_RE.match(short_id):
        raise NotFoundError("Link not found")


def validate_transcript_url(text_url: str, settings: Settings) -> None:
    """Only transcripts served from our own storage may be fetched."""
    base = settings.storage_public_base_url
    parsed = urlparse(text_url)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise InvalidRequestError("Invalid transcript URL.")
    if not base or not text_url.startswith(base + "/"):
        raise InvalidRequestError("Transcript URL is not served from recording storage.")
