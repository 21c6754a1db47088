from __future__ import annotations

import secrets

from vdfy.core.constants import LINK_KIND_VIDEO, SHORT_ID_ALPHABET, SHORT_ID_LENGTH


def generate_short_id(length: int = SHORT_ID_LENGTH) -> str:
    return "".join(secrets.choice(SHORT_ID_ALPHABET) for _ in range(length))


def build_short_url(base_url: str, short_id: str, kind: str) -> str:
    """Gated video links live under /v/, plain redirects under /s/."""
    path = "v" if kind == LINK_KIND_VIDEO else "s"
    return f"{base_url.rstrip('/')}/{path}/{short_id}"
