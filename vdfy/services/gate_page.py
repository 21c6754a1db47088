from __future__ import annotations

import json
from string import Template

# The page never sees the media URL; it asks /api/get-secure-video with the
# visitor's own token and only renders what that endpoint returns.
_GATE_TEMPLATE = Template(
    """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>Private recording</title>
  <style>
    body { font-family: system-ui, sans-serif; max-width: 860px; margin: 2rem auto; padding: 0 1rem; }
    video { width: 100%; background: #000; }
    #status { color: #555; }
    #transcript { white-space: pre-wrap; border-top: 1px solid #ddd; margin-top: 1rem; padding-top: 1rem; }
  </style>
</head>
<body>
  <p id="status">Checking access...</p>
  <video id="player" controls hidden></video>
  <div id="transcript" hidden></div>
  <script>
    const shortId = $short_id;
    const status = document.getElementById("status");
    const token = window.localStorage.getItem("$token_key");
    if (!token) {
      status.textContent = "Sign in to view this recording.";
    } else {
      fetch("/api/get-secure-video/" + encodeURIComponent(shortId), {
        headers: { "Authorization": "Bearer " + token }
      })
        .then(async (res) => {
          const body = await res.json().catch(() => ({}));
          if (!res.ok) { throw new Error(body.error || "Access denied"); }
          return body;
        })
        .then((body) => {
          const player = document.getElementById("player");
          player.src = body.url;
          player.hidden = false;
          const transcript = document.getElementById("transcript");
          transcript.textContent = body.transcription || "";
          transcript.hidden = !body.transcription;
          status.hidden = true;
        })
        .catch((err) => { status.textContent = err.message; });
    }
  </script>
</body>
</html>
"""
)

TOKEN_STORAGE_KEY = "vdfyAuthToken"


def render_gate_page(short_id: str) -> str:
    return _GATE_TEMPLATE.substitute(short_id=json.dumps(short_id), token_key=TOKEN_STORAGE_KEY)
